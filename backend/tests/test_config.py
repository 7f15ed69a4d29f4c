"""
Settings construction from the environment.
"""

import logging
import os
from unittest.mock import patch

import pytest

from app.config import get_settings


class TestMaxRecipients:

    def test_defaults_to_fifty(self):
        with patch.dict(os.environ):
            os.environ.pop("MAX_RECIPIENTS", None)
            assert get_settings().max_recipients == 50

    def test_reads_configured_value(self):
        with patch.dict(os.environ, {"MAX_RECIPIENTS": "10"}):
            assert get_settings().max_recipients == 10

    @pytest.mark.parametrize("raw", ["abc", "1.5", "0", "-3"])
    def test_invalid_value_falls_back_with_warning(self, raw, caplog):
        with patch.dict(os.environ, {"MAX_RECIPIENTS": raw}):
            with caplog.at_level(logging.WARNING, logger="app.config"):
                settings = get_settings()

        assert settings.max_recipients == 50
        assert "MAX_RECIPIENTS" in caplog.text

    def test_blank_value_uses_default_silently(self, caplog):
        with patch.dict(os.environ, {"MAX_RECIPIENTS": "  "}):
            with caplog.at_level(logging.WARNING, logger="app.config"):
                settings = get_settings()

        assert settings.max_recipients == 50
        assert caplog.text == ""


def test_graph_base_url_trailing_slash_is_dropped():
    with patch.dict(os.environ, {"GRAPH_BASE_URL": "https://graph.test/v1.0/"}):
        assert get_settings().graph_base_url == "https://graph.test/v1.0"
