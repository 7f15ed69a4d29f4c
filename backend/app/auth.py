"""
Inbound request authentication.

Handlers are invoked by Power Automate / Logic Apps with a shared function
key, following the Azure Functions authLevel=function convention:

  x-functions-key: <key>      header (preferred)
  ?code=<key>                 query parameter

The key is compared in constant time. When FUNCTION_KEY is not configured
every request is rejected.
"""

import hmac
import logging
from typing import Optional

from fastapi import Header, HTTPException, Query

from app.config import get_settings

logger = logging.getLogger(__name__)


async def verify_function_key(
    x_functions_key: Optional[str] = Header(None),
    code: Optional[str] = Query(None),
) -> None:
    """
    FastAPI dependency that rejects calls without the configured function key.

    Raises:
        HTTPException: 401 if the key is unconfigured, missing, or wrong
    """
    expected = get_settings().function_key
    if not expected:
        logger.warning(
            "No FUNCTION_KEY configured; all handler requests will be rejected"
        )
        raise HTTPException(status_code=401, detail="Function key not configured")

    provided = x_functions_key or code
    if not provided or not hmac.compare_digest(provided.encode(), expected.encode()):
        raise HTTPException(status_code=401, detail="Invalid function key")
