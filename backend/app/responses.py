"""
Response formatting shared by every handler.

Success bodies always carry `success: true` and an ISO-8601 timestamp.
Failures carry `success: false`, a human-readable `error`, the raw
`details` and a timestamp. The HTTP status comes from the remote status code
attached to the exception:

    401 → 401  authentication failure
    403 → 403  insufficient permission
    404 → 404  target not found
    429 → 429  rate limited
    anything else → 500
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, List, Optional, Tuple

from fastapi.responses import JSONResponse
from pydantic import BaseModel

DEFAULT_ERROR_MESSAGES: Dict[int, str] = {
    401: "Authentication failed. Please check app permissions.",
    403: "Insufficient permissions for this operation.",
    404: "Target not found.",
    429: "Rate limit exceeded. Please try again later.",
}

# Validation error types reported as "missing" rather than "malformed"
_MISSING_TYPES = {"missing", "string_too_short", "too_short"}
_BODY_SHAPE_TYPES = {"json_invalid", "model_attributes_type", "dict_type", "json_type"}


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
    details: Optional[Any] = None
    timestamp: str


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


def success_response(model: BaseModel, status_code: int = 200) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=model.model_dump(mode="json"))


def error_status(exc: BaseException) -> int:
    """First match wins: a mapped remote status passes through, everything else is 500."""
    status = getattr(exc, "status_code", None)
    if status in DEFAULT_ERROR_MESSAGES:
        return status
    return 500


def error_response(
    exc: BaseException,
    fallback_message: str,
    messages: Optional[Dict[int, str]] = None,
    status_code: Optional[int] = None,
) -> JSONResponse:
    """
    Map a caught exception to a JSON error response.

    Args:
        exc: The exception raised by a remote call (or anything unexpected).
        fallback_message: Human message for the 500 case, e.g. "Failed to send email".
        messages: Per-handler overrides for the 401/403/404/429 messages.
        status_code: Fixed status for handlers that report every remote
            failure the same way; skips the status table.
    """
    status = status_code or error_status(exc)
    if status in DEFAULT_ERROR_MESSAGES:
        error = (messages or {}).get(status) or DEFAULT_ERROR_MESSAGES[status]
    else:
        error = fallback_message

    details = getattr(exc, "message", None) or str(exc) or "Unknown error occurred"
    body = ErrorResponse(error=error, details=details, timestamp=utc_timestamp())
    return JSONResponse(status_code=status, content=body.model_dump())


def _field_name(loc: Iterable[Any]) -> str:
    # ("body", "subject") → "subject"; a field may itself be named "body"
    parts = list(loc)
    if parts and parts[0] == "body":
        parts = parts[1:]
    return ".".join(str(part) for part in parts)


def describe_validation_errors(errors: List[dict]) -> Tuple[str, List[str]]:
    """
    Summarize pydantic/FastAPI validation errors.

    Returns (error, details): error names every missing field in one line,
    or falls back to the first problem's message when nothing is missing.
    """
    missing: List[str] = []
    details: List[str] = []

    for err in errors:
        field = _field_name(err.get("loc", ()))
        err_type = err.get("type", "")
        message = err.get("msg", "Invalid value")

        # json_invalid is located at ("body", <offset>), the others at ("body",)
        if err_type == "json_invalid" or (
            not field and (err_type in _BODY_SHAPE_TYPES or err_type == "missing")
        ):
            return "Request body is required", [message]

        if err_type == "missing_identifier":
            missing.append("(userPrincipalName OR userId)")
        elif err_type in _MISSING_TYPES:
            missing.append(field)

        details.append(f"{field}: {message}" if field else message)

    if missing:
        return f"Missing required fields: {', '.join(missing)}", details
    if details:
        # Custom errors (e.g. invalid response value) already read as a sentence
        first = errors[0]
        return first.get("msg", "Invalid request"), details
    return "Invalid request", details


def validation_error_response(errors: List[dict]) -> JSONResponse:
    error, details = describe_validation_errors(errors)
    body = ErrorResponse(error=error, details=details, timestamp=utc_timestamp())
    return JSONResponse(status_code=400, content=body.model_dump())
