"""
Error taxonomy for remote Graph API failures.

Request validation problems never reach this module: they are rejected by
pydantic/FastAPI before any token is requested. Everything raised here
originates from (or stands in for) a remote call and carries the remote
status code so the response formatter can map it without touching httpx.
"""

from typing import Optional


class GraphAPIError(Exception):
    """A failed Graph API call."""

    status_code: Optional[int] = None

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        code: Optional[str] = None,
    ):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.code = code

    def __repr__(self) -> str:
        return f"{type(self).__name__}(status_code={self.status_code!r}, code={self.code!r}, message={self.message!r})"


class GraphAuthError(GraphAPIError):
    status_code = 401


class GraphPermissionError(GraphAPIError):
    status_code = 403


class GraphNotFoundError(GraphAPIError):
    status_code = 404


class GraphRateLimitError(GraphAPIError):
    status_code = 429


class AuthConfigError(GraphAuthError):
    """Client-credential secrets are missing or the token request was refused."""


class UserNotFound(GraphNotFoundError):
    """No directory user matched any of the identity hints."""


_ERRORS_BY_STATUS = {
    401: GraphAuthError,
    403: GraphPermissionError,
    404: GraphNotFoundError,
    429: GraphRateLimitError,
}

# Graph error codes that identify the category even when the status is odd
_ERRORS_BY_CODE = {
    "Request_ResourceNotFound": GraphNotFoundError,
    "ResourceNotFound": GraphNotFoundError,
    "InvalidAuthenticationToken": GraphAuthError,
    "Authorization_RequestDenied": GraphPermissionError,
}


def graph_error_from_response(
    status_code: int,
    code: Optional[str],
    message: str,
) -> GraphAPIError:
    """
    Build the most specific GraphAPIError for a failed response.

    The status code wins; the Graph error code is only consulted when the
    status is not one of the mapped categories.
    """
    error_cls = _ERRORS_BY_STATUS.get(status_code)
    if error_cls is not None:
        return error_cls(message, status_code=status_code, code=code)

    # Classified by code: keep the category's status so the formatter maps it
    error_cls = _ERRORS_BY_CODE.get(code or "")
    if error_cls is not None:
        return error_cls(message, code=code)

    return GraphAPIError(message, status_code=status_code, code=code)
