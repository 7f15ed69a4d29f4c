"""
Freelancer Identity API
FastAPI application hosting the identity lifecycle and notification handlers
(license management, password reset, activity check, outbound mail).
"""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.responses import ErrorResponse, utc_timestamp, validation_error_response
from app.routers import activity, licenses, mail, passwords

# Configure logging to output to console
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Freelancer Identity API",
    description="Entra ID user provisioning, E1 license membership and notification handlers",
    version="0.1.0",
)


@app.exception_handler(RequestValidationError)
async def handle_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Reject malformed payloads with 400 before any Graph call is made."""
    response = validation_error_response(exc.errors())
    logger.warning(f"Rejected {request.url.path}: {response.body.decode()}")
    return response


@app.exception_handler(StarletteHTTPException)
async def handle_http_exception(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Give HTTPExceptions (e.g. bad function key) the same body shape as handler errors."""
    body = ErrorResponse(error=str(exc.detail), timestamp=utc_timestamp())
    return JSONResponse(
        status_code=exc.status_code,
        content=body.model_dump(exclude_none=True),
        headers=getattr(exc, "headers", None),
    )


# Include routers
app.include_router(mail.router, prefix="/api", tags=["mail"])
app.include_router(licenses.router, prefix="/api", tags=["licenses"])
app.include_router(passwords.router, prefix="/api", tags=["passwords"])
app.include_router(activity.router, prefix="/api", tags=["activity"])


@app.get("/")
async def root():
    return {"message": "Freelancer Identity API", "version": "0.1.0"}


@app.get("/health")
async def health():
    return {"status": "ok"}
