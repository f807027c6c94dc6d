"""
Global Error Handling
Renders every failure as the {"success": false, "error": {...}} envelope

- AppError subclasses → their own code and status
- HTTPException (auth dependency, routing) → same envelope, same status
- RequestValidationError (bad query parameters) → 400 VALIDATION
- Anything else → 500 SERVER_ERROR with the traceback logged
"""
import logging
from fastapi import Request
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from gitpoor.core.errors import AppError, ErrorCode

logger = logging.getLogger(__name__)

_HTTP_STATUS_CODES = {
    401: ErrorCode.UNAUTHENTICATED,
    403: ErrorCode.FORBIDDEN,
    404: ErrorCode.NOT_FOUND,
    400: ErrorCode.VALIDATION,
    409: ErrorCode.CONFLICT,
    429: ErrorCode.RATE_LIMIT,
}


def error_envelope(message: str, code: ErrorCode, details=None) -> dict:
    return {
        "success": False,
        "error": {"message": message, "code": code.value, "details": details},
    }


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Exception handler for AppError (registered in main.py)."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(f"{request.method} {request.url.path} failed: {exc.code.value} - {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Exception handler for HTTPException (registered in main.py)."""
    code = _HTTP_STATUS_CODES.get(exc.status_code, ErrorCode.SERVER_ERROR)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(str(exc.detail), code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Exception handler for invalid query/body parameters (registered in main.py)."""
    errors = [
        {"field": ".".join(str(part) for part in error.get("loc", ())), "message": error.get("msg")}
        for error in exc.errors()
    ]
    logger.warning(f"{request.method} {request.url.path} rejected: {errors}")
    return JSONResponse(
        status_code=400,
        content=error_envelope("Invalid request parameters.", ErrorCode.VALIDATION, errors),
    )


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handler middleware.
    Catches all unhandled exceptions and returns the JSON error envelope.
    """

    async def dispatch(self, request: Request, call_next):
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            logger.error(
                f"Unhandled exception during request",
                exc_info=True,
                extra={
                    "path": request.url.path,
                    "method": request.method,
                    "client_host": request.client.host if request.client else None
                }
            )

            return JSONResponse(
                status_code=500,
                content=error_envelope(
                    "Internal server error",
                    ErrorCode.SERVER_ERROR,
                    {"error_type": type(exc).__name__, "path": request.url.path}
                )
            )
