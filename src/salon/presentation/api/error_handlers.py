"""
Global exception handlers.

Map domain exceptions to HTTP responses.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from salon.domain.exceptions import SalonError, ValidationError

STATUS_CODE_MAP = {
    "VALIDATION_ERROR": status.HTTP_422_UNPROCESSABLE_ENTITY,
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "FORBIDDEN": status.HTTP_403_FORBIDDEN,
    "AUTHENTICATION_ERROR": status.HTTP_401_UNAUTHORIZED,
}


def error_body(exc: SalonError) -> dict:
    """JSON body for a domain exception (shared with the WebSocket endpoint)."""
    body = {"error": exc.code, "message": exc.message}
    if isinstance(exc, ValidationError):
        body["errors"] = [error.to_dict() for error in exc.errors]
    return body


async def salon_exception_handler(request: Request, exc: SalonError) -> JSONResponse:
    """
    Handle Salon domain exceptions.

    Converts domain exceptions to appropriate HTTP responses.
    """
    status_code = STATUS_CODE_MAP.get(exc.code, status.HTTP_500_INTERNAL_SERVER_ERROR)
    headers = None
    if status_code == status.HTTP_401_UNAUTHORIZED:
        headers = {"WWW-Authenticate": "Bearer"}

    return JSONResponse(
        status_code=status_code,
        content=error_body(exc),
        headers=headers,
    )


async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed request bodies in the same shape as domain errors."""
    errors = [
        {
            "field": ".".join(str(p) for p in err["loc"] if p not in ("body", "query"))
            or "body",
            "message": err["msg"],
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content={
            "error": "VALIDATION_ERROR",
            "message": "The given data was invalid.",
            "errors": errors,
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(SalonError, salon_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
