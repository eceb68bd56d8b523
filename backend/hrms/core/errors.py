from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from hrms.core.logging import get_logger

logger = get_logger(__name__)


class HRMSError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class NotFoundError(HRMSError):
    status_code = status.HTTP_404_NOT_FOUND


class ConflictError(HRMSError):
    pass


class ValidationFailed(HRMSError):
    pass


class PermissionDenied(HRMSError):
    status_code = status.HTTP_403_FORBIDDEN


class AuthenticationFailed(HRMSError):
    status_code = status.HTTP_401_UNAUTHORIZED


def error_body(message: str, **extra) -> dict:
    return {"success": False, "message": message, **extra}


def _field_path(loc: tuple) -> str:
    parts = [str(part) for part in loc if part not in ("body", "query", "path")]
    return ".".join(parts) or "request"


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": _field_path(error.get("loc", ())), "message": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Validation failed", errors=errors),
    )


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def domain_exception_handler(request: Request, exc: HRMSError) -> JSONResponse:
    logger.info("request_rejected", error=type(exc).__name__, reason=exc.message)
    return JSONResponse(status_code=exc.status_code, content=error_body(exc.message))


async def integrity_exception_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("integrity_violation", error=str(exc.orig))
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body("Duplicate entry: a record with these values already exists"),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("unhandled_error", error=str(exc))
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body("Server error", error=str(exc)),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(HRMSError, domain_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
