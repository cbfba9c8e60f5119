import enum
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ErrorKind(str, enum.Enum):
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"
    CONFLICT = "conflict"
    UNAUTHORIZED = "unauthorized"
    VALIDATION_ERROR = "validation_error"
    INTERNAL_ERROR = "internal_error"

    @property
    def status_code(self) -> int:
        return _STATUS_CODES[self]


_STATUS_CODES = {
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.VALIDATION_ERROR: status.HTTP_400_BAD_REQUEST,
    ErrorKind.INTERNAL_ERROR: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class ServiceError:
    """Expected failure returned (not raised) by a service operation."""

    kind: ErrorKind
    message: str
    headers: dict[str, str] = field(default_factory=dict)

    @classmethod
    def not_found(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.NOT_FOUND, message)

    @classmethod
    def forbidden(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.FORBIDDEN, message)

    @classmethod
    def conflict(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.CONFLICT, message)

    @classmethod
    def unauthorized(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.UNAUTHORIZED, message, {"WWW-Authenticate": "Bearer"})

    @classmethod
    def validation(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.VALIDATION_ERROR, message)

    @classmethod
    def internal(cls, message: str) -> "ServiceError":
        return cls(ErrorKind.INTERNAL_ERROR, message)

    def to_http(self) -> HTTPException:
        return HTTPException(
            status_code=self.kind.status_code,
            detail=self.message,
            headers=self.headers or None,
        )


def unwrap(result: T | ServiceError) -> T:
    """Hand a service result back to a route, raising the HTTP error it maps to."""
    if isinstance(result, ServiceError):
        raise result.to_http()
    return result


def error_body(status_code: int, message: Any, errors: Any = None) -> dict:
    body = {
        "statusCode": status_code,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "message": message,
    }
    if errors:
        body["errors"] = errors
    return body


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    status_code = ErrorKind.VALIDATION_ERROR.status_code
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, "Validation failed", jsonable_encoder(exc.errors())),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}")
    status_code = ErrorKind.INTERNAL_ERROR.status_code
    return JSONResponse(
        status_code=status_code,
        content=error_body(status_code, "Internal server error"),
    )


def register_exception_handlers(app: FastAPI):
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
