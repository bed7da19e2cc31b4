"""
Error taxonomy and envelope for the Vine Portal API.

Rule: every failing route answers with the same envelope

    {"success": false,
     "error": {"code", "type", "message", "details"?, "requestId", "timestamp"}}

so clients can branch on `type` without parsing English messages.
"""
from __future__ import annotations

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Any, Optional

from fastapi import Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

from vine_portal.core.taxonomy import ERROR_STATUS, ErrorType, error_type_for_status
from vine_portal.schemas.common import ErrorDetail

logger = logging.getLogger("vine_portal.errors")


# ---------------------------------------------------------------------------
# Request ids
# ---------------------------------------------------------------------------

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(n: int) -> str:
    if n == 0:
        return "0"
    digits = []
    while n:
        n, rem = divmod(n, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def generate_request_id() -> str:
    """Random base-36 fragment followed by a base-36 millisecond timestamp."""
    random_part = _to_base36(secrets.randbits(64)).rjust(13, "0")
    return random_part + _to_base36(int(time.time() * 1000))


def request_id_for(request: Request) -> str:
    """Return the id assigned to this request, creating one if needed."""
    request_id = getattr(request.state, "request_id", None)
    if not request_id:
        request_id = generate_request_id()
        request.state.request_id = request_id
    return request_id


# ---------------------------------------------------------------------------
# Envelopes
# ---------------------------------------------------------------------------

def error_envelope(
    error_type: ErrorType,
    message: str,
    request_id: str,
    code: Optional[str] = None,
    details: Optional[dict[str, Any]] = None,
) -> dict[str, Any]:
    error: dict[str, Any] = {
        "code": code or error_type.value.upper(),
        "type": error_type.value,
        "message": message,
    }
    if details:
        error["details"] = details
    error["requestId"] = request_id
    error["timestamp"] = datetime.now(tz=timezone.utc).isoformat()
    return {"success": False, "error": error}


def success_envelope(data: Any, request_id: str) -> dict[str, Any]:
    return {"success": True, "data": data, "requestId": request_id}


# ---------------------------------------------------------------------------
# Exception classes
# ---------------------------------------------------------------------------

class PortalException(Exception):
    """Base class for all application-level errors."""
    error_type: ErrorType = ErrorType.server_error
    default_code: Optional[str] = None

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
        code: Optional[str] = None,
    ):
        self.message = message
        self.details = details or {}
        self.code = code or self.default_code or self.error_type.value.upper()
        super().__init__(message)

    @property
    def http_status(self) -> int:
        return ERROR_STATUS[self.error_type]

    def to_dict(self, request_id: str) -> dict[str, Any]:
        return error_envelope(
            self.error_type,
            self.message,
            request_id,
            code=self.code,
            details=self.details,
        )


class ValidationFailed(PortalException):
    error_type = ErrorType.validation
    default_code = "VALIDATION_ERROR"


class MissingFieldsError(ValidationFailed):
    def __init__(self, fields: list[str], errors: list[dict[str, Any]] | None = None):
        details: dict[str, Any] = {"missingFields": list(fields)}
        if errors:
            details["errors"] = errors
        super().__init__(message="Missing required fields", details=details)
        self.fields = list(fields)


class Unauthorized(PortalException):
    error_type = ErrorType.unauthorized


class Forbidden(PortalException):
    error_type = ErrorType.forbidden


class RoleNotFound(Forbidden):
    default_code = "ROLE_NOT_FOUND"

    def __init__(self):
        super().__init__(message="User role not found")


class NotFound(PortalException):
    error_type = ErrorType.not_found

    def __init__(self, entity: str, entity_id: Any):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            details={"entity": entity, "id": str(entity_id)},
        )


class Conflict(PortalException):
    error_type = ErrorType.conflict


class PartialFailure(PortalException):
    """The primary write is committed; a dependent write failed."""
    error_type = ErrorType.partial_failure


class ServerError(PortalException):
    error_type = ErrorType.server_error


class DataStoreError(ServerError):
    default_code = "DATABASE_ERROR"

    def __init__(self, message: str, exc: BaseException | None = None):
        super().__init__(
            message=message,
            details={"dbError": str(exc)} if exc is not None else {},
        )


# ---------------------------------------------------------------------------
# FastAPI exception handlers
# ---------------------------------------------------------------------------

def missing_fields_from(exc: RequestValidationError) -> list[str]:
    """
    Names of required fields that were absent or blank, in error order.

    Required fields reject null/blank input with a "missing" error (see
    schemas.common.NotBlank), so any other failure is a bad value, not a gap.
    """
    fields: list[str] = []
    for error in exc.errors():
        loc = [str(part) for part in error["loc"] if part != "body"]
        if not loc or error["type"] != "missing":
            continue
        name = ".".join(loc)
        if name not in fields:
            fields.append(name)
    return fields


async def portal_exception_handler(request: Request, exc: PortalException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.http_status,
        content=exc.to_dict(request_id_for(request)),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Return a structured 400 with the absent fields and per-field errors."""
    field_errors = [
        ErrorDetail(
            field=".".join(str(loc) for loc in error["loc"] if loc != "body"),
            message=error["msg"],
            type=error["type"],
        ).model_dump()
        for error in exc.errors()
    ]
    missing = missing_fields_from(exc)
    if missing:
        failure: ValidationFailed = MissingFieldsError(missing, errors=field_errors)
    else:
        failure = ValidationFailed("Request validation failed", details={"errors": field_errors})
    return await portal_exception_handler(request, failure)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    error_type = error_type_for_status(exc.status_code)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_envelope(
            error_type,
            str(exc.detail),
            request_id_for(request),
        ),
        headers=getattr(exc, "headers", None),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_envelope(
            ErrorType.server_error,
            "An unexpected error occurred",
            request_id_for(request),
            code="UNEXPECTED_ERROR",
            details={"error": str(exc)},
        ),
    )
