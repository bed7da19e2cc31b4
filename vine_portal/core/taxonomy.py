"""
Closed set of error types shared by the server envelope and the client.

Kept free of web-framework imports so the request executor can use it.
"""
import enum


class ErrorType(str, enum.Enum):
    validation = "validation"
    unauthorized = "unauthorized"
    forbidden = "forbidden"
    not_found = "not_found"
    # Reserved: no route emits it yet.
    conflict = "conflict"
    partial_failure = "partial_failure"
    server_error = "server_error"
    # Client-only, produced by the request executor before any response.
    network = "network"
    timeout = "timeout"


ERROR_STATUS: dict[ErrorType, int] = {
    ErrorType.validation: 400,
    ErrorType.unauthorized: 401,
    ErrorType.forbidden: 403,
    ErrorType.not_found: 404,
    ErrorType.conflict: 409,
    ErrorType.partial_failure: 207,
    ErrorType.server_error: 500,
}


def error_type_for_status(http_status: int) -> ErrorType:
    """Classify a bare HTTP status: mapped codes first, then 4xx → validation."""
    for error_type, code in ERROR_STATUS.items():
        if code == http_status:
            return error_type
    if 400 <= http_status < 500:
        return ErrorType.validation
    return ErrorType.server_error


def parse_error_type(value, default: ErrorType) -> ErrorType:
    try:
        return ErrorType(value)
    except ValueError:
        return default
