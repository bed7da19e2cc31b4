"""
Shared schema primitives used across the API.
"""
from datetime import date
from typing import Annotated, Any, Generic, Literal, Optional, TypeVar

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, StringConstraints
from pydantic_core import PydanticCustomError

T = TypeVar("T")


def _reject_blank(value: Any) -> Any:
    if value is None or (isinstance(value, str) and not value.strip()) or value == [] or value == {}:
        raise PydanticCustomError("missing", "Field required")
    return value


# Required fields: absent, null or blank all report as "missing".
NotBlank = BeforeValidator(_reject_blank)
RequiredStr = Annotated[str, StringConstraints(strip_whitespace=True), NotBlank]
RequiredDate = Annotated[date, NotBlank]
RequiredInt = Annotated[int, NotBlank]

# Optional text that, when sent, may not be blank.
NonBlankStr = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1)]


class ErrorDetail(BaseModel):
    """A single field-level validation error."""
    field: str
    message: str
    type: str


class ErrorBody(BaseModel):
    code: str
    type: str
    message: str
    details: Optional[dict[str, Any]] = None
    requestId: str
    timestamp: str


class ErrorResponse(BaseModel):
    """Standard error envelope returned for all failing responses (incl. 207)."""
    model_config = ConfigDict(from_attributes=True)

    success: Literal[False] = False
    error: ErrorBody


class SuccessResponse(BaseModel, Generic[T]):
    """Standard success envelope."""
    success: Literal[True] = True
    data: T
    requestId: str = Field(description="Echo of the per-request correlation id.")


ERROR_RESPONSES: dict[int | str, dict[str, Any]] = {
    400: {"model": ErrorResponse, "description": "Validation error (missing/invalid fields)."},
    401: {"model": ErrorResponse, "description": "Missing or invalid bearer token."},
    403: {"model": ErrorResponse, "description": "Role missing or insufficient."},
    500: {"model": ErrorResponse, "description": "Unexpected or data-store error."},
}
