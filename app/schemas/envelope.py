from typing import Any, Generic, TypeVar
from pydantic import BaseModel

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    """Standard success envelope: {success, code, data?, message?}"""
    success: bool = True
    code: int = 200
    data: T | None = None
    message: str | None = None


class ErrorResponse(BaseModel):
    """Standard error envelope. `code` mirrors the HTTP status."""
    success: bool = False
    code: int
    error: str
    details: Any | None = None
