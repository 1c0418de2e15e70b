from typing import Any, Generic, TypeVar
from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata (page numbers are 1-indexed)"""
    model_config = ConfigDict(populate_by_name=True)

    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit if limit else 1
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


class PageParams(BaseModel):
    """Resolved ?page=&limit= query parameters"""
    page: int
    limit: int

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class PaginatedResponse(BaseModel, Generic[T]):
    """Envelope for list endpoints"""
    success: bool = True
    code: int = 200
    data: list[T]
    pagination: PaginationMeta
    meta: dict[str, Any] | None = None
    stats: dict[str, int] | None = None
