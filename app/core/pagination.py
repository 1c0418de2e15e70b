from fastapi import Query

from app.core.config import settings
from app.schemas.pagination import PageParams


def page_params(
    page: int = Query(default=1, ge=1, description="Page number (1-indexed)"),
    limit: int | None = Query(default=None, ge=1, description="Page size"),
) -> PageParams:
    """
    Usage:
      params: PageParams = Depends(page_params)

    `limit` falls back to DEFAULT_PAGE_SIZE and is capped at MAX_PAGE_SIZE.
    """
    size = limit or settings.DEFAULT_PAGE_SIZE
    return PageParams(page=page, limit=min(size, settings.MAX_PAGE_SIZE))
