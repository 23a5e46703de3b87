from pydantic import BaseModel, Field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 50
MAX_PAGE_SIZE = 100


class ApiResponse(BaseModel, Generic[T]):
    """Envelope returned by every endpoint."""
    success: bool = True
    data: Optional[T] = None
    message: Optional[str] = None


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int = Field(alias="totalPages")
    has_next: bool = Field(alias="hasNext")
    has_prev: bool = Field(alias="hasPrev")

    class Config:
        populate_by_name = True

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        total_pages = (total + limit - 1) // limit if total else 0
        return cls(
            page=page,
            limit=limit,
            total=total,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_prev=page > 1,
        )


class Page(BaseModel, Generic[T]):
    data: List[T]
    pagination: Pagination


def normalize_page(page: Optional[int], limit: Optional[int]):
    """page >= 1 (default 1); limit clamped to [1, MAX_PAGE_SIZE] (default 50)."""
    page = page if page and page > 0 else 1
    limit = DEFAULT_PAGE_SIZE if limit is None else min(max(limit, 1), MAX_PAGE_SIZE)
    return page, limit


def reject_explicit_nulls(model: BaseModel, fields) -> BaseModel:
    """Partial updates may omit a required column but never set it to null."""
    nulled = sorted(f for f in fields if f in model.model_fields_set and getattr(model, f) is None)
    if nulled:
        raise ValueError(f"Fields cannot be null: {', '.join(nulled)}")
    return model
