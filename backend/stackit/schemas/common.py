"""Common Pydantic schemas used across the API."""

from typing import Generic, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class PaginationMeta(BaseModel):
    """Pagination metadata included in list responses."""

    page: int = 1
    limit: int = 20
    total: int = 0
    total_pages: int = 0

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "PaginationMeta":
        total_pages = (total + limit - 1) // limit if total > 0 else 0
        return cls(page=page, limit=limit, total=total, total_pages=total_pages)


class ApiResponse(BaseModel, Generic[T]):
    """Standard API response envelope."""

    status: str = "success"
    data: T
    meta: PaginationMeta | None = None


class ErrorDetail(BaseModel):
    """Error detail for error responses."""

    code: str
    message: str
    field: str | None = None


class ErrorResponse(BaseModel):
    """Standard API error response, rendered by the client as a notification."""

    status: str = "error"
    error: ErrorDetail
