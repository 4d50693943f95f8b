import math
from typing import Generic, Optional, TypeVar

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class CamelModel(BaseModel):
    """Base config for every payload crossing the HTTP boundary (camelCase JSON)."""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class ApiResponse(CamelModel, Generic[T]):
    """
    The uniform result wrapper returned by every endpoint.

    Failures carry ``success=False`` and a human-readable message only.
    """
    success: bool
    message: str
    data: Optional[T] = None


class Pagination(CamelModel):
    page: int
    limit: int
    total_pages: int
    total_items: int

    @classmethod
    def build(cls, page: int, limit: int, total_items: int) -> "Pagination":
        """Derives the page count as ``ceil(total_items / limit)``."""
        return cls(
            page=page,
            limit=limit,
            total_pages=math.ceil(total_items / limit) if limit else 0,
            total_items=total_items,
        )


class PaginatedResponse(CamelModel, Generic[T]):
    """List variant of the envelope carrying pagination metadata."""
    success: bool = True
    message: str
    pagination: Pagination
    data: list[T]


class Page(Generic[T]):
    """A single page of query results plus the count of every matching record."""

    def __init__(self, items: list[T], total: int, page: int, limit: int) -> None:
        self.items = items
        self.total = total
        self.page = page
        self.limit = limit

    @property
    def pagination(self) -> Pagination:
        return Pagination.build(self.page, self.limit, self.total)


def ok(message: str, data: Optional[T] = None) -> ApiResponse[T]:
    return ApiResponse(success=True, message=message, data=data)


def fail(message: str) -> dict[str, object]:
    """Failure body; ``data`` is omitted entirely."""
    return {"success": False, "message": message}


def paginated(message: str, page: Page[T]) -> PaginatedResponse[T]:
    return PaginatedResponse(message=message, pagination=page.pagination, data=page.items)
