from typing import Optional

from pydantic import BaseModel, field_validator

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100
# Keeps the row offset inside a signed 64-bit integer
MAX_PAGE = 2**63 // MAX_LIMIT


class PageQuery(BaseModel):
    """Pagination parameters; out-of-range values are clamped, not rejected."""
    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT

    @field_validator("page", mode="before")
    @classmethod
    def clamp_page(cls, v: Optional[int]) -> int:
        if v is None:
            return DEFAULT_PAGE
        return min(MAX_PAGE, max(1, int(v)))

    @field_validator("limit", mode="before")
    @classmethod
    def clamp_limit(cls, v: Optional[int]) -> int:
        if v is None:
            return DEFAULT_LIMIT
        return min(MAX_LIMIT, max(1, int(v)))

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit


class ReportQuery(PageQuery):
    """
    Filters accepted by the report listing.

    Attributes:
        category (Optional[str]): Category slug; must resolve to an existing category.
        search (Optional[str]): Free text matched against title, description,
            summary and meta keywords.
    """
    category: Optional[str] = None
    search: Optional[str] = None

    @field_validator("category", "search")
    @classmethod
    def blank_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        stripped = v.strip()
        return stripped or None
