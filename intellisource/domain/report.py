from datetime import date, datetime
from typing import Any, List, Optional

from pydantic import Field, field_validator, model_validator

from .category import CategorySummary
from .envelope import CamelModel


def _clean_title(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    stripped = v.strip()
    if len(stripped) < 2:
        raise ValueError("Report title must be at least 2 characters long.")
    return stripped


def _clean_items(v: Optional[List[str]]) -> Optional[List[str]]:
    if v is None:
        return v
    return [item.strip() for item in v if item and item.strip()]


class ReportMeta(CamelModel):
    """SEO metadata. Keywords behave like a set: duplicates are dropped, order kept."""
    keywords: List[str] = Field(default_factory=list)
    seo_description: Optional[str] = None

    @field_validator("keywords")
    @classmethod
    def dedupe_keywords(cls, v: List[str]) -> List[str]:
        seen: dict[str, None] = {}
        for keyword in _clean_items(v) or []:
            seen.setdefault(keyword, None)
        return list(seen)


class ReportCreate(CamelModel):
    """
    The input contract for publishing a market research Report.

    The category is referenced by its slug and resolved by the service layer;
    list-valued fields default to empty lists when omitted.

    Attributes:
        title (str): Display title; the slug is derived from it.
        category (str): Slug of an existing Category.
        price (float): Non-negative list price in USD.
        key_highlights (List[str]): Ordered bullet points.
        table_of_contents (List[str]): Ordered chapter titles.
        meta (ReportMeta): SEO keywords and description.
    """

    title: str = Field(..., description="Report title", max_length=200)
    slug: Optional[str] = Field(None, description="URL identifier; derived from title when omitted")
    category: str = Field(..., description="Slug of the owning category", min_length=1)
    description: Optional[str] = None
    summary: Optional[str] = None
    publish_date: Optional[date] = None
    image_url: Optional[str] = None
    price: float = Field(0.0, description="Unit price in USD", ge=0)
    key_highlights: List[str] = Field(default_factory=list)
    table_of_contents: List[str] = Field(default_factory=list)
    meta: ReportMeta = Field(default_factory=ReportMeta)

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: str) -> str:
        """
        Trims the title and enforces the minimum length.

        Raises:
            ValueError: If fewer than 2 characters remain after trimming.
        """
        return _clean_title(v)

    @field_validator("category")
    @classmethod
    def clean_category(cls, v: str) -> str:
        stripped = v.strip()
        if not stripped:
            raise ValueError("Category is required.")
        return stripped

    @field_validator("key_highlights", "table_of_contents")
    @classmethod
    def clean_lists(cls, v: List[str]) -> List[str]:
        return _clean_items(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "title": "Global Flexible Packaging Market Report 2024-2030",
                "category": "packaging-market-research",
                "summary": "Flexible packaging by material type, product form, and end-user industry.",
                "publishDate": "2024-04-10",
                "price": 449.99,
                "keyHighlights": ["Market CAGR 3.38% (2024-2030)"],
                "tableOfContents": ["Executive Summary", "Market Overview"],
                "meta": {"keywords": ["flexible packaging"], "seoDescription": "Flexible packaging outlook to 2030."},
            }
        }
    }


class ReportUpdate(CamelModel):
    """Sparse update. Every supplied field is checked with the creation rules."""

    title: Optional[str] = Field(None, max_length=200)
    slug: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    publish_date: Optional[date] = None
    image_url: Optional[str] = None
    price: Optional[float] = Field(None, ge=0)
    key_highlights: Optional[List[str]] = None
    table_of_contents: Optional[List[str]] = None
    meta: Optional[ReportMeta] = None

    @field_validator("title")
    @classmethod
    def clean_title(cls, v: Optional[str]) -> Optional[str]:
        return _clean_title(v)

    @field_validator("key_highlights", "table_of_contents")
    @classmethod
    def clean_lists(cls, v: Optional[List[str]]) -> Optional[List[str]]:
        return _clean_items(v)

    @model_validator(mode="after")
    def reject_null_required(self) -> "ReportUpdate":
        for name in ("title", "category", "price"):
            if name in self.model_fields_set and getattr(self, name) is None:
                raise ValueError(f"{name} cannot be null.")
        if self.category is not None and not self.category.strip():
            raise ValueError("Category is required.")
        return self


class ReportRead(CamelModel):
    """A report as returned by the API, with its category populated."""
    id: int
    title: str
    slug: str
    category: Optional[CategorySummary] = None
    description: Optional[str] = None
    summary: Optional[str] = None
    publish_date: Optional[date] = None
    image_url: Optional[str] = None
    price: float
    key_highlights: List[str] = Field(default_factory=list)
    table_of_contents: List[str] = Field(default_factory=list)
    meta: ReportMeta = Field(default_factory=ReportMeta)
    created_at: datetime
    updated_at: datetime

    @model_validator(mode="before")
    @classmethod
    def fold_meta_columns(cls, data: Any) -> Any:
        """Reads the flat ``meta_keywords``/``seo_description`` columns of a store record."""
        if isinstance(data, dict) or not hasattr(data, "meta_keywords"):
            return data
        return {
            "id": data.id,
            "title": data.title,
            "slug": data.slug,
            "category": CategorySummary.model_validate(data.category) if data.category else None,
            "description": data.description,
            "summary": data.summary,
            "publish_date": data.publish_date,
            "image_url": data.image_url,
            "price": data.price,
            "key_highlights": list(data.key_highlights or []),
            "table_of_contents": list(data.table_of_contents or []),
            "meta": {
                "keywords": list(data.meta_keywords or []),
                "seo_description": data.seo_description,
            },
            "created_at": data.created_at,
            "updated_at": data.updated_at,
        }
