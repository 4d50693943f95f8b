from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator, model_validator

from .envelope import CamelModel


def _clean_name(v: Optional[str]) -> Optional[str]:
    if v is None:
        return v
    stripped = v.strip()
    if len(stripped) < 2:
        raise ValueError("Category name must be at least 2 characters long.")
    return stripped


class CategoryCreate(CamelModel):
    """
    The input contract for creating a research Category.

    The name is trimmed and must keep at least two characters; the slug is
    optional and normally derived from the name by the service layer.

    Attributes:
        name (str): Unique display name (e.g., "Packaging Market Research").
        slug (Optional[str]): Explicit URL identifier; normalized when supplied.
        description (Optional[str]): Scope of the category.
        thumbnail_url (Optional[str]): Image shown on category cards.
    """

    name: str = Field(..., description="Unique category name", max_length=120)
    slug: Optional[str] = Field(None, description="URL identifier; derived from name when omitted")
    description: Optional[str] = Field(None, description="What the category covers")
    thumbnail_url: Optional[str] = Field(None, description="Thumbnail image URL")

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: str) -> str:
        """
        Trims the category name and enforces the minimum length.

        Raises:
            ValueError: If fewer than 2 characters remain after trimming.
        """
        return _clean_name(v)

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Packaging Market Research",
                "description": "Global packaging trends, materials, and regional performance.",
                "thumbnailUrl": "https://images.unsplash.com/photo-1616627455957-df6d0435c4c8?w=800",
            }
        }
    }


class CategoryUpdate(CamelModel):
    """Sparse update: only the fields present in the request body are applied."""

    name: Optional[str] = Field(None, max_length=120)
    slug: Optional[str] = None
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None

    @field_validator("name")
    @classmethod
    def clean_name(cls, v: Optional[str]) -> Optional[str]:
        return _clean_name(v)

    @model_validator(mode="after")
    def reject_null_name(self) -> "CategoryUpdate":
        if "name" in self.model_fields_set and self.name is None:
            raise ValueError("Category name cannot be null.")
        return self


class CategorySummary(CamelModel):
    """Compact category shape embedded in report payloads."""
    id: int
    name: str
    slug: str


class CategoryRead(CategorySummary):
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
