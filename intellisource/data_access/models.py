from datetime import UTC, date, datetime
from typing import List, Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, Relationship, SQLModel


def utcnow() -> datetime:
    return datetime.now(UTC)

# --- Catalog Tables ---

class Category(SQLModel, table=True):
    __tablename__ = "category"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(unique=True, index=True)
    slug: str = Field(unique=True, index=True)
    description: Optional[str] = None
    thumbnail_url: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    reports: List["Report"] = Relationship(back_populates="category")

class Report(SQLModel, table=True):
    __tablename__ = "report"
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(index=True)
    slug: str = Field(unique=True, index=True)
    # Deleting a referenced category is refused; see CategoryService.delete_category
    category_id: int = Field(foreign_key="category.id", index=True, ondelete="RESTRICT")
    description: Optional[str] = None
    summary: Optional[str] = None
    publish_date: Optional[date] = None
    image_url: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    key_highlights: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    table_of_contents: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    meta_keywords: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    seo_description: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    category: Optional[Category] = Relationship(back_populates="reports")

# --- Contact Log (append-only) ---

class ContactMessage(SQLModel, table=True):
    __tablename__ = "contact_message"
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    email: str = Field(index=True)
    subject: str
    message: str
    created_at: datetime = Field(default_factory=utcnow, index=True)
