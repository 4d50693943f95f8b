import logging
from typing import List

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, col, func, or_, select

# Layer 4: Data Access
from intellisource.data_access.models import Category, Report, utcnow

# Layer 3: Domain Entities
from intellisource.domain.category import CategoryCreate, CategoryRead, CategoryUpdate
from intellisource.domain.slug import resolve_slug

logger = logging.getLogger(__name__)


class CategoryService:
    """
    Service layer for managing Category business logic.

    This service orchestrates the transformation between Category domain
    payloads and the Category table, enforcing name/slug uniqueness and the
    slug invariant before anything is persisted.
    """

    def __init__(self, session: Session):
        """
        Initializes the CategoryService with a database session.

        Args:
            session (Session): The SQLModel/SQLAlchemy session for database operations.
        """
        self.session = session

    # --- 1. LOOKUP HELPERS ---

    def find_by_slug(self, slug: str) -> Category | None:
        statement = select(Category).where(Category.slug == slug)
        return self.session.exec(statement).first()

    def get_category_or_404(self, ref: str) -> Category:
        """
        Retrieves a category by slug, falling back to its numeric ID.

        Args:
            ref (str): The category slug (or primary key as a string).

        Returns:
            Category: The stored record.

        Raises:
            HTTPException: 404 status if no category matches.
        """
        category = self.find_by_slug(ref)
        if category is None and ref.isdigit():
            category = self.session.get(Category, int(ref))
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category '{ref}' not found."
            )
        return category

    def _ensure_unique(self, name: str, slug: str, exclude_id: int | None = None) -> None:
        """
        Business Rule: category names and slugs are unique.

        Raises:
            HTTPException: 409 status if another category already uses the name or slug.
        """
        statement = select(Category).where(or_(Category.name == name, Category.slug == slug))
        if exclude_id is not None:
            statement = statement.where(Category.id != exclude_id)
        existing = self.session.exec(statement).first()
        if existing:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category '{name}' already exists."
            )

    def _commit(self, category: Category) -> Category:
        """
        Commits pending changes, translating a unique-key violation to 409.

        The pre-check in ``_ensure_unique`` cannot see a concurrent insert;
        the store's unique index settles that race here.
        """
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(f"Duplicate category rejected by the store: {e.orig}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category '{category.name}' already exists."
            )
        self.session.refresh(category)
        return category

    @staticmethod
    def _slug_or_400(name: str, current: str | None, requested: str | None, changed: bool) -> str:
        try:
            return resolve_slug(name, current_slug=current, requested_slug=requested, source_changed=changed)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    # --- 2. FULL CRUD OPERATIONS ---

    def create_category(self, category_in: CategoryCreate) -> CategoryRead:
        """
        Validates business rules and persists a new Category.

        Args:
            category_in (CategoryCreate): The validated input payload.

        Returns:
            CategoryRead: The stored category.

        Raises:
            HTTPException: 400 if the name yields an empty slug, 409 if the name or slug exists.
        """
        slug = self._slug_or_400(category_in.name, None, category_in.slug, True)
        self._ensure_unique(category_in.name, slug)

        new_category = Category(
            name=category_in.name,
            slug=slug,
            description=category_in.description,
            thumbnail_url=category_in.thumbnail_url,
        )
        self.session.add(new_category)
        self._commit(new_category)
        logger.info(f"Created category '{new_category.slug}'.")
        return CategoryRead.model_validate(new_category)

    def get_all_categories(self) -> List[CategoryRead]:
        """
        Retrieves every category, newest first.

        Returns:
            List[CategoryRead]: All stored categories.
        """
        statement = select(Category).order_by(col(Category.created_at).desc(), col(Category.id).desc())
        return [CategoryRead.model_validate(c) for c in self.session.exec(statement).all()]

    def get_category(self, ref: str) -> CategoryRead:
        return CategoryRead.model_validate(self.get_category_or_404(ref))

    def update_category(self, ref: str, category_in: CategoryUpdate) -> CategoryRead:
        """
        Applies a sparse update; only fields present in the payload change.

        A changed name re-derives the slug unless a slug is supplied in the
        same request.

        Args:
            ref (str): Slug (or ID) of the category to update.
            category_in (CategoryUpdate): Fields to change.

        Returns:
            CategoryRead: The updated category.

        Raises:
            HTTPException: 404 if the category does not exist, 409 on a duplicate name/slug.
        """
        db_category = self.get_category_or_404(ref)
        changes = category_in.model_dump(exclude_unset=True)

        name_changed = "name" in changes and changes["name"] != db_category.name
        new_name = changes.get("name", db_category.name)
        slug = self._slug_or_400(new_name, db_category.slug, changes.get("slug"), name_changed)
        if name_changed or slug != db_category.slug:
            self._ensure_unique(new_name, slug, exclude_id=db_category.id)

        db_category.name = new_name
        db_category.slug = slug
        for field in ("description", "thumbnail_url"):
            if field in changes:
                setattr(db_category, field, changes[field])
        db_category.updated_at = utcnow()

        self.session.add(db_category)
        return CategoryRead.model_validate(self._commit(db_category))

    def delete_category(self, ref: str) -> CategoryRead:
        """
        Deletes a category that no report references.

        Args:
            ref (str): Slug (or ID) of the category to delete.

        Returns:
            CategoryRead: The deleted record's data.

        Raises:
            HTTPException: 404 if absent, 409 while reports still reference it.
        """
        db_category = self.get_category_or_404(ref)
        statement = select(func.count()).select_from(Report).where(Report.category_id == db_category.id)
        in_use = self.session.exec(statement).one()
        if in_use:
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"Category '{db_category.slug}' is still used by {in_use} report(s)."
            )

        deleted = CategoryRead.model_validate(db_category)
        self.session.delete(db_category)
        self.session.commit()
        logger.info(f"Deleted category '{deleted.slug}'.")
        return deleted
