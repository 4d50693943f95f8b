import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

# Layer 4: Data Access
from intellisource.data_access.models import Category, Report, utcnow

# Layer 3: Domain Entities
from intellisource.domain.envelope import Page
from intellisource.domain.query import ReportQuery
from intellisource.domain.report import ReportCreate, ReportRead, ReportUpdate
from intellisource.domain.slug import resolve_slug

# Layer 2: Supporting Services
from intellisource.services.catalog_query import CatalogQuery
from intellisource.services.category_service import CategoryService

logger = logging.getLogger(__name__)


class ReportService:
    """
    Service layer for market research Reports.

    Handles the report lifecycle: category resolution by slug, slug
    derivation from the title, sparse updates and the filtered, paginated
    listing that backs the storefront catalogue.
    """

    def __init__(self, session: Session):
        """
        Initializes the ReportService with a database session.

        Args:
            session (Session): The active SQLModel/SQLAlchemy session.
        """
        self.session = session
        self.categories = CategoryService(session)
        self.query = CatalogQuery(session)

    # --- 1. LAYERED MAPPING HELPERS ---

    def _map_to_domain(self, db_report: Report) -> ReportRead:
        """Converts the stored row (with its category loaded) into the API shape."""
        return ReportRead.model_validate(db_report)

    def _resolve_category(self, slug: str) -> Category:
        """
        Resolves a category slug to the stored record.

        Raises:
            HTTPException: 404 status if no category carries that slug.
        """
        category = self.categories.find_by_slug(slug)
        if category is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Category '{slug}' not found."
            )
        return category

    def _get_report_or_404(self, ref: str) -> Report:
        """
        Retrieves a report by slug, falling back to its numeric ID.

        Raises:
            HTTPException: 404 status if no report matches.
        """
        report = self.session.exec(select(Report).where(Report.slug == ref)).first()
        if report is None and ref.isdigit():
            report = self.session.get(Report, int(ref))
        if report is None:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Report not found")
        return report

    def _ensure_slug_free(self, slug: str, exclude_id: int | None = None) -> None:
        statement = select(Report).where(Report.slug == slug)
        if exclude_id is not None:
            statement = statement.where(Report.id != exclude_id)
        if self.session.exec(statement).first():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A report with slug '{slug}' already exists."
            )

    def _commit(self, db_report: Report) -> Report:
        try:
            self.session.commit()
        except IntegrityError as e:
            self.session.rollback()
            logger.info(f"Duplicate report rejected by the store: {e.orig}")
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"A report with slug '{db_report.slug}' already exists."
            )
        self.session.refresh(db_report)
        return db_report

    @staticmethod
    def _slug_or_400(title: str, current: str | None, requested: str | None, changed: bool) -> str:
        try:
            return resolve_slug(title, current_slug=current, requested_slug=requested, source_changed=changed)
        except ValueError as e:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))

    # --- 2. FULL CRUD OPERATIONS ---

    def create_report(self, report_in: ReportCreate) -> ReportRead:
        """
        Persists a new report under an existing category.

        Args:
            report_in (ReportCreate): The validated input payload; ``category`` is a slug.

        Returns:
            ReportRead: The stored report with its category populated.

        Raises:
            HTTPException: 404 if the category slug does not resolve,
                400 if the title yields an empty slug, 409 if the slug exists.
        """
        category = self._resolve_category(report_in.category)
        slug = self._slug_or_400(report_in.title, None, report_in.slug, True)
        self._ensure_slug_free(slug)

        new_report = Report(
            title=report_in.title,
            slug=slug,
            category_id=category.id,
            description=report_in.description,
            summary=report_in.summary,
            publish_date=report_in.publish_date,
            image_url=report_in.image_url,
            price=report_in.price,
            key_highlights=list(report_in.key_highlights),
            table_of_contents=list(report_in.table_of_contents),
            meta_keywords=list(report_in.meta.keywords),
            seo_description=report_in.meta.seo_description,
        )
        self.session.add(new_report)
        self._commit(new_report)
        logger.info(f"Created report '{new_report.slug}' in category '{category.slug}'.")
        return self._map_to_domain(new_report)

    def get_report(self, ref: str) -> ReportRead:
        """
        Retrieves a single report by slug (or ID) with its category populated.

        Raises:
            HTTPException: 404 status if the report is not found.
        """
        return self._map_to_domain(self._get_report_or_404(ref))

    def list_reports(self, query: ReportQuery) -> Page[ReportRead]:
        """
        Returns one page of reports, optionally scoped to a category and a search term.

        Args:
            query (ReportQuery): Page, limit, category slug and search text.

        Returns:
            Page[ReportRead]: The requested page and the total number of matches.

        Raises:
            HTTPException: 404 if ``query.category`` names an unknown category.
        """
        category = self._resolve_category(query.category) if query.category else None
        page = self.query.list_reports(query, category)
        return Page(
            items=[self._map_to_domain(r) for r in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
        )

    def update_report(self, ref: str, report_in: ReportUpdate) -> ReportRead:
        """
        Applies a sparse update; fields absent from the payload keep their values.

        Args:
            ref (str): Slug (or ID) of the report.
            report_in (ReportUpdate): Fields to change.

        Returns:
            ReportRead: The updated report.

        Raises:
            HTTPException: 404 if the report or a newly referenced category is missing,
                409 on a duplicate slug.
        """
        db_report = self._get_report_or_404(ref)
        changes = report_in.model_dump(exclude_unset=True)

        if "category" in changes:
            db_report.category_id = self._resolve_category(changes.pop("category").strip()).id

        title_changed = "title" in changes and changes["title"] != db_report.title
        new_title = changes.pop("title", db_report.title)
        slug = self._slug_or_400(new_title, db_report.slug, changes.pop("slug", None), title_changed)
        if slug != db_report.slug:
            self._ensure_slug_free(slug, exclude_id=db_report.id)
        db_report.title = new_title
        db_report.slug = slug

        meta = changes.pop("meta", None)
        if meta is not None:
            if "keywords" in report_in.meta.model_fields_set:
                db_report.meta_keywords = list(report_in.meta.keywords)
            if "seo_description" in report_in.meta.model_fields_set:
                db_report.seo_description = report_in.meta.seo_description

        for field, value in changes.items():
            setattr(db_report, field, list(value) if isinstance(value, list) else value)
        db_report.updated_at = utcnow()

        self.session.add(db_report)
        self._commit(db_report)
        return self._map_to_domain(db_report)

    def delete_report(self, ref: str) -> ReportRead:
        """
        Removes a report and returns its last state.

        Raises:
            HTTPException: 404 status if the report is not found.
        """
        db_report = self._get_report_or_404(ref)
        deleted = self._map_to_domain(db_report)
        self.session.delete(db_report)
        self.session.commit()
        logger.info(f"Deleted report '{deleted.slug}'.")
        return deleted
