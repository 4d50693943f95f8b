import logging
from typing import Any, List, Optional, TypeVar

from sqlalchemy import String, column, exists, func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, SQLModel, col, or_, select
from sqlmodel.sql.expression import SelectOfScalar

# Layer 4: Data Access
from intellisource.data_access.models import Category, ContactMessage, Report

# Layer 3: Domain Entities
from intellisource.domain.envelope import Page
from intellisource.domain.query import PageQuery, ReportQuery

logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=SQLModel)


class CatalogQuery:
    """
    Query/filter engine for the catalog listings.

    Turns pagination, category scoping and free-text search parameters into a
    single predicate, then returns one bounded page ordered newest first
    together with the count of every record matching that predicate.
    """

    def __init__(self, session: Session) -> None:
        """Initializes the engine with a database session."""
        self.session = session

    # --- 1. PREDICATE BUILDERS ---

    def keyword_clause(self, needle: str) -> Any:
        """
        EXISTS predicate matching ``needle`` against each meta keyword on its own.

        The JSON list is expanded row by row (``json_each`` on SQLite,
        ``json_array_elements_text`` on PostgreSQL), so JSON punctuation and
        escaping never take part in the match.
        """
        if self.session.get_bind().dialect.name == "postgresql":
            expand = func.json_array_elements_text
        else:
            expand = func.json_each
        keywords = expand(col(Report.meta_keywords)).table_valued(column("value", String)).alias("keyword")
        return exists().where(func.lower(keywords.c.value).contains(needle, autoescape=True))

    def search_clause(self, term: str) -> Any:
        """
        Builds the case-insensitive free-text predicate for reports.

        The term is matched as a literal substring (LIKE wildcards escaped)
        against title, description and summary, OR against any single keyword.

        Args:
            term (str): The user supplied search text.

        Returns:
            The OR-combined SQL expression.
        """
        needle = term.lower()
        return or_(
            func.lower(col(Report.title)).contains(needle, autoescape=True),
            func.lower(col(Report.description)).contains(needle, autoescape=True),
            func.lower(col(Report.summary)).contains(needle, autoescape=True),
            self.keyword_clause(needle),
        )

    def report_conditions(self, category: Optional[Category], search: Optional[str]) -> List[Any]:
        conditions: List[Any] = []
        if category is not None:
            conditions.append(col(Report.category_id) == category.id)
        if search:
            conditions.append(self.search_clause(search))
        return conditions

    # --- 2. PAGINATION ---

    def paginate(
        self,
        model: type[RecordT],
        query: PageQuery,
        conditions: Optional[List[Any]] = None,
        statement: Optional[SelectOfScalar[RecordT]] = None,
    ) -> Page[RecordT]:
        """
        Executes one page of ``model`` rows plus the total count.

        Args:
            model: The table model being listed (must have ``created_at`` and ``id``).
            query (PageQuery): Clamped page/limit values.
            conditions: Predicates AND-combined into both the page and count queries.
            statement: Optional base select (e.g. with eager loading options).

        Returns:
            Page: At most ``query.limit`` records, newest first, and the total match count.
        """
        conditions = conditions or []
        base = statement if statement is not None else select(model)
        if conditions:
            base = base.where(*conditions)

        page_stmt = (
            base.order_by(col(model.created_at).desc(), col(model.id).desc())  # type: ignore[attr-defined]
            .offset(query.offset)
            .limit(query.limit)
        )
        items = list(self.session.exec(page_stmt).all())

        count_stmt = select(func.count()).select_from(model)
        if conditions:
            count_stmt = count_stmt.where(*conditions)
        total = self.session.exec(count_stmt).one()

        logger.debug(f"{model.__name__} page {query.page}/{query.limit}: {len(items)} of {total}")
        return Page(items=items, total=total, page=query.page, limit=query.limit)

    # --- 3. LISTINGS ---

    def list_reports(self, query: ReportQuery, category: Optional[Category] = None) -> Page[Report]:
        """Reports matching the (already resolved) category and the search text."""
        statement = select(Report).options(selectinload(Report.category))  # type: ignore[arg-type]
        return self.paginate(
            Report,
            query,
            conditions=self.report_conditions(category, query.search),
            statement=statement,
        )

    def list_contacts(self, query: PageQuery) -> Page[ContactMessage]:
        return self.paginate(ContactMessage, query)
