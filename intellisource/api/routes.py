from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, status
from sqlmodel import Session

# Layer 4: Data Access (Session)
from intellisource.data_access.database import get_session

# Layer 3: Domain Entities (Pydantic models)
from intellisource.domain import (
    ApiResponse,
    CategoryCreate,
    CategoryRead,
    CategoryUpdate,
    ChatReply,
    ChatRequest,
    ContactCreate,
    ContactRead,
    PageQuery,
    PaginatedResponse,
    ReportCreate,
    ReportQuery,
    ReportRead,
    ReportUpdate,
)
from intellisource.domain.envelope import ok, paginated

# Layer 2: Services
from intellisource.services.ai_service import AIService
from intellisource.services.assistant_service import AssistantService
from intellisource.services.category_service import CategoryService
from intellisource.services.contact_service import ContactService
from intellisource.services.report_service import ReportService


router = APIRouter(prefix="/api")

SessionDep = Annotated[Session, Depends(get_session)]


def get_ai_service() -> AIService:
    """Dependency hook so tests can swap the hosted model for a stub."""
    return AIService()


# --- 1. CATEGORIES ---
@router.get("/categories", tags=["Categories"])
def list_categories(session: SessionDep) -> ApiResponse[list[CategoryRead]]:
    """Every category, newest first."""
    return ok("Categories fetched", CategoryService(session).get_all_categories())

@router.get("/categories/{slug}", tags=["Categories"])
def get_category(slug: str, session: SessionDep) -> ApiResponse[CategoryRead]:
    return ok("Category fetched", CategoryService(session).get_category(slug))

@router.post("/categories", tags=["Categories"], status_code=status.HTTP_201_CREATED)
def create_category(data: CategoryCreate, session: SessionDep) -> ApiResponse[CategoryRead]:
    """Creates a category; the slug is derived from the name unless supplied."""
    return ok("Category created", CategoryService(session).create_category(data))

@router.put("/categories/{slug}", tags=["Categories"])
def update_category(slug: str, data: CategoryUpdate, session: SessionDep) -> ApiResponse[CategoryRead]:
    """Partial update; renaming re-derives the slug."""
    return ok("Category updated", CategoryService(session).update_category(slug, data))

@router.delete("/categories/{slug}", tags=["Categories"])
def delete_category(slug: str, session: SessionDep) -> ApiResponse[CategoryRead]:
    """Deletes a category. Refused with 409 while reports still reference it."""
    return ok("Category deleted", CategoryService(session).delete_category(slug))


# --- 2. REPORTS ---
@router.get("/reports", tags=["Reports"])
def list_reports(
    session: SessionDep,
    page: Annotated[Optional[int], Query(description="1-indexed page; values below 1 become 1")] = None,
    limit: Annotated[Optional[int], Query(description="Page size, clamped to 1..100 (default 20)")] = None,
    category: Annotated[Optional[str], Query(description="Category slug to scope the listing")] = None,
    search: Annotated[Optional[str], Query(description="Matches title, description, summary or keywords")] = None,
) -> PaginatedResponse[ReportRead]:
    """Paginated report listing, newest first.

    - **category**: unknown slugs return 404 rather than an empty page.
    - **search**: case-insensitive substring match.
    """
    query = ReportQuery(page=page, limit=limit, category=category, search=search)
    return paginated("Reports fetched", ReportService(session).list_reports(query))

@router.get("/reports/{slug}", tags=["Reports"])
def get_report(slug: str, session: SessionDep) -> ApiResponse[ReportRead]:
    return ok("Report fetched", ReportService(session).get_report(slug))

@router.post("/reports", tags=["Reports"], status_code=status.HTTP_201_CREATED)
def create_report(data: ReportCreate, session: SessionDep) -> ApiResponse[ReportRead]:
    """Creates a report under the category whose slug is given in ``category``."""
    return ok("Report created", ReportService(session).create_report(data))

@router.put("/reports/{slug}", tags=["Reports"])
def update_report(slug: str, data: ReportUpdate, session: SessionDep) -> ApiResponse[ReportRead]:
    return ok("Report updated", ReportService(session).update_report(slug, data))

@router.delete("/reports/{slug}", tags=["Reports"])
def delete_report(slug: str, session: SessionDep) -> ApiResponse[ReportRead]:
    return ok("Report deleted", ReportService(session).delete_report(slug))


# --- 3. CONTACT MESSAGES (append-only) ---
@router.get("/contacts", tags=["Contacts"])
def list_contacts(
    session: SessionDep,
    page: Annotated[Optional[int], Query()] = None,
    limit: Annotated[Optional[int], Query()] = None,
) -> PaginatedResponse[ContactRead]:
    query = PageQuery(page=page, limit=limit)
    return paginated("Contacts fetched", ContactService(session).list_contacts(query))

@router.post("/contacts", tags=["Contacts"], status_code=status.HTTP_201_CREATED)
def create_contact(data: ContactCreate, session: SessionDep) -> ApiResponse[ContactRead]:
    return ok("Contact created successfully", ContactService(session).create_contact(data))


# --- 4. ASSISTANT ---
@router.post("/assistant/chat", tags=["Assistant"])
def chat_with_assistant(
    data: ChatRequest,
    session: SessionDep,
    ai: Annotated[AIService, Depends(get_ai_service)],
) -> ApiResponse[ChatReply]:
    """Answers a storefront chat message using the current report catalogue as context."""
    return ok("Assistant replied", AssistantService(session, ai).reply(data))
