import logging

from sqlmodel import Session

# Layer 4: Data Access
from intellisource.data_access.models import ContactMessage

# Layer 3: Domain Entities
from intellisource.domain.contact import ContactCreate, ContactRead
from intellisource.domain.envelope import Page
from intellisource.domain.query import PageQuery

# Layer 2: Supporting Services
from intellisource.services.catalog_query import CatalogQuery

logger = logging.getLogger(__name__)


class ContactService:
    """Append-only log of contact form submissions."""

    def __init__(self, session: Session):
        self.session = session
        self.query = CatalogQuery(session)

    def create_contact(self, contact_in: ContactCreate) -> ContactRead:
        """
        Stores a validated contact message.

        Args:
            contact_in (ContactCreate): Trimmed, length-checked fields with a lowercased email.

        Returns:
            ContactRead: The stored record, including its ID and timestamp.
        """
        db_contact = ContactMessage(**contact_in.model_dump())
        self.session.add(db_contact)
        self.session.commit()
        self.session.refresh(db_contact)
        logger.info(f"Stored contact message {db_contact.id} ('{db_contact.subject}').")
        return ContactRead.model_validate(db_contact)

    def list_contacts(self, query: PageQuery) -> Page[ContactRead]:
        page = self.query.list_contacts(query)
        return Page(
            items=[ContactRead.model_validate(c) for c in page.items],
            total=page.total,
            page=page.page,
            limit=page.limit,
        )
