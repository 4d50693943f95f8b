import logging
from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

# Layer 4: Data Access
from intellisource.data_access.models import Report

# Layer 3: Domain Entities
from intellisource.domain.assistant import ChatReply, ChatRequest

# Layer 2: Supporting Services
from intellisource.services.ai_service import AIService

logger = logging.getLogger(__name__)

ASSISTANT_RULES = """When a user asks a question, use this data to provide helpful answers.
- If a user asks for a report on a topic, identify the most relevant report(s) from the list and mention their title and a brief summary.
- Be conversational and helpful.
- Do not make up reports that are not on the list.
- Keep your answers concise and to the point.
- You can suggest navigating to the report page, for example "You can find more details on the 'Global AI Market Trends 2024' report page."
"""


def build_catalog_context(reports: Iterable[Report]) -> str:
    """
    Renders the system instruction handed to the chat model.

    Each report is listed with its slug as ID, title, summary, category and
    price so the model can only recommend what the catalogue really holds.

    Args:
        reports: Stored reports with their category loaded.

    Returns:
        str: The complete system instruction.
    """
    lines = []
    for r in reports:
        category = r.category.name if r.category else "Uncategorized"
        summary = r.summary or "No summary available."
        lines.append(
            f"- ID: {r.slug}, Title: {r.title}, Summary: {summary} "
            f"(Category: {category}, Price: ${r.price:,.2f})"
        )
    listing = "\n".join(lines) if lines else "- No reports are currently available."
    return (
        "You are IntelliSource Assistant, a friendly and professional AI helper for the "
        "IntelliSource Reports website. Your goal is to help users find the right market "
        "research reports.\n\n"
        "You have access to the following data:\n\n"
        f"**Available Reports:**\n{listing}\n\n"
        f"{ASSISTANT_RULES}"
    )


class AssistantService:
    """Answers storefront chat messages against a fresh snapshot of the catalogue."""

    def __init__(self, session: Session, ai: AIService) -> None:
        self.session = session
        self.ai = ai

    def catalog_snapshot(self) -> List[Report]:
        statement = (
            select(Report)
            .options(selectinload(Report.category))  # type: ignore[arg-type]
            .order_by(col(Report.created_at).desc(), col(Report.id).desc())
        )
        return list(self.session.exec(statement).all())

    def reply(self, request: ChatRequest) -> ChatReply:
        if not request.message.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Message cannot be empty.")

        context = build_catalog_context(self.catalog_snapshot())
        turns = [("model" if m.sender == "ai" else "user", m.text) for m in request.history]
        turns.append(("user", request.message.strip()))
        return ChatReply(reply=self.ai.chat(context, turns))
