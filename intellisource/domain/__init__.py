# intellisource/domain/__init__.py

# 1. Response Envelope
from .envelope import ApiResponse, CamelModel, Page, PaginatedResponse, Pagination

# 2. Catalog Entities
from .category import CategoryCreate, CategoryRead, CategorySummary, CategoryUpdate
from .report import ReportCreate, ReportMeta, ReportRead, ReportUpdate

# 3. Contact Log
from .contact import ContactCreate, ContactRead

# 4. Assistant Chat
from .assistant import ChatMessage, ChatReply, ChatRequest

# 5. Query Parameters
from .query import PageQuery, ReportQuery


__all__ = [
    "ApiResponse",
    "CamelModel",
    "CategoryCreate",
    "CategoryRead",
    "CategorySummary",
    "CategoryUpdate",
    "ChatMessage",
    "ChatReply",
    "ChatRequest",
    "ContactCreate",
    "ContactRead",
    "Page",
    "PageQuery",
    "PaginatedResponse",
    "Pagination",
    "ReportCreate",
    "ReportMeta",
    "ReportQuery",
    "ReportRead",
    "ReportUpdate",
]
