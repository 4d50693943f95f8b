import logging
from datetime import date

from sqlmodel import Session, delete

from intellisource.core.config import settings
from intellisource.data_access.database import Database
from intellisource.data_access.models import Category, ContactMessage, Report
from intellisource.domain import CategoryCreate, ContactCreate, ReportCreate, ReportMeta
from intellisource.services.category_service import CategoryService
from intellisource.services.contact_service import ContactService
from intellisource.services.report_service import ReportService

logger = logging.getLogger(__name__)

SAMPLE_CATEGORIES = [
    CategoryCreate(
        name="Packaging Market Research",
        description="In-depth research on global packaging trends, materials, and regional performance across paper, flexible, and plastic segments.",
        thumbnail_url="https://images.unsplash.com/photo-1616627455957-df6d0435c4c8?q=80&w=800",
    ),
    CategoryCreate(
        name="Sustainability & Eco-Packaging",
        description="Market insights on environmentally sustainable, recyclable, and biodegradable packaging materials and practices.",
        thumbnail_url="https://images.unsplash.com/photo-1607083206968-13611e1d3a43?q=80&w=800",
    ),
    CategoryCreate(
        name="Regional Packaging Reports",
        description="Analysis of packaging industry performance across countries and states, focusing on innovation and market share.",
        thumbnail_url="https://images.unsplash.com/photo-1620231158340-cf05c9f2706e?q=80&w=800",
    ),
]

SAMPLE_REPORTS = [
    ReportCreate(
        title="Global Flexible Packaging Market Report 2024-2030",
        category="packaging-market-research",
        summary="Analysis of the global flexible packaging market by material type, product form, and end-user industries.",
        description="Production and sales of flexible materials such as plastic, paper, and aluminum foil used for consumer and industrial goods.",
        publish_date=date(2024, 4, 10),
        image_url="https://images.unsplash.com/photo-1585386959984-a41552231693?q=80&w=800",
        price=449.99,
        key_highlights=[
            "Market CAGR 3.38% (2024-2030)",
            "Food and beverage sector leads usage",
            "Amcor, Sealed Air, and Mondi among key players",
        ],
        table_of_contents=[
            "Executive Summary",
            "Market Overview",
            "Key Drivers and Restraints",
            "Regional Insights",
            "Company Profiles",
            "Future Outlook",
        ],
        meta=ReportMeta(
            keywords=["flexible packaging", "plastic film", "food packaging", "aluminum foil", "market forecast"],
            seo_description="Research on the global flexible packaging market with drivers, segmentation, and trends up to 2030.",
        ),
    ),
    ReportCreate(
        title="Global Paper and Paperboard Packaging Market Report 2024-2030",
        category="sustainability-eco-packaging",
        summary="The rise of sustainable paper and paperboard packaging, driven by eco-regulations and recyclable materials.",
        description="Corrugated boxes dominate, supported by e-commerce and food delivery; Asia-Pacific grows fastest.",
        publish_date=date(2024, 5, 2),
        image_url="https://images.unsplash.com/photo-1598454449130-7dbdf9a58a32?q=80&w=800",
        price=399.0,
        key_highlights=[
            "CAGR of 5.0% (2024-2030)",
            "Corrugated boxes dominate global demand",
            "Rising consumer shift toward eco-friendly packaging",
        ],
        table_of_contents=[
            "Market Summary",
            "Material Segmentation",
            "Sustainability Drivers",
            "Regional Market Analysis",
            "Competitive Landscape",
        ],
        meta=ReportMeta(
            keywords=["paper packaging", "paperboard boxes", "eco-friendly packaging", "corrugated carton"],
            seo_description="Paper and paperboard packaging insights on sustainable materials, innovation, and regional dynamics.",
        ),
    ),
    ReportCreate(
        title="United States Packaging Market Outlook 2024-2031",
        category="regional-packaging-reports",
        summary="The U.S. packaging industry by material type and end-user industries, with state-level trends.",
        description="California leads eco-friendly adoption while Texas shows the fastest CAGR due to industrial investments.",
        publish_date=date(2024, 6, 15),
        image_url="https://images.unsplash.com/photo-1624462604564-65096d3b7a2b?q=80&w=800",
        price=499.0,
        key_highlights=[
            "CAGR of 3.97% (2024-2031)",
            "Plastic dominates due to versatility",
            "California leads; Texas grows fastest",
        ],
        table_of_contents=[
            "U.S. Packaging Overview",
            "Material Analysis",
            "Market Drivers & Challenges",
            "Regional Insights",
            "Future Outlook",
        ],
        meta=ReportMeta(
            keywords=["US packaging", "plastic packaging", "Texas growth", "California sustainability"],
            seo_description="United States packaging market with state-level insights and growth projections through 2031.",
        ),
    ),
]

SAMPLE_CONTACTS = [
    ContactCreate(
        name="Olivia Martinez",
        email="olivia.m@greentec.com",
        subject="Flexible Packaging Inquiry",
        message="Could you share regional data breakdowns for flexible packaging growth across Asia-Pacific?",
    ),
    ContactCreate(
        name="Ravi Sharma",
        email="ravi@packsmart.in",
        subject="Request for Paper Packaging Report",
        message="We need access to your latest paper and paperboard packaging market insights for 2024.",
    ),
]


def seed_catalog(session: Session) -> dict[str, int]:
    """Replaces every category, report and contact message with the sample data set.

    Records go through the services so slugs and validation match API-created data.

    Returns:
        dict[str, int]: Number of records created per table.
    """
    session.execute(delete(Report))
    session.execute(delete(Category))
    session.execute(delete(ContactMessage))
    session.commit()
    logger.info("Cleared existing catalog data.")

    categories = [CategoryService(session).create_category(c) for c in SAMPLE_CATEGORIES]
    reports = [ReportService(session).create_report(r) for r in SAMPLE_REPORTS]
    contacts = [ContactService(session).create_contact(c) for c in SAMPLE_CONTACTS]

    summary = {"categories": len(categories), "reports": len(reports), "contacts": len(contacts)}
    logger.info(f"Seeding completed: {summary}")
    return summary


def main() -> None:
    logging.basicConfig(level=settings.LOG_LEVEL, format="%(asctime)s [%(levelname)s] %(message)s")
    database = Database(settings.DATABASE_URL)
    database.connect()
    try:
        with database.session() as session:
            seed_catalog(session)
    finally:
        database.dispose()


if __name__ == "__main__":
    main()
