from datetime import datetime

from pydantic import EmailStr, Field, field_validator

from .envelope import CamelModel


class ContactCreate(CamelModel):
    """
    A message submitted through the storefront contact form.

    Every field is trimmed before its length rule is applied, and the email
    is lowercased before format validation.

    Attributes:
        name (str): Sender's name, at least 2 characters.
        email (EmailStr): Reply address.
        subject (str): At least 2 characters.
        message (str): Body of the enquiry, at least 10 characters.
    """

    name: str = Field(..., min_length=2, max_length=120)
    email: EmailStr = Field(..., description="Reply address of the sender")
    subject: str = Field(..., min_length=2, max_length=200)
    message: str = Field(..., min_length=10, max_length=5000)

    @field_validator("name", "subject", "message", mode="before")
    @classmethod
    def strip_text(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @field_validator("email", mode="before")
    @classmethod
    def normalize_email(cls, v: object) -> object:
        return v.strip().lower() if isinstance(v, str) else v

    model_config = {
        "json_schema_extra": {
            "example": {
                "name": "Olivia Martinez",
                "email": "olivia.m@greentec.com",
                "subject": "Flexible Packaging Inquiry",
                "message": "Could you share regional data breakdowns for flexible packaging growth?",
            }
        }
    }


class ContactRead(CamelModel):
    id: int
    name: str
    email: str
    subject: str
    message: str
    created_at: datetime
