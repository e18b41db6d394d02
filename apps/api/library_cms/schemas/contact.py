"""Pydantic schemas for contact messages and replies."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field

from library_cms.db.enums import ResponseStatus


class ContactMessageCreate(BaseModel):
    """Public contact-form submission."""
    library_id: UUID | None = None
    name: str = Field(..., min_length=1, max_length=255)
    email: EmailStr
    subject: str = Field(..., min_length=1, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)


class ContactMessageUpdate(BaseModel):
    is_read: bool | None = None
    response_status: ResponseStatus | None = None


class ContactMessageRead(BaseModel):
    id: UUID
    library_id: UUID | None
    name: str
    email: str
    subject: str
    message: str
    is_read: bool
    response_status: str
    created_at: datetime

    model_config = {"from_attributes": True}


class ReplyRequest(BaseModel):
    """Reply body. Emptiness is checked by the service so the error text is uniform."""
    subject: str = ""
    message: str = ""


class MessageResponseRead(BaseModel):
    id: UUID
    contact_message_id: UUID
    responded_by: UUID
    subject: str
    message: str
    email_sent: bool
    email_sent_at: datetime | None
    created_at: datetime

    model_config = {"from_attributes": True}
