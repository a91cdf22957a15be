from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_serializer, field_validator
from pydantic.alias_generators import to_camel


class ContactCreate(BaseModel):
    """Public submission body.

    Every field is optional at the schema level; which ones are required is a
    deployment setting checked by the message service, so a missing ``name``
    is reported the same way as a missing ``phone``.
    """

    model_config = ConfigDict(str_strip_whitespace=True)

    name: Optional[str] = Field(default=None, max_length=120)
    phone: Optional[str] = Field(default=None, max_length=40)
    email: Optional[EmailStr] = None
    subject: Optional[str] = Field(default=None, max_length=200)
    message: Optional[str] = Field(default=None, max_length=5000)

    @field_validator("email", mode="before")
    @classmethod
    def _blank_email_is_missing(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class ContactOut(BaseModel):
    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    name: str
    phone: Optional[str] = None
    email: Optional[str] = None
    subject: Optional[str] = None
    message: str
    created_at: datetime
    deleted: bool
    deleted_at: Optional[datetime] = None

    @field_serializer("created_at", "deleted_at")
    def _as_utc(self, value: Optional[datetime]) -> Optional[datetime]:
        # SQLite hands timestamps back without tzinfo; they are stored as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class ContactSubmitted(ContactOut):
    success: bool = True
