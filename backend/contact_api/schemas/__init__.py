from __future__ import annotations

from contact_api.schemas.contact import ContactCreate, ContactOut, ContactSubmitted

__all__ = [
    "ContactCreate",
    "ContactOut",
    "ContactSubmitted",
]
