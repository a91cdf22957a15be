from __future__ import annotations

from contact_api.models.admin import Admin
from contact_api.models.contact_message import ContactMessage

__all__ = ["Admin", "ContactMessage"]
