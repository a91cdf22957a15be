from __future__ import annotations

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from contact_api.api.deps import get_settings
from contact_api.core.config import Settings
from contact_api.db.session import get_db
from contact_api.schemas.contact import ContactCreate, ContactSubmitted
from contact_api.services import messages as message_service

router = APIRouter(tags=["contact"])

SUBMIT_PATHS = ("/contact", "/messages")


def submit_contact(
    message_in: ContactCreate,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> ContactSubmitted:
    cm = message_service.submit_message(
        db,
        message_in,
        required_fields=settings.CONTACT_REQUIRED_FIELDS,
    )
    return ContactSubmitted.model_validate(cm)


for _path in SUBMIT_PATHS:
    router.add_api_route(
        _path,
        submit_contact,
        methods=["POST"],
        response_model=ContactSubmitted,
        status_code=status.HTTP_201_CREATED,
        name=f"submit_contact{_path.replace('/', '_')}",
    )
