from __future__ import annotations

import logging
from typing import Iterable, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contact_api.core.config import ALWAYS_REQUIRED_FIELDS
from contact_api.core.errors import NotFound, PersistenceError, ValidationError
from contact_api.crud import contact_message as crud
from contact_api.models.contact_message import ContactMessage
from contact_api.schemas.contact import ContactCreate

logger = logging.getLogger(__name__)

DEFAULT_PAGE_SIZE = 500


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = str(value).strip()
    return value or None


def _persistence_failure(db: Session, action: str) -> PersistenceError:
    db.rollback()
    logger.exception("Failed to %s", action)
    return PersistenceError()


def submit_message(
    db: Session,
    payload: ContactCreate,
    *,
    required_fields: Iterable[str] = ALWAYS_REQUIRED_FIELDS,
) -> ContactMessage:
    values = {
        "name": _clean(payload.name),
        "phone": _clean(payload.phone),
        "email": _clean(payload.email),
        "subject": _clean(payload.subject),
        "message": _clean(payload.message),
    }

    required = list(dict.fromkeys([*ALWAYS_REQUIRED_FIELDS, *required_fields]))
    missing = [field for field in required if not values.get(field)]
    if missing:
        raise ValidationError(fields=missing)

    try:
        cm = crud.create_contact_message(db, **values)
    except SQLAlchemyError:
        raise _persistence_failure(db, "store contact message")

    logger.info("Stored contact message id=%s", cm.id)
    return cm


def list_active(db: Session, *, limit: int = DEFAULT_PAGE_SIZE) -> list[ContactMessage]:
    try:
        return crud.list_active_messages(db, limit=limit)
    except SQLAlchemyError:
        raise _persistence_failure(db, "list active messages")


def list_deleted(db: Session, *, limit: int = DEFAULT_PAGE_SIZE) -> list[ContactMessage]:
    try:
        return crud.list_deleted_messages(db, limit=limit)
    except SQLAlchemyError:
        raise _persistence_failure(db, "list deleted messages")


def _get_or_404(db: Session, message_id: int) -> ContactMessage:
    try:
        cm = crud.get_contact_message(db, message_id=message_id)
    except SQLAlchemyError:
        raise _persistence_failure(db, f"load message id={message_id}")
    if cm is None:
        raise NotFound()
    return cm


def soft_delete(db: Session, message_id: int, *, refresh_timestamp: bool = False) -> ContactMessage:
    """Move a message to the trash.

    Deleting an already deleted message keeps its original ``deleted_at``
    unless ``refresh_timestamp`` is set.
    """
    cm = _get_or_404(db, message_id)
    try:
        cm = crud.mark_deleted(db, cm, refresh_timestamp=refresh_timestamp)
    except SQLAlchemyError:
        raise _persistence_failure(db, f"soft-delete message id={message_id}")

    logger.info("Soft-deleted message id=%s", message_id)
    return cm


def restore(db: Session, message_id: int) -> ContactMessage:
    cm = _get_or_404(db, message_id)
    try:
        cm = crud.mark_restored(db, cm)
    except SQLAlchemyError:
        raise _persistence_failure(db, f"restore message id={message_id}")

    logger.info("Restored message id=%s", message_id)
    return cm


def purge(db: Session, message_id: int) -> None:
    """Permanently remove a message. Only messages already in the trash qualify."""
    cm = _get_or_404(db, message_id)
    if not cm.deleted:
        raise NotFound()
    try:
        crud.purge_contact_message(db, cm)
    except SQLAlchemyError:
        raise _persistence_failure(db, f"purge message id={message_id}")

    logger.info("Purged message id=%s", message_id)
