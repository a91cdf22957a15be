from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from contact_api.models.contact_message import ContactMessage


def create_contact_message(
    db: Session,
    *,
    name: str,
    message: str,
    phone: Optional[str] = None,
    email: Optional[str] = None,
    subject: Optional[str] = None,
) -> ContactMessage:
    cm = ContactMessage(
        name=name,
        phone=phone,
        email=email,
        subject=subject,
        message=message,
        deleted=False,
    )
    db.add(cm)
    db.commit()
    db.refresh(cm)
    return cm


def get_contact_message(db: Session, *, message_id: int) -> Optional[ContactMessage]:
    return db.execute(
        select(ContactMessage).where(ContactMessage.id == message_id)
    ).scalar_one_or_none()


def list_active_messages(db: Session, *, limit: int = 500) -> list[ContactMessage]:
    stmt = (
        select(ContactMessage)
        .where(ContactMessage.deleted.is_(False))
        .order_by(ContactMessage.created_at.desc(), ContactMessage.id.desc())
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def list_deleted_messages(db: Session, *, limit: int = 500) -> list[ContactMessage]:
    stmt = (
        select(ContactMessage)
        .where(ContactMessage.deleted.is_(True))
        .order_by(
            ContactMessage.deleted_at.desc(),
            ContactMessage.created_at.desc(),
            ContactMessage.id.desc(),
        )
        .limit(limit)
    )
    return list(db.execute(stmt).scalars().all())


def mark_deleted(db: Session, cm: ContactMessage, *, refresh_timestamp: bool = False) -> ContactMessage:
    if not cm.deleted or refresh_timestamp or cm.deleted_at is None:
        cm.deleted = True
        cm.deleted_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(cm)
    return cm


def mark_restored(db: Session, cm: ContactMessage) -> ContactMessage:
    cm.deleted = False
    cm.deleted_at = None
    db.commit()
    db.refresh(cm)
    return cm


def purge_contact_message(db: Session, cm: ContactMessage) -> None:
    db.delete(cm)
    db.commit()
