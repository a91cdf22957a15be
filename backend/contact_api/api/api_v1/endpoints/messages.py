from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from contact_api.api import deps
from contact_api.core.config import Settings
from contact_api.db.session import get_db
from contact_api.schemas.contact import ContactOut
from contact_api.services import messages as message_service

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("", response_model=list[ContactOut])
def list_messages(
    deleted: bool = Query(False),
    db: Session = Depends(get_db),
    settings: Settings = Depends(deps.get_settings),
    admin: str = Depends(deps.require_admin),
) -> list[ContactOut]:
    if deleted:
        return message_service.list_deleted(db, limit=settings.MESSAGE_PAGE_SIZE)
    return message_service.list_active(db, limit=settings.MESSAGE_PAGE_SIZE)


@router.get("/deleted", response_model=list[ContactOut])
def list_deleted_messages(
    db: Session = Depends(get_db),
    settings: Settings = Depends(deps.get_settings),
    admin: str = Depends(deps.require_admin),
) -> list[ContactOut]:
    return message_service.list_deleted(db, limit=settings.MESSAGE_PAGE_SIZE)


@router.delete("/{message_id}", response_model=ContactOut)
def soft_delete_message(
    message_id: int,
    db: Session = Depends(get_db),
    settings: Settings = Depends(deps.get_settings),
    admin: str = Depends(deps.require_admin),
) -> ContactOut:
    return message_service.soft_delete(
        db,
        message_id,
        refresh_timestamp=settings.SOFT_DELETE_REFRESHES_TIMESTAMP,
    )


@router.post("/{message_id}/restore", response_model=ContactOut)
def restore_message(
    message_id: int,
    db: Session = Depends(get_db),
    admin: str = Depends(deps.require_admin),
) -> ContactOut:
    return message_service.restore(db, message_id)


purge_router = APIRouter(prefix="/messages", tags=["messages"])


@purge_router.delete("/{message_id}/purge")
def purge_message(
    message_id: int,
    db: Session = Depends(get_db),
    admin: str = Depends(deps.require_admin),
) -> dict[str, bool]:
    message_service.purge(db, message_id)
    return {"ok": True}
