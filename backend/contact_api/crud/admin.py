from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from contact_api.models.admin import Admin


def get_admin_by_username(db: Session, username: str) -> Optional[Admin]:
    return db.execute(select(Admin).where(Admin.username == username)).scalar_one_or_none()


def upsert_admin(db: Session, *, username: str, password_hash: str) -> Admin:
    admin = get_admin_by_username(db, username)
    if admin is None:
        admin = Admin(username=username, password_hash=password_hash)
        db.add(admin)
    else:
        admin.password_hash = password_hash
    db.commit()
    db.refresh(admin)
    return admin
