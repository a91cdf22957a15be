from __future__ import annotations

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contact_api.core.errors import PersistenceError, ValidationError
from contact_api.core.security import BCRYPT_ROUNDS, get_password_hash
from contact_api.crud.admin import upsert_admin
from contact_api.models.admin import Admin

logger = logging.getLogger(__name__)


def ensure_admin(db: Session, username: str, password: str, *, rounds: int = BCRYPT_ROUNDS) -> Admin:
    """Create the admin, or replace its password hash if it already exists."""
    username = (username or "").strip()
    missing = [field for field, value in (("username", username), ("password", password)) if not value]
    if missing:
        raise ValidationError(fields=missing)

    password_hash = get_password_hash(password, rounds=rounds)
    try:
        admin = upsert_admin(db, username=username, password_hash=password_hash)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to upsert admin %r", username)
        raise PersistenceError()

    logger.info("Admin user created/updated: %s", admin.username)
    return admin
