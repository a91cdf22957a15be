from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from contact_api.core.config import Settings
from contact_api.core.errors import PersistenceError, Unauthorized
from contact_api.core.security import burn_password_check, constant_time_equals, verify_password
from contact_api.crud.admin import get_admin_by_username

logger = logging.getLogger(__name__)


def authenticate_stored(db: Session, *, username: str, password: str) -> bool:
    try:
        admin = get_admin_by_username(db, username)
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Failed to load admin %r", username)
        raise PersistenceError()

    if admin is None:
        burn_password_check(password)
        return False
    return verify_password(password, admin.password_hash)


def authenticate_static(settings: Settings, *, username: str, password: str) -> bool:
    if not settings.ADMIN_USER or not settings.ADMIN_PASS:
        return False
    user_ok = constant_time_equals(username, settings.ADMIN_USER)
    pass_ok = constant_time_equals(password, settings.ADMIN_PASS)
    return user_ok and pass_ok


def authenticate_admin(
    db: Session,
    settings: Settings,
    *,
    username: Optional[str],
    password: Optional[str],
) -> str:
    """Check Basic credentials and return the admin username, or raise Unauthorized."""
    if not username or password is None:
        raise Unauthorized(settings.ADMIN_REALM)

    if settings.uses_static_credentials:
        ok = authenticate_static(settings, username=username, password=password)
    else:
        ok = authenticate_stored(db, username=username, password=password)

    if not ok:
        logger.warning("Rejected admin credentials for user %r", username)
        raise Unauthorized(settings.ADMIN_REALM)
    return username
