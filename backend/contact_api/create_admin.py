"""Create or update the inbox admin account.

Usage::

    ADMIN_USER=alice ADMIN_PASS=secret contact-create-admin
    contact-create-admin <username> <password>

ADMIN_USER/ADMIN_PASS win over the positional arguments when both are given.
Reads DATABASE_URL (or MONGO_URI) from the environment or backend/.env.
Exits with status 1 on missing configuration or when the database cannot be
reached.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

from contact_api.core import config  # noqa: F401  loads backend/.env into the environment
from contact_api.core.errors import ContactApiError
from contact_api.core.logging_setup import configure_logging
from contact_api.db.session import Database
from contact_api.services.provisioning import ensure_admin

logger = logging.getLogger("contact_api.create_admin")


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Create or update the inbox admin account.")
    parser.add_argument("username", nargs="?", help="defaults to ADMIN_USER")
    parser.add_argument("password", nargs="?", help="defaults to ADMIN_PASS")
    parser.add_argument("--database-url", help="defaults to DATABASE_URL or MONGO_URI")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))
    args = _parse_args(argv)

    database_url = args.database_url or os.getenv("DATABASE_URL") or os.getenv("MONGO_URI")
    if not database_url:
        logger.error("Please set DATABASE_URL (or MONGO_URI) in environment")
        return 1

    username = os.getenv("ADMIN_USER") or args.username
    password = os.getenv("ADMIN_PASS") or args.password
    if not username or not password:
        logger.error("Usage: ADMIN_USER=alice ADMIN_PASS=secret contact-create-admin")
        logger.error("Or: contact-create-admin <username> <password>")
        return 1

    database = Database(database_url)
    if not database.open():
        return 1

    db = database.session()
    try:
        admin = ensure_admin(db, username, password)
    except ContactApiError as exc:
        logger.error("Could not create admin: %s", exc.detail)
        return 1
    finally:
        db.close()
        database.close()

    print(f"Admin user created/updated: {admin.username}")
    return 0


def main_entry() -> None:
    sys.exit(main())


if __name__ == "__main__":
    main_entry()
