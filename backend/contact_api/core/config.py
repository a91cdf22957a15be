from __future__ import annotations

import os
from pathlib import Path

from dotenv import load_dotenv


# Load backend/.env if it exists so local environment variables (e.g. ADMIN_USER)
# are available without needing to export them manually.
BASE_DIR = Path(__file__).resolve().parents[2]
env_path = BASE_DIR / ".env"
if env_path.exists():
    load_dotenv(env_path)


AUTH_MODE_STORE = "store"
AUTH_MODE_STATIC = "static"

ALWAYS_REQUIRED_FIELDS = ("name", "message")
CONTACT_FIELDS = ("name", "phone", "email", "subject", "message")


def _int_env(key: str, default: int) -> int:
    try:
        return int(os.getenv(key, str(default)))
    except ValueError:
        return default


def _bool_env(key: str, default: bool = False) -> bool:
    raw = os.getenv(key)
    if raw is None:
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _list_env(key: str, default: str) -> list[str]:
    return [item.strip() for item in os.getenv(key, default).split(",") if item.strip()]


class Settings:
    PROJECT_NAME = "Contact Inbox API"
    API_V1_STR = "/api"

    def __init__(self) -> None:
        self.DATABASE_URL = (
            os.getenv("DATABASE_URL")
            or os.getenv("MONGO_URI")
            or "sqlite:///./contact.db"
        )

        self.AUTH_MODE = os.getenv("AUTH_MODE", AUTH_MODE_STORE).strip().lower()
        self.ADMIN_USER = os.getenv("ADMIN_USER", "")
        self.ADMIN_PASS = os.getenv("ADMIN_PASS", "")
        self.ADMIN_REALM = os.getenv("ADMIN_REALM", "admin")
        self.SEED_ADMIN_ON_STARTUP = _bool_env("SEED_ADMIN_ON_STARTUP")

        _cors_origins = os.getenv("CORS_ORIGINS") or os.getenv("ORIGIN") or "*"

        # If wildcard is present, treat as allow-all
        if "*" in _cors_origins:
            self.CORS_ORIGINS = ["*"]
        else:
            self.CORS_ORIGINS = [o.strip() for o in _cors_origins.split(",") if o.strip()]
        self.CORS_ALLOW_METHODS = _list_env("CORS_ALLOW_METHODS", "GET,POST,DELETE,OPTIONS")
        self.CORS_ALLOW_HEADERS = _list_env("CORS_ALLOW_HEADERS", "Content-Type,Authorization")

        required = _list_env("CONTACT_REQUIRED_FIELDS", ",".join(ALWAYS_REQUIRED_FIELDS))
        self.CONTACT_REQUIRED_FIELDS = list(ALWAYS_REQUIRED_FIELDS) + [
            f for f in required if f in CONTACT_FIELDS and f not in ALWAYS_REQUIRED_FIELDS
        ]

        self.MESSAGE_PAGE_SIZE = max(1, _int_env("MESSAGE_PAGE_SIZE", 500))
        self.SOFT_DELETE_REFRESHES_TIMESTAMP = _bool_env("SOFT_DELETE_REFRESHES_TIMESTAMP")
        self.ENABLE_HARD_DELETE = _bool_env("ENABLE_HARD_DELETE")

        self.RATE_LIMIT_MAX = _int_env("RATE_LIMIT_MAX", 12)
        self.RATE_LIMIT_WINDOW_SECONDS = _int_env("RATE_LIMIT_WINDOW_SECONDS", 60)

        self.LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
        self.HOST = os.getenv("HOST", "0.0.0.0")
        self.PORT = _int_env("PORT", 5000)

    @property
    def uses_static_credentials(self) -> bool:
        return self.AUTH_MODE == AUTH_MODE_STATIC


settings = Settings()
