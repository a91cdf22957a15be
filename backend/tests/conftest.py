from __future__ import annotations

import base64

import pytest
from fastapi.testclient import TestClient

from contact_api.core.config import Settings
from contact_api.db.session import Database
from contact_api.main import create_app
from contact_api.services.provisioning import ensure_admin

ADMIN_USER = "alice"
ADMIN_PASS = "s3cret-pass"

ENV_VARS = (
    "DATABASE_URL",
    "MONGO_URI",
    "AUTH_MODE",
    "ADMIN_USER",
    "ADMIN_PASS",
    "ADMIN_REALM",
    "SEED_ADMIN_ON_STARTUP",
    "CORS_ORIGINS",
    "ORIGIN",
    "CORS_ALLOW_METHODS",
    "CORS_ALLOW_HEADERS",
    "CONTACT_REQUIRED_FIELDS",
    "MESSAGE_PAGE_SIZE",
    "SOFT_DELETE_REFRESHES_TIMESTAMP",
    "ENABLE_HARD_DELETE",
    "RATE_LIMIT_MAX",
    "RATE_LIMIT_WINDOW_SECONDS",
)


def basic_auth(username: str = ADMIN_USER, password: str = ADMIN_PASS) -> dict[str, str]:
    token = base64.b64encode(f"{username}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


class FakeClock:
    def __init__(self, start: float = 1000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clean_env(monkeypatch):
    for var in ENV_VARS:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch


@pytest.fixture
def settings(clean_env) -> Settings:
    clean_env.setenv("DATABASE_URL", "sqlite://")
    return Settings()


@pytest.fixture
def database():
    database = Database("sqlite://")
    assert database.open()
    yield database
    database.close()


@pytest.fixture
def db(database):
    session = database.session()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_client(settings):
    """Build a started TestClient for the current ``settings`` with the admin seeded."""
    clients = []

    def _make(**app_kwargs) -> TestClient:
        app = create_app(settings, **app_kwargs)
        client = TestClient(app)
        client.__enter__()
        clients.append(client)
        if app.state.db.available:
            session = app.state.db.session()
            try:
                ensure_admin(session, ADMIN_USER, ADMIN_PASS, rounds=4)
            finally:
                session.close()
        return client

    yield _make

    for client in clients:
        client.__exit__(None, None, None)


@pytest.fixture
def client(make_client) -> TestClient:
    return make_client()
