from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response

from contact_api.api.api_v1 import build_api_router
from contact_api.core.config import Settings, settings as default_settings
from contact_api.core.errors import ContactApiError, PersistenceError, RateLimited, ValidationError
from contact_api.core.logging_setup import configure_logging
from contact_api.db.session import Database
from contact_api.services.provisioning import ensure_admin
from contact_api.services.rate_limit import FixedWindowRateLimiter

logger = logging.getLogger(__name__)

SECURITY_HEADERS = {
    "X-Content-Type-Options": "nosniff",
    "X-Frame-Options": "DENY",
    "Referrer-Policy": "no-referrer",
}


def _error_response(exc: ContactApiError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=exc.headers or None,
    )


def _seed_admin(database: Database, settings: Settings) -> None:
    if not settings.ADMIN_USER or not settings.ADMIN_PASS:
        logger.warning("SEED_ADMIN_ON_STARTUP is set but ADMIN_USER/ADMIN_PASS are missing")
        return
    db = database.session()
    try:
        ensure_admin(db, settings.ADMIN_USER, settings.ADMIN_PASS)
    except ContactApiError:
        logger.error("Could not seed admin %r at startup", settings.ADMIN_USER)
    finally:
        db.close()


def _client_key(request: Request) -> str:
    return request.client.host if request.client else "unknown"


def create_app(settings: Optional[Settings] = None, *, rate_limiter: Optional[FixedWindowRateLimiter] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.LOG_LEVEL)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        database: Database = app.state.db
        logger.info(
            "Starting %s (auth_mode=%s, database_url=%s)",
            settings.PROJECT_NAME,
            settings.AUTH_MODE,
            "[SET]" if settings.DATABASE_URL else "[NOT SET]",
        )
        if settings.uses_static_credentials:
            logger.warning("AUTH_MODE=static compares against ADMIN_USER/ADMIN_PASS; prefer the admin store")

        # A failed connection leaves the app up; store-backed requests answer 500.
        if database.open() and settings.SEED_ADMIN_ON_STARTUP and not settings.uses_static_credentials:
            _seed_admin(database, settings)
        try:
            yield
        finally:
            database.close()

    app = FastAPI(title=settings.PROJECT_NAME, lifespan=lifespan)
    app.state.settings = settings
    app.state.db = Database(settings.DATABASE_URL)
    app.state.rate_limiter = rate_limiter or FixedWindowRateLimiter(
        max_requests=settings.RATE_LIMIT_MAX,
        window_seconds=settings.RATE_LIMIT_WINDOW_SECONDS,
    )

    limited_paths = {
        f"{settings.API_V1_STR}{path}{suffix}"
        for path in ("/contact", "/messages")
        for suffix in ("", "/")
    }

    @app.middleware("http")
    async def rate_limit_middleware(request: Request, call_next):
        if request.method == "POST" and request.url.path in limited_paths:
            retry_after = app.state.rate_limiter.hit(_client_key(request))
            if retry_after:
                logger.warning("Rate limit hit for %s on %s", _client_key(request), request.url.path)
                return _error_response(RateLimited(retry_after))
        return await call_next(request)

    @app.middleware("http")
    async def cors_middleware(request: Request, call_next):
        if request.method == "OPTIONS":
            response = Response(status_code=204)
        else:
            response = await call_next(request)

        origin = request.headers.get("origin")
        if "*" in settings.CORS_ORIGINS:
            response.headers["Access-Control-Allow-Origin"] = "*"
        elif origin and origin in settings.CORS_ORIGINS:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Vary"] = "Origin"

        response.headers["Access-Control-Allow-Methods"] = ", ".join(settings.CORS_ALLOW_METHODS)
        response.headers["Access-Control-Allow-Headers"] = ", ".join(settings.CORS_ALLOW_HEADERS)

        for header, value in SECURITY_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    @app.exception_handler(ContactApiError)
    async def contact_api_error_handler(request: Request, exc: ContactApiError) -> JSONResponse:
        if isinstance(exc, PersistenceError):
            logger.error("%s %s failed: persistence error", request.method, request.url.path)
        return _error_response(exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        logger.info(
            "Rejected %s %s: invalid %s",
            request.method,
            request.url.path,
            [".".join(str(part) for part in err.get("loc", ())) for err in exc.errors()],
        )
        return _error_response(ValidationError("Invalid request"))

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.error("%s %s error", request.method, request.url.path, exc_info=exc)
        return _error_response(PersistenceError())

    @app.get("/")
    def root() -> dict:
        return {"ok": True, "msg": "Contact backend running"}

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok"}

    app.include_router(
        build_api_router(enable_hard_delete=settings.ENABLE_HARD_DELETE),
        prefix=settings.API_V1_STR,
    )

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT)


if __name__ == "__main__":
    run()
