from __future__ import annotations

from typing import Optional


class ContactApiError(Exception):
    """Base error carrying the HTTP status and the message safe to show clients."""

    status_code = 500
    detail = "Server error"

    def __init__(self, detail: Optional[str] = None, *, headers: Optional[dict[str, str]] = None) -> None:
        if detail is not None:
            self.detail = detail
        self.headers = headers or {}
        super().__init__(self.detail)


class ValidationError(ContactApiError):
    status_code = 400
    detail = "Missing fields"

    def __init__(self, detail: Optional[str] = None, *, fields: Optional[list[str]] = None) -> None:
        self.fields = list(fields or [])
        if detail is None and self.fields:
            detail = f"Missing fields: {', '.join(self.fields)}"
        super().__init__(detail)


class Unauthorized(ContactApiError):
    status_code = 401
    detail = "Authentication required."

    def __init__(self, realm: str = "admin") -> None:
        super().__init__(headers={"WWW-Authenticate": f'Basic realm="{realm}"'})


class NotFound(ContactApiError):
    status_code = 404
    detail = "Not found"


class RateLimited(ContactApiError):
    status_code = 429
    detail = "Too many requests"

    def __init__(self, retry_after: int) -> None:
        self.retry_after = retry_after
        super().__init__(headers={"Retry-After": str(retry_after)})


class PersistenceError(ContactApiError):
    status_code = 500
    detail = "Server error"
