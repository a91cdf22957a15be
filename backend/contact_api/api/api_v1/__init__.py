from __future__ import annotations

from contact_api.api.api_v1.api import build_api_router

__all__ = ["build_api_router"]
