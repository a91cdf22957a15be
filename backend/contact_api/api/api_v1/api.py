from __future__ import annotations

from fastapi import APIRouter

from contact_api.api.api_v1.endpoints import contact, messages


def build_api_router(*, enable_hard_delete: bool = False) -> APIRouter:
    api_router = APIRouter()

    api_router.include_router(contact.router)
    api_router.include_router(messages.router)
    if enable_hard_delete:
        api_router.include_router(messages.purge_router)

    return api_router
