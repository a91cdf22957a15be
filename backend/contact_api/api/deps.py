from __future__ import annotations

from typing import Optional

from fastapi import Depends, HTTPException, Request
from fastapi.security import HTTPBasic, HTTPBasicCredentials
from sqlalchemy.orm import Session

from contact_api.core.config import Settings
from contact_api.db.session import get_db
from contact_api.services.auth import authenticate_admin

_basic = HTTPBasic(auto_error=False)


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


async def get_basic_credentials(request: Request) -> Optional[HTTPBasicCredentials]:
    # Undecodable headers are treated like a missing one so every failure
    # goes through the same Unauthorized response.
    try:
        return await _basic(request)
    except HTTPException:
        return None


def require_admin(
    credentials: Optional[HTTPBasicCredentials] = Depends(get_basic_credentials),
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
) -> str:
    return authenticate_admin(
        db,
        settings,
        username=credentials.username if credentials else None,
        password=credentials.password if credentials else None,
    )
