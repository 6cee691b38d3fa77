# fleet_induction/security.py
from __future__ import annotations

from fastapi import Header, HTTPException
from fleet_induction.config import settings


async def require_api_key(x_api_key: str | None = Header(default=None)):
    """Simple API key check; open when API_KEY is not configured"""
    if settings.api_key and x_api_key != settings.api_key:
        raise HTTPException(status_code=401, detail="Invalid API key")
    return True
