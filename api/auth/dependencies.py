"""
Auth dependencies for protected FastAPI routes.

Missing credentials -> 401, credentials that fail verification -> 403.
"""

from __future__ import annotations

from fastapi import Depends, Header

from core.errors import Unauthorized

from . import service


def _extract_bearer_token(authorization: str | None) -> str:
    raw = (authorization or "").strip()
    if not raw:
        raise Unauthorized("Missing Authorization header.")

    parts = raw.split(" ", 1)
    if len(parts) != 2:
        raise Unauthorized("Authorization must be: Bearer <token>.")

    scheme, token = parts[0].strip().lower(), parts[1].strip()
    if scheme != "bearer" or not token:
        raise Unauthorized("Authorization must be: Bearer <token>.")
    return token


async def get_bearer_token(authorization: str | None = Header(default=None)) -> str:
    return _extract_bearer_token(authorization)


async def get_current_user(access_token: str = Depends(get_bearer_token)) -> dict:
    return service.claims_from_access_token(access_token)
