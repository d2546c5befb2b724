"""
Auth API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter

from . import schemas, service

router = APIRouter()


@router.post("/login")
async def login(request: schemas.LoginRequest) -> dict:
    return service.login(request).model_dump()
