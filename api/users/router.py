"""
User and user-profile API endpoints.

`PUT` on a collection is the paginated listing (body: page, limit, filter).
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Body, Depends

from auth import dependencies as auth_dependencies

from . import service

router = APIRouter(dependencies=[Depends(auth_dependencies.get_current_user)])


@router.post("/users")
async def create_user(body: Any = Body(default=None)) -> dict:
    return await service.create_user(body)


@router.get("/users")
async def list_users() -> list[dict]:
    return await service.list_users()


@router.put("/users")
async def page_users(body: Any = Body(default=None)) -> dict:
    return await service.page_users(body)


@router.get("/users/{user_id}")
async def get_user(user_id: str) -> dict:
    return await service.get_user(user_id)


@router.put("/users/{user_id}")
async def update_user(user_id: str, body: Any = Body(default=None)) -> dict:
    return await service.update_user(user_id, body)


@router.delete("/users/{user_id}")
async def delete_user(user_id: str) -> dict:
    return await service.delete_user(user_id)


@router.post("/userprofiles")
async def create_user_profile(body: Any = Body(default=None)) -> dict:
    return await service.create_user_profile(body)


@router.get("/userprofiles")
async def list_user_profiles() -> list[dict]:
    return await service.list_user_profiles()


@router.put("/userprofiles")
async def page_user_profiles(body: Any = Body(default=None)) -> dict:
    return await service.page_user_profiles(body)


@router.get("/userprofiles/{user_id}")
async def get_user_profile(user_id: str) -> dict:
    """
    Profiles are keyed by the owning user's id.
    """
    return await service.get_user_profile(user_id)


@router.put("/userprofiles/{user_id}")
async def update_user_profile(user_id: str, body: Any = Body(default=None)) -> dict:
    return await service.update_user_profile(user_id, body)


@router.delete("/userprofiles/{user_id}")
async def delete_user_profile(user_id: str) -> dict:
    return await service.delete_user_profile(user_id)
