"""
User and user-profile business logic.

Validation rules live here; persistence goes through `core.crud`.
Passwords are bcrypt-hashed before every write and never returned.
"""

from __future__ import annotations

from typing import Any

from auth import security
from core import crud, validation
from core.pagination import parse_page_request
from core.resources import USER, USER_PROFILE

USER_RULES: validation.Rules = {
    "firstname": (validation.string,),
    "lastname": (validation.string,),
    "email": (validation.email,),
    "password": (
        validation.string,
        validation.min_length(6, "Password must be at least 6 characters long"),
        validation.max_bytes(72, "Password must be at most 72 bytes long"),
    ),
}

USER_PROFILE_IDENTITY: validation.Rules = {
    "user_id": (validation.positive_integer,),
}

USER_PROFILE_RULES: validation.Rules = {
    "age": (validation.integer, validation.between(0, 150)),
    "address": (validation.string,),
    "contact_number": (validation.phone,),
    "pnn_number": (validation.postal_code,),
}


def _hash_password(values: dict[str, Any]) -> dict[str, Any]:
    if "password" in values:
        values = {**values, "password": security.hash_password(values["password"])}
    return values


# users

async def create_user(body: Any) -> dict:
    values = validation.validate_create(body, USER_RULES)
    user_id = await crud.create(USER, _hash_password(values))
    return {"message": "User created successfully", "user_id": user_id}


async def list_users() -> list[dict]:
    return await crud.list_all(USER)


async def page_users(body: Any) -> dict:
    return await crud.list_page(USER, parse_page_request(body, USER))


async def get_user(raw_id: str) -> dict:
    return await crud.get(USER, validation.parse_id(raw_id, "user"))


async def update_user(raw_id: str, body: Any) -> dict:
    user_id = validation.parse_id(raw_id, "user")
    patch = validation.validate_patch(body, USER_RULES, identity=USER.id_column)
    user = await crud.update(USER, user_id, _hash_password(patch))
    return {"message": "User updated successfully", "user": user}


async def delete_user(raw_id: str) -> dict:
    await crud.delete(USER, validation.parse_id(raw_id, "user"))
    return {"message": "User deleted successfully"}


# user profiles

async def create_user_profile(body: Any) -> dict:
    values = validation.validate_create(body, {**USER_PROFILE_IDENTITY, **USER_PROFILE_RULES})
    user_id = await crud.create_dependent(USER_PROFILE, values)
    return {"message": "User profile created successfully", "user_id": user_id}


async def list_user_profiles() -> list[dict]:
    return await crud.list_all(USER_PROFILE)


async def page_user_profiles(body: Any) -> dict:
    return await crud.list_page(USER_PROFILE, parse_page_request(body, USER_PROFILE))


async def get_user_profile(raw_id: str) -> dict:
    return await crud.get(USER_PROFILE, validation.parse_id(raw_id, "user profile"))


async def update_user_profile(raw_id: str, body: Any) -> dict:
    user_id = validation.parse_id(raw_id, "user profile")
    patch = validation.validate_patch(body, USER_PROFILE_RULES, identity=USER_PROFILE.id_column)
    profile = await crud.update(USER_PROFILE, user_id, patch)
    return {"message": "User profile updated successfully", "userprofile": profile}


async def delete_user_profile(raw_id: str) -> dict:
    await crud.delete(USER_PROFILE, validation.parse_id(raw_id, "user profile"))
    return {"message": "User profile deleted successfully"}
