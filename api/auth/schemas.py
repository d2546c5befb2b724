"""
Auth API schemas (request/response models).
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    firstname: str = Field(..., min_length=1, max_length=100)
    # Accepted for client compatibility; not checked.
    password: str | None = Field(default=None, max_length=128)


class TokenResponse(BaseModel):
    token: str
