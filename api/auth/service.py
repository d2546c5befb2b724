"""
Auth business logic.
"""

from __future__ import annotations

import logging

from core.errors import BadRequest, Forbidden

from . import schemas, security

logger = logging.getLogger(__name__)


def login(payload: schemas.LoginRequest) -> schemas.TokenResponse:
    firstname = payload.firstname.strip()
    if not firstname:
        raise BadRequest("firstname is required")

    token = security.build_access_token(firstname=firstname)
    logger.info("token_issued firstname=%s", firstname)
    return schemas.TokenResponse(token=token)


def claims_from_access_token(access_token: str) -> dict:
    try:
        return security.decode_access_token(access_token)
    except security.AuthSecurityError as exc:
        raise Forbidden(str(exc)) from exc
