"""
Caller Identity
===============
Resolves the wallet owner behind a request.

Sign-up, sign-in and password storage live in Supabase Auth; this service
never sees a credential. Each request carries the Supabase access token,
which is exchanged for the auth user id and then for the matching row in
``users``. Every activity, profile and tracking session is keyed by that
row's id.

Errors:
    401 auth_required   no usable "Bearer <token>" header
    401 auth_invalid    Supabase rejected the token
    404 user_not_found  token is fine but the wallet has no users row yet
"""

from __future__ import annotations

import logging

from fastapi import HTTPException, status

from app.db.supabase import get_supabase_client

logger = logging.getLogger(__name__)

_BEARER = "Bearer "


def _unauthorized(message: str, code: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail={"message": message, "code": code},
    )


def _bearer_token(authorization: str) -> str:
    if not authorization or not authorization.startswith(_BEARER):
        raise _unauthorized("Sign in to use your carbon wallet", "auth_required")
    token = authorization[len(_BEARER):].strip()
    if not token:
        raise _unauthorized("Sign in to use your carbon wallet", "auth_required")
    return token


def get_authenticated_user(authorization: str) -> dict:
    """Return the ``users`` row for the wallet owner holding *authorization*."""
    token = _bearer_token(authorization)
    db = get_supabase_client()

    try:
        auth_response = db.auth.get_user(token)
    except Exception as exc:
        logger.warning("Rejected access token: %s", exc)
        raise _unauthorized("Session expired, sign in again", "auth_invalid") from exc

    auth_user = getattr(auth_response, "user", None) if auth_response else None
    if auth_user is None:
        raise _unauthorized("Session expired, sign in again", "auth_invalid")

    result = (
        db.table("users")
        .select("*")
        .eq("id", auth_user.id)
        .maybe_single()
        .execute()
    )
    if not result or not result.data:
        logger.warning("Auth user %s has no wallet record", auth_user.id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={"message": "No carbon wallet exists for this account", "code": "user_not_found"},
        )

    return result.data


def db_error(what: str) -> HTTPException:
    """500 response for a write the store did not acknowledge."""
    logger.error("Store did not acknowledge %s write", what)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail={"message": f"Could not save {what}, try again", "code": "db_error"},
    )
