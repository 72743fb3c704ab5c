"""Authentication dependencies.

Verifies Clerk session JWTs and provides user-id dependencies for FastAPI
endpoints. Supports a dev mode override via DEV_USER_ID.
"""

from __future__ import annotations

from functools import lru_cache
from typing import NoReturn

import jwt
from fastapi import HTTPException, Request, status
from loguru import logger
from sqlalchemy import select

from looptimer.config.settings import settings
from looptimer.db.models import User
from looptimer.db.session import get_session


def _raise_unauthorized(detail: str = "Authentication required") -> NoReturn:
    logger.warning(f"Unauthorized request: {detail}")
    raise HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


@lru_cache(maxsize=1)
def _jwks_client(url: str) -> jwt.PyJWKClient:
    return jwt.PyJWKClient(url)


def _decode_token(token: str) -> dict:
    """Decode a session token with the strongest configured verification.

    JWKS (RS256) when CLERK_JWKS_URL is set, HS256 with CLERK_SECRET_KEY
    otherwise, and no signature check at all in local dev.
    """
    issuer_options = {"issuer": settings.clerk_issuer} if settings.clerk_issuer else {}
    if settings.clerk_jwks_url:
        signing_key = _jwks_client(settings.clerk_jwks_url).get_signing_key_from_jwt(token)
        return jwt.decode(token, signing_key.key, algorithms=["RS256"], options={"verify_aud": False}, **issuer_options)
    if settings.clerk_secret_key:
        return jwt.decode(
            token, settings.clerk_secret_key, algorithms=["HS256"], options={"verify_aud": False}, **issuer_options
        )
    logger.warning("No Clerk verification configured - decoding token without verification (dev mode)")
    return jwt.decode(token, options={"verify_signature": False})


def verify_clerk_jwt(token: str) -> str:
    """Verify a Clerk JWT and extract the user ID.

    Args:
        token: JWT token string

    Returns:
        Clerk user ID (``sub`` claim)

    Raises:
        HTTPException: 401 if the token is invalid, expired or has no subject
    """
    try:
        decoded = _decode_token(token)
    except jwt.ExpiredSignatureError:
        _raise_unauthorized("Token expired")
    except jwt.PyJWKClientError as e:
        logger.warning(f"Could not resolve signing key: {e}")
        _raise_unauthorized("Invalid token")
    except jwt.InvalidTokenError as e:
        logger.warning(f"Invalid token: {e}")
        _raise_unauthorized("Invalid token")

    user_id = decoded.get("sub") or decoded.get("user_id")
    if not user_id:
        _raise_unauthorized("Token missing user ID")
    return str(user_id)


def _bearer_token(request: Request) -> str | None:
    auth_header = request.headers.get("Authorization")
    if not auth_header:
        return None
    if not auth_header.startswith("Bearer "):
        _raise_unauthorized("Invalid Authorization header format")
    token = auth_header.removeprefix("Bearer ").strip()
    if not token:
        _raise_unauthorized("Missing token")
    return token


def _get_or_create_user(user_id: str) -> str:
    with get_session() as session:
        existing = session.execute(select(User.id).where(User.id == user_id)).scalar_one_or_none()
        if existing:
            return existing
        session.add(User(id=user_id, email=None))
        logger.info(f"Created new user: {user_id}")
    return user_id


def get_current_user_id(request: Request) -> str:
    """FastAPI dependency returning the authenticated user's id.

    The user row is created on first sight of a verified subject.

    Raises:
        HTTPException: 401 if authentication fails
    """
    if settings.dev_user_id:
        logger.debug(f"Using dev mode user override: {settings.dev_user_id}")
        return _get_or_create_user(settings.dev_user_id)

    token = _bearer_token(request)
    if token is None:
        _raise_unauthorized("Missing Authorization header")
    return _get_or_create_user(verify_clerk_jwt(token))


def get_optional_user_id(request: Request) -> str | None:
    """Like get_current_user_id, but anonymous requests yield None.

    A token that is present but invalid is still rejected with 401.
    """
    if settings.dev_user_id:
        return _get_or_create_user(settings.dev_user_id)
    token = _bearer_token(request)
    if token is None:
        return None
    return _get_or_create_user(verify_clerk_jwt(token))
