# artmarket/core/auth.py
from typing import Any

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError
from sqlmodel import Session

from artmarket.core.config import get_settings
from artmarket.core.errors import Unauthorized
from artmarket.database import get_session
from artmarket.models.user import User
from artmarket.repositories.user_repo import UserRepository

# HTTP Bearer scheme:
# - auto_error=False => a missing Authorization header reaches our code,
#   so it is reported with the same 401 body as an invalid token.
bearer_scheme = HTTPBearer(auto_error=False)

user_repo = UserRepository()


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify an identity-provider access token (JWT).

    Verification:
      - signature (AUTH_JWT_SECRET / AUTH_JWT_ALG)
      - expiration time (exp)
      - audience, only when AUTH_JWT_AUDIENCE is configured

    Args:
        token: raw JWT from the Authorization header.

    Returns:
        Decoded JWT claims.

    Raises:
        Unauthorized: if token is invalid/expired.
    """
    settings = get_settings()
    try:
        return jwt.decode(
            token,
            settings.AUTH_JWT_SECRET,
            algorithms=[settings.AUTH_JWT_ALG],
            audience=settings.AUTH_JWT_AUDIENCE,
            options={"verify_aud": settings.AUTH_JWT_AUDIENCE is not None},
        )
    except JWTError:
        raise Unauthorized("Invalid or expired token")


def get_token_claims(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict[str, Any]:
    """
    Verified claims of the presented bearer token.

    Raises:
        Unauthorized: missing header, invalid token or no 'sub' claim.
    """
    if credentials is None:
        raise Unauthorized("Unauthorized")

    payload = decode_access_token(credentials.credentials)
    if not payload.get("sub"):
        raise Unauthorized("Token missing sub")
    return payload


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    session: Session = Depends(get_session),
) -> User | None:
    """
    Resolve the local user of a bearer token.

    Flow:
      1. If no Authorization header => guest => return None.
      2. Verify token => claims; 'sub' is required.
      3. Find the user whose external_id equals 'sub'.

    Users are provisioned explicitly through POST /auth/create-user;
    a valid token without a local user is rejected.

    Raises:
        Unauthorized: invalid token, or no matching user exists.
    """
    if credentials is None:
        return None  # guest mode

    claims = get_token_claims(credentials)
    user = user_repo.get_by_external_id(session, claims["sub"])
    if user is None:
        raise Unauthorized("User not found")
    return user


def require_auth(user: User | None = Depends(get_current_user)) -> User:
    """
    Enforce authentication.

    If attached to a route, guests (missing JWT) will be rejected
    with 401.

    Raises:
        Unauthorized: if user is None.
    """
    if user is None:
        raise Unauthorized("Authentication required")
    return user
