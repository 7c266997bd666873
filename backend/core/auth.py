"""
Single shared password login.

The session only records a boolean ``auth`` flag; there are no user accounts.
"""

import logging

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHashError, VerificationError
from fastapi import HTTPException, Request, status

logger = logging.getLogger(__name__)

AUTH_SESSION_KEY = "auth"

_hasher = PasswordHasher()


def verify_password(password: str, password_hash: str) -> bool:
    if not password_hash:
        logger.error("LOGIN_PASSWORD is not configured; refusing all logins")
        return False
    try:
        return _hasher.verify(password_hash, password)
    except VerificationError:
        return False
    except InvalidHashError:
        logger.error("LOGIN_PASSWORD is not a valid argon2 hash")
        return False


def is_authenticated(request: Request) -> bool:
    return bool(request.session.get(AUTH_SESSION_KEY, False))


async def require_auth(request: Request) -> None:
    if not is_authenticated(request):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
