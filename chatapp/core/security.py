# File: chatapp/core/security.py

"""
Security helpers for the chat API.

Passwords are hashed with bcrypt (salted, slow, fixed cost factor) and
sessions are signed JWTs issued with PyJWT.
"""

from datetime import datetime, timedelta, timezone
from typing import Any, Optional

import bcrypt
import jwt

from chatapp.core.config import settings


ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes
SECRET_KEY = settings.secret_key


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    salt = bcrypt.gensalt(rounds=rounds or settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """
    Compare a plaintext password with a stored bcrypt hash.

    A malformed stored hash counts as a mismatch.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Sign a session token.

    ``data`` must carry ``sub``; ``iat`` and ``exp`` are added here.
    """
    now = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = data.copy()
    to_encode["iat"] = now
    to_encode["exp"] = now + (expires_delta or timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES))
    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def decode_access_token(token: str) -> dict[str, Any]:
    """
    Decode and verify a session token (signature and expiry).

    Raises jwt.InvalidTokenError (or a subclass such as
    jwt.ExpiredSignatureError) when the token cannot be trusted.
    """
    return jwt.decode(
        token,
        SECRET_KEY,
        algorithms=[ALGORITHM],
        options={"require": ["sub", "exp"]},
    )
