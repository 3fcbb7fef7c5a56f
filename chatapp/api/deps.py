# File: chatapp/api/deps.py

from collections.abc import Generator
from typing import Optional

import jwt
from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from chatapp.core.config import settings
from chatapp.core.errors import UnauthorizedError, ValidationError
from chatapp.core.security import decode_access_token
from chatapp.db.session import SessionLocal
from chatapp.models.user import User
from chatapp.schemas.chat import ChatRequest
from chatapp.services.auth_service import AuthenticatedUser
from chatapp.services.chat_service import get_user
from chatapp.services.response_generator import ResponseGenerator, StubResponseGenerator

bearer_scheme = HTTPBearer(auto_error=False)


def get_db() -> Generator[Session, None, None]:
    """
    FastAPI dependency that provides a SQLAlchemy session.

    Usage in route functions:
        db: Session = Depends(get_db)
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_session_identity(
    request: Request,
    creds: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> AuthenticatedUser:
    """
    Resolve the caller from the session cookie, falling back to an
    ``Authorization: Bearer`` header.

    A stale cookie does not shadow a valid bearer token: each candidate is
    tried in turn and the first one that verifies wins.
    """
    candidates = [request.cookies.get(settings.session_cookie_name)]
    if creds is not None:
        candidates.append(creds.credentials)
    candidates = [token for token in candidates if token]
    if not candidates:
        raise UnauthorizedError("Not authenticated")

    for token in candidates:
        try:
            claims = decode_access_token(token)
            user_id = int(claims["sub"])
        except (jwt.InvalidTokenError, KeyError, ValueError):
            continue
        return AuthenticatedUser(id=user_id, email=claims.get("email", ""), name=claims.get("name"))

    raise UnauthorizedError("Invalid or expired session")


def get_current_user(
    identity: AuthenticatedUser = Depends(get_session_identity),
    db: Session = Depends(get_db),
) -> User:
    # the account may have been removed after the token was issued
    return get_user(db, identity.id)


async def read_chat_request(
    request: Request,
    user: User = Depends(get_current_user),
) -> ChatRequest:
    """
    Parse the chat body only once the caller is known, so an anonymous
    request is a 401 whatever it carries.
    """
    try:
        return ChatRequest.model_validate_json(await request.body())
    except PydanticValidationError as exc:
        errors = exc.errors()
        raise ValidationError(errors[0]["msg"] if errors else "Invalid request body")


def get_response_generator() -> ResponseGenerator:
    return StubResponseGenerator()
