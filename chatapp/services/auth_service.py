# File: chatapp/services/auth_service.py

"""
Authentication service.

This contains:
  - User registration (bcrypt hash, unique email)
  - User lookup and password verification
  - Session token generation

Callers get back either a User row (registration) or an
AuthenticatedUser (login); the password hash stays inside this module
and the model.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from chatapp.core.errors import (
    ConflictError,
    InvalidCredentialsError,
    NotFoundError,
    ValidationError,
)
from chatapp.core.security import create_access_token, hash_password, verify_password
from chatapp.models.user import User

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuthenticatedUser:
    id: int
    email: str
    name: Optional[str] = None


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    return db.scalars(select(User).where(User.email == normalize_email(email))).first()


def register_user(
    db: Session,
    *,
    name: Optional[str],
    email: Optional[str],
    password: Optional[str],
) -> User:
    """
    Create a new user with a bcrypt-hashed password.

    Raises ValidationError when email or password is missing and
    ConflictError when the email is already registered.
    """
    email = normalize_email(email)
    if not email or not password:
        raise ValidationError("Email and password are required")

    if get_user_by_email(db, email) is not None:
        raise ConflictError("Email is already registered")

    user = User(
        name=(name or "").strip() or None,
        email=email,
        password_hash=hash_password(password),
    )
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        # lost a race with a concurrent registration for the same email
        db.rollback()
        raise ConflictError("Email is already registered")
    db.refresh(user)

    logger.info("Registered user id=%s", user.id)
    return user


def authenticate_user(
    db: Session,
    *,
    email: Optional[str],
    password: Optional[str],
) -> AuthenticatedUser:
    """
    Check an email/password pair against the stored hash.

    Raises:
      - ValidationError if either field is missing
      - NotFoundError if no user has that email
      - InvalidCredentialsError if the password does not match
    """
    if not normalize_email(email) or not password:
        raise ValidationError("Email and password are required")

    user = get_user_by_email(db, email)
    if user is None:
        raise NotFoundError("User not found")

    if not verify_password(password, user.password_hash):
        logger.warning("Failed login for user id=%s", user.id)
        raise InvalidCredentialsError()

    return AuthenticatedUser(id=user.id, email=user.email, name=user.name)


def issue_session_token(identity: AuthenticatedUser) -> str:
    return create_access_token(
        {"sub": str(identity.id), "email": identity.email, "name": identity.name}
    )
