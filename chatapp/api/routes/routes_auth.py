# File: chatapp/api/routes/routes_auth.py

"""
Auth API routes: register, login, logout, and session lookup.

Login issues a signed session token both as an HttpOnly cookie (browser
clients) and in the response body (clients using a Bearer header).
"""

import logging

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from chatapp.api.deps import get_current_user, get_db
from chatapp.core.config import settings
from chatapp.core.errors import ChatAppError, InvalidCredentialsError, NotFoundError, UnexpectedError
from chatapp.models.user import User
from chatapp.schemas.user import LoginResponse, UserCreate, UserEnvelope, UserLogin, UserRead
from chatapp.services.auth_service import authenticate_user, issue_session_token, register_user

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/register", response_model=UserEnvelope, summary="User registration")
def register(payload: UserCreate, db: Session = Depends(get_db)):
    """
    Create an account. The response never includes the password hash.
    """
    try:
        user = register_user(
            db,
            name=payload.name,
            email=payload.email,
            password=payload.password,
        )
    except ChatAppError:
        raise
    except Exception:
        logger.exception("Registration failed")
        raise UnexpectedError("Registration failed")

    return UserEnvelope(user=UserRead.model_validate(user))


@router.post("/login", response_model=LoginResponse, summary="User login")
def login(payload: UserLogin, response: Response, db: Session = Depends(get_db)):
    """
    Verify credentials and start a session.

    Unknown email and wrong password both come back as 401 with the same
    message.
    """
    try:
        identity = authenticate_user(db, email=payload.email, password=payload.password)
    except NotFoundError:
        logger.warning("Login attempt for unknown email")
        raise InvalidCredentialsError()
    except ChatAppError:
        raise
    except Exception:
        logger.exception("Login failed")
        raise UnexpectedError("Login failed")

    token = issue_session_token(identity)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.access_token_expire_minutes * 60,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    logger.info("User id=%s logged in", identity.id)

    return LoginResponse(
        user=UserRead(id=identity.id, name=identity.name, email=identity.email),
        access_token=token,
    )


@router.post("/logout", summary="End the browser session")
def logout(response: Response):
    response.delete_cookie(
        key=settings.session_cookie_name,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
    )
    return {"ok": True}


@router.get("/session", response_model=UserEnvelope, summary="Current session")
def read_session(user: User = Depends(get_current_user)):
    return UserEnvelope(user=UserRead.model_validate(user))
