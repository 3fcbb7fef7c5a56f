# File: chatapp/services/chat_service.py

"""
Chat turns: store the user's message, ask the response generator for a
reply, store the reply, hand both back.
"""

import logging
from typing import List, Optional, Tuple

from sqlalchemy import select
from sqlalchemy.orm import Session

from chatapp.core.errors import NotFoundError, ValidationError
from chatapp.models.message import Message, MessageRole
from chatapp.models.user import User
from chatapp.services.response_generator import ResponseGenerator

logger = logging.getLogger(__name__)

# prior turns handed to the generator along with the new message
HISTORY_WINDOW = 20


def get_user(db: Session, user_id: int) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User not found")
    return user


def list_messages(db: Session, user_id: int, limit: Optional[int] = None) -> List[Message]:
    """
    Messages owned by ``user_id``, oldest first.

    With ``limit`` only the most recent ``limit`` messages are returned
    (still oldest first).
    """
    if limit is None:
        stmt = (
            select(Message)
            .where(Message.user_id == user_id)
            .order_by(Message.created_at.asc(), Message.id.asc())
        )
        return list(db.scalars(stmt))

    stmt = (
        select(Message)
        .where(Message.user_id == user_id)
        .order_by(Message.created_at.desc(), Message.id.desc())
        .limit(limit)
    )
    return list(reversed(db.scalars(stmt).all()))


def post_message(
    db: Session,
    *,
    user: User,
    content: Optional[str],
    generator: ResponseGenerator,
) -> Tuple[Message, Message]:
    """
    Record one chat turn for ``user``.

    The trimmed message and the generated reply are committed together;
    if anything fails in between, nothing is stored.
    """
    text = content.strip() if isinstance(content, str) else ""
    if not text:
        raise ValidationError("Message must not be empty")

    history = list_messages(db, user.id, limit=HISTORY_WINDOW)

    try:
        user_message = Message(content=text, role=MessageRole.USER, user_id=user.id)
        db.add(user_message)
        db.flush()

        reply = generator.generate(text, history)

        assistant_message = Message(content=reply, role=MessageRole.ASSISTANT, user_id=user.id)
        db.add(assistant_message)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(user_message)
    db.refresh(assistant_message)

    logger.info(
        "Chat turn stored for user id=%s (messages %s, %s)",
        user.id,
        user_message.id,
        assistant_message.id,
    )
    return user_message, assistant_message
