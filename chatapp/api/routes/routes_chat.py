# File: chatapp/api/routes/routes_chat.py

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from chatapp.api.deps import get_current_user, get_db, get_response_generator, read_chat_request
from chatapp.core.errors import ChatAppError, UnexpectedError
from chatapp.models.user import User
from chatapp.schemas.chat import ChatHistoryResponse, ChatRequest, ChatResponse, MessageRead
from chatapp.services.chat_service import list_messages, post_message
from chatapp.services.response_generator import ResponseGenerator

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "",
    response_model=ChatResponse,
    summary="Send a chat message",
    # body is parsed by read_chat_request after the session check
    openapi_extra={
        "requestBody": {
            "required": True,
            "content": {"application/json": {"schema": ChatRequest.model_json_schema()}},
        }
    },
)
def send_message(
    payload: ChatRequest = Depends(read_chat_request),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
    generator: ResponseGenerator = Depends(get_response_generator),
):
    """
    Store the caller's message and the assistant reply, return both.
    """
    try:
        user_message, assistant_message = post_message(
            db,
            user=user,
            content=payload.message,
            generator=generator,
        )
    except ChatAppError:
        raise
    except Exception:
        logger.exception("Chat request failed for user id=%s", user.id)
        raise UnexpectedError()

    return ChatResponse(
        response=assistant_message.content,
        user_message=MessageRead.model_validate(user_message),
        assistant_message=MessageRead.model_validate(assistant_message),
    )


@router.get("/history", response_model=ChatHistoryResponse, summary="Conversation history")
def read_history(
    limit: Optional[int] = Query(default=None, ge=1, le=500),
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    messages = list_messages(db, user.id, limit=limit)
    return ChatHistoryResponse(messages=[MessageRead.model_validate(m) for m in messages])
