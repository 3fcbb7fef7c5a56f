# File: chatapp/schemas/chat.py

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from chatapp.models.message import MessageRole


class ChatRequest(BaseModel):
    message: Optional[str] = None


class MessageRead(BaseModel):
    model_config = ConfigDict(from_attributes=True, populate_by_name=True)

    id: int
    content: str
    role: MessageRole
    user_id: int = Field(alias="userId")
    created_at: datetime = Field(alias="createdAt")


class ChatResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    response: str
    user_message: MessageRead = Field(alias="userMessage")
    assistant_message: MessageRead = Field(alias="assistantMessage")


class ChatHistoryResponse(BaseModel):
    messages: List[MessageRead]
