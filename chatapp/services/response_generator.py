# File: chatapp/services/response_generator.py

"""
Assistant reply generation.

There is no model behind the chat yet: StubResponseGenerator answers every
message with the configured placeholder text. Anything with a
``generate(content, history)`` method can be swapped in through the
``get_response_generator`` dependency in chatapp.api.deps.
"""

from typing import Protocol, Sequence

from chatapp.core.config import settings
from chatapp.models.message import Message


class ResponseGenerator(Protocol):
    def generate(self, content: str, history: Sequence[Message]) -> str:
        ...


class StubResponseGenerator:
    def __init__(self, reply: str | None = None):
        self.reply = reply or settings.assistant_placeholder_reply

    def generate(self, content: str, history: Sequence[Message]) -> str:
        return self.reply
