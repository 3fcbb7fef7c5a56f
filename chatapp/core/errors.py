# File: chatapp/core/errors.py

"""
Domain errors for the chat API.

Services raise these; the exception handler installed in chatapp.main turns
them into ``{"error": message}`` JSON responses with the matching status.
"""

from fastapi import status


class ChatAppError(Exception):
    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class ValidationError(ChatAppError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid request"


class ConflictError(ChatAppError):
    # duplicate email is reported as a plain bad request
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Resource already exists"


class UnauthorizedError(ChatAppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class InvalidCredentialsError(UnauthorizedError):
    default_message = "Invalid email or password"


class NotFoundError(ChatAppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Not found"


class UnexpectedError(ChatAppError):
    pass
