# File: chatapp/api/routes/api.py

from fastapi import APIRouter

from chatapp.api.routes.routes_auth import router as auth_router
from chatapp.api.routes.routes_chat import router as chat_router


api_router = APIRouter()

api_router.include_router(auth_router, prefix="/auth", tags=["auth"])
api_router.include_router(chat_router, prefix="/chat", tags=["chat"])
