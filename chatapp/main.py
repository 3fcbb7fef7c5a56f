# chatapp/main.py

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from chatapp.api.routes.api import api_router
from chatapp.core.config import settings
from chatapp.core.errors import ChatAppError, UnexpectedError
from chatapp.core.logging_config import configure_logging
from chatapp.db.init_db import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if settings.create_tables_on_startup:
        init_db()
    yield


async def handle_chat_app_error(request: Request, exc: ChatAppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def handle_request_validation_error(request: Request, exc: RequestValidationError) -> JSONResponse:
    # first problem only, e.g. "body.email: value is not a valid email address"
    errors = exc.errors()
    if errors:
        first = errors[0]
        where = ".".join(str(part) for part in first.get("loc", ()))
        message = f"{where}: {first.get('msg', 'invalid value')}" if where else first.get("msg")
    else:
        message = "Invalid request"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    # anything that escaped a route's own try/except, dependencies included
    logger.error("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": UnexpectedError.default_message},
    )


def create_application() -> FastAPI:
    configure_logging()

    app = FastAPI(
        title=settings.PROJECT_NAME,
        version=settings.VERSION,
        lifespan=lifespan,
    )

    # ---------- CORS ----------
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.backend_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # ---------- ERRORS ----------
    app.add_exception_handler(ChatAppError, handle_chat_app_error)
    app.add_exception_handler(RequestValidationError, handle_request_validation_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    # ---------- ROUTERS ----------
    app.include_router(api_router, prefix=settings.api_prefix)

    @app.get("/healthz", tags=["health"])
    def healthz():
        return {"status": "ok"}

    return app


app = create_application()
