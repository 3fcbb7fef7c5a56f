"""
Database initialization helpers.

Models are imported here so their tables get registered on Base.metadata.
"""

import logging

from sqlalchemy.engine import Engine

from chatapp.db.session import engine as default_engine
from chatapp.models.base import Base
from chatapp.models import message, user  # noqa: F401

logger = logging.getLogger(__name__)


def init_db(engine: Engine | None = None) -> None:
    """
    Create all tables based on SQLAlchemy models.
    """
    bind = engine or default_engine
    Base.metadata.create_all(bind=bind)
    logger.info("Database tables ready (%s)", bind.url.render_as_string(hide_password=True))
