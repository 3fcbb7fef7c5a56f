# File: chatapp/core/logging_config.py

import logging

from chatapp.core.config import settings

LOG_FORMAT = "[%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: str | None = None) -> None:
    """
    Configure root logging once for the API process.

    SQL statements are only echoed when SQL_ECHO is on.
    """
    logging.basicConfig(level=(level or settings.log_level).upper(), format=LOG_FORMAT)

    if settings.sql_echo:
        logging.getLogger("sqlalchemy.engine").setLevel(logging.INFO)
