from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker

from chatapp.core.config import settings

SQLALCHEMY_DATABASE_URL = settings.database_url


def build_engine(url: str, **kwargs):
    if url.startswith("sqlite"):
        engine = create_engine(
            url, echo=settings.sql_echo, connect_args={"check_same_thread": False}, **kwargs
        )

        # SQLite leaves foreign keys off unless asked per connection
        @event.listens_for(engine, "connect")
        def _enable_sqlite_fks(dbapi_conn, _record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        return engine

    return create_engine(url, echo=settings.sql_echo, pool_pre_ping=True, **kwargs)


engine = build_engine(SQLALCHEMY_DATABASE_URL)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
