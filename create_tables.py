"""
Create the chat tables in the configured database.

Run this from the backend root:

    (.venv) python create_tables.py

It reads DATABASE_URL like the API does and creates the users and
messages tables if they are missing. Existing tables are left alone.
"""

from chatapp.core.logging_config import configure_logging
from chatapp.db.init_db import init_db
from chatapp.db.session import SQLALCHEMY_DATABASE_URL


def main() -> None:
    configure_logging()
    print(f"[INFO] Creating tables on {SQLALCHEMY_DATABASE_URL.split('@')[-1]}")
    init_db()
    print("[INFO] Done.")


if __name__ == "__main__":
    main()
