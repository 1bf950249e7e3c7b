"""
Create the account tables.

Each account variant lives in its own table. Email and username carry
UNIQUE constraints so duplicate registrations are rejected atomically by
PostgreSQL, even when two requests race past the service's lookup.

Run once before starting the gateway:
    python -m backend.database.init_db
"""

import logging
import sys

from backend.config import Settings
from backend.database.db_connection import get_db

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    account_id    SERIAL PRIMARY KEY,
    full_name     TEXT NOT NULL,
    email         TEXT NOT NULL UNIQUE,
    phone         TEXT NOT NULL,
    username      TEXT NOT NULL UNIQUE,
    password_hash TEXT NOT NULL,
    created_at    TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);

CREATE TABLE IF NOT EXISTS event_organizers (
    account_id     SERIAL PRIMARY KEY,
    organizer_name TEXT NOT NULL,
    full_name      TEXT NOT NULL,
    email          TEXT NOT NULL UNIQUE,
    phone          TEXT NOT NULL,
    username       TEXT NOT NULL UNIQUE,
    password_hash  TEXT NOT NULL,
    created_at     TIMESTAMPTZ NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""


def init_db(conn) -> None:
    """
    Apply the schema on an open connection and commit.

    Args:
        conn: A psycopg2 connection (see get_db()).
    """
    with conn:
        with conn.cursor() as cur:
            cur.execute(SCHEMA_SQL)


def main() -> int:
    logging.basicConfig(level=logging.INFO, format="[%(levelname)s] %(asctime)s - %(message)s")
    settings = Settings.from_env()

    conn = get_db(settings.database_url)
    try:
        init_db(conn)
    finally:
        conn.close()

    logging.info("Account tables are ready.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
