"""
PostgreSQL connection helper.
Provides get_db() for use by the account stores.
"""

import logging

import psycopg2
from psycopg2.extras import DictCursor

logger = logging.getLogger(__name__)


def get_db(database_url: str):
    """
    Returns a new psycopg2 connection with dictionary-based row access.

    The connection string is passed in by the caller (see Settings.database_url)
    rather than read from a module global.

    Usage:
        conn = get_db(settings.database_url)
        with conn:
            with conn.cursor() as cur:
                cur.execute(...)

    Returns:
        psycopg2.extensions.connection: A connection object with DictCursor factory.

    Raises:
        psycopg2.Error: If connection fails.
    """
    try:
        conn = psycopg2.connect(database_url)

        # Rows come back as dictionaries, e.g. {"account_id": 1, "email": "..."}
        conn.cursor_factory = DictCursor
        return conn
    except psycopg2.Error as e:
        logger.error("Error connecting to database: %s", e)
        # Re-raise so the caller knows the connection failed
        raise
