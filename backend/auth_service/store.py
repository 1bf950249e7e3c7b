"""
PostgreSQL-backed credential store.

One AccountStore instance serves one account variant (one table). The
store opens a fresh connection per operation through the injected
`connect` callable; the connection context commits on success, rolls
back on error, and the connection is always closed.

psycopg2 errors never escape this module:
    + UniqueViolation  -> DuplicateAccount
    + anything else    -> DependencyFailure
"""

import logging
from contextlib import contextmanager
from typing import Any, Callable, Dict, Iterator, List, Optional, Type

import psycopg2
import psycopg2.errors

from backend.auth_service.errors import DependencyFailure, DuplicateAccount
from backend.auth_service.models import Account, EventOrganizer, User

logger = logging.getLogger(__name__)

# Table and column names are fixed here, never taken from request data.
_TABLES: Dict[Type[Account], str] = {
    User: "users",
    EventOrganizer: "event_organizers",
}

_COMMON_COLUMNS = ["full_name", "email", "phone", "username"]
_EXTRA_COLUMNS: Dict[Type[Account], List[str]] = {
    User: [],
    EventOrganizer: ["organizer_name"],
}

_DUPLICATE_MESSAGES: Dict[Type[Account], str] = {
    User: "User with this email or username already exists",
    EventOrganizer: "Organizer with this email or username already exists",
}


def duplicate_message(account_type: Type[Account]) -> str:
    return _DUPLICATE_MESSAGES[account_type]


class AccountStore:
    """
    Persistence for one account variant.

    Args:
        connect (callable): Returns a new psycopg2 connection.
        account_type (type): User or EventOrganizer.
    """

    def __init__(self, connect: Callable[[], Any], account_type: Type[Account]) -> None:
        self._connect = connect
        self.account_type = account_type
        self.table = _TABLES[account_type]
        self.profile_columns = _EXTRA_COLUMNS[account_type] + _COMMON_COLUMNS
        # Everything a client may see. password_hash is deliberately absent.
        self.public_columns = ["account_id"] + self.profile_columns + ["created_at"]

    @contextmanager
    def _cursor(self) -> Iterator[Any]:
        try:
            conn = self._connect()
            try:
                with conn:
                    with conn.cursor() as cur:
                        yield cur
            finally:
                conn.close()
        except psycopg2.errors.UniqueViolation as exc:
            raise DuplicateAccount(duplicate_message(self.account_type)) from exc
        except psycopg2.Error as exc:
            logger.error("Database error on %s: %s", self.table, exc)
            raise DependencyFailure("Database operation failed") from exc

    def _to_account(self, row: Optional[Any]) -> Optional[Account]:
        if not row:
            return None
        return self.account_type.from_row(dict(row))

    def insert(self, account: Account) -> Account:
        """
        Insert a new account and return it with account_id and created_at set.

        Raises:
            DuplicateAccount: Email or username is already taken.
            DependencyFailure: Any other database error.
        """
        columns = self.profile_columns + ["password_hash"]
        placeholders = ", ".join(["%s"] * len(columns))
        sql = (
            f"INSERT INTO {self.table} ({', '.join(columns)}) "
            f"VALUES ({placeholders}) "
            f"RETURNING account_id, created_at;"
        )
        values = [getattr(account, c) for c in columns]

        with self._cursor() as cur:
            cur.execute(sql, values)
            row = cur.fetchone()

        account.account_id = row["account_id"]
        account.created_at = row["created_at"]
        return account

    def find_by_email(self, email: str) -> Optional[Account]:
        sql = f"SELECT * FROM {self.table} WHERE email = %s;"
        with self._cursor() as cur:
            cur.execute(sql, (email,))
            return self._to_account(cur.fetchone())

    def find_by_email_or_username(self, email: str, username: str) -> Optional[Account]:
        """Single combined lookup used for duplicate detection."""
        sql = f"SELECT * FROM {self.table} WHERE email = %s OR username = %s LIMIT 1;"
        with self._cursor() as cur:
            cur.execute(sql, (email, username))
            return self._to_account(cur.fetchone())

    def update_password_hash(self, account_id: int, password_hash: str) -> None:
        sql = f"UPDATE {self.table} SET password_hash = %s WHERE account_id = %s;"
        with self._cursor() as cur:
            cur.execute(sql, (password_hash, account_id))

    def list_public(self) -> List[Account]:
        """Return every account of this variant, loaded without password_hash."""
        sql = f"SELECT {', '.join(self.public_columns)} FROM {self.table} ORDER BY account_id ASC;"
        with self._cursor() as cur:
            cur.execute(sql)
            rows = cur.fetchall()

        return [self.account_type.from_row(dict(row)) for row in rows]
