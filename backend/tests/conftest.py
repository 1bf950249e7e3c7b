import copy
from dataclasses import replace
from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest

from backend.auth_service.errors import DuplicateAccount
from backend.auth_service.models import EventOrganizer, User
from backend.auth_service.passwords import CredentialHasher
from backend.auth_service.service import AuthService
from backend.auth_service.store import duplicate_message
from backend.auth_service.utils import TokenIssuer
from backend.config import Settings
from backend.gateway.server import create_app

TEST_SECRET = "test_secret_for_schedulo_session_tokens"


class InMemoryAccountStore:
    """
    Test double with the same interface as AccountStore.
    Enforces email/username uniqueness on insert like the real UNIQUE constraints.
    """

    def __init__(self, account_type):
        self.account_type = account_type
        self.accounts = {}
        self._next_id = 1

    def insert(self, account):
        for existing in self.accounts.values():
            if existing.email == account.email or existing.username == account.username:
                raise DuplicateAccount(duplicate_message(self.account_type))
        account.account_id = self._next_id
        account.created_at = datetime(2025, 1, 1, tzinfo=timezone.utc)
        self._next_id += 1
        self.accounts[account.account_id] = copy.deepcopy(account)
        return account

    def find_by_email(self, email):
        for account in self.accounts.values():
            if account.email == email:
                return copy.deepcopy(account)
        return None

    def find_by_email_or_username(self, email, username):
        for account in self.accounts.values():
            if account.email == email or account.username == username:
                return copy.deepcopy(account)
        return None

    def update_password_hash(self, account_id, password_hash):
        self.accounts[account_id].password_hash = password_hash

    def list_public(self):
        # Same projection as the SQL: the hash is never loaded.
        return [replace(account, password_hash=None) for account in self.accounts.values()]


@pytest.fixture
def settings():
    return Settings(jwt_secret=TEST_SECRET, database_url="postgresql://localhost/schedulo_test")


@pytest.fixture(scope="session")
def hasher():
    # Minimal argon2 cost keeps the suite fast.
    return CredentialHasher(time_cost=1, memory_cost=8, parallelism=1)


@pytest.fixture
def tokens():
    return TokenIssuer(TEST_SECRET, expiration_minutes=60)


@pytest.fixture
def users_store():
    return InMemoryAccountStore(User)


@pytest.fixture
def organizers_store():
    return InMemoryAccountStore(EventOrganizer)


@pytest.fixture
def mailer(mocker):
    mailer = mocker.Mock()
    mailer.send.return_value = True
    return mailer


@pytest.fixture
def auth_service(users_store, organizers_store, hasher, tokens, mailer):
    return AuthService(
        users=users_store,
        organizers=organizers_store,
        hasher=hasher,
        tokens=tokens,
        mailer=mailer,
    )


@pytest.fixture
def app(settings, auth_service):
    app = create_app(settings, auth_service)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def mock_db():
    """
    Mocks a psycopg2 connection and cursor.
    Returns (connect, conn, cursor) where connect() hands out the connection.
    """
    mock_conn = MagicMock()
    mock_cursor = MagicMock()

    # Setup the context manager for connection
    mock_conn.__enter__.return_value = mock_conn
    mock_conn.__exit__.return_value = None

    # Setup the context manager for cursor
    mock_cursor.__enter__.return_value = mock_cursor
    mock_cursor.__exit__.return_value = None

    # Connect cursor to connection
    mock_conn.cursor.return_value = mock_cursor

    connect = MagicMock(return_value=mock_conn)
    return connect, mock_conn, mock_cursor
