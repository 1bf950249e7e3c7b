"""
Authentication service: signup, login, organizer provisioning and
password change.

The service holds no request state. Everything it needs (stores, hasher,
token issuer, mailer, optional background executor) is handed to it at
construction; `build_auth_service()` wires the production versions from
Settings.

Enumeration policy: login answers "Invalid email or password" whether the
account is unknown or the password is wrong, and spends the same hashing
work in both cases. Change-password keeps its distinct NotFound /
InvalidCredentials answers.
"""

import atexit
import logging
import re
from concurrent.futures import Executor, ThreadPoolExecutor
from functools import partial
from typing import Any, Dict, List, Optional

from backend.auth_service.errors import DuplicateAccount, InvalidCredentials, NotFound, ValidationError
from backend.auth_service.models import EventOrganizer, User, normalize_email
from backend.auth_service.passwords import CredentialHasher, generate_one_time_password
from backend.auth_service.store import AccountStore, duplicate_message
from backend.auth_service.utils import SessionClaims, TokenIssuer
from backend.database.db_connection import get_db
from backend.notification_service.mailer import ConfirmationMailer

logger = logging.getLogger(__name__)

LOGIN_FAILED = "Invalid email or password"

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+$")


def _require(data: Dict[str, Any], message: str = "All fields are required") -> Dict[str, str]:
    """
    Check that every value is a non-blank string and return them stripped.

    Raises:
        ValidationError: If any value is missing, blank or not a string.
    """
    cleaned = {}
    for name, value in data.items():
        if not isinstance(value, str) or not value.strip():
            raise ValidationError(message)
        cleaned[name] = value.strip()
    return cleaned


def _check_email(email: str) -> str:
    email = normalize_email(email)
    if not _EMAIL_RE.match(email):
        raise ValidationError("Invalid email address")
    return email


class AuthService:
    def __init__(
        self,
        users: AccountStore,
        organizers: AccountStore,
        hasher: CredentialHasher,
        tokens: TokenIssuer,
        mailer: Any,
        executor: Optional[Executor] = None,
    ) -> None:
        self.users = users
        self.organizers = organizers
        self.hasher = hasher
        self.tokens = tokens
        self.mailer = mailer
        self.executor = executor

    def _store_for(self, kind: str) -> AccountStore:
        if kind == EventOrganizer.kind:
            return self.organizers
        if kind == User.kind:
            return self.users
        raise ValueError(f"Unknown account kind: {kind}")

    # --- SIGNUP ---
    def signup(self, full_name: Any, email: Any, phone: Any, username: Any, password: Any) -> User:
        """
        Create a general user account.

        Raises:
            ValidationError: Missing field or malformed email.
            DuplicateAccount: Email or username already registered.
        """
        fields = _require({
            "full_name": full_name,
            "email": email,
            "phone": phone,
            "username": username,
        })
        if not isinstance(password, str) or not password:
            raise ValidationError("All fields are required")
        fields["email"] = _check_email(fields["email"])

        if self.users.find_by_email_or_username(fields["email"], fields["username"]):
            raise DuplicateAccount(duplicate_message(User))

        user = User(password_hash=self.hasher.hash(password), **fields)
        self.users.insert(user)

        logger.info("[Auth] User %s registered", user.account_id)
        return user

    # --- LOGIN ---
    def login(self, email: Any, password: Any, kind: str = User.kind) -> str:
        """
        Authenticate an account and return a session token.

        Raises:
            ValidationError: Missing email or password.
            InvalidCredentials: Unknown account or wrong password (same message).
        """
        store = self._store_for(kind)

        email = normalize_email(email)
        if not email or not isinstance(password, str) or not password:
            raise ValidationError("Email and password required")

        account = store.find_by_email(email)
        if account is None:
            self.hasher.dummy_verify(password)
            raise InvalidCredentials(LOGIN_FAILED)

        if not account.verify_password(self.hasher, password):
            raise InvalidCredentials(LOGIN_FAILED)

        return self.tokens.issue(account.account_id, account.email, kind=account.kind)

    def verify_session(self, token: str) -> SessionClaims:
        return self.tokens.verify(token)

    # --- ORGANIZERS ---
    def register_organizer(
        self, organizer_name: Any, full_name: Any, email: Any, phone: Any, username: Any
    ) -> EventOrganizer:
        """
        Provision an event organizer with an auto-generated password.

        The plaintext password is only handed to the mailer, after the
        record has been stored. Mail failures are logged and ignored.

        Raises:
            ValidationError: Missing field or malformed email.
            DuplicateAccount: Email or username already registered.
        """
        fields = _require({
            "organizer_name": organizer_name,
            "full_name": full_name,
            "email": email,
            "phone": phone,
            "username": username,
        })
        fields["email"] = _check_email(fields["email"])

        if self.organizers.find_by_email_or_username(fields["email"], fields["username"]):
            raise DuplicateAccount(duplicate_message(EventOrganizer))

        one_time_password = generate_one_time_password()
        organizer = EventOrganizer(password_hash=self.hasher.hash(one_time_password), **fields)
        self.organizers.insert(organizer)

        logger.info("[Auth] Organizer %s registered", organizer.account_id)
        self._send_confirmation(organizer.email, organizer.full_name, one_time_password)
        return organizer

    def _send_confirmation(self, email: str, full_name: str, secret: str) -> None:
        deliver = partial(self._deliver, email, full_name, secret)
        if self.executor is not None:
            self.executor.submit(deliver)
        else:
            deliver()

    def _deliver(self, email: str, full_name: str, secret: str) -> bool:
        try:
            sent = self.mailer.send(email, full_name, secret)
        except Exception:
            logger.exception("Confirmation email to %s failed", email)
            return False
        if not sent:
            logger.warning("Confirmation email to %s was not delivered", email)
        return bool(sent)

    def change_password(self, email: Any, current_password: Any, new_password: Any) -> None:
        """
        Replace an organizer's password after checking the current one.

        Raises:
            ValidationError: Any of the three fields missing.
            NotFound: No organizer with that email.
            InvalidCredentials: current_password does not match.
        """
        for value in (email, current_password, new_password):
            if not isinstance(value, str) or not value:
                raise ValidationError("All fields are required")

        organizer = self.organizers.find_by_email(normalize_email(email))
        if organizer is None:
            raise NotFound("Organizer not found")

        if not organizer.verify_password(self.hasher, current_password):
            raise InvalidCredentials("Incorrect current password")

        self.organizers.update_password_hash(organizer.account_id, self.hasher.hash(new_password))
        logger.info("[Auth] Organizer %s changed password", organizer.account_id)

    def list_organizers(self) -> List[Dict[str, Any]]:
        return [organizer.to_public_dict() for organizer in self.organizers.list_public()]


def build_auth_service(settings) -> AuthService:
    """Wire the production AuthService from Settings."""
    connect = partial(get_db, settings.database_url)
    executor = None
    if settings.mail_in_background:
        executor = ThreadPoolExecutor(max_workers=2, thread_name_prefix="mailer")
        # Flush queued confirmation emails before the process exits.
        atexit.register(executor.shutdown, wait=True)

    return AuthService(
        users=AccountStore(connect, User),
        organizers=AccountStore(connect, EventOrganizer),
        hasher=CredentialHasher(
            time_cost=settings.password_time_cost,
            memory_cost=settings.password_memory_cost,
            parallelism=settings.password_parallelism,
        ),
        tokens=TokenIssuer(settings.jwt_secret, settings.token_expiration_minutes),
        mailer=ConfirmationMailer.from_settings(settings),
        executor=executor,
    )
