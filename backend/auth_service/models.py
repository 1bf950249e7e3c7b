"""
Account records for the authentication service.

Two variants share the same credential fields:
    + User: a general attendee created by self-signup.
    + EventOrganizer: an event host provisioned by an administrator,
      with an extra organizer_name.

Rows coming back from the store are turned into these records with
`from_row()`. API responses use `to_public_dict()`, which renders the
fields in camelCase (fullName, organizerName, ...) and never includes the
password hash.
"""

from dataclasses import asdict, dataclass, field, fields
from datetime import datetime
from typing import Any, ClassVar, Dict, Mapping, Optional

PRIVATE_FIELDS = ("password_hash",)


def normalize_email(email: Any) -> str:
    """Trim and lowercase an email address. Non-strings normalize to ''."""
    if not isinstance(email, str):
        return ""
    return email.strip().lower()


def to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.title() for part in rest)


@dataclass
class Account:
    kind: ClassVar[str] = "account"

    full_name: str
    email: str
    phone: str
    username: str
    password_hash: Optional[str] = field(default=None, repr=False)
    account_id: Optional[int] = None
    created_at: Optional[datetime] = None

    def __post_init__(self) -> None:
        self.email = normalize_email(self.email)
        self.username = self.username.strip()

    def verify_password(self, hasher: Any, plaintext: str) -> bool:
        """
        Check a plaintext password against this account's stored hash.

        Args:
            hasher: A CredentialHasher.
            plaintext (str): The candidate password.

        Returns:
            bool: True only when the plaintext matches.
        """
        return hasher.verify(plaintext, self.password_hash)

    def to_public_dict(self) -> Dict[str, Any]:
        """Serialize for API responses: camelCase keys, no password hash."""
        data = {}
        for name, value in asdict(self).items():
            if name in PRIVATE_FIELDS:
                continue
            if isinstance(value, datetime):
                value = value.isoformat()
            data[to_camel(name)] = value
        data["kind"] = self.kind
        return data

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "Account":
        names = [f.name for f in fields(cls)]
        return cls(**{k: row[k] for k in names if k in row})


@dataclass
class User(Account):
    kind: ClassVar[str] = "user"


@dataclass
class EventOrganizer(Account):
    kind: ClassVar[str] = "organizer"

    organizer_name: str = ""
