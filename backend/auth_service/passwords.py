"""
Password hashing and one-time password generation.

Hashing uses Argon2id through argon2-cffi. Verification never raises:
a wrong password, a malformed hash or a missing hash all return False.
"""

import logging
import secrets
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import HashingError, InvalidHashError, VerificationError

from backend.auth_service.errors import DependencyFailure

logger = logging.getLogger(__name__)

# 4 random bytes -> 8 hex characters
OTP_BYTES = 4
OTP_MIN_BYTES = 4


class CredentialHasher:
    """
    Salted one-way hash and verify for account passwords and OTPs.

    Args:
        time_cost (int): Argon2 iterations.
        memory_cost (int): Argon2 memory usage in KiB.
        parallelism (int): Argon2 lanes.
    """

    def __init__(self, time_cost: int = 3, memory_cost: int = 65536, parallelism: int = 4) -> None:
        self._ph = PasswordHasher(
            time_cost=time_cost,
            memory_cost=memory_cost,
            parallelism=parallelism,
        )
        # Used to burn the same amount of work when an account does not exist.
        self._dummy_hash = self._ph.hash(secrets.token_hex(16))

    def hash(self, plaintext: str) -> str:
        """
        Hash a plaintext secret.

        Raises:
            DependencyFailure: If argon2 fails to produce a hash.
        """
        try:
            return self._ph.hash(plaintext)
        except HashingError as exc:
            logger.error("Password hashing failed: %s", exc)
            raise DependencyFailure("Password hashing failed") from exc

    def verify(self, plaintext: str, hashed: Optional[str]) -> bool:
        """Return True if plaintext matches hashed, False otherwise."""
        if not isinstance(hashed, str) or not hashed or not isinstance(plaintext, str):
            return False
        try:
            return self._ph.verify(hashed, plaintext)
        except (VerificationError, InvalidHashError):
            return False

    def dummy_verify(self, plaintext: str) -> bool:
        """Spend a verify's worth of work against a throwaway hash. Always False."""
        self.verify(plaintext if isinstance(plaintext, str) else "", self._dummy_hash)
        return False


def generate_one_time_password(num_bytes: int = OTP_BYTES) -> str:
    """
    Generate a random hex one-time password of length 2 * num_bytes.

    Raises:
        ValueError: If num_bytes would give fewer than 8 characters.
    """
    if num_bytes < OTP_MIN_BYTES:
        raise ValueError(f"OTP needs at least {OTP_MIN_BYTES} bytes")
    return secrets.token_hex(num_bytes)
