"""
Shared authentication helpers.
Provides session token creation and verification.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional, Tuple

import jwt
from flask import Response, jsonify, request

from backend.auth_service.errors import AuthError, TokenExpired, TokenInvalid

ALGORITHM = "HS256"
DEFAULT_EXPIRATION_MINUTES = 60


@dataclass(frozen=True)
class SessionClaims:
    account_id: int
    email: str
    kind: str
    issued_at: datetime
    expires_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            "account_id": self.account_id,
            "email": self.email,
            "kind": self.kind,
            "issued_at": self.issued_at.isoformat(),
            "expires_at": self.expires_at.isoformat(),
        }


class TokenIssuer:
    """
    Signs and validates stateless bearer tokens.

    Args:
        secret (str): Shared HMAC secret.
        expiration_minutes (int): Validity window of every issued token.
    """

    def __init__(self, secret: str, expiration_minutes: int = DEFAULT_EXPIRATION_MINUTES) -> None:
        if not secret:
            raise RuntimeError("JWT_SECRET is missing. Set it in .env")
        self._secret = secret
        self.expiration = timedelta(minutes=expiration_minutes)

    # --- JWT CREATION ---
    def issue(self, account_id: int, email: str, kind: str = "user") -> str:
        """
        Generates a new JWT for an account.

        Args:
            account_id (int): The unique ID of the account.
            email (str): The account's normalized email.
            kind (str): "user" or "organizer".

        Returns:
            str: Encoded JWT string.
        """
        now = datetime.now(timezone.utc)

        payload = {
            "sub": str(account_id),
            "email": email,
            "kind": kind,
            "iat": now,
            "exp": now + self.expiration,
        }

        return jwt.encode(payload, self._secret, algorithm=ALGORITHM)

    # --- JWT VALIDATION ---
    def verify(self, token: str) -> SessionClaims:
        """
        Decode and validate a JWT.

        Raises:
            TokenExpired: The token is past its expiry.
            TokenInvalid: Bad signature, malformed token or missing claims.
        """
        try:
            payload = jwt.decode(
                token,
                self._secret,
                algorithms=[ALGORITHM],
                options={"require": ["sub", "exp", "iat"]},
            )
        except jwt.ExpiredSignatureError as exc:
            raise TokenExpired() from exc
        except jwt.PyJWTError as exc:
            raise TokenInvalid() from exc

        try:
            return SessionClaims(
                account_id=int(payload["sub"]),
                email=payload["email"],
                kind=payload.get("kind", "user"),
                issued_at=datetime.fromtimestamp(payload["iat"], tz=timezone.utc),
                expires_at=datetime.fromtimestamp(payload["exp"], tz=timezone.utc),
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise TokenInvalid() from exc


def verify_token_from_request(issuer: TokenIssuer) -> Tuple[Optional[SessionClaims], Optional[Response], Optional[int]]:
    """
    Verify the JWT in the Authorization header.

    Returns:
        tuple: (claims, error_response, status_code)
               If successful, error_response and status_code are None.
               If failed, claims is None.
    """
    auth = request.headers.get("Authorization", "")

    if not auth.startswith("Bearer "):
        return None, jsonify({"error": "missing token", "reason": "token_missing"}), 401

    token = auth.split(" ", 1)[1]

    try:
        claims = issuer.verify(token)
    except AuthError as exc:
        return None, jsonify(exc.to_dict()), exc.status_code

    return claims, None, None
