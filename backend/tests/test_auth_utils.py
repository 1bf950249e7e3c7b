import pytest
import jwt
from datetime import datetime, timedelta, timezone

from backend.auth_service.errors import TokenExpired, TokenInvalid
from backend.auth_service.utils import TokenIssuer, verify_token_from_request


def test_issue_token(tokens, settings):
    token = tokens.issue(123, "a@x.com")

    assert isinstance(token, str)

    # Decode to verify contents using the same secret
    payload = jwt.decode(token, settings.jwt_secret, algorithms=["HS256"])
    assert payload["sub"] == "123"
    assert payload["email"] == "a@x.com"
    assert payload["kind"] == "user"
    assert payload["exp"] - payload["iat"] == 3600


def test_verify_token(tokens):
    token = tokens.issue(456, "b@x.com", kind="organizer")

    claims = tokens.verify(token)
    assert claims.account_id == 456
    assert claims.email == "b@x.com"
    assert claims.kind == "organizer"
    assert claims.expires_at > datetime.now(timezone.utc)
    assert claims.expires_at - claims.issued_at == timedelta(hours=1)


def test_verify_token_expired(settings):
    issuer = TokenIssuer(settings.jwt_secret, expiration_minutes=-1)
    token = issuer.issue(1, "a@x.com")

    with pytest.raises(TokenExpired):
        issuer.verify(token)


def test_verify_token_wrong_secret(tokens):
    token = TokenIssuer("another_secret_that_is_long_enough_123").issue(1, "a@x.com")

    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_verify_token_malformed(tokens):
    with pytest.raises(TokenInvalid):
        tokens.verify("invalid.token.here")


def test_verify_token_missing_claims(tokens, settings):
    now = datetime.now(timezone.utc)
    token = jwt.encode({"sub": "1", "iat": now, "exp": now + timedelta(minutes=5)}, settings.jwt_secret, algorithm="HS256")

    with pytest.raises(TokenInvalid):
        tokens.verify(token)


def test_issuer_requires_secret():
    with pytest.raises(RuntimeError):
        TokenIssuer("")


def test_verify_token_from_request_valid(app, tokens):
    token = tokens.issue(789, "c@x.com")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        claims, err, code = verify_token_from_request(tokens)
        assert claims.account_id == 789
        assert err is None
        assert code is None


def test_verify_token_from_request_missing_header(app, tokens):
    with app.test_request_context():
        claims, err, code = verify_token_from_request(tokens)
        assert claims is None
        assert code == 401
        assert err.json["error"] == "missing token"


def test_verify_token_from_request_invalid_format(app, tokens):
    with app.test_request_context(headers={"Authorization": "InvalidFormat"}):
        claims, err, code = verify_token_from_request(tokens)
        assert claims is None
        assert code == 401


def test_verify_token_from_request_expired(app, settings):
    issuer = TokenIssuer(settings.jwt_secret, expiration_minutes=-5)
    token = issuer.issue(1, "a@x.com")

    with app.test_request_context(headers={"Authorization": f"Bearer {token}"}):
        claims, err, code = verify_token_from_request(issuer)
        assert claims is None
        assert code == 401
        assert err.json["reason"] == "token_expired"
