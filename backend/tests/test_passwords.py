import string

import pytest
from argon2.exceptions import HashingError

from backend.auth_service.errors import DependencyFailure
from backend.auth_service.passwords import CredentialHasher, generate_one_time_password


def test_hash_is_not_plaintext(hasher):
    hashed = hasher.hash("p1")
    assert hashed != "p1"
    assert hashed.startswith("$argon2id$")


def test_hash_is_salted(hasher):
    assert hasher.hash("same-password") != hasher.hash("same-password")


def test_verify_matches_only_original(hasher):
    hashed = hasher.hash("correct horse")
    assert hasher.verify("correct horse", hashed) is True
    assert hasher.verify("correct horsE", hashed) is False
    assert hasher.verify("", hashed) is False


@pytest.mark.parametrize("bad_hash", [None, "", "not-a-hash", "$argon2id$v=19$broken"])
def test_verify_malformed_hash_returns_false(hasher, bad_hash):
    assert hasher.verify("anything", bad_hash) is False


def test_dummy_verify_is_always_false(hasher):
    assert hasher.dummy_verify("whatever") is False
    assert hasher.dummy_verify(None) is False


def test_hashing_failure_is_dependency_failure(hasher, mocker):
    mocker.patch("backend.auth_service.passwords.PasswordHasher.hash", side_effect=HashingError("boom"))
    with pytest.raises(DependencyFailure):
        hasher.hash("p1")


def test_hasher_uses_configured_cost():
    hasher = CredentialHasher(time_cost=2, memory_cost=16, parallelism=1)
    assert "m=16,t=2,p=1" in hasher.hash("p1")


def test_otp_fixed_length_hex():
    otp = generate_one_time_password()
    assert len(otp) == 8
    assert set(otp) <= set(string.hexdigits.lower())


def test_otp_custom_length():
    assert len(generate_one_time_password(8)) == 16


def test_otp_rejects_short_length():
    with pytest.raises(ValueError):
        generate_one_time_password(3)


def test_otp_values_are_not_correlated():
    values = [generate_one_time_password() for _ in range(500)]

    # No repeats and no two consecutive values sharing a prefix more than chance allows.
    assert len(set(values)) == len(values)
    shared_prefix = sum(1 for a, b in zip(values, values[1:]) if a[:3] == b[:3])
    assert shared_prefix < 5

    # Every hex digit shows up in the first position.
    assert len({v[0] for v in values}) == 16
