"""Unit tests for auth/passwords.py.

Covers:
- Salted hashing (same input, different output) and the configured cost
- verify() returns False on mismatch and raises InternalError on a corrupt hash
- Long passwords hash and verify consistently
"""

import pytest

from auth.errors import InternalError
from auth.passwords import PasswordHasher


@pytest.fixture
def hasher() -> PasswordHasher:
    return PasswordHasher(rounds=4)


def test_hash_is_not_plaintext(hasher):
    hashed = hasher.hash("secret")
    assert hashed != "secret"
    assert hashed.startswith("$2")


def test_same_input_hashes_differently(hasher):
    assert hasher.hash("secret") != hasher.hash("secret")


def test_cost_factor_is_encoded_in_hash():
    assert PasswordHasher(rounds=5).hash("secret").split("$")[2] == "05"


def test_default_cost_factor_is_ten():
    assert PasswordHasher().rounds == 10


def test_verify_correct_password(hasher):
    assert hasher.verify("secret", hasher.hash("secret")) is True


def test_verify_wrong_password_returns_false(hasher):
    assert hasher.verify("wrong", hasher.hash("secret")) is False


def test_corrupt_hash_raises_internal_error(hasher):
    with pytest.raises(InternalError):
        hasher.verify("secret", "not-a-bcrypt-hash")


def test_long_password_round_trips(hasher):
    password = "x" * 200
    assert hasher.verify(password, hasher.hash(password)) is True


def test_verify_dummy_does_not_raise(hasher):
    hasher.verify_dummy("anything")
    hasher.verify_dummy("anything")


def test_dummy_hash_is_ready_at_construction():
    hasher = PasswordHasher(rounds=4)
    assert hasher._dummy_hash.startswith(b"$2")
    assert hasher._dummy_hash.split(b"$")[2] == b"04"
