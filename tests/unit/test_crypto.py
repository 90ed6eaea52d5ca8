"""Unit tests for password hashing and temporary credentials."""

import pytest

from src.portal.core.config import get_settings
from src.portal.core.security import (
    generate_temporary_password,
    hash_password,
    verify_password,
)
from src.portal.core.security.crypto import TEMPORARY_PASSWORD_ALPHABET

pytestmark = pytest.mark.unit


class TestPasswordHashing:
    def test_hash_and_verify(self):
        hashed = hash_password("quiet-harbor-lantern-42")
        assert hashed.startswith("$argon2id$")
        assert verify_password("quiet-harbor-lantern-42", hashed)
        assert not verify_password("wrong", hashed)

    def test_verify_rejects_malformed_hash(self):
        assert verify_password("anything", "not-a-hash") is False


class TestTemporaryPassword:
    def test_default_length_comes_from_settings(self):
        assert len(generate_temporary_password()) == get_settings().temporary_password_length

    def test_only_unambiguous_characters(self):
        password = generate_temporary_password(200)
        assert set(password) <= set(TEMPORARY_PASSWORD_ALPHABET)
        assert not set(password) & set("0O1lI")

    def test_passwords_differ(self):
        assert len({generate_temporary_password() for _ in range(20)}) == 20
