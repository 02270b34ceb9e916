"""Unit tests for staff password hashing.

Note: Test strings in this file are synthetic test data, not real secrets.
"""

import pytest

from tenancy.application.security import (
    hash_password,
    hash_password_async,
    verify_password,
)


class TestPasswordHashing:
    def test_hash_is_bcrypt(self):
        hashed = hash_password("correct horse")

        assert hashed.startswith("$2b$")
        assert "correct horse" not in hashed

    def test_hashes_are_salted(self):
        assert hash_password("correct horse") != hash_password("correct horse")

    def test_verify_matching_password(self):
        hashed = hash_password("correct horse")

        assert verify_password("correct horse", hashed) is True

    def test_verify_wrong_password(self):
        hashed = hash_password("correct horse")

        assert verify_password("battery staple", hashed) is False

    def test_verify_malformed_hash_is_false(self):
        assert verify_password("correct horse", "not-a-bcrypt-hash") is False

    @pytest.mark.asyncio
    async def test_async_hash_verifies(self):
        hashed = await hash_password_async("correct horse")

        assert verify_password("correct horse", hashed)
