"""
Users API — Password Hashing Tests
====================================

What:  PasswordHasher hash/verify behavior for both supported schemes.
"""

import pytest

from users_api.services.credentials import PasswordHasher


@pytest.fixture(params=["bcrypt", "pbkdf2_sha256"])
def hasher(request):
    return PasswordHasher(default_scheme=request.param)


class TestPasswordHasher:

    def test_hash_is_not_plaintext_and_verifies(self, hasher):
        hashed = hasher.hash("supersecurepassword")

        assert hashed and hashed != "supersecurepassword"
        assert hasher.verify("supersecurepassword", hashed)
        assert not hasher.verify("incorrect", hashed)

    def test_hashes_are_salted(self, hasher):
        assert hasher.hash("same") != hasher.hash("same")

    def test_uses_default_scheme(self):
        assert PasswordHasher("bcrypt").hash("pw").startswith("$2")
        assert PasswordHasher("pbkdf2_sha256").hash("pw").startswith("$pbkdf2-sha256$")

    def test_verifies_hashes_from_other_supported_scheme(self):
        legacy = PasswordHasher("pbkdf2_sha256").hash("pw")
        assert PasswordHasher("bcrypt").verify("pw", legacy)

    @pytest.mark.parametrize("stored", ["", None, "not-a-hash", "$2b$12$truncated"])
    def test_malformed_stored_hash_does_not_verify(self, hasher, stored):
        assert hasher.verify("pw", stored) is False

    def test_rejected_secret_returns_none(self, hasher):
        assert hasher.hash(None) is None
