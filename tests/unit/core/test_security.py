"""
Unit Tests for Security Module.

bcrypt executes for real.
"""

from modules.backend.core.security import hash_password, verify_password


class TestPasswordHashing:
    """Tests for hash_password / verify_password."""

    def test_hash_is_not_plaintext(self):
        hashed = hash_password("correct horse")
        assert hashed != "correct horse"
        assert hashed.startswith("$2")

    def test_verify_accepts_matching_password(self):
        hashed = hash_password("correct horse")
        assert verify_password("correct horse", hashed) is True

    def test_verify_rejects_wrong_password(self):
        hashed = hash_password("correct horse")
        assert verify_password("battery staple", hashed) is False

    def test_same_password_hashes_differently(self):
        assert hash_password("correct horse") != hash_password("correct horse")
