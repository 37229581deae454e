"""Password hasher unit tests."""

from app.services.password_hasher import PasswordHasher


class TestPasswordHasher:

    def setup_method(self):
        self.hasher = PasswordHasher()

    def test_hash_is_not_the_password(self):
        hashed = self.hasher.hash("admin123")
        assert "admin123" not in hashed

    def test_verify_accepts_correct_password(self):
        assert self.hasher.verify("admin123", self.hasher.hash("admin123")) is True

    def test_verify_rejects_wrong_password(self):
        assert self.hasher.verify("admin124", self.hasher.hash("admin123")) is False

    def test_hashes_are_salted(self):
        assert self.hasher.hash("admin123") != self.hasher.hash("admin123")
