"""Salted one-way password hashing."""

from werkzeug.security import check_password_hash, generate_password_hash


class PasswordHasher:
    """
    Hashes with werkzeug's default scheme (salted scrypt/pbkdf2, method
    recorded in the hash itself) and verifies by recomputing.
    """

    def hash(self, password: str) -> str:
        return str(generate_password_hash(password))

    def verify(self, password: str, hashed: str) -> bool:
        return bool(check_password_hash(hashed, password))


password_hasher = PasswordHasher()
