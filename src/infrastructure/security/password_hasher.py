"""
Password hashing — PBKDF2-HMAC-SHA256 with per-password random salt.

Stored format: pbkdf2_sha256$<iterations>$<salt b64>$<hash b64>
"""

import base64
import os

from cryptography.exceptions import InvalidKey
from cryptography.hazmat.primitives import hashes
from cryptography.hazmat.primitives.kdf.pbkdf2 import PBKDF2HMAC

from src.core.interfaces.security import IPasswordHasher

SCHEME = "pbkdf2_sha256"
DEFAULT_ITERATIONS = 310_000
SALT_BYTES = 16
KEY_LENGTH = 32


class PasswordHasher(IPasswordHasher):
    """Hash and verify user passwords."""

    def __init__(self, iterations: int = DEFAULT_ITERATIONS):
        self._iterations = iterations

    def hash(self, password: str) -> str:
        salt = os.urandom(SALT_BYTES)
        key = self._kdf(salt, self._iterations).derive(password.encode("utf-8"))
        return "$".join([
            SCHEME,
            str(self._iterations),
            base64.b64encode(salt).decode("ascii"),
            base64.b64encode(key).decode("ascii"),
        ])

    def verify(self, password: str, encoded: str) -> bool:
        try:
            scheme, iterations, salt_b64, key_b64 = encoded.split("$")
            rounds = int(iterations)
            salt = base64.b64decode(salt_b64, validate=True)
            expected = base64.b64decode(key_b64, validate=True)
        except ValueError:
            # binascii.Error is a ValueError
            return False
        if scheme != SCHEME or rounds < 1:
            return False

        kdf = self._kdf(salt, rounds)
        try:
            kdf.verify(password.encode("utf-8"), expected)
        except InvalidKey:
            return False
        return True

    @staticmethod
    def _kdf(salt: bytes, iterations: int) -> PBKDF2HMAC:
        return PBKDF2HMAC(
            algorithm=hashes.SHA256(),
            length=KEY_LENGTH,
            salt=salt,
            iterations=iterations,
        )
