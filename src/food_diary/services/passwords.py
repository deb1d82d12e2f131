"""Salted one-way password hashing."""

import base64
import hashlib
import hmac
import os
from dataclasses import dataclass

_ALGORITHM = "sha256"


def _b64encode(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).decode("ascii").rstrip("=")


def _b64decode(data: str) -> bytes:
    pad = "=" * (-len(data) % 4)
    return base64.urlsafe_b64decode((data + pad).encode("ascii"))


@dataclass(frozen=True)
class PasswordHasher:
    """PBKDF2-HMAC hasher storing ``pbkdf2_sha256$iterations$salt$digest``."""

    iterations: int = 200_000

    def hash(self, password: str) -> str:
        salt = os.urandom(16)
        digest = hashlib.pbkdf2_hmac(
            _ALGORITHM, password.encode("utf-8"), salt, self.iterations
        )
        return "$".join(
            (
                f"pbkdf2_{_ALGORITHM}",
                str(self.iterations),
                _b64encode(salt),
                _b64encode(digest),
            )
        )

    def verify(self, password: str, password_hash: str) -> bool:
        """Return True when ``password`` matches the stored hash."""
        try:
            scheme, raw_iterations, salt_b64, digest_b64 = password_hash.split("$", 3)
            if not scheme.startswith("pbkdf2_"):
                return False
            algorithm = scheme.split("_", 1)[1]
            actual = hashlib.pbkdf2_hmac(
                algorithm,
                password.encode("utf-8"),
                _b64decode(salt_b64),
                int(raw_iterations),
            )
            expected = _b64decode(digest_b64)
        except ValueError:
            return False
        return hmac.compare_digest(actual, expected)
