"""bcrypt password hashing."""

from __future__ import annotations

import bcrypt

DEFAULT_ROUNDS = 10


def hash_password(plaintext: str, rounds: int = DEFAULT_ROUNDS) -> str:
    """Hash a password with a fresh random salt.

    The returned string embeds algorithm, cost and salt, so two calls with the
    same plaintext produce different hashes that both verify.
    """
    digest = bcrypt.hashpw(plaintext.encode("utf-8"), bcrypt.gensalt(rounds=rounds))
    return digest.decode("ascii")


def verify_password(plaintext: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(plaintext.encode("utf-8"), password_hash.encode("ascii"))
    except ValueError:
        # malformed stored hash
        return False
