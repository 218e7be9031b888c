"""
Password and reset-token hashing.

Passwords use bcrypt (slow, salted). Reset tokens are high-entropy random
values, so a single SHA-256 is enough and keeps lookup by hash possible.
"""

import hashlib
import secrets
from functools import lru_cache

import bcrypt

DEFAULT_BCRYPT_ROUNDS = 12

# bcrypt only reads this many bytes of input and refuses anything longer
MAX_PASSWORD_BYTES = 72


def password_too_long(password: str) -> bool:
    return len(password.encode("utf-8")) > MAX_PASSWORD_BYTES


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> bytes:
    """Hash of a throwaway password at the given cost, built once per cost"""
    return bcrypt.hashpw(b"dummy_password", bcrypt.gensalt(rounds))


def hash_password(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(rounds)).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Compare a plain password with a stored bcrypt hash.

    Passwords longer than bcrypt accepts can never match; they still pay for
    one comparison so the failure takes as long as a wrong password.
    """
    if password_too_long(password):
        bcrypt.checkpw(b"dummy_password", password_hash.encode("utf-8"))
        return False
    return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))


def burn_password_check(password: str, rounds: int = DEFAULT_BCRYPT_ROUNDS) -> None:
    """
    Run a bcrypt comparison whose result is discarded.

    Used when no user matches so that signin takes the same time whether or
    not the account exists. ``rounds`` should match the cost of real hashes.
    """
    candidate = password.encode("utf-8")[:MAX_PASSWORD_BYTES]
    bcrypt.checkpw(candidate, _dummy_hash(rounds))


def generate_reset_token() -> str:
    return secrets.token_urlsafe(32)


def hash_reset_token(raw_token: str) -> str:
    return hashlib.sha256(raw_token.encode("utf-8")).hexdigest()
