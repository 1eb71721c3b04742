"""
auth/passwords.py -- Salted one-way password hashing.

bcrypt, used directly (no passlib wrapper). Every hash_password() call draws a
fresh salt from gensalt(), and the salt is embedded in the returned digest, so
hashing the same password twice yields two different strings and
verify_password() needs nothing but the digest.

bcrypt only looks at the first 72 bytes of input and recent releases raise on
anything longer, so both functions cut the encoded password at 72 bytes. The
API layer caps passwords at 128 characters.
"""

from __future__ import annotations

import bcrypt

from core.errors import ValidationError

BCRYPT_ROUNDS = 10
PASSWORD_MIN_LENGTH = 6

_BCRYPT_MAX_BYTES = 72


def _encode(plain: str) -> bytes:
    return plain.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(plain: str) -> str:
    """Return a bcrypt digest of the plaintext. The salt is random per call."""
    return bcrypt.hashpw(_encode(plain), bcrypt.gensalt(rounds=BCRYPT_ROUNDS)).decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """Return True if the plaintext matches the digest.

    A mismatch is a normal False, and so is a digest bcrypt cannot parse.
    """
    try:
        return bcrypt.checkpw(_encode(plain), hashed.encode("utf-8"))
    except (ValueError, TypeError):
        return False


def check_password_policy(plain: str) -> None:
    """Raise ValidationError if the password is too short to be hashed."""
    if len(plain or "") < PASSWORD_MIN_LENGTH:
        raise ValidationError(f"Password must be at least {PASSWORD_MIN_LENGTH} characters long")


# Timing equalization. Login runs verify_password() against this digest when
# the username does not exist, so an unknown username costs the same bcrypt
# work as a wrong password.
DUMMY_HASH: str = hash_password("chirp_timing_dummy")
