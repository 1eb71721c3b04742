"""
auth/models.py -- Domain dataclasses for authentication entities.

Pattern: Data class. The store and the routes do the work; the dataclass owns
the shape and the invariants that must hold for every record, whichever layer
built it:
  - username matches USERNAME_PATTERN (letters, digits, "_", "." and "-";
    no whitespace, so the name typed at login is the name stored)
  - email matches EMAIL_PATTERN

hashed_password is excluded from repr() so a stray log line or traceback
never prints it.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field

from core.errors import ValidationError

# Same shape check the signup form has always used: something@something.tld
EMAIL_PATTERN = r"^[^\s@]+@[^\s@]+\.[^\s@]+$"
_EMAIL_RE = re.compile(EMAIL_PATTERN)

USERNAME_PATTERN = r"^[A-Za-z0-9_.-]+$"
_USERNAME_RE = re.compile(USERNAME_PATTERN)
INVALID_USERNAME = "Username may only contain letters, digits, underscores, dots and hyphens"


def is_valid_email(email: str) -> bool:
    return bool(_EMAIL_RE.fullmatch(email or ""))


def is_valid_username(username: str) -> bool:
    return bool(_USERNAME_RE.fullmatch(username or ""))


@dataclass
class User:
    """A registered account.

    id is None until the store assigns one. followers / following hold user
    ids and are filled in by the store on reads; they are not columns.
    """

    username: str
    email: str
    hashed_password: str = field(repr=False)
    full_name: str = ""
    id: int | None = None
    bio: str = ""
    link: str = ""
    created_at: str | None = None
    followers: list[int] = field(default_factory=list)
    following: list[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        if not self.username:
            raise ValidationError("Username is required")
        if not is_valid_username(self.username):
            raise ValidationError(INVALID_USERNAME)
        if not is_valid_email(self.email):
            raise ValidationError("Invalid email format")
