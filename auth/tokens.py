"""
auth/tokens.py -- Signed, time-limited session tokens.

JWT via python-jose, HS256. A token carries:
  sub  user id (string, as RFC 7519 requires)
  iat  issue time
  exp  iat + expire_seconds (15 days by default)

Nothing is stored server-side. Possession of a token that verifies is the
session; it ends when exp passes or the client drops the cookie.

The issuer is constructed with the secret instead of reading configuration on
every call. api/main.py builds one from Settings at startup and keeps it on
app.state; tests build their own with an injected secret.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt

from core.config import Settings
from core.errors import InvalidToken, TokenExpired

logger = logging.getLogger("chirp.auth")

_ALGORITHM = "HS256"


class TokenIssuer:
    """Issues and verifies session tokens for one signing secret.

    Usage:
        issuer = TokenIssuer.from_settings(get_settings())
        token = issuer.issue(user.id)
        user_id = issuer.verify(token)   # raises InvalidToken / TokenExpired
    """

    def __init__(self, secret_key: str, expire_seconds: int, algorithm: str = _ALGORITHM) -> None:
        if not secret_key:
            raise ValueError("TokenIssuer requires a non-empty secret key")
        self._secret_key = secret_key
        self.expire_seconds = expire_seconds
        self.algorithm = algorithm

    @classmethod
    def from_settings(cls, settings: Settings) -> TokenIssuer:
        return cls(settings.secret_key, settings.token_expire_seconds)

    def issue(self, user_id: int, now: datetime | None = None) -> str:
        """Sign a token for user_id that expires expire_seconds after `now`.

        `now` defaults to the current UTC time.
        """
        issued_at = now or datetime.now(timezone.utc)
        payload = {
            "sub": str(user_id),
            "iat": issued_at,
            "exp": issued_at + timedelta(seconds=self.expire_seconds),
        }
        return jwt.encode(payload, self._secret_key, algorithm=self.algorithm)

    def verify(self, token: str) -> int:
        """Return the user id embedded in a valid, unexpired token.

        Raises TokenExpired when exp has passed and InvalidToken for every
        other failure: bad signature, malformed token, missing or
        non-numeric subject.
        """
        try:
            payload = jwt.decode(token, self._secret_key, algorithms=[self.algorithm])
        except ExpiredSignatureError as exc:
            raise TokenExpired("Unauthorized: Token expired") from exc
        except JWTError as exc:
            logger.debug("Rejected session token: %s", exc)
            raise InvalidToken("Unauthorized: Invalid token") from exc

        try:
            return int(payload["sub"])
        except (KeyError, TypeError, ValueError) as exc:
            raise InvalidToken("Unauthorized: Invalid token") from exc

    def __repr__(self) -> str:
        # Never include the secret.
        return f"TokenIssuer(algorithm={self.algorithm!r}, expire_seconds={self.expire_seconds})"
