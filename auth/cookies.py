"""
auth/cookies.py -- Carries the session token in an HTTP cookie.

Cookie attributes:
  httponly=True:     JS cannot read the cookie (XSS token theft mitigation).
  samesite="strict": the browser never sends it on cross-site requests, which
                     closes off CSRF against the cookie-authenticated routes.
  secure:            only sent over HTTPS. Off in development so the cookie
                     works on http://localhost.
  max_age:           matches the token lifetime so both expire together.

Logout overwrites the cookie with an empty value and max_age=0, which makes the
browser drop it immediately.
"""

from __future__ import annotations

from starlette.requests import Request
from starlette.responses import Response

from core.config import Settings

DEFAULT_COOKIE_NAME = "jwt"
DEFAULT_MAX_AGE = 15 * 24 * 60 * 60


class SessionCookie:
    """Reads and writes the session cookie with one fixed set of attributes."""

    def __init__(
        self,
        name: str = DEFAULT_COOKIE_NAME,
        max_age: int = DEFAULT_MAX_AGE,
        secure: bool = True,
    ) -> None:
        self.name = name
        self.max_age = max_age
        self.secure = secure

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionCookie:
        return cls(
            name=settings.cookie_name,
            max_age=settings.token_expire_seconds,
            secure=not settings.is_development,
        )

    def attach(self, response: Response, token: str) -> None:
        """Set the session cookie carrying `token` on the response."""
        self._set(response, token, self.max_age)

    def clear(self, response: Response) -> None:
        """Expire the session cookie on the client."""
        self._set(response, "", 0)

    def read(self, request: Request) -> str | None:
        """Return the raw token from the request, or None if there is none."""
        return request.cookies.get(self.name) or None

    def _set(self, response: Response, value: str, max_age: int) -> None:
        response.set_cookie(
            self.name,
            value=value,
            max_age=max_age,
            httponly=True,
            samesite="strict",
            secure=self.secure,
        )
