"""
core/errors.py -- Application error taxonomy.

Every error a request can fail with is an AppError subclass carrying its HTTP
status. Route handlers and services raise these; api/main.py has a single
exception handler that turns any AppError into {"error": message}.

  ValidationError     400  bad input shape or length
  ConflictError       400  duplicate username or email
  AuthError           401  missing, invalid or expired session
  InvalidCredentials  400  wrong username/password at login
  NotFoundError       404  referenced identity absent
  InternalError       500  store/hash/signing failure (message is generic;
                           api/main.py renders unmapped SQLAlchemyError and
                           any other stray exception as this)

Messages are shown to clients verbatim, so they must never contain password
hashes, tokens or the signing secret.

Layer rule: core/ is the kernel. This module may not import from api/ or auth/.
"""

from __future__ import annotations


class AppError(Exception):
    """Base class for errors that map to an HTTP response."""

    status_code: int = 500

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(AppError):
    status_code = 400


class ConflictError(AppError):
    status_code = 400


class AuthError(AppError):
    status_code = 401


class InvalidCredentials(AuthError):
    """Login failed. One message for unknown username and wrong password."""

    status_code = 400


class InvalidToken(AuthError):
    pass


class TokenExpired(AuthError):
    pass


class NotFoundError(AppError):
    status_code = 404


class InternalError(AppError):
    status_code = 500

    def __init__(self, message: str = "Internal server error") -> None:
        super().__init__(message)
