"""
auth/dependencies.py -- FastAPI Depends() helper for authentication.

get_current_user() is the authorization gate in front of every protected
route:

  no session cookie         -> AuthError      401
  token fails verification  -> InvalidToken / TokenExpired  401
  token valid, user deleted -> AuthError      401
  token valid, user found   -> request.state.user = user, handler runs

Failures are raised, not returned, and are terminal for the request. The
AppError handler in api/main.py renders them as {"error": message}.

The token issuer, session cookie and user store are read from app.state,
where the lifespan in api/main.py (or the test fixtures) put them.
"""

from __future__ import annotations

from fastapi import Request

from auth.cookies import SessionCookie
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenIssuer
from core.errors import AuthError


def get_current_user(request: Request) -> User:
    """Require a valid session cookie and return the user it belongs to.

    Use as a FastAPI dependency:
        @router.get("/protected")
        async def route(user: User = Depends(get_current_user)): ...
    """
    session_cookie: SessionCookie = request.app.state.session_cookie
    token_issuer: TokenIssuer = request.app.state.token_issuer
    user_store: UserStore = request.app.state.user_store

    token = session_cookie.read(request)
    if token is None:
        raise AuthError("Unauthorized: No token provided")

    user_id = token_issuer.verify(token)

    user = user_store.get_by_id(user_id)
    if user is None:
        raise AuthError("Unauthorized: User not found")

    request.state.user = user
    return user
