"""
api/routes/auth.py -- Session endpoints.

Routes:
  POST /api/auth/signup   -- create account; sets session cookie
  POST /api/auth/login    -- password login; sets session cookie
  POST /api/auth/logout   -- clears session cookie; 200
  GET  /api/auth/me       -- current user (requires auth)

Security:
  signup and login are rate-limited per client IP (LOGIN_RATE_LIMIT).
  authenticate_user() gives one error for unknown username and wrong password
    and equalizes bcrypt work between them. Do not inline the lookup here.
  The session token is issued only after register_user() has persisted the
    account.
  Cache-Control: no-store on responses that carry a fresh session cookie.

No `from __future__ import annotations` here: slowapi wraps signup/login, and
FastAPI would resolve string annotations against slowapi's module globals.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.limiter import auth_rate_limit, limiter
from api.models import LoginRequest, MessageResponse, PublicUser, SignupRequest
from auth.accounts import authenticate_user, register_user
from auth.cookies import SessionCookie
from auth.dependencies import get_current_user
from auth.models import User
from auth.store import UserStore
from auth.tokens import TokenIssuer

# Auth policy:
# - POST /api/auth/signup:  public -- rate-limited
# - POST /api/auth/login:   public -- rate-limited
# - POST /api/auth/logout:  public -- clearing a cookie needs no prior auth
# - GET  /api/auth/me:      requires auth (get_current_user)
router = APIRouter()


@router.post("/auth/signup", response_model=PublicUser)
@limiter.limit(auth_rate_limit)
def signup(request: Request, body: SignupRequest) -> JSONResponse:
    """Register a new account and start a session for it."""
    user_store: UserStore = request.app.state.user_store
    user = register_user(
        user_store,
        full_name=body.full_name,
        username=body.username,
        email=body.email,
        password=body.password,
    )
    return _session_response(request, user)


@router.post("/auth/login", response_model=PublicUser)
@limiter.limit(auth_rate_limit)
def login(request: Request, body: LoginRequest) -> JSONResponse:
    """Authenticate with username and password; set the session cookie."""
    user_store: UserStore = request.app.state.user_store
    user = authenticate_user(user_store, body.username, body.password)
    return _session_response(request, user)


@router.post("/auth/logout", response_model=MessageResponse)
async def logout(request: Request) -> JSONResponse:
    """Clear the session cookie."""
    session_cookie: SessionCookie = request.app.state.session_cookie
    resp = JSONResponse(content=MessageResponse(message="Logged out successfully").model_dump())
    session_cookie.clear(resp)
    return resp


@router.get("/auth/me", response_model=PublicUser)
async def me(current_user: User = Depends(get_current_user)) -> PublicUser:
    """Return the currently authenticated user."""
    return PublicUser.from_user(current_user)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _session_response(request: Request, user: User) -> JSONResponse:
    token_issuer: TokenIssuer = request.app.state.token_issuer
    session_cookie: SessionCookie = request.app.state.session_cookie

    token = token_issuer.issue(user.id)
    resp = JSONResponse(
        status_code=200,
        content=PublicUser.from_user(user).model_dump(by_alias=True),
    )
    session_cookie.attach(resp, token)
    resp.headers["Cache-Control"] = "no-store"
    return resp
