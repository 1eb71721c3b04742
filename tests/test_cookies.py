"""Unit tests for auth/cookies.py -- session cookie attributes.

Covers:
- attach() sets HttpOnly, SameSite=strict, Max-Age of 15 days
- Secure flag follows the environment mode
- clear() writes an empty value with Max-Age=0
- read() returns the raw value, or None when absent or empty
"""

from starlette.requests import Request
from starlette.responses import Response

from auth.cookies import SessionCookie
from core.config import Settings

FIFTEEN_DAYS = 15 * 24 * 60 * 60


def _set_cookie_header(response: Response) -> str:
    headers = [v.decode("latin-1") for k, v in response.raw_headers if k.lower() == b"set-cookie"]
    assert len(headers) == 1, headers
    return headers[0]


def _request_with_cookie(header: str | None) -> Request:
    headers = [(b"cookie", header.encode("latin-1"))] if header is not None else []
    return Request({"type": "http", "method": "GET", "path": "/", "headers": headers})


def test_attach_sets_security_attributes():
    response = Response()
    SessionCookie(secure=True).attach(response, "tok.en.value")
    header = _set_cookie_header(response)
    lowered = header.lower()
    assert header.startswith("jwt=tok.en.value")
    assert "httponly" in lowered
    assert "samesite=strict" in lowered
    assert f"max-age={FIFTEEN_DAYS}" in lowered
    assert "secure" in lowered.replace("samesite", "")


def test_development_mode_drops_secure_flag():
    dev = Settings(app_env="development", secret_key="x" * 32)
    response = Response()
    SessionCookie.from_settings(dev).attach(response, "abc")
    lowered = _set_cookie_header(response).lower()
    assert "secure" not in lowered.replace("samesite", "")
    assert "httponly" in lowered


def test_production_mode_sets_secure_flag():
    prod = Settings(app_env="production", secret_key="x" * 32)
    cookie = SessionCookie.from_settings(prod)
    assert cookie.secure is True
    assert cookie.name == "jwt"
    assert cookie.max_age == FIFTEEN_DAYS


def test_clear_expires_cookie_immediately():
    response = Response()
    SessionCookie().clear(response)
    header = _set_cookie_header(response)
    lowered = header.lower()
    assert header.startswith("jwt=")
    assert 'jwt=""' in header or "jwt=;" in header
    assert "max-age=0" in lowered
    assert "httponly" in lowered


def test_read_returns_token():
    assert SessionCookie().read(_request_with_cookie("jwt=abc.def.ghi")) == "abc.def.ghi"


def test_read_ignores_other_cookies():
    assert SessionCookie().read(_request_with_cookie("other=1; jwt=tok")) == "tok"
    assert SessionCookie().read(_request_with_cookie("other=1")) is None


def test_read_without_cookie_header_is_none():
    assert SessionCookie().read(_request_with_cookie(None)) is None


def test_read_empty_value_is_none():
    assert SessionCookie().read(_request_with_cookie("jwt=")) is None


def test_custom_cookie_name():
    cookie = SessionCookie(name="session")
    assert cookie.read(_request_with_cookie("session=s1; jwt=j1")) == "s1"
