"""
asgi.py -- ASGI entry point for Chirp.

Run with:  uvicorn asgi:app --reload

Set APP_ENV=development for local work (auto-generated SECRET_KEY, session
cookie without the Secure flag). Production needs SECRET_KEY in the
environment or .env.
"""

from api.main import app

__all__ = ["app"]
