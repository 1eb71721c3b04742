"""
auth/accounts.py -- Signup, login and profile operations over a UserStore.

Route handlers stay thin: they parse the body, call one function here, and
turn the returned User into a response. Every failure is raised as a
core.errors.AppError subclass and rendered by the handler in api/main.py.

Signup ordering: the record is persisted first and the caller issues the
session token only after register_user() returns, so a failed insert can never
leave the client holding a session for an account that does not exist.

Login returns one error for "no such user" and "wrong password" and runs
bcrypt in both branches, so neither the message nor the response time tells a
caller whether a username is registered.

Layer rule: no imports from api/.
"""

from __future__ import annotations

import logging

from sqlalchemy.exc import IntegrityError

from auth.models import INVALID_USERNAME, User, is_valid_email, is_valid_username
from auth.passwords import DUMMY_HASH, check_password_policy, hash_password, verify_password
from auth.store import UserStore
from core.errors import ConflictError, InvalidCredentials, NotFoundError, ValidationError

logger = logging.getLogger("chirp.auth")

_BAD_CREDENTIALS = "Invalid username or password"


# ---------------------------------------------------------------------------
# Signup / login
# ---------------------------------------------------------------------------


def register_user(store: UserStore, *, full_name: str, username: str, email: str, password: str) -> User:
    """Validate, hash and persist a new account. Returns the stored User.

    Checks run in this order and stop at the first failure:
      1. email shape                  -> ValidationError
      2. username shape, full name    -> ValidationError
      3. username already registered  -> ConflictError
      4. email already registered     -> ConflictError
      5. password length              -> ValidationError
    Nothing is written unless all of them pass. The username is taken as
    given: one with surrounding whitespace is rejected, not trimmed, so
    login and profile lookups see exactly the stored name.
    """
    if not is_valid_email(email):
        raise ValidationError("Invalid email format")
    if not is_valid_username(username):
        raise ValidationError(INVALID_USERNAME)
    if not (full_name or "").strip():
        raise ValidationError("Full name is required")
    if store.username_exists(username):
        raise ConflictError("Username is already taken")
    if store.email_exists(email):
        raise ConflictError("Email is already taken")
    check_password_policy(password)

    user = User(
        username=username,
        email=email,
        full_name=full_name,
        hashed_password=hash_password(password),
    )
    try:
        user_id = store.create_user(user)
    except IntegrityError as exc:
        # A concurrent signup took the username or email between our checks
        # and the insert.
        raise ConflictError("Username or email is already taken") from exc

    logger.info("User registered: id=%s username=%s", user_id, user.username)
    return store.get_by_id(user_id)


def authenticate_user(store: UserStore, username: str, password: str) -> User:
    """Return the user whose username and password match, else raise InvalidCredentials."""
    user = store.get_by_username(username)
    if user is None:
        verify_password(password, DUMMY_HASH)
        logger.warning("Login failed for username=%s", username)
        raise InvalidCredentials(_BAD_CREDENTIALS)
    if not verify_password(password, user.hashed_password):
        logger.warning("Login failed for username=%s", username)
        raise InvalidCredentials(_BAD_CREDENTIALS)
    return user


# ---------------------------------------------------------------------------
# Profiles
# ---------------------------------------------------------------------------


def get_profile(store: UserStore, username: str) -> User:
    user = store.get_by_username(username)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(
    store: UserStore,
    user: User,
    *,
    full_name: str | None = None,
    email: str | None = None,
    bio: str | None = None,
    link: str | None = None,
    current_password: str | None = None,
    new_password: str | None = None,
) -> User:
    """Apply the provided fields to the user's record and return the fresh copy.

    None or empty means "leave unchanged". A password change needs both the
    current and the new password; the current one must verify.
    """
    if bool(current_password) != bool(new_password):
        raise ValidationError("Please provide both current password and new password")

    updates: dict = {}
    if current_password and new_password:
        if not verify_password(current_password, user.hashed_password):
            raise InvalidCredentials("Current password is incorrect")
        check_password_policy(new_password)
        updates["hashed_password"] = hash_password(new_password)

    if email and email != user.email:
        if not is_valid_email(email):
            raise ValidationError("Invalid email format")
        if store.email_exists(email):
            raise ConflictError("Email is already taken")
        updates["email"] = email
    if full_name:
        updates["full_name"] = full_name
    if bio:
        updates["bio"] = bio
    if link:
        updates["link"] = link

    try:
        found = store.update_user(user.id, **updates)
    except IntegrityError as exc:
        raise ConflictError("Email is already taken") from exc
    if not found:
        raise NotFoundError("User not found")
    return store.get_by_id(user.id)


def suggested_users(store: UserStore, user: User, limit: int = 4) -> list[User]:
    """Up to `limit` accounts the user might follow: not themselves, not already followed."""
    return store.suggest_users(user.id, limit)


def toggle_follow(store: UserStore, user: User, target_id: int) -> bool:
    """Follow target_id if not already following, otherwise unfollow.

    Returns True when the user follows the target afterwards.
    """
    if target_id == user.id:
        raise ValidationError("You can't follow or unfollow yourself")
    if store.get_by_id(target_id) is None:
        raise NotFoundError("User not found")

    if store.is_following(user.id, target_id):
        store.unfollow(user.id, target_id)
        logger.info("User %s unfollowed %s", user.id, target_id)
        return False
    store.follow(user.id, target_id)
    logger.info("User %s followed %s", user.id, target_id)
    return True
