"""Unit tests for auth/store.py -- UserStore persistence and the follow graph.

Covers:
- create/get round trip by id, username and email
- UNIQUE constraints on username and email
- update_user() refuses username and unknown fields
- follow/unfollow edges and the follower/following lists on reads
- suggest_users() excludes the caller and anyone already followed
- User rejects usernames outside USERNAME_PATTERN
"""

import pytest
from sqlalchemy.exc import IntegrityError

from auth.models import User
from core.errors import ValidationError


def _user(username: str = "alice", email: str | None = None) -> User:
    return User(
        username=username,
        email=email or f"{username}@example.com",
        hashed_password="$2b$10$notarealhashnotarealhashnotarealhashnotarealhash",
        full_name=f"{username.title()} Example",
    )


def test_create_and_fetch(store):
    uid = store.create_user(_user("alice"))
    by_id = store.get_by_id(uid)
    assert by_id is not None
    assert by_id.id == uid
    assert by_id.username == "alice"
    assert by_id.email == "alice@example.com"
    assert by_id.full_name == "Alice Example"
    assert by_id.created_at
    assert store.get_by_username("alice").id == uid
    assert store.get_by_email("alice@example.com").id == uid


def test_missing_lookups_return_none(store):
    assert store.get_by_id(999) is None
    assert store.get_by_username("nobody") is None
    assert store.get_by_email("nobody@example.com") is None


def test_username_lookup_is_case_sensitive(store):
    store.create_user(_user("alice"))
    assert store.get_by_username("Alice") is None


def test_exists_checks(store):
    store.create_user(_user("alice"))
    assert store.username_exists("alice")
    assert not store.username_exists("bob")
    assert store.email_exists("alice@example.com")
    assert not store.email_exists("bob@example.com")


def test_duplicate_username_violates_constraint(store):
    store.create_user(_user("alice"))
    with pytest.raises(IntegrityError):
        store.create_user(_user("alice", email="other@example.com"))


def test_duplicate_email_violates_constraint(store):
    store.create_user(_user("alice"))
    with pytest.raises(IntegrityError):
        store.create_user(_user("bob", email="alice@example.com"))


def test_hash_is_stored_but_not_in_repr(store):
    uid = store.create_user(_user("alice"))
    user = store.get_by_id(uid)
    assert user.hashed_password.startswith("$2b$")
    assert "hashed_password" not in repr(user)


def test_update_user_changes_fields(store):
    uid = store.create_user(_user("alice"))
    assert store.update_user(uid, bio="hello", link="https://alice.example")
    user = store.get_by_id(uid)
    assert user.bio == "hello"
    assert user.link == "https://alice.example"


def test_update_user_unknown_id(store):
    assert store.update_user(123, bio="x") is False


def test_update_user_refuses_username(store):
    uid = store.create_user(_user("alice"))
    with pytest.raises(ValueError):
        store.update_user(uid, username="mallory")
    assert store.get_by_id(uid).username == "alice"


def test_update_user_email_collision(store):
    store.create_user(_user("alice"))
    bob = store.create_user(_user("bob"))
    with pytest.raises(IntegrityError):
        store.update_user(bob, email="alice@example.com")


class TestFollowGraph:
    def test_follow_shows_on_both_sides(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        store.follow(alice, bob)
        assert store.is_following(alice, bob)
        assert not store.is_following(bob, alice)
        assert store.get_by_id(alice).following == [bob]
        assert store.get_by_id(bob).followers == [alice]

    def test_follow_is_idempotent(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        store.follow(alice, bob)
        store.follow(alice, bob)
        assert store.get_by_id(bob).followers == [alice]

    def test_unfollow_removes_edge(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        store.follow(alice, bob)
        assert store.unfollow(alice, bob) is True
        assert store.unfollow(alice, bob) is False
        assert store.get_by_id(bob).followers == []


class TestSuggestUsers:
    def test_excludes_self_and_followed(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        carol = store.create_user(_user("carol"))
        store.follow(alice, bob)
        suggested = store.suggest_users(alice, limit=10)
        assert [u.id for u in suggested] == [carol]

    def test_respects_limit(self, store):
        alice = store.create_user(_user("alice"))
        for name in ("bob", "carol", "dave", "erin", "frank", "grace"):
            store.create_user(_user(name))
        suggested = store.suggest_users(alice, limit=4)
        assert len(suggested) == 4
        assert len({u.id for u in suggested}) == 4
        assert alice not in {u.id for u in suggested}

    def test_follower_edges_do_not_exclude(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        store.follow(bob, alice)
        suggested = store.suggest_users(alice, limit=4)
        assert [u.id for u in suggested] == [bob]
        assert suggested[0].following == [alice]

    def test_everyone_followed(self, store):
        alice = store.create_user(_user("alice"))
        bob = store.create_user(_user("bob"))
        store.follow(alice, bob)
        assert store.suggest_users(alice, limit=4) == []


class TestUserInvariants:
    def test_empty_username_rejected(self):
        with pytest.raises(ValidationError):
            _user("   ")

    def test_malformed_email_rejected(self):
        with pytest.raises(ValidationError) as exc_info:
            _user("alice", email="bad-email")
        assert exc_info.value.message == "Invalid email format"

    @pytest.mark.parametrize("username", [" alice ", "alice\n", "a/b", "al ice", "<alice>"])
    def test_username_outside_allowed_characters_rejected(self, username):
        with pytest.raises(ValidationError) as exc_info:
            _user(username, email="alice@example.com")
        assert "letters, digits" in exc_info.value.message

    @pytest.mark.parametrize("username", ["alice", "alice_b", "a.l-i_c3"])
    def test_allowed_usernames(self, username):
        assert _user(username, email="alice@example.com").username == username
