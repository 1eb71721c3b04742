"""
auth/store.py -- SQLAlchemy Core persistence layer for user records.

Pattern: Repository + Data Mapper.
UserStore is the repository; _row_to_user is the mapper. Route, service and
dependency code never touches SQL directly.

Uniqueness:
  username and email carry UNIQUE constraints. The service layer checks both
  before inserting so the common case gets a precise message, but the
  constraint is the only arbiter when two signups race: the second insert
  raises sqlalchemy.exc.IntegrityError and the caller maps it to a conflict.

  follows has a composite primary key (follower_id, followee_id), so an edge
  exists at most once. follow() is idempotent.

Security:
  All queries use bound parameters. No f-strings in SQL.

Layer rule: no imports from api/.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import Column, ForeignKey, Integer, MetaData, String, Table, Text, create_engine, event, func, select
from sqlalchemy.engine import Connection, Engine

from auth.models import User

# ---------------------------------------------------------------------------
# Schema
# ---------------------------------------------------------------------------

_metadata = MetaData()

_users = Table(
    "users",
    _metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("username", String(255), nullable=False, unique=True),
    Column("email", String(255), nullable=False, unique=True),
    Column("full_name", String(255), nullable=False, server_default=""),
    Column("hashed_password", Text, nullable=False),
    Column("bio", Text, nullable=False, server_default=""),
    Column("link", Text, nullable=False, server_default=""),
    Column("created_at", String(32), nullable=False),
)

_follows = Table(
    "follows",
    _metadata,
    Column("follower_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("followee_id", Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
    Column("created_at", String(32), nullable=False),
)

# Columns a profile update may touch. username is immutable once created.
_UPDATABLE_FIELDS = frozenset({"full_name", "email", "bio", "link", "hashed_password"})


# ---------------------------------------------------------------------------
# SQLite connection setup
# ---------------------------------------------------------------------------


def _sqlite_pragmas(dbapi_conn, connection_record) -> None:
    """Enable WAL journal mode and foreign keys on every new SQLite connection.

    SQLite PRAGMAs are per-connection and are not inherited from the pool.
    """
    dbapi_conn.execute("PRAGMA journal_mode=WAL")
    dbapi_conn.execute("PRAGMA foreign_keys=ON")


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------


class UserStore:
    """Repository for User records and the follow graph.

    Usage:
        store = UserStore("sqlite:///:memory:")
        uid = store.create_user(User(username="alice", email="a@x.io", hashed_password=hash_password("secret")))
        user = store.get_by_username("alice")
        store.close()
    """

    def __init__(self, db_url: str) -> None:
        connect_args: dict = {}
        if db_url.startswith("sqlite"):
            connect_args["check_same_thread"] = False
        self.engine: Engine = create_engine(db_url, connect_args=connect_args)
        if db_url.startswith("sqlite"):
            event.listen(self.engine, "connect", _sqlite_pragmas)
        _metadata.create_all(self.engine)

    # ------------------------------------------------------------------
    # Users
    # ------------------------------------------------------------------

    def create_user(self, user: User) -> int:
        """Insert a new user and return its assigned database ID.

        Raises sqlalchemy.exc.IntegrityError if the username or email is
        already taken.
        """
        with self.engine.connect() as conn:
            result = conn.execute(
                _users.insert().values(
                    username=user.username,
                    email=user.email,
                    full_name=user.full_name,
                    hashed_password=user.hashed_password,
                    bio=user.bio,
                    link=user.link,
                    created_at=_now_iso(),
                )
            )
            conn.commit()
            return result.inserted_primary_key[0]

    def get_by_id(self, user_id: int) -> User | None:
        """Look up a user by primary key. Returns None if not found."""
        return self._get_one(_users.c.id == user_id)

    def get_by_username(self, username: str) -> User | None:
        """Look up a user by exact username (case-sensitive). Returns None if not found."""
        return self._get_one(_users.c.username == username)

    def get_by_email(self, email: str) -> User | None:
        return self._get_one(_users.c.email == email)

    def username_exists(self, username: str) -> bool:
        return self._exists(_users.c.username == username)

    def email_exists(self, email: str) -> bool:
        return self._exists(_users.c.email == email)

    def update_user(self, user_id: int, **fields) -> bool:
        """Update mutable fields on an existing user.

        Accepted fields: full_name, email, bio, link, hashed_password. Anything
        else (username included) raises ValueError before any SQL runs.

        Returns True if a row was updated, False if user_id was not found.
        Raises IntegrityError if the new email belongs to another user.
        """
        unknown = set(fields) - _UPDATABLE_FIELDS
        if unknown:
            raise ValueError(f"Fields cannot be updated: {sorted(unknown)!r}")
        if not fields:
            return self.get_by_id(user_id) is not None
        with self.engine.connect() as conn:
            result = conn.execute(_users.update().where(_users.c.id == user_id).values(**fields))
            conn.commit()
        return result.rowcount > 0

    def suggest_users(self, user_id: int, limit: int) -> list[User]:
        """Return up to `limit` random users that user_id neither is nor already follows."""
        followed = select(_follows.c.followee_id).where(_follows.c.follower_id == user_id)
        query = (
            _users.select()
            .where((_users.c.id != user_id) & _users.c.id.not_in(followed))
            .order_by(func.random())
            .limit(limit)
        )
        with self.engine.connect() as conn:
            rows = conn.execute(query).fetchall()
            return [_row_to_user(row, *_follow_ids(conn, row.id)) for row in rows]

    # ------------------------------------------------------------------
    # Follow graph
    # ------------------------------------------------------------------

    def follow(self, follower_id: int, followee_id: int) -> None:
        """Record that follower_id follows followee_id. No-op if already following."""
        if self.is_following(follower_id, followee_id):
            return
        with self.engine.connect() as conn:
            conn.execute(
                _follows.insert().values(follower_id=follower_id, followee_id=followee_id, created_at=_now_iso())
            )
            conn.commit()

    def unfollow(self, follower_id: int, followee_id: int) -> bool:
        """Remove the edge. Returns True if one existed."""
        with self.engine.connect() as conn:
            result = conn.execute(
                _follows.delete().where(
                    (_follows.c.follower_id == follower_id) & (_follows.c.followee_id == followee_id)
                )
            )
            conn.commit()
        return result.rowcount > 0

    def is_following(self, follower_id: int, followee_id: int) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(
                select(_follows.c.follower_id).where(
                    (_follows.c.follower_id == follower_id) & (_follows.c.followee_id == followee_id)
                )
            ).fetchone()
        return row is not None

    def close(self) -> None:
        self.engine.dispose()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _get_one(self, clause) -> User | None:
        with self.engine.connect() as conn:
            row = conn.execute(_users.select().where(clause)).fetchone()
            if row is None:
                return None
            return _row_to_user(row, *_follow_ids(conn, row.id))

    def _exists(self, clause) -> bool:
        with self.engine.connect() as conn:
            row = conn.execute(select(_users.c.id).where(clause)).fetchone()
        return row is not None


# ---------------------------------------------------------------------------
# Row mappers (Data Mapper pattern)
# ---------------------------------------------------------------------------


def _follow_ids(conn: Connection, user_id: int) -> tuple[list[int], list[int]]:
    """Return (followers, following) id lists for one user, oldest edge first."""
    followers = conn.execute(
        select(_follows.c.follower_id).where(_follows.c.followee_id == user_id).order_by(_follows.c.created_at)
    ).scalars()
    following = conn.execute(
        select(_follows.c.followee_id).where(_follows.c.follower_id == user_id).order_by(_follows.c.created_at)
    ).scalars()
    return list(followers), list(following)


def _row_to_user(row, followers: list[int], following: list[int]) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        full_name=row.full_name,
        hashed_password=row.hashed_password,
        bio=row.bio,
        link=row.link,
        created_at=row.created_at,
        followers=followers,
        following=following,
    )
