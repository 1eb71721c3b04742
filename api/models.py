"""
API request and response models for Chirp REST endpoints.

These Pydantic v2 models define the HTTP transport contract. They are
intentionally separate from the dataclasses in auth/models.py, which own the
internal domain representation. Route handlers map between the two.

JSON keys are camelCase (fullName, createdAt, currentPassword) to match the
web client; Python attributes stay snake_case via field aliases.

Password fields are only ever request models. No response model has a
password or hash field, so a hash cannot leak through serialization.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from auth.models import USERNAME_PATTERN, User

# ---------------------------------------------------------------------------
# Request models
# ---------------------------------------------------------------------------


class SignupRequest(BaseModel):
    """Request body for POST /api/auth/signup.

    Email shape and password length are checked by auth.accounts so the
    client gets the same messages whichever layer rejects the input. The
    username pattern is repeated here so a malformed name never reaches the
    store.
    """

    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName", min_length=1, max_length=255)
    username: str = Field(min_length=1, max_length=255, pattern=USERNAME_PATTERN)
    email: str = Field(max_length=255)
    password: str = Field(max_length=128)


class LoginRequest(BaseModel):
    """Request body for POST /api/auth/login."""

    username: str = Field(min_length=1, max_length=255)
    password: str = Field(min_length=1, max_length=128)


class UpdateProfileRequest(BaseModel):
    """Request body for POST /api/users/update. Omitted fields are left unchanged."""

    model_config = ConfigDict(populate_by_name=True)

    full_name: Optional[str] = Field(default=None, alias="fullName", max_length=255)
    email: Optional[str] = Field(default=None, max_length=255)
    bio: Optional[str] = Field(default=None, max_length=500)
    link: Optional[str] = Field(default=None, max_length=500)
    current_password: Optional[str] = Field(default=None, alias="currentPassword", max_length=128)
    new_password: Optional[str] = Field(default=None, alias="newPassword", max_length=128)


# ---------------------------------------------------------------------------
# Response models
# ---------------------------------------------------------------------------


class PublicUser(BaseModel):
    """The externally visible view of a user."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: int
    full_name: str = Field(alias="fullName")
    username: str
    email: str
    bio: str
    link: str
    followers: list[int]
    following: list[int]
    created_at: str = Field(alias="createdAt")

    @classmethod
    def from_user(cls, user: User) -> "PublicUser":
        """Build the public view from a domain User, dropping the password hash."""
        return cls(
            id=user.id,
            full_name=user.full_name,
            username=user.username,
            email=user.email,
            bio=user.bio,
            link=user.link,
            followers=list(user.followers),
            following=list(user.following),
            created_at=user.created_at or "",
        )


class MessageResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    message: str


class FollowResponse(BaseModel):
    """Response for POST /api/users/follow/{user_id}."""

    model_config = ConfigDict(frozen=True)

    message: str
    following: bool


class ErrorResponse(BaseModel):
    """Error envelope returned on every 4xx/5xx response."""

    model_config = ConfigDict(frozen=True)

    error: str


class HealthResponse(BaseModel):
    """Response for GET /api/health."""

    model_config = ConfigDict(frozen=True)

    status: str = "ok"
    version: str
