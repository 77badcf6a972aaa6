"""Request/response schemas for user management."""

from pydantic import BaseModel, ConfigDict, Field

from poi_accounts.core.security import (
    PASSWORD_MAX_LEN,
    PASSWORD_MIN_LEN,
    USERNAME_MAX_LEN,
    USERNAME_MIN_LEN,
)
from poi_accounts.models import Role
from poi_accounts.schemas.points_of_interest import PointOfInterestRead


class UserCreate(BaseModel):
    """Fields accepted when creating a user. The password is hashed before storage."""

    email: str = Field(..., min_length=3, max_length=255, description="Unique email")
    username: str = Field(
        ..., min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN, description="Display name"
    )
    password: str = Field(
        ..., min_length=PASSWORD_MIN_LEN, max_length=PASSWORD_MAX_LEN, description="Password"
    )
    role: Role = Field(default=Role.REGULAR, description="0 regular, 1 admin, 2 special")


class UserUpdate(BaseModel):
    """
    Partial update. role, email and username are each applied only when given a
    non-null value. updated_by_id is always written.
    """

    email: str | None = Field(default=None, min_length=3, max_length=255)
    username: str | None = Field(
        default=None, min_length=USERNAME_MIN_LEN, max_length=USERNAME_MAX_LEN
    )
    role: Role | None = None
    updated_by_id: int | None = Field(
        default=None, description="User who made the change; defaults to the caller"
    )


class UserRead(BaseModel):
    """User as returned by the API (no password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    username: str
    role: Role
    updated_by_id: int | None = None
    favorites: list[PointOfInterestRead] = Field(default_factory=list)


class DeletionResult(BaseModel):
    """Outcome of a delete: number of user records removed (0 when nothing matched)."""

    affected: int = Field(..., ge=0)
