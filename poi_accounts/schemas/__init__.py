"""Pydantic request/response schemas."""

from poi_accounts.schemas.auth import SignInRequest, TokenResponse
from poi_accounts.schemas.health import HealthResponse
from poi_accounts.schemas.points_of_interest import PointOfInterestRead
from poi_accounts.schemas.users import DeletionResult, UserCreate, UserRead, UserUpdate

__all__ = [
    "DeletionResult",
    "HealthResponse",
    "PointOfInterestRead",
    "SignInRequest",
    "TokenResponse",
    "UserCreate",
    "UserRead",
    "UserUpdate",
]
