"""Favorites endpoints: list, add and remove points of interest for a user."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from poi_accounts.api.v1.auth import require_identity
from poi_accounts.core.authorization import AuthContext
from poi_accounts.core.database import get_db
from poi_accounts.core.exceptions import NotFoundError
from poi_accounts.schemas.points_of_interest import PointOfInterestRead
from poi_accounts.schemas.users import UserRead
from poi_accounts.services import favorites as favorites_service

router = APIRouter()


@router.get("/{user_id}/favorites", response_model=list[PointOfInterestRead])
def list_favorites(
    user_id: int,
    _context: Annotated[AuthContext, Depends(require_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> list[PointOfInterestRead]:
    favorites = favorites_service.list_favorites(db, user_id)
    if favorites is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return [PointOfInterestRead.model_validate(p) for p in favorites]


@router.put("/{user_id}/favorites/{point_of_interest_id}", response_model=UserRead)
def add_favorite(
    user_id: int,
    point_of_interest_id: int,
    _context: Annotated[AuthContext, Depends(require_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Add a favorite. Adding one the user already has is a no-op."""
    try:
        user = favorites_service.add_favorite(db, user_id, point_of_interest_id)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    return UserRead.model_validate(user)


@router.delete("/{user_id}/favorites/{point_of_interest_id}", response_model=UserRead)
def remove_favorite(
    user_id: int,
    point_of_interest_id: int,
    _context: Annotated[AuthContext, Depends(require_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Remove a favorite. Removing one the user does not have is a no-op."""
    user = favorites_service.remove_favorite(db, user_id, point_of_interest_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)
