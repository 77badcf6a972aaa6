"""Favorites: the many-to-many relation from a user to points of interest.

Membership is a set. Adding a point of interest the user already holds leaves
the collection unchanged, and removing one the user does not hold is a no-op.
Mutations lock the user row for the whole load-modify-commit sequence so
concurrent calls on the same user cannot overwrite each other.
"""

import logging

from sqlalchemy.orm import Session

from poi_accounts.core.exceptions import NotFoundError
from poi_accounts.models import PointOfInterest, User
from poi_accounts.repositories import PointOfInterestRepository, UserRepository

logger = logging.getLogger(__name__)


def list_favorites(session: Session, user_id: int) -> list[PointOfInterest] | None:
    """Return the user's favorites ordered by id, or None if the user does not exist."""
    user = UserRepository(session).find_by_id_with_favorites(user_id)
    if user is None:
        return None
    return list(user.favorites)


def add_favorite(session: Session, user_id: int, point_of_interest_id: int) -> User:
    """Add a point of interest to the user's favorites. Raises NotFoundError if either is missing."""
    users = UserRepository(session)
    try:
        user = users.find_by_id_for_update(user_id)
        point_of_interest = PointOfInterestRepository(session).find_by_id(point_of_interest_id)
        if user is None:
            raise NotFoundError("User", user_id)
        if point_of_interest is None:
            raise NotFoundError("PointOfInterest", point_of_interest_id)

        if any(f.id == point_of_interest.id for f in user.favorites):
            logger.debug(
                "Favorite already present",
                extra={"user_id": user_id, "point_of_interest_id": point_of_interest_id},
            )
        else:
            user.favorites.append(point_of_interest)
        session.commit()
    except Exception:
        session.rollback()
        raise
    return users.find_by_id_with_favorites(user_id)


def remove_favorite(session: Session, user_id: int, point_of_interest_id: int) -> User | None:
    """Drop a point of interest from the user's favorites; None if the user does not exist."""
    users = UserRepository(session)
    try:
        user = users.find_by_id_for_update(user_id)
        if user is None:
            session.rollback()
            return None
        user.favorites = [f for f in user.favorites if f.id != point_of_interest_id]
        session.commit()
    except Exception:
        session.rollback()
        raise
    return users.find_by_id_with_favorites(user_id)
