"""SQLAlchemy ORM models."""

from poi_accounts.models.base import Base
from poi_accounts.models.point_of_interest import PointOfInterest
from poi_accounts.models.user import Role, User, user_favorites

__all__ = ["Base", "PointOfInterest", "Role", "User", "user_favorites"]
