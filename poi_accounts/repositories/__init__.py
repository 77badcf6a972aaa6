"""Persistence access for users and points of interest."""

from poi_accounts.repositories.users import PointOfInterestRepository, UserRepository

__all__ = ["PointOfInterestRepository", "UserRepository"]
