"""ORM model for points of interest users can mark as favorites."""

from sqlalchemy import Column, Integer, String

from poi_accounts.models.base import Base


class PointOfInterest(Base):
    """Point of interest; only its identity matters to the accounts API."""

    __tablename__ = "points_of_interest"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False, default="")
