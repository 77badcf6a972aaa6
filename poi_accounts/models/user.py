"""ORM model for application users (auth, RBAC and favorites)."""

from enum import IntEnum

from sqlalchemy import CheckConstraint, Column, ForeignKey, Integer, String, Table
from sqlalchemy.orm import relationship

from poi_accounts.models.base import Base


class Role(IntEnum):
    """Closed set of role tags stored on users and embedded in tokens."""

    REGULAR = 0
    ADMIN = 1
    SPECIAL = 2


# Composite primary key: a user holds a given point of interest at most once.
user_favorites = Table(
    "user_favorites",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "point_of_interest_id",
        Integer,
        ForeignKey("points_of_interest.id", ondelete="CASCADE"),
        primary_key=True,
    ),
)


class User(Base):
    """
    User account for JWT authentication and role-based access control.

    role: 0 (regular), 1 (admin) or 2 (special). updated_by_id points at the user
    who last modified this record; it is a lookup only and owns nothing.
    """

    __tablename__ = "users"
    __table_args__ = (
        CheckConstraint(
            f"role IN ({', '.join(str(int(r)) for r in Role)})",
            name="role",
        ),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(255), nullable=False, unique=True, index=True)
    username = Column(String(255), nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Integer, nullable=False, default=int(Role.REGULAR))
    updated_by_id = Column(
        Integer,
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )

    updated_by = relationship("User", remote_side=[id])
    favorites = relationship(
        "PointOfInterest",
        secondary=user_favorites,
        order_by="PointOfInterest.id",
    )
