"""Named queries over users and points of interest.

Every relation a caller needs is loaded by the query that names it, so service
code never depends on implicit lazy loading.
"""

from sqlalchemy import delete
from sqlalchemy.orm import Query, Session, selectinload

from poi_accounts.models import PointOfInterest, User, user_favorites


class UserRepository:
    """User data access. Services own commit/rollback; the repository only flushes."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_all(self) -> list[User]:
        return (
            self.db.query(User)
            .options(selectinload(User.favorites), selectinload(User.updated_by))
            .order_by(User.id)
            .all()
        )

    def find_by_id(self, user_id: int) -> User | None:
        return self.db.query(User).filter(User.id == user_id).first()

    def find_by_id_with_favorites(self, user_id: int) -> User | None:
        return (
            self.db.query(User)
            .options(selectinload(User.favorites), selectinload(User.updated_by))
            .filter(User.id == user_id)
            .populate_existing()
            .first()
        )

    def query_for_update(self, user_id: int) -> Query:
        """User lookup that takes a row lock (SELECT ... FOR UPDATE) and reloads favorites."""
        return (
            self.db.query(User)
            .options(selectinload(User.favorites))
            .filter(User.id == user_id)
            .with_for_update()
            .populate_existing()
        )

    def find_by_id_for_update(self, user_id: int) -> User | None:
        """Load a user with its favorites and lock the row until the transaction ends."""
        return self.query_for_update(user_id).first()

    def find_by_email_without_relations(self, email: str) -> User | None:
        return self.db.query(User).filter(User.email == email).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.flush()
        return user

    def delete(self, user: User) -> None:
        self.db.delete(user)
        self.db.flush()

    def delete_all(self) -> int:
        """Delete every user and their favorites rows; return the number of users removed."""
        self.db.execute(delete(user_favorites))
        self.db.query(User).update({User.updated_by_id: None}, synchronize_session=False)
        return self.db.query(User).delete(synchronize_session=False)


class PointOfInterestRepository:
    """Point-of-interest lookups (identity only)."""

    def __init__(self, db: Session) -> None:
        self.db = db

    def find_by_id(self, point_of_interest_id: int) -> PointOfInterest | None:
        return (
            self.db.query(PointOfInterest)
            .filter(PointOfInterest.id == point_of_interest_id)
            .first()
        )

    def add(self, point_of_interest: PointOfInterest) -> PointOfInterest:
        self.db.add(point_of_interest)
        self.db.flush()
        return point_of_interest
