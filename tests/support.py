"""Shared helpers: an isolated in-memory SQLite store and quick fixtures for users/POIs."""

from pydantic import SecretStr
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from poi_accounts.core.config import Settings
from poi_accounts.core.database import create_db_engine
from poi_accounts.models import Base, PointOfInterest, Role, User
from poi_accounts.repositories import PointOfInterestRepository

TEST_SECRET = "test-secret-not-for-production"


def make_session_factory() -> sessionmaker:
    """
    Return a sessionmaker bound to a fresh in-memory database with the schema created.

    StaticPool keeps a single connection so every session (and the TestClient worker
    threads) sees the same in-memory database.
    """
    engine = create_db_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def make_settings(**overrides: object) -> Settings:
    values: dict[str, object] = {
        "APP_ENV": "dev",
        "DATABASE_URL": "sqlite://",
        "JWT_SECRET": SecretStr(TEST_SECRET),
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def add_user(
    db: Session,
    user_id: int,
    email: str | None = None,
    username: str = "someone",
    role: Role = Role.REGULAR,
    password_hash: str = "unused",
) -> User:
    """Insert a user row directly (no hashing) and commit."""
    user = User(
        id=user_id,
        email=email or f"user{user_id}@example.com",
        username=username,
        password_hash=password_hash,
        role=int(role),
    )
    db.add(user)
    db.commit()
    return user


def add_point_of_interest(db: Session, poi_id: int, name: str = "") -> PointOfInterest:
    poi = PointOfInterestRepository(db).add(
        PointOfInterest(id=poi_id, name=name or f"Place {poi_id}")
    )
    db.commit()
    return poi
