"""User lifecycle: create, read, update, delete and password sign-in."""

import logging
from functools import lru_cache
from typing import TYPE_CHECKING

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from poi_accounts.core.exceptions import DuplicateEmailError, NotFoundError
from poi_accounts.core.security import (
    TokenService,
    hash_password,
    verify_and_update_password,
    verify_password,
)
from poi_accounts.models import Role, User
from poi_accounts.repositories import UserRepository
from poi_accounts.schemas.users import DeletionResult, UserCreate, UserUpdate

if TYPE_CHECKING:
    from poi_accounts.core.config import Settings

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def _decoy_hash() -> str:
    # Verified against when the email is unknown so both failure paths cost one hash check.
    return hash_password("decoy-password-for-unknown-accounts")


def create_user(session: Session, data: UserCreate, settings: "Settings") -> User:
    """
    Hash the password and persist a new user.

    The reserved username always gets Role.SPECIAL, whatever role was requested.
    Raises DuplicateEmailError when the email is taken.
    """
    role = Role.SPECIAL if data.username == settings.RESERVED_USERNAME else data.role
    users = UserRepository(session)
    user = User(
        email=data.email,
        username=data.username,
        password_hash=hash_password(data.password),
        role=int(role),
    )
    try:
        users.add(user)
        session.commit()
    except IntegrityError as e:
        session.rollback()
        raise DuplicateEmailError(data.email) from e
    logger.info("User created", extra={"user_id": user.id, "role": user.role})
    return users.find_by_id_with_favorites(user.id)


def list_users(session: Session) -> list[User]:
    return UserRepository(session).find_all()


def get_user(session: Session, user_id: int) -> User | None:
    return UserRepository(session).find_by_id_with_favorites(user_id)


def _email_taken_by_other(users: UserRepository, email: str, user_id: int) -> bool:
    owner = users.find_by_email_without_relations(email)
    return owner is not None and owner.id != user_id


def update_user(session: Session, user_id: int, data: UserUpdate) -> User | None:
    """
    Apply a partial update; return None when the user does not exist.

    role, email and username are each written only when given a non-null value.
    updated_by_id is always written, null included. Raises NotFoundError when
    updated_by_id names a missing user, DuplicateEmailError when the new email
    belongs to another user. Any other integrity error propagates unchanged.
    """
    users = UserRepository(session)
    try:
        user = users.find_by_id_for_update(user_id)
        if user is None:
            session.rollback()
            return None
        if data.updated_by_id is not None and users.find_by_id(data.updated_by_id) is None:
            raise NotFoundError("User", data.updated_by_id)

        if data.role is not None:
            user.role = int(data.role)
        if data.email is not None:
            user.email = data.email
        if data.username is not None:
            user.username = data.username
        user.updated_by_id = data.updated_by_id
        session.commit()
    except IntegrityError as e:
        session.rollback()
        if data.email is not None and _email_taken_by_other(users, data.email, user_id):
            raise DuplicateEmailError(data.email) from e
        raise
    except Exception:
        session.rollback()
        raise
    logger.info(
        "User updated",
        extra={"user_id": user_id, "updated_by_id": data.updated_by_id},
    )
    return users.find_by_id_with_favorites(user_id)


def delete_user(session: Session, user_id: int) -> DeletionResult:
    """Delete one user. A missing id is not an error: the result reports affected=0."""
    users = UserRepository(session)
    user = users.find_by_id(user_id)
    if user is None:
        return DeletionResult(affected=0)
    try:
        users.delete(user)
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.info("User deleted", extra={"user_id": user_id})
    return DeletionResult(affected=1)


def delete_all_users(session: Session) -> DeletionResult:
    """Delete every user record and their favorites. Irreversible."""
    try:
        deleted = UserRepository(session).delete_all()
        session.commit()
    except Exception:
        session.rollback()
        raise
    logger.warning("All users deleted", extra={"affected": deleted})
    return DeletionResult(affected=deleted)


def sign_in(
    session: Session,
    email: str,
    password: str,
    tokens: TokenService,
) -> str | None:
    """
    Check credentials and return an access token, or None.

    Unknown email, wrong password and internal errors all return None so callers
    cannot tell them apart; internal errors are logged. A password stored under a
    deprecated hash is re-hashed on success.
    """
    try:
        users = UserRepository(session)
        user = users.find_by_email_without_relations(email)
        if user is None:
            verify_password(password, _decoy_hash())
            return None
        matched, new_hash = verify_and_update_password(password, user.password_hash)
        if not matched:
            return None
        user_id, role = user.id, user.role
        if new_hash is not None:
            user.password_hash = new_hash
            session.commit()
            logger.info("Password hash upgraded", extra={"user_id": user_id})
        return tokens.issue(user_id, role)
    except Exception:
        session.rollback()
        logger.exception("Sign-in failed with an internal error")
        return None
