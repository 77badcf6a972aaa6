"""User management endpoints (admin listing/deletion, self lookup, signup, update)."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from poi_accounts.api.v1.auth import anyone, require_admin, require_identity
from poi_accounts.core.authorization import AuthContext
from poi_accounts.core.config import get_settings
from poi_accounts.core.database import get_db
from poi_accounts.core.exceptions import DuplicateEmailError, NotFoundError
from poi_accounts.schemas.users import DeletionResult, UserCreate, UserRead, UserUpdate
from poi_accounts.services import users as user_service

router = APIRouter()


@router.get("", response_model=list[UserRead])
def list_users(
    _admin: Annotated[AuthContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> list[UserRead]:
    """List all users with their favorites (admin only)."""
    return [UserRead.model_validate(u) for u in user_service.list_users(db)]


@router.post("", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def create_user(
    body: UserCreate,
    _context: Annotated[AuthContext, Depends(anyone)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Sign up. The reserved username is always given the special role."""
    try:
        user = user_service.create_user(db, body, get_settings())
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    return UserRead.model_validate(user)


@router.get("/me", response_model=UserRead)
def get_me(
    context: Annotated[AuthContext, Depends(require_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Return the authenticated caller."""
    user = user_service.get_user(db, context.user.id)
    if user is None:
        # Deleted between authentication and this lookup.
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return UserRead.model_validate(user)


@router.get("/{user_id}", response_model=UserRead)
def get_user(
    user_id: int,
    _admin: Annotated[AuthContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """Return one user (admin only)."""
    user = user_service.get_user(db, user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.patch("/{user_id}", response_model=UserRead)
def update_user(
    user_id: int,
    body: UserUpdate,
    context: Annotated[AuthContext, Depends(require_identity)],
    db: Annotated[Session, Depends(get_db)],
) -> UserRead:
    """
    Update role, email and/or username. Each field changes only when given a non-null
    value. updated_by_id defaults to the caller when omitted from the request.

    Role changes are not restricted by the caller's role: any authenticated user may
    change the role of any user, their own included.
    """
    if "updated_by_id" not in body.model_fields_set:
        body = body.model_copy(update={"updated_by_id": context.user.id})
    try:
        user = user_service.update_user(db, user_id, body)
    except NotFoundError as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message) from e
    except DuplicateEmailError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message) from e
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return UserRead.model_validate(user)


@router.delete("/{user_id}", response_model=DeletionResult)
def delete_user(
    user_id: int,
    _admin: Annotated[AuthContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeletionResult:
    """Delete one user (admin only). Deleting a missing id succeeds with affected=0."""
    return user_service.delete_user(db, user_id)


@router.delete("", response_model=DeletionResult)
def delete_all_users(
    _admin: Annotated[AuthContext, Depends(require_admin)],
    db: Annotated[Session, Depends(get_db)],
) -> DeletionResult:
    """Delete every user (admin only). Irreversible, no confirmation step."""
    return user_service.delete_all_users(db)
