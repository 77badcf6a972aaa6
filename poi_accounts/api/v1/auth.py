"""Sign-in endpoint and the authorization dependencies every route is wrapped with."""

from collections.abc import Callable
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from poi_accounts.core.authorization import (
    AuthContext,
    Guard,
    allow_anonymous,
    authorize,
    requires_identity,
    requires_role,
    resolve_context,
)
from poi_accounts.core.config import get_settings
from poi_accounts.core.database import get_db
from poi_accounts.core.exceptions import AuthenticationFailure, AuthorizationFailure
from poi_accounts.core.security import TokenService
from poi_accounts.models import Role
from poi_accounts.repositories import UserRepository
from poi_accounts.schemas.auth import SignInRequest, TokenResponse
from poi_accounts.services.users import sign_in

router = APIRouter()
security = HTTPBearer(auto_error=False)


@lru_cache
def get_token_service() -> TokenService:
    """Process-wide token service built from settings."""
    return TokenService(get_settings())


def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
) -> AuthContext:
    """Dependency: resolve the Bearer token (if any) into an AuthContext. Never raises."""
    token = credentials.credentials if credentials is not None else None
    return resolve_context(token, tokens, UserRepository(db))


def guarded(guard: Guard) -> Callable[[AuthContext], AuthContext]:
    """
    Build a dependency that applies guard to the request's AuthContext.
    Raises 401 when there is no live identity and 403 when the role is not allowed.
    """

    def dependency(
        context: Annotated[AuthContext, Depends(get_auth_context)],
    ) -> AuthContext:
        try:
            return authorize(context, guard)
        except AuthenticationFailure as e:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail=e.message,
                headers={"WWW-Authenticate": "Bearer"},
            ) from e
        except AuthorizationFailure as e:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=e.message,
            ) from e

    return dependency


anyone = guarded(allow_anonymous())
require_identity = guarded(requires_identity())
require_admin = guarded(requires_role({Role.ADMIN}))


@router.post("/signin", response_model=TokenResponse)
def post_signin(
    body: SignInRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    _context: Annotated[AuthContext, Depends(anyone)],
) -> TokenResponse:
    """
    Authenticate with email and password.
    Returns a JWT on success and a null access_token otherwise. Send the token as:
    Authorization: Bearer <access_token>
    """
    token = sign_in(db, body.email, body.password, tokens)
    return TokenResponse(access_token=token)
