"""
Request authorization: resolve the caller's identity, then apply an explicit guard.

Each request goes through two steps:
  1. resolve_context() turns the bearer token (or its absence) into an AuthContext.
     No token, an invalid/expired token, or a token for a user that no longer exists
     all produce a context without a user.
  2. authorize() applies the operation's guard. Guards are plain callables built by
     allow_anonymous(), requires_identity() and requires_role(); route wiring passes
     one per operation instead of hiding requirements in metadata.

Role checks use the role currently stored on the user, not the role in the token,
so demotions take effect immediately.
"""

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum

from poi_accounts.core.exceptions import AuthenticationFailure, AuthorizationFailure
from poi_accounts.core.security import TokenPayload, TokenService
from poi_accounts.models import User
from poi_accounts.repositories import UserRepository

logger = logging.getLogger(__name__)


class Decision(str, Enum):
    """Terminal state of an authorization check."""

    ALLOWED = "allowed"
    DENIED = "denied"


@dataclass
class AuthContext:
    """Identity resolved for one request; user is None when there is no live identity."""

    token: str | None = None
    payload: TokenPayload | None = None
    user: User | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None


Guard = Callable[[AuthContext], Decision]


def resolve_context(
    token: str | None,
    tokens: TokenService,
    users: UserRepository,
) -> AuthContext:
    """Resolve a bearer token into an AuthContext. Never raises for bad tokens."""
    if not token:
        return AuthContext()
    payload = tokens.verify(token)
    if payload is None:
        logger.debug("Rejected bearer token: invalid or expired")
        return AuthContext(token=token)
    user = users.find_by_id(payload.user_id)
    if user is None:
        logger.debug("Rejected bearer token: user %s no longer exists", payload.user_id)
        return AuthContext(token=token, payload=payload)
    return AuthContext(token=token, payload=payload, user=user)


def allow_anonymous() -> Guard:
    """Guard for operations with no identity requirement."""

    def guard(context: AuthContext) -> Decision:
        return Decision.ALLOWED

    return guard


def requires_identity() -> Guard:
    """Guard for operations open to any authenticated user."""

    def guard(context: AuthContext) -> Decision:
        return Decision.ALLOWED if context.is_authenticated else Decision.DENIED

    return guard


def requires_role(roles: Iterable[int]) -> Guard:
    """Guard for operations restricted to users whose current role is in roles."""
    allowed = frozenset(int(r) for r in roles)

    def guard(context: AuthContext) -> Decision:
        if context.user is None:
            return Decision.DENIED
        return Decision.ALLOWED if context.user.role in allowed else Decision.DENIED

    return guard


def authorize(context: AuthContext, guard: Guard) -> AuthContext:
    """
    Apply guard to context.

    Returns the context (with the resolved user attached) when allowed. Raises
    AuthenticationFailure when denied without an identity, AuthorizationFailure when
    denied with one.
    """
    if guard(context) is Decision.ALLOWED:
        return context
    if context.user is None:
        raise AuthenticationFailure()
    logger.info(
        "Authorization denied",
        extra={"user_id": context.user.id, "role": context.user.role},
    )
    raise AuthorizationFailure()
