"""Password hashing and JWT issuing/verification for authentication."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from pwdlib import PasswordHash
from pwdlib.exceptions import PwdlibError
from pwdlib.hashers.argon2 import Argon2Hasher
from pwdlib.hashers.bcrypt import BcryptHasher

from poi_accounts.core.config import Settings

logger = logging.getLogger(__name__)

# Argon2 (library default cost) hashes new passwords. Bcrypt hashes are still
# verified so they can be replaced with Argon2 on the next successful sign-in.
password_hash = PasswordHash((Argon2Hasher(), BcryptHasher()))

# Min/max lengths for username and password validation.
USERNAME_MIN_LEN = 1
USERNAME_MAX_LEN = 255
PASSWORD_MIN_LEN = 8
PASSWORD_MAX_LEN = 128


def hash_password(plain_password: str) -> str:
    """Hash a plain-text password for storage. Do not store plain passwords."""
    return password_hash.hash(plain_password)


def verify_password(plain_password: str, hashed: str) -> bool:
    """Verify a plain password against a stored hash. Malformed hashes never match."""
    try:
        return password_hash.verify(plain_password, hashed)
    except (PwdlibError, ValueError, TypeError):
        return False


def verify_and_update_password(plain_password: str, hashed: str) -> tuple[bool, str | None]:
    """
    Verify a password and return a replacement hash when the stored one is outdated.

    Returns (matched, new_hash); new_hash is None unless the match succeeded against a
    deprecated algorithm or cost.
    """
    try:
        return password_hash.verify_and_update(plain_password, hashed)
    except (PwdlibError, ValueError, TypeError):
        return (False, None)


@dataclass(frozen=True)
class TokenPayload:
    """Identity claims carried by a verified access token (never persisted)."""

    user_id: int
    role: int
    issued_at: datetime
    expires_at: datetime


class TokenService:
    """Issues and verifies signed, time-limited access tokens."""

    def __init__(self, settings: Settings) -> None:
        self._secret = settings.JWT_SECRET.get_secret_value()
        self._algorithm = settings.JWT_ALGORITHM
        self._lifetime = timedelta(minutes=settings.JWT_EXPIRE_MINUTES)
        if settings.uses_insecure_secret:
            logger.warning(
                "JWT_SECRET is the built-in default; tokens are forgeable. Set JWT_SECRET."
            )

    def issue(self, user_id: int, role: int, now: datetime | None = None) -> str:
        """Create a JWT with sub (user id), role, iat and exp."""
        issued_at = now or datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(user_id),
            "role": int(role),
            "iat": issued_at,
            "exp": issued_at + self._lifetime,
        }
        return jwt.encode(payload, self._secret, algorithm=self._algorithm)

    def verify(self, token: str) -> TokenPayload | None:
        """
        Validate signature and expiry; return the claims.
        Returns None on any failure: bad signature, malformed token, expiry or bad claims.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[self._algorithm],
                options={"require": ["sub", "iat", "exp"]},
            )
        except jwt.PyJWTError:
            return None
        try:
            return TokenPayload(
                user_id=int(claims["sub"]),
                role=int(claims["role"]),
                issued_at=datetime.fromtimestamp(claims["iat"], UTC),
                expires_at=datetime.fromtimestamp(claims["exp"], UTC),
            )
        except (KeyError, TypeError, ValueError, OverflowError):
            return None
