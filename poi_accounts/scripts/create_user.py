"""
Create a user (e.g. the first admin). Run from project root:
  python -m poi_accounts.scripts.create_user EMAIL USERNAME PASSWORD [role]
Example:
  python -m poi_accounts.scripts.create_user admin@example.com admin your-secure-password 1
"""
import argparse
import logging
import sys

from pydantic import ValidationError

from poi_accounts.core.config import get_settings
from poi_accounts.core.database import SessionLocal
from poi_accounts.core.exceptions import DuplicateEmailError
from poi_accounts.core.logging import configure_logging
from poi_accounts.models import Role
from poi_accounts.schemas.users import UserCreate
from poi_accounts.services.users import create_user

logger = logging.getLogger(__name__)


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Create a user without going through the API.")
    parser.add_argument("email", help="Unique email used to sign in")
    parser.add_argument("username", help="Username (1-255 chars)")
    parser.add_argument("password", help="Password (8-128 chars)")
    parser.add_argument(
        "role",
        nargs="?",
        type=int,
        default=int(Role.REGULAR),
        choices=[int(r) for r in Role],
        help="0 regular, 1 admin, 2 special",
    )
    args = parser.parse_args(argv)

    settings = get_settings()
    configure_logging(settings.LOG_LEVEL)
    try:
        data = UserCreate(
            email=args.email.strip(),
            username=args.username.strip(),
            password=args.password,
            role=Role(args.role),
        )
    except ValidationError as e:
        print(f"Invalid input: {e.errors()[0]['msg']}", file=sys.stderr)
        return 1

    db = SessionLocal()
    try:
        user = create_user(db, data, settings)
        print(f"Created user {user.id} '{user.username}' with role {user.role}.")
        return 0
    except DuplicateEmailError:
        print(f"Email '{data.email}' is already registered.", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("User creation failed: %s", e)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
