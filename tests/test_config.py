"""Unit tests for settings validation, including the prod secret check."""

import unittest

from pydantic import SecretStr, ValidationError

from poi_accounts.core.config import INSECURE_DEFAULT_JWT_SECRET
from tests.support import make_settings


class TestJwtSecretValidation(unittest.TestCase):
    """The built-in JWT secret is tolerated in dev and refused in prod."""

    def test_default_secret_accepted_in_dev(self) -> None:
        settings = make_settings(JWT_SECRET=SecretStr(INSECURE_DEFAULT_JWT_SECRET))
        self.assertTrue(settings.uses_insecure_secret)

    def test_default_secret_rejected_in_prod(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(APP_ENV="prod", JWT_SECRET=SecretStr(INSECURE_DEFAULT_JWT_SECRET))

    def test_custom_secret_accepted_in_prod(self) -> None:
        settings = make_settings(APP_ENV="prod", JWT_SECRET=SecretStr("a-real-secret"))
        self.assertFalse(settings.uses_insecure_secret)

    def test_blank_secret_rejected(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_SECRET=SecretStr("   "))


class TestOtherSettings(unittest.TestCase):
    def test_token_lifetime_defaults_to_two_hours(self) -> None:
        self.assertEqual(make_settings().JWT_EXPIRE_MINUTES, 120)

    def test_reserved_username_default(self) -> None:
        self.assertEqual(make_settings().RESERVED_USERNAME, "user")

    def test_database_url_scheme_checked(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(DATABASE_URL="mysql://root@localhost/db")

    def test_expire_minutes_bounds(self) -> None:
        with self.assertRaises(ValidationError):
            make_settings(JWT_EXPIRE_MINUTES=0)


if __name__ == "__main__":
    unittest.main()
