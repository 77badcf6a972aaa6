"""Tests for poi_accounts.services.users: create, update, delete and sign-in."""

import unittest
from unittest.mock import MagicMock, patch

from pwdlib.hashers.bcrypt import BcryptHasher
from sqlalchemy.exc import IntegrityError

from poi_accounts.core.exceptions import DuplicateEmailError, NotFoundError
from poi_accounts.core.security import TokenService, hash_password, verify_password
from poi_accounts.models import Role, User
from poi_accounts.repositories import UserRepository
from poi_accounts.services.favorites import add_favorite, list_favorites
from poi_accounts.services.users import (
    create_user,
    delete_all_users,
    delete_user,
    get_user,
    list_users,
    sign_in,
    update_user,
)
from poi_accounts.schemas.users import UserCreate, UserUpdate
from tests.support import add_point_of_interest, add_user, make_session_factory, make_settings


class UsersTestCase(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()
        self.settings = make_settings()

    def tearDown(self) -> None:
        self.db.close()

    def create(self, email: str = "ada@example.com", username: str = "ada", role: Role = Role.REGULAR) -> User:
        data = UserCreate(email=email, username=username, password="s3cret-pass", role=role)
        return create_user(self.db, data, self.settings)


class TestCreateUser(UsersTestCase):
    def test_password_is_stored_hashed(self) -> None:
        user = self.create()
        self.assertNotEqual(user.password_hash, "s3cret-pass")
        self.assertTrue(verify_password("s3cret-pass", user.password_hash))

    def test_requested_role_kept(self) -> None:
        self.assertEqual(self.create(role=Role.ADMIN).role, Role.ADMIN)

    def test_reserved_username_forces_special_role(self) -> None:
        user = self.create(username="user", role=Role.REGULAR)
        self.assertEqual(user.role, Role.SPECIAL)
        self.assertEqual(get_user(self.db, user.id).role, 2)

    def test_reserved_username_overrides_admin_request(self) -> None:
        self.assertEqual(self.create(username="user", role=Role.ADMIN).role, Role.SPECIAL)

    def test_reserved_username_is_configurable(self) -> None:
        self.settings = make_settings(RESERVED_USERNAME="guest")
        self.assertEqual(self.create(username="user").role, Role.REGULAR)
        self.assertEqual(self.create(email="g@example.com", username="guest").role, Role.SPECIAL)

    def test_duplicate_email_raises_and_session_stays_usable(self) -> None:
        self.create()
        with self.assertRaises(DuplicateEmailError):
            self.create(username="other")
        self.create(email="grace@example.com", username="grace")
        self.assertEqual(len(list_users(self.db)), 2)


class TestReadUsers(UsersTestCase):
    def test_get_missing_user_returns_none(self) -> None:
        self.assertIsNone(get_user(self.db, 42))

    def test_list_includes_favorites(self) -> None:
        user = self.create()
        add_point_of_interest(self.db, 7)
        add_favorite(self.db, user.id, 7)
        (listed,) = list_users(self.db)
        self.assertEqual([p.id for p in listed.favorites], [7])


class TestUpdateUser(UsersTestCase):
    """
    Fields are applied independently: each of role, email and username changes only
    when given a non-null value. This replaces an earlier all-or-nothing rule where a
    single non-null field caused all three to be overwritten, nulls included.
    """

    def setUp(self) -> None:
        super().setUp()
        add_user(self.db, 1, email="one@example.com", username="one", role=Role.REGULAR)
        add_user(self.db, 9, email="nine@example.com", username="nine", role=Role.ADMIN)

    def test_all_null_fields_leave_record_but_set_updated_by(self) -> None:
        data = UserUpdate(role=None, email=None, username=None, updated_by_id=9)
        user = update_user(self.db, 1, data)
        self.assertEqual(user.role, Role.REGULAR)
        self.assertEqual(user.email, "one@example.com")
        self.assertEqual(user.username, "one")
        self.assertEqual(user.updated_by_id, 9)
        self.assertEqual(user.updated_by.id, 9)

    def test_single_field_does_not_clear_the_others(self) -> None:
        user = update_user(self.db, 1, UserUpdate(role=Role.ADMIN, updated_by_id=9))
        self.assertEqual(user.role, Role.ADMIN)
        self.assertEqual(user.email, "one@example.com")
        self.assertEqual(user.username, "one")

    def test_all_fields_updated(self) -> None:
        data = UserUpdate(role=Role.SPECIAL, email="uno@example.com", username="uno", updated_by_id=1)
        user = update_user(self.db, 1, data)
        self.assertEqual((user.role, user.email, user.username), (2, "uno@example.com", "uno"))
        self.assertEqual(user.updated_by_id, 1)

    def test_updated_by_overwritten_even_when_omitted(self) -> None:
        update_user(self.db, 1, UserUpdate(updated_by_id=9))
        user = update_user(self.db, 1, UserUpdate(username="renamed"))
        self.assertIsNone(user.updated_by_id)

    def test_missing_user_returns_none(self) -> None:
        self.assertIsNone(update_user(self.db, 404, UserUpdate(username="x")))

    def test_unknown_updated_by_raises(self) -> None:
        with self.assertRaises(NotFoundError):
            update_user(self.db, 1, UserUpdate(username="x", updated_by_id=404))
        self.assertEqual(get_user(self.db, 1).username, "one")

    def test_email_clash_raises(self) -> None:
        with self.assertRaises(DuplicateEmailError):
            update_user(self.db, 1, UserUpdate(email="nine@example.com"))
        self.assertEqual(get_user(self.db, 1).email, "one@example.com")

    def test_other_integrity_errors_propagate(self) -> None:
        # Let a dangling updated_by_id through to the foreign key constraint.
        with patch.object(UserRepository, "find_by_id", return_value=object()):
            with self.assertRaises(IntegrityError) as caught:
                update_user(self.db, 1, UserUpdate(username="x", updated_by_id=404))
        self.assertNotIsInstance(caught.exception, DuplicateEmailError)
        self.assertEqual(get_user(self.db, 1).username, "one")

    def test_own_email_with_other_integrity_error_is_not_a_clash(self) -> None:
        with patch.object(UserRepository, "find_by_id", return_value=object()):
            with self.assertRaises(IntegrityError):
                update_user(self.db, 1, UserUpdate(email="one@example.com", updated_by_id=404))


class TestDeleteUsers(UsersTestCase):
    def test_delete_existing_user(self) -> None:
        add_user(self.db, 3)
        self.assertEqual(delete_user(self.db, 3).affected, 1)
        self.assertIsNone(get_user(self.db, 3))

    def test_delete_missing_user_is_noop_success(self) -> None:
        add_user(self.db, 3)
        self.assertEqual(delete_user(self.db, 404).affected, 0)
        self.assertIsNotNone(get_user(self.db, 3))

    def test_delete_user_with_favorites(self) -> None:
        add_user(self.db, 3)
        add_point_of_interest(self.db, 7)
        add_favorite(self.db, 3, 7)
        self.assertEqual(delete_user(self.db, 3).affected, 1)
        self.assertIsNone(list_favorites(self.db, 3))

    def test_deleting_updater_nulls_reference(self) -> None:
        add_user(self.db, 1)
        add_user(self.db, 2)
        update_user(self.db, 2, UserUpdate(updated_by_id=1))
        self.assertEqual(delete_user(self.db, 1).affected, 1)
        self.assertIsNone(get_user(self.db, 2).updated_by_id)
        self.assertIsNone(get_user(self.db, 2).updated_by)

    def test_delete_all(self) -> None:
        add_user(self.db, 1)
        add_user(self.db, 2)
        add_point_of_interest(self.db, 7)
        add_favorite(self.db, 1, 7)
        update_user(self.db, 2, UserUpdate(updated_by_id=1))
        self.assertEqual(delete_all_users(self.db).affected, 2)
        self.assertEqual(list_users(self.db), [])

    def test_delete_all_on_empty_store(self) -> None:
        self.assertEqual(delete_all_users(self.db).affected, 0)


class TestSignIn(UsersTestCase):
    def setUp(self) -> None:
        super().setUp()
        self.tokens = TokenService(self.settings)
        add_user(
            self.db,
            5,
            email="ada@example.com",
            role=Role.ADMIN,
            password_hash=hash_password("s3cret-pass"),
        )

    def test_valid_credentials_return_token(self) -> None:
        token = sign_in(self.db, "ada@example.com", "s3cret-pass", self.tokens)
        payload = self.tokens.verify(token)
        self.assertEqual(payload.user_id, 5)
        self.assertEqual(payload.role, Role.ADMIN)

    def test_wrong_password_returns_none(self) -> None:
        self.assertIsNone(sign_in(self.db, "ada@example.com", "wrong-pass", self.tokens))

    def test_unknown_email_returns_none(self) -> None:
        self.assertIsNone(sign_in(self.db, "nobody@example.com", "s3cret-pass", self.tokens))

    def test_internal_error_returns_none_and_is_logged(self) -> None:
        session = MagicMock()
        session.query.side_effect = RuntimeError("database went away")
        with self.assertLogs("poi_accounts.services.users", level="ERROR"):
            self.assertIsNone(sign_in(session, "ada@example.com", "s3cret-pass", self.tokens))
        session.rollback.assert_called_once()

    def test_bcrypt_hash_upgraded_on_sign_in(self) -> None:
        add_user(
            self.db,
            6,
            email="legacy@example.com",
            password_hash=BcryptHasher().hash("old-pass-123"),
        )
        self.assertIsNotNone(sign_in(self.db, "legacy@example.com", "old-pass-123", self.tokens))
        stored = get_user(self.db, 6).password_hash
        self.assertTrue(stored.startswith("$argon2"))
        self.assertIsNotNone(sign_in(self.db, "legacy@example.com", "old-pass-123", self.tokens))


if __name__ == "__main__":
    unittest.main()
