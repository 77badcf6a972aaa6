"""Tests for the SQL emitted by poi_accounts.repositories."""

import unittest

from sqlalchemy.dialects import postgresql

from poi_accounts.repositories import UserRepository
from tests.support import add_user, make_session_factory


class TestUserRepositoryLocking(unittest.TestCase):
    def setUp(self) -> None:
        self.db = make_session_factory()()

    def tearDown(self) -> None:
        self.db.close()

    def test_update_lookup_locks_row_on_postgres(self) -> None:
        query = UserRepository(self.db).query_for_update(5)
        sql = str(query.statement.compile(dialect=postgresql.dialect()))
        self.assertIn("FOR UPDATE", sql)
        self.assertIn("WHERE users.id =", sql)

    def test_find_by_id_for_update_returns_user(self) -> None:
        add_user(self.db, 5)
        user = UserRepository(self.db).find_by_id_for_update(5)
        self.assertEqual(user.id, 5)
        self.assertEqual(user.favorites, [])


if __name__ == "__main__":
    unittest.main()
