import unittest

from sqlalchemy.dialects import mysql, postgresql

from lottery.repositories.prize_repository import PrizeRepository
from tests._support import make_store, seed_prizes


class EligibleStatementTests(unittest.TestCase):
    """The locking read must lock rows and keep a fixed order on real servers."""

    def _sql(self, dialect) -> str:
        return str(PrizeRepository.eligible_statement().compile(dialect=dialect))

    def test_mysql_locks_rows_in_id_order(self):
        sql = self._sql(mysql.dialect())

        self.assertIn("WHERE prizes.remaining_quantity > ", sql)
        self.assertIn("ORDER BY prizes.id ASC", sql)
        self.assertTrue(sql.rstrip().endswith("FOR UPDATE"), sql)

    def test_postgresql_locks_rows_in_id_order(self):
        sql = self._sql(postgresql.dialect())

        self.assertIn("WHERE prizes.remaining_quantity > ", sql)
        self.assertIn("ORDER BY prizes.id ASC", sql)
        self.assertTrue(sql.rstrip().endswith("FOR UPDATE"), sql)


class LockEligibleTests(unittest.TestCase):
    def test_returns_only_stocked_prizes_by_id(self):
        store = make_store()
        self.addCleanup(store.close)
        ids = seed_prizes(
            store,
            {"name": "C", "total_quantity": 1, "weight": 1},
            {"name": "Empty", "total_quantity": 1, "remaining_quantity": 0, "weight": 50},
            {"name": "A", "total_quantity": 3, "weight": 99},
        )

        with store.unit_of_work() as session:
            prizes = PrizeRepository().lock_eligible(session)

        self.assertEqual([p.id for p in prizes], [ids[0], ids[2]])


if __name__ == "__main__":
    unittest.main()
