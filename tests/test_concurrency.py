import tempfile
import threading
import unittest
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from lottery.errors import NoPrizesAvailable
from lottery.services.draw_service import DrawEngine
from tests._support import make_store, record_count, remaining, seed_prizes


class ConcurrentDrawTests(unittest.TestCase):
    """Many threads drawing at once against a file-backed database."""

    workers = 20

    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        url = f"sqlite:///{Path(self._tmpdir.name) / 'lottery.db'}"
        self.store = make_store(url, pool_size=self.workers, max_overflow=0, pool_timeout=30)

    def tearDown(self) -> None:
        self.store.close()
        self._tmpdir.cleanup()

    def _run_draws(self, engine: DrawEngine, n: int) -> tuple[list, list]:
        start = threading.Barrier(self.workers, timeout=30)
        successes: list = []
        failures: list = []
        lock = threading.Lock()

        def attempt(i: int) -> None:
            if i < self.workers:
                start.wait()
            try:
                outcome = engine.draw(f"player-{i}")
            except NoPrizesAvailable as exc:
                with lock:
                    failures.append(exc)
            else:
                with lock:
                    successes.append(outcome)

        with ThreadPoolExecutor(max_workers=self.workers) as pool:
            list(pool.map(attempt, range(n)))
        return successes, failures

    def test_hundred_draws_against_ten_in_stock(self) -> None:
        (prize_id,) = seed_prizes(self.store, {"name": "Headphones", "total_quantity": 10, "weight": 1})

        successes, failures = self._run_draws(DrawEngine(self.store), 100)

        self.assertEqual(len(successes), 10)
        self.assertEqual(len(failures), 90)
        self.assertEqual(remaining(self.store), {prize_id: 0})
        self.assertEqual(record_count(self.store), 10)
        # Each success saw a distinct post-decrement stock level.
        self.assertEqual(
            sorted(o.prize.remaining_quantity for o in successes),
            list(range(10)),
        )

    def test_issued_stock_matches_successful_draws(self) -> None:
        totals = {"A": 3, "B": 7, "C": 5}
        ids = seed_prizes(
            self.store,
            {"name": "A", "total_quantity": totals["A"], "weight": 5},
            {"name": "B", "total_quantity": totals["B"], "weight": 20},
            {"name": "C", "total_quantity": totals["C"], "weight": 75},
        )

        successes, failures = self._run_draws(DrawEngine(self.store), 40)

        left = remaining(self.store)
        issued = sum(totals[name] - left[pid] for name, pid in zip("ABC", ids))
        self.assertEqual(issued, len(successes))
        self.assertEqual(len(successes), 15)
        self.assertEqual(len(failures), 25)
        self.assertTrue(all(v >= 0 for v in left.values()))
        self.assertEqual(record_count(self.store), len(successes))


if __name__ == "__main__":
    unittest.main()
