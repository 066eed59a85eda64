import contextlib
import importlib.util
import io
import tempfile
import unittest
from pathlib import Path

from lottery.errors import ValidationError
from tests._support import make_store, record_count, remaining

_SCRIPT = Path(__file__).resolve().parents[1] / "scripts" / "create_tables.py"
_spec = importlib.util.spec_from_file_location("create_tables", _SCRIPT)
create_tables = importlib.util.module_from_spec(_spec)
_spec.loader.exec_module(create_tables)


class SeedCsvTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmpdir = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmpdir.cleanup)
        self.dir = Path(self._tmpdir.name)

    def _csv(self, content: str) -> Path:
        path = self.dir / "prizes.csv"
        path.write_text(content, encoding="utf-8")
        return path

    def test_reads_rows(self):
        path = self._csv("name,total_quantity,weight,color\nGrand,1,1.5,#ff0000\nSmall,10,98.5,\n")

        rows = create_tables.read_prize_rows(path)

        self.assertEqual(
            rows,
            [
                {"name": "Grand", "total_quantity": 1, "weight": 1.5, "color": "#ff0000"},
                {"name": "Small", "total_quantity": 10, "weight": 98.5, "color": None},
            ],
        )

    def test_missing_column_rejected(self):
        path = self._csv("name,total_quantity\nGrand,1\n")
        with self.assertRaises(ValueError):
            create_tables.read_prize_rows(path)

    def test_bad_number_reports_line(self):
        path = self._csv("name,total_quantity,weight,color\nGrand,lots,1,\n")
        with self.assertRaisesRegex(ValueError, "line 2"):
            create_tables.read_prize_rows(path)

    def test_seed_sets_remaining_to_total_and_resets(self):
        store = make_store()
        self.addCleanup(store.close)
        rows = [{"name": "Grand", "total_quantity": 2, "weight": 1.0, "color": None}]

        create_tables.seed_prizes(store, rows)
        create_tables.seed_prizes(store, rows, reset=True)

        self.assertEqual(list(remaining(store).values()), [2])
        self.assertEqual(record_count(store), 0)

    def test_seed_rejects_negative_weight(self):
        store = make_store()
        self.addCleanup(store.close)

        with self.assertRaises(ValidationError):
            create_tables.seed_prizes(store, [{"name": "Bad", "total_quantity": 1, "weight": -1.0, "color": None}])

        self.assertEqual(remaining(store), {})

    def test_seed_rejects_non_finite_weight(self):
        store = make_store()
        self.addCleanup(store.close)

        for weight in (float("inf"), float("nan")):
            with self.subTest(weight=weight):
                with self.assertRaises(ValidationError) as ctx:
                    create_tables.seed_prizes(
                        store,
                        [
                            {"name": "Fine", "total_quantity": 1, "weight": 1.0, "color": None},
                            {"name": "Bad", "total_quantity": 1, "weight": weight, "color": None},
                        ],
                    )
                self.assertIn("weight", ctx.exception.details)
                self.assertEqual(remaining(store), {})

    def test_csv_infinite_weight_is_rejected_on_seed(self):
        store = make_store()
        self.addCleanup(store.close)
        rows = create_tables.read_prize_rows(self._csv("name,total_quantity,weight,color\nJackpot,1,inf,\n"))

        with self.assertRaises(ValidationError):
            create_tables.seed_prizes(store, rows)

        self.assertEqual(remaining(store), {})


class CommandLineTests(unittest.TestCase):
    def test_reset_without_seed_is_a_usage_error(self):
        with contextlib.redirect_stderr(io.StringIO()) as err:
            with self.assertRaises(SystemExit) as ctx:
                create_tables.main(["--reset"])

        self.assertEqual(ctx.exception.code, 2)
        self.assertIn("--reset requires --seed", err.getvalue())


if __name__ == "__main__":
    unittest.main()
