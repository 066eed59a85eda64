"""Create database tables in the configured database, optionally seeding prizes.

Reads DATABASE_URL (or DB_HOST/DB_USER/DB_NAME...) from .env / environment
and creates all registered ORM tables.

The optional seed CSV has a header row with columns
``name,total_quantity,weight,color`` (``color`` may be empty).

Usage:
  python scripts/create_tables.py
  python scripts/create_tables.py --seed prizes.csv --reset
"""

from __future__ import annotations

import argparse
import csv
import logging
import pathlib
import sys
from collections.abc import Sequence

from dotenv import load_dotenv
from sqlalchemy import delete

PROJECT_ROOT = pathlib.Path(__file__).resolve().parents[1]
sys.path.insert(0, str(PROJECT_ROOT))

from lottery.config import resolve_database_url
from lottery.db import InventoryStore
from lottery.errors import ValidationError
from lottery.models import DrawRecord, Prize
from lottery.services.prize_service import PrizeService

logger = logging.getLogger("create_tables")

EXPECTED_HEADERS: Sequence[str] = ("name", "total_quantity", "weight", "color")


def read_prize_rows(path: pathlib.Path) -> list[dict[str, object]]:
    """Parse the seed CSV into keyword arguments for ``PrizeService.create_prize``."""

    with path.open(newline="", encoding="utf-8-sig") as fh:
        reader = csv.DictReader(fh)
        headers = tuple(h.strip() for h in (reader.fieldnames or ()))
        missing = [h for h in EXPECTED_HEADERS if h not in headers]
        if missing:
            raise ValueError(f"CSV is missing columns: {', '.join(missing)}")

        rows: list[dict[str, object]] = []
        for line_no, raw in enumerate(reader, start=2):
            row = {k.strip(): (v or "").strip() for k, v in raw.items() if k}
            if not row.get("name"):
                raise ValueError(f"line {line_no}: name is required")
            try:
                rows.append(
                    {
                        "name": row["name"],
                        "total_quantity": int(row["total_quantity"]),
                        "weight": float(row["weight"]),
                        "color": row.get("color") or None,
                    }
                )
            except ValueError as exc:
                raise ValueError(f"line {line_no}: {exc}") from exc
        return rows


def seed_prizes(store: InventoryStore, rows: list[dict[str, object]], *, reset: bool = False) -> int:
    """Insert prizes in one transaction. ``reset`` wipes prizes and history first."""

    service = PrizeService()
    with store.unit_of_work() as session:
        if reset:
            session.execute(delete(DrawRecord))
            session.execute(delete(Prize))
        for row in rows:
            service.create_prize(session, **row)  # type: ignore[arg-type]
    return len(rows)


def main(argv: Sequence[str] | None = None) -> int:
    """Create all ORM tables in the target database."""

    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--seed", type=pathlib.Path, help="CSV file with prizes to insert")
    parser.add_argument("--reset", action="store_true", help="delete existing prizes and draw records before seeding")
    args = parser.parse_args(argv)
    if args.reset and not args.seed:
        parser.error("--reset requires --seed")

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s %(message)s")

    load_dotenv()
    env_local = PROJECT_ROOT / ".env.local"
    if env_local.exists():
        load_dotenv(dotenv_path=env_local, override=True)

    store = InventoryStore.open(resolve_database_url())
    try:
        store.create_all()
        logger.info("Tables created (or already exist).")

        if args.seed:
            try:
                count = seed_prizes(store, read_prize_rows(args.seed), reset=args.reset)
            except (OSError, ValueError, ValidationError) as exc:
                logger.error("Seeding failed: %s", getattr(exc, "message", exc))
                return 1
            logger.info("Seeded %d prizes from %s", count, args.seed)
    finally:
        store.close()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
