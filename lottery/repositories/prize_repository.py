"""Repository layer for Prize persistence."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from sqlalchemy import Select, select, update
from sqlalchemy.orm import Session

from lottery.models.prize import Prize


class PrizeRepository:
    """Locking reads, conditional decrement and plain CRUD for prizes."""

    @staticmethod
    def eligible_statement() -> Select[tuple[Prize]]:
        """SELECT ... FOR UPDATE of the prizes with stock left.

        Ordered by id so the weight sum and the selection walk see the same
        sequence.
        """

        return (
            select(Prize)
            .where(Prize.remaining_quantity > 0)
            .order_by(Prize.id.asc())
            .with_for_update()
        )

    def lock_eligible(self, session: Session) -> list[Prize]:
        """Return prizes with stock left, locked until the transaction ends."""

        return list(session.scalars(self.eligible_statement()).all())

    def decrement_if_positive(self, session: Session, prize_id: int) -> bool:
        """Take one unit of stock. False (no-op) when the prize is already empty."""

        stmt = (
            update(Prize)
            .where(Prize.id == prize_id, Prize.remaining_quantity > 0)
            .values(remaining_quantity=Prize.remaining_quantity - 1)
            .execution_options(synchronize_session=False)
        )
        result = session.execute(stmt)
        return result.rowcount == 1

    def list_all(self, session: Session) -> Sequence[Prize]:
        stmt = select(Prize).order_by(Prize.weight.asc(), Prize.id.asc())
        return list(session.scalars(stmt).all())

    def get_by_id(self, session: Session, prize_id: int) -> Prize | None:
        return session.get(Prize, prize_id)

    def create(self, session: Session, **fields: Any) -> Prize:
        prize = Prize(**fields)
        session.add(prize)
        session.flush()  # assign PK
        return prize

    def update(self, session: Session, prize: Prize, **fields: Any) -> Prize:
        for key, value in fields.items():
            setattr(prize, key, value)
        session.flush()
        return prize
