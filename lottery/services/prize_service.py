"""Service layer for prize administration."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any

from sqlalchemy.orm import Session

from lottery.errors import NotFoundError, ValidationError
from lottery.models.prize import Prize
from lottery.repositories.prize_repository import PrizeRepository


class PrizeService:
    """Prize use-cases."""

    def __init__(self, repository: PrizeRepository | None = None) -> None:
        self._repo = repository or PrizeRepository()

    def list_prizes(self, session: Session) -> Sequence[Prize]:
        return self._repo.list_all(session)

    def get_prize(self, session: Session, prize_id: int) -> Prize:
        prize = self._repo.get_by_id(session, prize_id)
        if prize is None:
            raise NotFoundError(message=f"Prize {prize_id} not found")
        return prize

    def create_prize(
        self,
        session: Session,
        *,
        name: str,
        total_quantity: int,
        weight: float,
        color: str | None = None,
        remaining_quantity: int | None = None,
    ) -> Prize:
        remaining = total_quantity if remaining_quantity is None else remaining_quantity
        self._check_invariants(total_quantity, remaining, weight)
        return self._repo.create(
            session,
            name=name,
            color=color,
            total_quantity=total_quantity,
            remaining_quantity=remaining,
            weight=weight,
        )

    def update_prize(self, session: Session, prize_id: int, changes: dict[str, Any]) -> Prize:
        """Apply an administrative correction.

        Partial updates are merged with the stored row before the stock
        invariants are checked.
        """

        prize = self.get_prize(session, prize_id)
        total = int(changes.get("total_quantity", prize.total_quantity))
        remaining = int(changes.get("remaining_quantity", prize.remaining_quantity))
        weight = float(changes.get("weight", prize.weight))
        self._check_invariants(total, remaining, weight)
        return self._repo.update(session, prize, **changes)

    @staticmethod
    def _check_invariants(total: int, remaining: int, weight: float) -> None:
        errors: dict[str, list[str]] = {}
        if total < 0:
            errors["total_quantity"] = ["Must be >= 0"]
        if remaining < 0:
            errors["remaining_quantity"] = ["Must be >= 0"]
        elif remaining > total:
            errors["remaining_quantity"] = ["remaining_quantity must be <= total_quantity"]
        if not math.isfinite(weight):
            errors["weight"] = ["Must be a finite number"]
        elif weight < 0:
            errors["weight"] = ["Must be >= 0"]
        if errors:
            raise ValidationError(message="Invalid prize", details=errors)
