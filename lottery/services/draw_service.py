"""Weighted prize draw.

One draw is one transaction on the inventory store:

1. lock the prizes that still have stock (ascending id),
2. pick one by weight,
3. resolve the participant (optional),
4. append the draw record,
5. take one unit of stock, only while stock is still positive,
6. commit.

Any failure rolls the whole unit back, so stock and history never drift
apart.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from sqlalchemy.exc import SQLAlchemyError

from lottery.db import InventoryStore
from lottery.errors import AppError, DrawFailed, InvalidInput, NoPrizesAvailable
from lottery.models.prize import Prize
from lottery.repositories.draw_record_repository import DrawRecordRepository
from lottery.repositories.participant_repository import ParticipantRepository
from lottery.repositories.prize_repository import PrizeRepository

logger = logging.getLogger(__name__)


class ParticipantNameMode(str, Enum):
    REQUIRED = "required"
    OPTIONAL = "optional"
    IGNORED = "ignored"


@dataclass(frozen=True)
class ParticipantSnapshot:
    id: int
    name: str


@dataclass(frozen=True)
class PrizeSnapshot:
    id: int
    name: str
    color: str | None
    total_quantity: int
    remaining_quantity: int
    weight: float

    @classmethod
    def from_model(cls, prize: Prize) -> "PrizeSnapshot":
        return cls(
            id=int(prize.id),
            name=str(prize.name),
            color=prize.color,
            total_quantity=int(prize.total_quantity),
            remaining_quantity=int(prize.remaining_quantity),
            weight=float(prize.weight),
        )


@dataclass(frozen=True)
class DrawOutcome:
    prize: PrizeSnapshot
    participant: ParticipantSnapshot | None
    record_id: int
    drawn_at: datetime


def pick_weighted(candidates: Sequence[Prize], r: float) -> Prize:
    """Walk ``candidates`` subtracting weights from ``r``.

    The first candidate that brings ``r`` to zero or below wins. If the walk
    runs off the end (float drift), the last candidate wins. ``candidates``
    must be non-empty and already in the order used to compute the total.
    """

    if not candidates:
        raise ValueError("candidates must not be empty")

    for candidate in candidates:
        r -= float(candidate.weight)
        if r <= 0:
            return candidate

    return candidates[-1]


def selectable(prizes: Sequence[Prize]) -> list[Prize]:
    """Prizes that can actually be drawn, in ascending id order."""

    return sorted((p for p in prizes if float(p.weight) > 0), key=lambda p: p.id)


def choose_prize(prizes: Sequence[Prize], rng: random.Random) -> Prize:
    """Weighted pick: P(p) == weight(p) / sum(weights)."""

    candidates = selectable(prizes)
    if not candidates:
        raise NoPrizesAvailable()

    total = sum(float(p.weight) for p in candidates)
    return pick_weighted(candidates, rng.random() * total)


class DrawEngine:
    """Runs the draw transaction against an ``InventoryStore``."""

    def __init__(
        self,
        store: InventoryStore,
        *,
        rng: random.Random | None = None,
        participant_mode: ParticipantNameMode | str = ParticipantNameMode.REQUIRED,
        keep_participant_on_empty: bool = False,
        prizes: PrizeRepository | None = None,
        participants: ParticipantRepository | None = None,
        records: DrawRecordRepository | None = None,
    ) -> None:
        self._store = store
        self._rng = rng or random.SystemRandom()
        self._mode = ParticipantNameMode(participant_mode)
        self._keep_participant_on_empty = keep_participant_on_empty
        self._prizes = prizes or PrizeRepository()
        self._participants = participants or ParticipantRepository()
        self._records = records or DrawRecordRepository()

    def _normalize_name(self, participant_name: str | None) -> str | None:
        if self._mode is ParticipantNameMode.IGNORED:
            return None

        name = (participant_name or "").strip() or None
        if name is None and self._mode is ParticipantNameMode.REQUIRED:
            raise InvalidInput(
                message="Participant name is required",
                details={"participantName": ["Missing data for required field."]},
            )
        return name

    def draw(self, participant_name: str | None = None) -> DrawOutcome:
        """Draw one prize, optionally on behalf of ``participant_name``.

        Raises:
            InvalidInput: the name is required but missing.
            NoPrizesAvailable: nothing has stock and a positive weight.
            DrawFailed: the transaction failed and was rolled back.
            ConnectionExhaustion: no pooled connection was available.
        """

        name = self._normalize_name(participant_name)

        try:
            with self._store.unit_of_work() as session:
                eligible = self._prizes.lock_eligible(session)
                if not selectable(eligible):
                    raise NoPrizesAvailable()

                prize = choose_prize(eligible, self._rng)

                participant = None
                if name is not None:
                    participant = self._participants.find_or_create(session, name)

                record = self._records.append(
                    session,
                    participant_id=participant.id if participant is not None else None,
                    prize_id=prize.id,
                )

                if not self._prizes.decrement_if_positive(session, prize.id):
                    raise DrawFailed(
                        message="Prize stock changed during the draw",
                        details={"prize_id": prize.id},
                    )
                session.refresh(prize)

                outcome = DrawOutcome(
                    prize=PrizeSnapshot.from_model(prize),
                    participant=(
                        ParticipantSnapshot(id=int(participant.id), name=str(participant.name))
                        if participant is not None
                        else None
                    ),
                    record_id=int(record.id),
                    drawn_at=record.drawn_at,
                )
        except NoPrizesAvailable:
            logger.info("Draw rejected: no prizes available")
            if name is not None and self._keep_participant_on_empty:
                self._remember_participant(name)
            raise
        except AppError as exc:
            logger.warning("Draw rolled back: %s", exc.message)
            raise
        except SQLAlchemyError as exc:
            logger.exception("Draw transaction failed")
            raise DrawFailed(details=exc.__class__.__name__) from exc

        logger.info(
            "Drew prize %s for participant %s (record %s, %s left)",
            outcome.prize.id,
            outcome.participant.id if outcome.participant else None,
            outcome.record_id,
            outcome.prize.remaining_quantity,
        )
        return outcome

    def _remember_participant(self, name: str) -> None:
        try:
            with self._store.unit_of_work() as session:
                self._participants.find_or_create(session, name)
        except (AppError, SQLAlchemyError):
            logger.exception("Could not store participant %r after an empty draw", name)
