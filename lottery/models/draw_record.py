"""Draw history.

One row per successful draw. Rows are append-only: the service never
updates or deletes them.
"""

from __future__ import annotations

from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column, relationship

from lottery.models.base import Base
from lottery.models.participant import Participant
from lottery.models.prize import Prize


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class DrawRecord(Base):
    """Who won which prize, and when."""

    __tablename__ = "lottery_records"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    participant_id: Mapped[int | None] = mapped_column(
        Integer, ForeignKey("participants.id"), nullable=True, index=True
    )
    prize_id: Mapped[int] = mapped_column(Integer, ForeignKey("prizes.id"), nullable=False, index=True)
    drawn_at: Mapped[datetime] = mapped_column(
        "lottery_time", DateTime(timezone=True), nullable=False, default=_utcnow, index=True
    )

    participant: Mapped[Participant | None] = relationship(lazy="joined")
    prize: Mapped[Prize] = relationship(lazy="joined")
