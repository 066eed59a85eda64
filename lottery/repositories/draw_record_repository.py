"""Repository layer for the append-only draw history."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from lottery.models.draw_record import DrawRecord


class DrawRecordRepository:
    def append(self, session: Session, *, participant_id: int | None, prize_id: int) -> DrawRecord:
        record = DrawRecord(participant_id=participant_id, prize_id=prize_id)
        session.add(record)
        session.flush()  # assign PK and timestamp
        return record

    def list_recent(self, session: Session, limit: int = 50) -> Sequence[DrawRecord]:
        stmt = (
            select(DrawRecord)
            .order_by(DrawRecord.drawn_at.desc(), DrawRecord.id.desc())
            .limit(limit)
        )
        return list(session.scalars(stmt).unique().all())

    def count(self, session: Session) -> int:
        return int(session.scalar(select(func.count()).select_from(DrawRecord)) or 0)
