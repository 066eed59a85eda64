"""Read-only views over participants and draw history."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy.orm import Session

from lottery.models.draw_record import DrawRecord
from lottery.models.participant import Participant
from lottery.repositories.draw_record_repository import DrawRecordRepository
from lottery.repositories.participant_repository import ParticipantRepository


class HistoryService:
    def __init__(
        self,
        records: DrawRecordRepository | None = None,
        participants: ParticipantRepository | None = None,
    ) -> None:
        self._records = records or DrawRecordRepository()
        self._participants = participants or ParticipantRepository()

    def recent_records(self, session: Session, limit: int = 50) -> Sequence[DrawRecord]:
        return self._records.list_recent(session, limit=limit)

    def list_participants(self, session: Session) -> Sequence[Participant]:
        return self._participants.list_all(session)
