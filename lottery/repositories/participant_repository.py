"""Repository layer for Participant persistence."""

from __future__ import annotations

from collections.abc import Sequence

from sqlalchemy import select
from sqlalchemy.orm import Session

from lottery.models.participant import Participant


class ParticipantRepository:
    """Lookups and lazy creation of participants."""

    def find_by_name(self, session: Session, name: str) -> Participant | None:
        return session.scalar(select(Participant).where(Participant.name == name))

    def find_or_create(self, session: Session, name: str) -> Participant:
        participant = self.find_by_name(session, name)
        if participant is not None:
            return participant

        participant = Participant(name=name)
        session.add(participant)
        session.flush()  # assign PK
        return participant

    def list_all(self, session: Session) -> Sequence[Participant]:
        stmt = select(Participant).order_by(Participant.name.asc())
        return list(session.scalars(stmt).all())
