"""Participant routes."""

from __future__ import annotations

from flask import Blueprint

from lottery.db import get_session
from lottery.schemas.participant import ParticipantSchema
from lottery.services.history_service import HistoryService
from lottery.utils.responses import ok

participants_bp = Blueprint("participants", __name__)

_participants_schema = ParticipantSchema(many=True)
_service = HistoryService()


@participants_bp.get("/participants")
def list_participants():
    participants = _service.list_participants(get_session())
    return ok(_participants_schema.dump(participants))
