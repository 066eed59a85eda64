"""Lottery routes (controllers). No business logic here."""

from __future__ import annotations

from dataclasses import asdict

from flask import Blueprint, current_app, request

from lottery.db import get_session
from lottery.schemas.draw import DrawRecordSchema, DrawRequestSchema, DrawResponseSchema, RecordsQuerySchema
from lottery.services.draw_service import DrawEngine
from lottery.services.history_service import HistoryService
from lottery.utils.responses import ok

lottery_bp = Blueprint("lottery", __name__)

_request_schema = DrawRequestSchema()
_response_schema = DrawResponseSchema()
_records_query_schema = RecordsQuerySchema()
_records_schema = DrawRecordSchema(many=True)
_history = HistoryService()


def _engine() -> DrawEngine:
    return current_app.extensions["draw_engine"]


@lottery_bp.post("/lottery/draw")
def draw():
    """Draw one prize. The whole draw commits or rolls back as one unit."""

    payload = request.get_json(silent=True) or {}
    data = _request_schema.load(payload)

    outcome = _engine().draw(participant_name=data.get("participant_name"))
    return ok(_response_schema.dump(asdict(outcome)))


@lottery_bp.get("/lottery/records")
def list_records():
    """Latest draw records, newest first."""

    args = _records_query_schema.load(request.args)
    limit = int(args.get("limit") or current_app.config.get("RECORDS_DEFAULT_LIMIT", 50))

    records = _history.recent_records(get_session(), limit=limit)
    return ok(_records_schema.dump(records))
