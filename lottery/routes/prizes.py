"""Prize routes (controllers). No business logic here."""

from __future__ import annotations

from flask import Blueprint, request

from lottery.db import get_session
from lottery.schemas.prize import PrizeSchema, PrizeUpdateSchema
from lottery.services.prize_service import PrizeService
from lottery.utils.responses import ok

prizes_bp = Blueprint("prizes", __name__)

_prize_schema = PrizeSchema()
_prizes_schema = PrizeSchema(many=True)
_update_schema = PrizeUpdateSchema()
_service = PrizeService()


@prizes_bp.get("/prizes")
def list_prizes():
    """List all prizes, lowest weight first."""

    prizes = _service.list_prizes(get_session())
    return ok(_prizes_schema.dump(prizes))


@prizes_bp.get("/prizes/<int:prize_id>")
def get_prize(prize_id: int):
    prize = _service.get_prize(get_session(), prize_id)
    return ok(_prize_schema.dump(prize))


@prizes_bp.put("/prizes/<int:prize_id>")
def update_prize(prize_id: int):
    """Administrative update of a prize."""

    payload = request.get_json(silent=True) or {}
    changes = _update_schema.load(payload)

    prize = _service.update_prize(get_session(), prize_id, changes)

    # Commit occurs in teardown if no exception.
    return ok(_prize_schema.dump(prize))
