"""Schemas for the lottery draw API."""

from __future__ import annotations

from marshmallow import Schema, fields, validate

from lottery.schemas.participant import ParticipantSchema
from lottery.schemas.prize import PrizeSchema


class DrawRequestSchema(Schema):
    # Presence is enforced by the draw engine, depending on PARTICIPANT_NAME_MODE.
    participant_name = fields.String(
        data_key="participantName",
        required=False,
        allow_none=True,
        load_default=None,
        validate=validate.Length(max=100),
    )


class DrawResponseSchema(Schema):
    participant = fields.Nested(ParticipantSchema, allow_none=True)
    prize = fields.Nested(PrizeSchema, required=True)
    record_id = fields.Int(required=True)
    drawn_at = fields.DateTime()


class RecordsQuerySchema(Schema):
    limit = fields.Integer(required=False, validate=validate.Range(min=1, max=200))


class DrawRecordSchema(Schema):
    """Flattened history row for the records listing."""

    id = fields.Int(required=True)
    lottery_time = fields.DateTime(attribute="drawn_at")
    participant_name = fields.Method("_participant_name", allow_none=True)
    prize_name = fields.Method("_prize_name")
    prize_color = fields.Method("_prize_color", allow_none=True)

    def _participant_name(self, record):  # type: ignore[no-untyped-def]
        return record.participant.name if record.participant is not None else None

    def _prize_name(self, record):  # type: ignore[no-untyped-def]
        return record.prize.name

    def _prize_color(self, record):  # type: ignore[no-untyped-def]
        return record.prize.color
