"""Marshmallow schemas for Participant."""

from __future__ import annotations

from marshmallow import Schema, fields


class ParticipantSchema(Schema):
    """Serialize Participant."""

    id = fields.Int(required=True)
    name = fields.Str(required=True)
