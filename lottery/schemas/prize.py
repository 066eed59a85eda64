"""Marshmallow schemas for Prize."""

from __future__ import annotations

from marshmallow import Schema, ValidationError, fields, validate, validates_schema


class PrizeSchema(Schema):
    """Serialize Prize."""

    id = fields.Int(required=True)
    name = fields.Str(required=True)
    color = fields.Str(allow_none=True)
    total_quantity = fields.Int()
    remaining_quantity = fields.Int()
    weight = fields.Float()


class PrizeUpdateSchema(Schema):
    """Validate an administrative prize update. Every field is optional."""

    name = fields.Str(validate=validate.Length(min=1, max=100))
    color = fields.Str(allow_none=True, validate=validate.Length(max=20))
    total_quantity = fields.Int(validate=validate.Range(min=0))
    remaining_quantity = fields.Int(validate=validate.Range(min=0))
    weight = fields.Float(validate=validate.Range(min=0))

    @validates_schema
    def _validate_quantities(self, data, **kwargs):  # type: ignore[no-untyped-def]
        total = data.get("total_quantity")
        remaining = data.get("remaining_quantity")
        if total is not None and remaining is not None and remaining > total:
            raise ValidationError({"remaining_quantity": ["remaining_quantity must be <= total_quantity"]})
