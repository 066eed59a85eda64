"""ORM models."""

from lottery.models.draw_record import DrawRecord
from lottery.models.participant import Participant
from lottery.models.prize import Prize

__all__ = ["DrawRecord", "Participant", "Prize"]
