"""Prize ORM model."""

from __future__ import annotations

from sqlalchemy import CheckConstraint, Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from lottery.models.base import Base


class Prize(Base):
    """A prize with stock and a relative draw weight.

    ``weight`` is relative: the chance of a prize is ``weight / sum(weight)``
    over the prizes that still have stock. Weights do not need to add up to 100.
    """

    __tablename__ = "prizes"
    __table_args__ = (
        CheckConstraint("total_quantity >= 0", name="ck_prizes_total_non_negative"),
        CheckConstraint("remaining_quantity >= 0", name="ck_prizes_remaining_non_negative"),
        CheckConstraint("remaining_quantity <= total_quantity", name="ck_prizes_remaining_le_total"),
        CheckConstraint("weight >= 0", name="ck_prizes_weight_non_negative"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    color: Mapped[str | None] = mapped_column(String(20), nullable=True)

    total_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    remaining_quantity: Mapped[int] = mapped_column(Integer, nullable=False, default=0, index=True)
    weight: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    def __repr__(self) -> str:
        return f"Prize(id={self.id!r}, name={self.name!r}, remaining={self.remaining_quantity!r})"
