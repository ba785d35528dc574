"""
Vehicle Dimension Model.

Reference table of wrappable surface area per vehicle make, model and
model-year range.
"""

from sqlalchemy import Float, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wrapcommand.backend.models.base import Base, TimestampMixin, UUIDMixin


class VehicleDimension(UUIDMixin, TimestampMixin, Base):
    """
    One vehicle generation with its panel square footage.

    A null ``year_start``/``year_end`` means the row applies to any year.
    ``total_sqft`` includes the roof.
    """

    __tablename__ = "vehicle_dimensions"

    make: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    model: Mapped[str] = mapped_column(String(100), nullable=False, index=True)
    year_start: Mapped[int | None] = mapped_column(Integer, nullable=True)
    year_end: Mapped[int | None] = mapped_column(Integer, nullable=True)
    total_sqft: Mapped[float] = mapped_column(Float, nullable=False)
    side_sqft: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    back_sqft: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    hood_sqft: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    roof_sqft: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    @property
    def year_range(self) -> str | None:
        """Year range as text, e.g. ``2015-2020``, ``2019+`` or ``2015``."""
        if self.year_start is None and self.year_end is None:
            return None
        if self.year_end is None:
            return f"{self.year_start}+"
        if self.year_start is None or self.year_start == self.year_end:
            return str(self.year_end)
        return f"{self.year_start}-{self.year_end}"

    def __repr__(self) -> str:
        return f"<VehicleDimension(make={self.make!r}, model={self.model!r}, years={self.year_range!r})>"
