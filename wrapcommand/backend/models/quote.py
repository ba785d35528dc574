"""
Quote Model.

A priced wrap quote for one customer vehicle, owned by an organization.
"""

from sqlalchemy import Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from wrapcommand.backend.models.base import Base, TimestampMixin, UUIDMixin

QUOTE_STATUSES = ("draft", "sent", "approved", "expired")


class Quote(UUIDMixin, TimestampMixin, Base):
    """
    Quote database model.

    Money columns are stored rounded to cents. ``panels`` holds the
    comma-separated panel names the square footage was summed from.
    """

    __tablename__ = "quotes"

    organization_id: Mapped[str] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    quote_number: Mapped[str] = mapped_column(String(32), nullable=False, unique=True, index=True)

    customer_name: Mapped[str] = mapped_column(String(255), nullable=False)
    customer_email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    customer_phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    customer_company: Mapped[str | None] = mapped_column(String(255), nullable=True)

    vehicle_year: Mapped[str | None] = mapped_column(String(20), nullable=True)
    vehicle_make: Mapped[str | None] = mapped_column(String(100), nullable=True)
    vehicle_model: Mapped[str | None] = mapped_column(String(100), nullable=True)

    sqft: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    panels: Mapped[str | None] = mapped_column(String(100), nullable=True)
    product_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    price_per_sqft: Mapped[float | None] = mapped_column(Float, nullable=True)
    quantity: Mapped[int] = mapped_column(Integer, default=1, nullable=False)

    material_cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    installation_included: Mapped[bool] = mapped_column(default=False, nullable=False)
    labor_hours: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    labor_cost: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    margin: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    margin_amount: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)
    total_price: Mapped[float] = mapped_column(Float, default=0.0, nullable=False)

    status: Mapped[str] = mapped_column(String(20), default="draft", nullable=False, index=True)
    source: Mapped[str] = mapped_column(String(50), default="internal", nullable=False)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_commercial: Mapped[bool] = mapped_column(default=False, nullable=False)
    email_sent: Mapped[bool] = mapped_column(default=False, nullable=False)

    utm_source: Mapped[str | None] = mapped_column(String(255), nullable=True)
    utm_medium: Mapped[str | None] = mapped_column(String(255), nullable=True)
    utm_campaign: Mapped[str | None] = mapped_column(String(255), nullable=True)

    def __repr__(self) -> str:
        return f"<Quote(number={self.quote_number!r}, total={self.total_price})>"
