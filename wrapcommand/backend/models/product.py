"""
Product Model.

Wrap materials and services a shop can quote. Rows without an
organization are global wholesale products visible to every tenant that
opts in.
"""

from sqlalchemy import Float, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from wrapcommand.backend.models.base import Base, TimestampMixin, UUIDMixin

PRICING_PER_SQFT = "per_sqft"
PRICING_FLAT = "flat"
PRICING_TYPES = (PRICING_PER_SQFT, PRICING_FLAT)


class Product(UUIDMixin, TimestampMixin, Base):
    """Product database model. Locked products cannot be edited by tenants."""

    __tablename__ = "products"

    organization_id: Mapped[str | None] = mapped_column(
        String(36),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=True,
        index=True,
    )
    product_name: Mapped[str] = mapped_column(String(255), nullable=False)
    category: Mapped[str] = mapped_column(String(100), default="wrap", nullable=False)
    pricing_type: Mapped[str] = mapped_column(String(20), default=PRICING_PER_SQFT, nullable=False)
    price_per_sqft: Mapped[float | None] = mapped_column(Float, nullable=True)
    flat_price: Mapped[float | None] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_locked: Mapped[bool] = mapped_column(default=False, nullable=False)
    display_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    @property
    def is_global(self) -> bool:
        return self.organization_id is None

    def __repr__(self) -> str:
        return f"<Product(id={self.id}, name={self.product_name!r})>"
