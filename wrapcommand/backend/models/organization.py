"""
Organization Model.

A tenant of the platform: one wrap shop with its own quotes, products and
pricing defaults.
"""

from sqlalchemy import Float, String
from sqlalchemy.orm import Mapped, mapped_column

from wrapcommand.backend.models.base import Base, TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, Base):
    """
    Organization (tenant) database model.

    ``installs_enabled`` gates labor and margin in quote derivation. Shops
    that only sell printed material leave it off and are quoted on
    material cost alone.
    """

    __tablename__ = "organizations"

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    installs_enabled: Mapped[bool] = mapped_column(default=False, nullable=False)
    default_margin_percentage: Mapped[float] = mapped_column(Float, default=65.0, nullable=False)
    labor_rate_per_hour: Mapped[float] = mapped_column(Float, default=75.0, nullable=False)
    show_wholesale_products: Mapped[bool] = mapped_column(default=True, nullable=False)
    is_active: Mapped[bool] = mapped_column(default=True, nullable=False)

    def __repr__(self) -> str:
        return f"<Organization(id={self.id}, slug={self.slug!r})>"
