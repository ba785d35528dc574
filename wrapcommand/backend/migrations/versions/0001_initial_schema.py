"""Initial schema: organizations, vehicle dimensions, products, quotes

Revision ID: 0001
Revises:
Create Date: 2025-01-06 00:00:00
"""

from alembic import op
import sqlalchemy as sa

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "organizations",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=100), nullable=False),
        sa.Column("installs_enabled", sa.Boolean(), nullable=False),
        sa.Column("default_margin_percentage", sa.Float(), nullable=False),
        sa.Column("labor_rate_per_hour", sa.Float(), nullable=False),
        sa.Column("show_wholesale_products", sa.Boolean(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_organizations_slug", "organizations", ["slug"], unique=True)

    op.create_table(
        "vehicle_dimensions",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column("make", sa.String(length=100), nullable=False),
        sa.Column("model", sa.String(length=100), nullable=False),
        sa.Column("year_start", sa.Integer(), nullable=True),
        sa.Column("year_end", sa.Integer(), nullable=True),
        sa.Column("total_sqft", sa.Float(), nullable=False),
        sa.Column("side_sqft", sa.Float(), nullable=False),
        sa.Column("back_sqft", sa.Float(), nullable=False),
        sa.Column("hood_sqft", sa.Float(), nullable=False),
        sa.Column("roof_sqft", sa.Float(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_vehicle_dimensions_make", "vehicle_dimensions", ["make"])
    op.create_index("ix_vehicle_dimensions_model", "vehicle_dimensions", ["model"])

    op.create_table(
        "products",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "organization_id",
            sa.String(length=36),
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=True,
        ),
        sa.Column("product_name", sa.String(length=255), nullable=False),
        sa.Column("category", sa.String(length=100), nullable=False),
        sa.Column("pricing_type", sa.String(length=20), nullable=False),
        sa.Column("price_per_sqft", sa.Float(), nullable=True),
        sa.Column("flat_price", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False),
        sa.Column("is_locked", sa.Boolean(), nullable=False),
        sa.Column("display_order", sa.Integer(), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_products_organization_id", "products", ["organization_id"])

    op.create_table(
        "quotes",
        sa.Column("id", sa.String(length=36), primary_key=True),
        sa.Column(
            "organization_id",
            sa.String(length=36),
            sa.ForeignKey("organizations.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("quote_number", sa.String(length=32), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("customer_phone", sa.String(length=50), nullable=True),
        sa.Column("customer_company", sa.String(length=255), nullable=True),
        sa.Column("vehicle_year", sa.String(length=20), nullable=True),
        sa.Column("vehicle_make", sa.String(length=100), nullable=True),
        sa.Column("vehicle_model", sa.String(length=100), nullable=True),
        sa.Column("sqft", sa.Float(), nullable=False),
        sa.Column("panels", sa.String(length=100), nullable=True),
        sa.Column("product_name", sa.String(length=255), nullable=True),
        sa.Column("price_per_sqft", sa.Float(), nullable=True),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.Column("material_cost", sa.Float(), nullable=False),
        sa.Column("installation_included", sa.Boolean(), nullable=False),
        sa.Column("labor_hours", sa.Float(), nullable=False),
        sa.Column("labor_cost", sa.Float(), nullable=False),
        sa.Column("margin", sa.Float(), nullable=False),
        sa.Column("margin_amount", sa.Float(), nullable=False),
        sa.Column("total_price", sa.Float(), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("source", sa.String(length=50), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("is_commercial", sa.Boolean(), nullable=False),
        sa.Column("email_sent", sa.Boolean(), nullable=False),
        sa.Column("utm_source", sa.String(length=255), nullable=True),
        sa.Column("utm_medium", sa.String(length=255), nullable=True),
        sa.Column("utm_campaign", sa.String(length=255), nullable=True),
        *_timestamps(),
    )
    op.create_index("ix_quotes_organization_id", "quotes", ["organization_id"])
    op.create_index("ix_quotes_quote_number", "quotes", ["quote_number"], unique=True)
    op.create_index("ix_quotes_status", "quotes", ["status"])


def downgrade() -> None:
    op.drop_table("quotes")
    op.drop_table("products")
    op.drop_table("vehicle_dimensions")
    op.drop_table("organizations")
