"""
Organization Schemas.

Pydantic schemas for tenant settings.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class OrganizationCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, examples=["Wrap Shop Co"])
    slug: str = Field(
        ...,
        min_length=2,
        max_length=100,
        pattern=r"^[a-z0-9][a-z0-9-]*$",
        examples=["wrap-shop-co"],
    )
    installs_enabled: bool = False
    default_margin_percentage: float | None = Field(default=None, ge=0, le=1000)
    labor_rate_per_hour: float | None = Field(default=None, ge=0)


class OrganizationUpdate(BaseModel):
    """Tenant-editable settings. Only provided fields change."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    installs_enabled: bool | None = None
    default_margin_percentage: float | None = Field(default=None, ge=0, le=1000)
    labor_rate_per_hour: float | None = Field(default=None, ge=0)
    show_wholesale_products: bool | None = None


class OrganizationResponse(BaseModel):
    id: str
    name: str
    slug: str
    installs_enabled: bool
    default_margin_percentage: float
    labor_rate_per_hour: float
    show_wholesale_products: bool
    is_active: bool
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
