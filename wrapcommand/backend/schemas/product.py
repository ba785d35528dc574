"""
Product Schemas.

Pydantic schemas for product catalog management.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

PricingType = Literal["per_sqft", "flat"]


class ProductCreate(BaseModel):
    """Schema for creating a tenant-owned product."""

    product_name: str = Field(..., min_length=1, max_length=255, examples=["Avery MPI 1105"])
    category: str = Field(default="wrap", max_length=100)
    pricing_type: PricingType = "per_sqft"
    price_per_sqft: float | None = Field(default=None, ge=0, examples=[5.25])
    flat_price: float | None = Field(default=None, ge=0)
    display_order: int = 0

    @model_validator(mode="after")
    def _check_price(self):
        if self.pricing_type == "per_sqft" and self.price_per_sqft is None:
            raise ValueError("price_per_sqft is required for per_sqft products")
        if self.pricing_type == "flat" and self.flat_price is None:
            raise ValueError("flat_price is required for flat products")
        return self


class ProductUpdate(BaseModel):
    product_name: str | None = Field(default=None, min_length=1, max_length=255)
    category: str | None = Field(default=None, max_length=100)
    pricing_type: PricingType | None = None
    price_per_sqft: float | None = Field(default=None, ge=0)
    flat_price: float | None = Field(default=None, ge=0)
    display_order: int | None = None
    is_active: bool | None = None


class ProductResponse(BaseModel):
    id: str
    organization_id: str | None
    product_name: str
    category: str
    pricing_type: str
    price_per_sqft: float | None
    flat_price: float | None
    is_active: bool
    is_locked: bool
    display_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
