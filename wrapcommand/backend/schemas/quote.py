"""
Quote Schemas.

Pydantic schemas for quote estimation, persistence and the public embed.
"""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field, model_validator

from wrapcommand.backend.schemas.vehicle import VehicleMatchResponse

Panel = Literal["sides", "back", "hood", "roof"]
QuoteStatus = Literal["draft", "sent", "approved", "expired"]

EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class QuoteEstimateRequest(BaseModel):
    """
    Inputs for deriving a quote.

    Either a vehicle (year/make/model) or an explicit ``sqft`` is required.
    Pricing comes from ``product_id``, else ``price_per_sqft``, else the
    default material.
    """

    vehicle_year: str | None = Field(default=None, max_length=20, examples=["2018"])
    vehicle_make: str | None = Field(default=None, max_length=100, examples=["Ford"])
    vehicle_model: str | None = Field(default=None, max_length=100, examples=["F-150"])
    sqft: float | None = Field(default=None, gt=0, description="Overrides the vehicle lookup")
    panels: list[Panel] | None = Field(
        default=None,
        description="Panels to wrap; defaults to sides, back and hood",
    )
    product_id: str | None = None
    price_per_sqft: float | None = Field(default=None, ge=0)
    quantity: int = Field(default=1, ge=1, le=1000)
    margin: float | None = Field(
        default=None,
        ge=0,
        le=1000,
        description="Margin percentage; defaults to the organization's",
    )

    @model_validator(mode="after")
    def _check_vehicle_or_sqft(self):
        if self.sqft is None and not (self.vehicle_make and self.vehicle_model):
            raise ValueError("Provide vehicle_make and vehicle_model, or sqft")
        return self


class QuoteEstimateResponse(BaseModel):
    sqft: float
    panels: list[str]
    product_name: str | None
    price_per_sqft: float | None
    quantity: int
    material_cost: float
    installation_included: bool
    labor_hours: float
    labor_cost: float
    margin: float
    margin_amount: float
    total_price: float
    vehicle_match: VehicleMatchResponse | None = None

    model_config = ConfigDict(from_attributes=True)


class QuoteCreate(QuoteEstimateRequest):
    """Schema for creating a quote."""

    customer_name: str = Field(..., min_length=1, max_length=255, examples=["Jordan Lee"])
    customer_email: str | None = Field(default=None, max_length=255, pattern=EMAIL_PATTERN)
    customer_phone: str | None = Field(default=None, max_length=50)
    customer_company: str | None = Field(default=None, max_length=255)
    notes: str | None = Field(default=None, max_length=5000)
    category: str | None = Field(default=None, max_length=100)
    source: str = Field(default="internal", max_length=50)
    utm_source: str | None = Field(default=None, max_length=255)
    utm_medium: str | None = Field(default=None, max_length=255)
    utm_campaign: str | None = Field(default=None, max_length=255)


class QuoteStatusUpdate(BaseModel):
    status: QuoteStatus


class QuoteResponse(BaseModel):
    """Schema for a stored quote."""

    id: str
    organization_id: str
    quote_number: str
    customer_name: str
    customer_email: str | None
    customer_phone: str | None
    customer_company: str | None
    vehicle_year: str | None
    vehicle_make: str | None
    vehicle_model: str | None
    sqft: float
    panels: str | None
    product_name: str | None
    price_per_sqft: float | None
    quantity: int
    material_cost: float
    installation_included: bool
    labor_hours: float
    labor_cost: float
    margin: float
    margin_amount: float
    total_price: float
    status: str
    source: str
    notes: str | None
    is_commercial: bool
    email_sent: bool
    utm_source: str | None
    utm_medium: str | None
    utm_campaign: str | None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class QuoteListResponse(BaseModel):
    id: str
    quote_number: str
    customer_name: str
    vehicle_year: str | None
    vehicle_make: str | None
    vehicle_model: str | None
    total_price: float
    status: str
    is_commercial: bool
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PublicQuoteSubmission(BaseModel):
    """Quote request submitted from the website embed widget."""

    organization_slug: str = Field(..., min_length=1, max_length=100)
    customer_name: str = Field(..., min_length=1, max_length=255)
    customer_email: str = Field(..., max_length=255, pattern=EMAIL_PATTERN)
    customer_phone: str | None = Field(default=None, max_length=50)
    customer_company: str | None = Field(default=None, max_length=255)
    vehicle_year: str | None = Field(default=None, max_length=20)
    vehicle_make: str | None = Field(default=None, max_length=100)
    vehicle_model: str | None = Field(default=None, max_length=100)
    sqft: float | None = Field(default=None, gt=0)
    material: str | None = Field(
        default=None,
        max_length=50,
        description="Material key or name, e.g. '3m' or 'avery'",
    )
    category: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=5000)
    utm_source: str | None = Field(default=None, max_length=255)
    utm_medium: str | None = Field(default=None, max_length=255)
    utm_campaign: str | None = Field(default=None, max_length=255)

    @model_validator(mode="after")
    def _check_vehicle_or_sqft(self):
        if self.sqft is None and not (self.vehicle_make and self.vehicle_model):
            raise ValueError("Provide vehicle_make and vehicle_model, or sqft")
        return self


class PublicQuoteResponse(BaseModel):
    quote_number: str
    material: str
    price_per_sqft: float
    sqft: float
    total_price: float
    status: str
    is_commercial: bool
    email_sent: bool

    model_config = ConfigDict(from_attributes=True)
