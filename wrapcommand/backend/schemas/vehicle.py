"""
Vehicle Schemas.

Pydantic schemas for vehicle lookup, catalog and reference-table admin.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, model_validator


class PanelSqftResponse(BaseModel):
    sides: float
    back: float
    hood: float
    roof: float

    model_config = ConfigDict(from_attributes=True)


class SqftOptionsResponse(BaseModel):
    """Square footage figures for one vehicle."""

    with_roof: float = Field(description="Total wrappable area including the roof")
    without_roof: float = Field(description="Sides, back and hood")
    roof_only: float
    panels: PanelSqftResponse

    model_config = ConfigDict(from_attributes=True)


class VehicleMatchResponse(BaseModel):
    """Matched reference row and its square footage."""

    make: str
    model: str
    year_start: int | None
    year_end: int | None
    match_type: str = Field(description="exact, closest_year or any_year")
    sqft: SqftOptionsResponse

    model_config = ConfigDict(from_attributes=True)


class VehicleLookupResponse(BaseModel):
    """Result of a natural-language vehicle lookup."""

    query: str
    year: int | None
    make: str | None
    model: str | None
    match: VehicleMatchResponse | None


class VehicleOptionResponse(BaseModel):
    label: str = Field(examples=["2019–2024 Ford F-150"])
    value: str = Field(examples=["ford|f-150|2019-2024"])

    model_config = ConfigDict(from_attributes=True)


class VehicleDimensionBase(BaseModel):
    year_start: int | None = Field(default=None, ge=1900, le=2100)
    year_end: int | None = Field(default=None, ge=1900, le=2100)
    total_sqft: float | None = Field(
        default=None,
        ge=0,
        description="Defaults to the sum of the panel figures",
    )
    side_sqft: float = Field(default=0.0, ge=0)
    back_sqft: float = Field(default=0.0, ge=0)
    hood_sqft: float = Field(default=0.0, ge=0)
    roof_sqft: float = Field(default=0.0, ge=0)

    @model_validator(mode="after")
    def _check_years(self):
        if (
            self.year_start is not None
            and self.year_end is not None
            and self.year_start > self.year_end
        ):
            raise ValueError("year_start must not be after year_end")
        return self


class VehicleDimensionCreate(VehicleDimensionBase):
    """Schema for adding a row to the vehicle reference table."""

    make: str = Field(..., min_length=1, max_length=100, examples=["Ford"])
    model: str = Field(..., min_length=1, max_length=100, examples=["F-150"])


class VehicleDimensionUpdate(BaseModel):
    """Schema for editing a reference row. Only provided fields change."""

    make: str | None = Field(default=None, min_length=1, max_length=100)
    model: str | None = Field(default=None, min_length=1, max_length=100)
    year_start: int | None = Field(default=None, ge=1900, le=2100)
    year_end: int | None = Field(default=None, ge=1900, le=2100)
    total_sqft: float | None = Field(default=None, ge=0)
    side_sqft: float | None = Field(default=None, ge=0)
    back_sqft: float | None = Field(default=None, ge=0)
    hood_sqft: float | None = Field(default=None, ge=0)
    roof_sqft: float | None = Field(default=None, ge=0)


class VehicleDimensionResponse(BaseModel):
    id: str
    make: str
    model: str
    year_start: int | None
    year_end: int | None
    total_sqft: float
    side_sqft: float
    back_sqft: float
    hood_sqft: float
    roof_sqft: float
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
