"""
Quote Derivation.

Pure arithmetic turning selected panel square footage, a material price and
a quantity into material, labor and margin figures.

Labor and margin only apply when the tenant has installs enabled. With
installs disabled the total is the material cost and every labor and margin
field is zero.

Values are returned unrounded; callers round money when persisting.
"""

from collections.abc import Iterable, Mapping
from dataclasses import dataclass

from wrapcommand.backend.core.exceptions import ValidationError
from wrapcommand.backend.services.vehicle_matching import SqftOptions

PANELS = ("sides", "back", "hood", "roof")
DEFAULT_PANELS = ("sides", "back", "hood")
FULL_VEHICLE = "full"


@dataclass(frozen=True)
class LaborRates:
    """Square feet installed per labor hour, per panel."""

    sides: float = 20.0
    back: float = 15.0
    hood: float = 12.0
    roof: float = 18.0
    full: float = 20.0

    @classmethod
    def from_config(cls, config) -> "LaborRates":
        """Build from the ``labor.sqft_per_hour`` section of pricing.yaml."""
        return cls(
            sides=config.sides,
            back=config.back,
            hood=config.hood,
            roof=config.roof,
            full=config.full,
        )

    def divisor(self, panel: str) -> float:
        return getattr(self, panel)


@dataclass(frozen=True)
class QuoteInputs:
    panel_sqft: Mapping[str, float]
    price_per_sqft: float = 0.0
    quantity: int = 1
    installs_enabled: bool = False
    margin_percentage: float = 0.0
    labor_rate_per_hour: float = 0.0
    flat_price: float | None = None


@dataclass(frozen=True)
class QuoteBreakdown:
    sqft: float
    material_cost: float
    installation_included: bool
    labor_hours: float
    labor_cost: float
    margin: float
    margin_amount: float
    total: float


def select_panels(options: SqftOptions, panels: Iterable[str] | None = None) -> dict[str, float]:
    """
    Pick panel figures from a vehicle's sqft options.

    With no selection the roof is left out, matching the default wrap quote.

    Raises:
        ValidationError: If a panel name is unknown or nothing is selected
    """
    selected = list(dict.fromkeys(panels)) if panels is not None else list(DEFAULT_PANELS)
    unknown = [p for p in selected if p not in PANELS]
    if unknown:
        raise ValidationError(
            "Unknown panel",
            details={"panels": unknown, "allowed": list(PANELS)},
        )
    if not selected:
        raise ValidationError("At least one panel must be selected")
    return {panel: getattr(options.panels, panel) for panel in selected}


def explicit_sqft(sqft: float) -> dict[str, float]:
    """Panel mapping for a caller-supplied total, labored at the full-vehicle rate."""
    return {FULL_VEHICLE: sqft}


def derive_quote(inputs: QuoteInputs, labor_rates: LaborRates | None = None) -> QuoteBreakdown:
    """
    Derive material, labor, margin and total for a quote.

    Raises:
        ValidationError: On a non-positive quantity or negative sqft/price
    """
    if inputs.quantity < 1:
        raise ValidationError("Quantity must be at least 1", details={"quantity": inputs.quantity})
    unknown = [p for p in inputs.panel_sqft if p not in PANELS and p != FULL_VEHICLE]
    if unknown:
        raise ValidationError("Unknown panel", details={"panels": unknown})
    if any(value < 0 for value in inputs.panel_sqft.values()):
        raise ValidationError("Square footage cannot be negative")
    if inputs.price_per_sqft < 0 or (inputs.flat_price is not None and inputs.flat_price < 0):
        raise ValidationError("Price cannot be negative")

    rates = labor_rates or LaborRates()
    sqft = sum(inputs.panel_sqft.values())

    if inputs.flat_price is not None:
        material_cost = inputs.flat_price * inputs.quantity
    else:
        material_cost = sqft * inputs.price_per_sqft * inputs.quantity

    if not inputs.installs_enabled:
        return QuoteBreakdown(
            sqft=sqft,
            material_cost=material_cost,
            installation_included=False,
            labor_hours=0.0,
            labor_cost=0.0,
            margin=0.0,
            margin_amount=0.0,
            total=material_cost,
        )

    labor_hours = sum(
        value / rates.divisor(panel)
        for panel, value in inputs.panel_sqft.items()
    ) * inputs.quantity
    labor_cost = labor_hours * inputs.labor_rate_per_hour
    margin_amount = (material_cost + labor_cost) * inputs.margin_percentage / 100

    return QuoteBreakdown(
        sqft=sqft,
        material_cost=material_cost,
        installation_included=True,
        labor_hours=labor_hours,
        labor_cost=labor_cost,
        margin=inputs.margin_percentage,
        margin_amount=margin_amount,
        total=material_cost + labor_cost + margin_amount,
    )


def is_commercial_lead(
    sqft: float,
    texts: Iterable[str | None],
    keywords: Iterable[str],
    sqft_threshold: float,
) -> bool:
    """A fleet or bulk lead: a keyword appears in any text, or the area exceeds the threshold."""
    if sqft > sqft_threshold:
        return True
    haystack = " ".join(t.lower() for t in texts if t)
    return any(keyword.lower() in haystack for keyword in keywords)
