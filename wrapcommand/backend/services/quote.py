"""
Quote Service.

Prices and persists quotes for a tenant, and accepts quote requests from the
public website embed.
"""

from dataclasses import dataclass

from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.config import get_app_config
from wrapcommand.backend.core.exceptions import (
    AuthorizationError,
    ExternalServiceError,
    NotFoundError,
    ValidationError,
)
from wrapcommand.backend.core.utils import round_currency, utc_now
from wrapcommand.backend.integrations.email import EmailClient, render_quote_confirmation
from wrapcommand.backend.models.organization import Organization
from wrapcommand.backend.models.product import PRICING_FLAT
from wrapcommand.backend.models.quote import QUOTE_STATUSES, Quote
from wrapcommand.backend.repositories.quote import QuoteRepository
from wrapcommand.backend.schemas.quote import (
    PublicQuoteSubmission,
    QuoteCreate,
    QuoteEstimateRequest,
)
from wrapcommand.backend.services.base import BaseService
from wrapcommand.backend.services.organization import OrganizationService
from wrapcommand.backend.services.product import ProductService
from wrapcommand.backend.services.quote_engine import (
    LaborRates,
    QuoteBreakdown,
    QuoteInputs,
    derive_quote,
    explicit_sqft,
    is_commercial_lead,
    select_panels,
)
from wrapcommand.backend.services.vehicle import VehicleService
from wrapcommand.backend.services.vehicle_matching import VehicleMatch


@dataclass(frozen=True)
class Pricing:
    product_name: str | None
    price_per_sqft: float | None
    flat_price: float | None = None


@dataclass(frozen=True)
class QuoteEstimate:
    """A derived quote before persistence, with money rounded to cents."""

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
    vehicle_match: VehicleMatch | None = None

    @classmethod
    def from_breakdown(
        cls,
        breakdown: QuoteBreakdown,
        panels: list[str],
        pricing: Pricing,
        quantity: int,
        vehicle_match: VehicleMatch | None,
    ) -> "QuoteEstimate":
        material_cost = round_currency(breakdown.material_cost)
        labor_cost = round_currency(breakdown.labor_cost)
        margin_amount = round_currency(breakdown.margin_amount)
        return cls(
            sqft=round(breakdown.sqft, 1),
            panels=panels,
            product_name=pricing.product_name,
            price_per_sqft=pricing.price_per_sqft,
            quantity=quantity,
            material_cost=material_cost,
            installation_included=breakdown.installation_included,
            labor_hours=round(breakdown.labor_hours, 2),
            labor_cost=labor_cost,
            margin=breakdown.margin,
            margin_amount=margin_amount,
            # Total is summed from the rounded parts so the parts always add up
            total_price=round_currency(material_cost + labor_cost + margin_amount),
            vehicle_match=vehicle_match,
        )


@dataclass(frozen=True)
class PublicQuoteResult:
    quote: Quote
    material: str
    price_per_sqft: float


class QuoteService(BaseService):
    """
    Service for quote pricing and lifecycle.

    Pricing order: a product by ID, then an explicit price per sqft, then
    the default material from pricing.yaml. Square footage comes from the
    vehicle matcher unless the caller passes it explicitly.
    """

    resource_name = "Quote"

    def __init__(self, session: AsyncSession, email_client: EmailClient | None = None) -> None:
        super().__init__(session)
        self.repo = QuoteRepository(session)
        self.vehicles = VehicleService(session)
        self.products = ProductService(session)
        self.organizations = OrganizationService(session)
        self._email_client = email_client
        self._pricing = get_app_config().pricing

    @property
    def email_client(self) -> EmailClient:
        if self._email_client is None:
            self._email_client = EmailClient()
        return self._email_client

    # -------------------------------------------------------------------------
    # Pricing
    # -------------------------------------------------------------------------

    def _material(self, requested: str | None) -> tuple[str, float]:
        """Resolve a material by catalog key or name fragment, else the default."""
        materials = self._pricing.materials
        if requested:
            wanted = requested.strip().lower()
            for key, material in materials.catalog.items():
                if wanted == key.lower() or wanted in material.name.lower():
                    return material.name, material.price_per_sqft
        default = materials.catalog[materials.default]
        return default.name, default.price_per_sqft

    async def _resolve_pricing(
        self,
        organization: Organization,
        product_id: str | None,
        price_per_sqft: float | None,
    ) -> Pricing:
        if product_id:
            product = await self.products.get_visible_product(organization, product_id)
            if product.pricing_type == PRICING_FLAT:
                return Pricing(product.product_name, None, flat_price=product.flat_price or 0.0)
            return Pricing(product.product_name, product.price_per_sqft or 0.0)
        if price_per_sqft is not None:
            return Pricing(None, price_per_sqft)
        name, price = self._material(None)
        return Pricing(name, price)

    async def _resolve_area(
        self,
        year: str | None,
        make: str | None,
        model: str | None,
        sqft: float | None,
        panels: list[str] | None,
    ) -> tuple[dict[str, float], VehicleMatch | None]:
        if sqft is not None:
            return explicit_sqft(sqft), None
        match = await self.vehicles.lookup_sqft(year, make, model)
        return select_panels(match.sqft, panels), match

    def _labor_rates(self) -> LaborRates:
        return LaborRates.from_config(self._pricing.labor.sqft_per_hour)

    async def estimate(self, organization: Organization, data: QuoteEstimateRequest) -> QuoteEstimate:
        """
        Derive a quote for the organization without saving it.

        Raises:
            VehicleNotMatchedError: If the vehicle is not in the reference table
            NotFoundError: If the product is not visible to the organization
            ValidationError: On invalid panels or prices
        """
        panel_sqft, match = await self._resolve_area(
            data.vehicle_year, data.vehicle_make, data.vehicle_model, data.sqft, data.panels
        )
        pricing = await self._resolve_pricing(organization, data.product_id, data.price_per_sqft)
        margin = data.margin if data.margin is not None else organization.default_margin_percentage

        breakdown = derive_quote(
            QuoteInputs(
                panel_sqft=panel_sqft,
                price_per_sqft=pricing.price_per_sqft or 0.0,
                quantity=data.quantity,
                installs_enabled=organization.installs_enabled,
                margin_percentage=margin,
                labor_rate_per_hour=organization.labor_rate_per_hour,
                flat_price=pricing.flat_price,
            ),
            self._labor_rates(),
        )
        return QuoteEstimate.from_breakdown(
            breakdown, list(panel_sqft), pricing, data.quantity, match
        )

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    async def next_quote_number(self) -> str:
        """Next number in today's sequence, e.g. ``WPW-250114-0003``."""
        prefix = f"{self._pricing.quote_number_prefix}-{utc_now():%y%m%d}-"
        sequence = await self.repo.count_numbers_with_prefix(prefix) + 1
        return f"{prefix}{sequence:04d}"

    def _is_commercial(self, sqft: float, *texts: str | None) -> bool:
        commercial = self._pricing.commercial
        return is_commercial_lead(sqft, texts, commercial.keywords, commercial.sqft_threshold)

    async def _persist(
        self,
        organization: Organization,
        estimate: QuoteEstimate,
        *,
        status: str,
        source: str,
        is_commercial: bool,
        **fields,
    ) -> Quote:
        quote_number = await self.next_quote_number()
        return await self._execute_db_operation(
            "create_quote",
            self.repo.create(
                organization_id=organization.id,
                quote_number=quote_number,
                sqft=estimate.sqft,
                panels=",".join(estimate.panels),
                product_name=estimate.product_name,
                price_per_sqft=estimate.price_per_sqft,
                quantity=estimate.quantity,
                material_cost=estimate.material_cost,
                installation_included=estimate.installation_included,
                labor_hours=estimate.labor_hours,
                labor_cost=estimate.labor_cost,
                margin=estimate.margin,
                margin_amount=estimate.margin_amount,
                total_price=estimate.total_price,
                status=status,
                source=source,
                is_commercial=is_commercial,
                **fields,
            ),
        )

    async def create_quote(self, organization: Organization, data: QuoteCreate) -> Quote:
        """Price and save a quote as a draft."""
        estimate = await self.estimate(organization, data)
        is_commercial = self._is_commercial(estimate.sqft, data.notes, data.category)

        self._log_operation(
            "Creating quote",
            organization=organization,
            total_price=estimate.total_price,
            is_commercial=is_commercial,
        )
        return await self._persist(
            organization,
            estimate,
            status="draft",
            source=data.source,
            is_commercial=is_commercial,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            customer_company=data.customer_company,
            vehicle_year=data.vehicle_year,
            vehicle_make=data.vehicle_make,
            vehicle_model=data.vehicle_model,
            notes=data.notes,
            utm_source=data.utm_source,
            utm_medium=data.utm_medium,
            utm_campaign=data.utm_campaign,
        )

    async def submit_public_quote(self, data: PublicQuoteSubmission) -> PublicQuoteResult:
        """
        Accept a quote request from the website embed.

        Embed quotes are material-only: sqft (without roof) times the
        requested material's price. The quote is saved as a draft and moves
        to ``sent`` once the confirmation email is delivered. Email failures
        are logged and leave ``email_sent`` false.

        Raises:
            AuthorizationError: If public submission is disabled
            NotFoundError: If the organization slug is unknown
            VehicleNotMatchedError: If the vehicle is not in the reference table
        """
        features = get_app_config().features
        if not features.public_quote_submission_enabled:
            raise AuthorizationError("Public quote submission is disabled")

        organization = await self.organizations.get_by_slug(data.organization_slug)
        material_name, price = self._material(data.material)
        panel_sqft, match = await self._resolve_area(
            data.vehicle_year, data.vehicle_make, data.vehicle_model, data.sqft, None
        )
        breakdown = derive_quote(QuoteInputs(panel_sqft=panel_sqft, price_per_sqft=price))
        estimate = QuoteEstimate.from_breakdown(
            breakdown, list(panel_sqft), Pricing(material_name, price), 1, match
        )
        is_commercial = self._is_commercial(estimate.sqft, data.notes, data.category)

        quote = await self._persist(
            organization,
            estimate,
            status="draft",
            source="embed",
            is_commercial=is_commercial,
            customer_name=data.customer_name,
            customer_email=data.customer_email,
            customer_phone=data.customer_phone,
            customer_company=data.customer_company,
            vehicle_year=data.vehicle_year,
            vehicle_make=data.vehicle_make,
            vehicle_model=data.vehicle_model,
            notes=data.notes,
            utm_source=data.utm_source,
            utm_medium=data.utm_medium,
            utm_campaign=data.utm_campaign,
        )
        self._log_operation(
            "Public quote submitted",
            organization=organization,
            quote_number=quote.quote_number,
            is_commercial=is_commercial,
        )

        if features.quote_confirmation_email_enabled:
            quote = await self._send_confirmation(quote, material_name)

        return PublicQuoteResult(quote=quote, material=material_name, price_per_sqft=price)

    async def _send_confirmation(self, quote: Quote, material_name: str) -> Quote:
        vehicle = " ".join(
            part for part in (quote.vehicle_year, quote.vehicle_make, quote.vehicle_model) if part
        )
        message = render_quote_confirmation(
            customer_name=quote.customer_name,
            customer_email=quote.customer_email,
            quote_number=quote.quote_number,
            vehicle=vehicle,
            material=material_name,
            sqft=quote.sqft,
            total_price=quote.total_price,
        )
        try:
            await self.email_client.send(message)
        except ExternalServiceError as e:
            self._logger.warning(
                "Quote confirmation email not sent",
                extra={"quote_number": quote.quote_number, "error": e.message},
            )
            return quote

        return await self._execute_db_operation(
            "mark_quote_sent",
            self.repo.update(quote.id, email_sent=True, status="sent"),
        )

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    async def get_quote(self, organization: Organization, quote_id: str) -> Quote:
        """
        Raises:
            NotFoundError: If the quote does not exist for this organization
        """
        quote = await self.repo.get_for_organization(organization.id, quote_id)
        if quote is None:
            raise NotFoundError("Quote not found")
        return quote

    async def list_quotes(
        self,
        organization: Organization,
        status: str | None = None,
        limit: int = 20,
        offset: int = 0,
    ) -> tuple[list[Quote], int]:
        if status is not None and status not in QUOTE_STATUSES:
            raise ValidationError(
                "Unknown quote status",
                details={"status": status, "allowed": list(QUOTE_STATUSES)},
            )
        return await self.repo.list_for_organization(
            organization.id, status=status, limit=limit, offset=offset
        )

    async def update_status(self, organization: Organization, quote_id: str, status: str) -> Quote:
        """
        Raises:
            NotFoundError: If the quote does not exist for this organization
            ValidationError: If the status is not one of draft, sent, approved, expired
        """
        if status not in QUOTE_STATUSES:
            raise ValidationError(
                "Unknown quote status",
                details={"status": status, "allowed": list(QUOTE_STATUSES)},
            )
        quote = await self.get_quote(organization, quote_id)
        self._log_operation(
            "Updating quote status",
            quote_number=quote.quote_number,
            old_status=quote.status,
            new_status=status,
        )
        return await self._execute_db_operation(
            "update_quote_status",
            self.repo.update(quote.id, status=status),
        )

    async def delete_quote(self, organization: Organization, quote_id: str) -> None:
        quote = await self.get_quote(organization, quote_id)
        self._log_operation("Deleting quote", quote_number=quote.quote_number)
        await self._execute_db_operation("delete_quote", self.repo.delete(quote.id))
