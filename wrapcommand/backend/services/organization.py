"""
Organization Service.

Tenant creation and settings.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.config import get_app_config
from wrapcommand.backend.core.exceptions import ConflictError, NotFoundError
from wrapcommand.backend.models.organization import Organization
from wrapcommand.backend.repositories.organization import OrganizationRepository
from wrapcommand.backend.schemas.organization import OrganizationCreate, OrganizationUpdate
from wrapcommand.backend.services.base import BaseService


class OrganizationService(BaseService):
    """Service for tenant lifecycle and settings."""

    resource_name = "Organization"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = OrganizationRepository(session)

    async def create_organization(self, data: OrganizationCreate) -> Organization:
        """
        Create a tenant. Unset margin and labor rate come from pricing.yaml.

        Raises:
            ConflictError: If the slug is taken
        """
        if await self.repo.slug_exists(data.slug):
            raise ConflictError(f"Organization slug '{data.slug}' is already in use")

        pricing = get_app_config().pricing
        margin = data.default_margin_percentage
        labor_rate = data.labor_rate_per_hour

        self._log_operation("Creating organization", slug=data.slug)
        return await self._execute_db_operation(
            "create_organization",
            self.repo.create(
                name=data.name,
                slug=data.slug,
                installs_enabled=data.installs_enabled,
                default_margin_percentage=(
                    margin if margin is not None else pricing.margin.default_percentage
                ),
                labor_rate_per_hour=(
                    labor_rate if labor_rate is not None else pricing.labor.default_rate_per_hour
                ),
            ),
        )

    async def get_organization(self, organization_id: str) -> Organization:
        return await self.repo.get_by_id(organization_id)

    async def get_by_slug(self, slug: str) -> Organization:
        """
        Get an active organization by slug.

        Raises:
            NotFoundError: If no active organization has this slug
        """
        organization = await self.repo.get_by_slug(slug)
        if organization is None:
            raise NotFoundError(f"Organization '{slug}' not found")
        return organization

    async def update_organization(
        self,
        organization: Organization,
        data: OrganizationUpdate,
    ) -> Organization:
        """Update tenant settings. Only fields present in the request change."""
        update_data = self._changed_fields(data)
        if not update_data:
            return organization

        self._log_operation(
            "Updating organization",
            organization=organization,
            fields=list(update_data.keys()),
        )
        return await self._execute_db_operation(
            "update_organization",
            self.repo.update(organization.id, **update_data),
        )
