"""
Organization Repository.

Data access for tenants.
"""

from sqlalchemy import select

from wrapcommand.backend.models.organization import Organization
from wrapcommand.backend.repositories.base import BaseRepository


class OrganizationRepository(BaseRepository[Organization]):
    model = Organization

    async def get_by_slug(self, slug: str) -> Organization | None:
        """Get an active organization by its slug."""
        result = await self.session.execute(
            select(Organization)
            .where(Organization.slug == slug)
            .where(Organization.is_active == True)  # noqa: E712
        )
        return result.scalar_one_or_none()

    async def slug_exists(self, slug: str) -> bool:
        result = await self.session.execute(
            select(Organization.id).where(Organization.slug == slug)
        )
        return result.scalar_one_or_none() is not None
