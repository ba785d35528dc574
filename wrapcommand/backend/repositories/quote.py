"""
Quote Repository.

Tenant-scoped data access for quotes.
"""

from sqlalchemy import select

from wrapcommand.backend.models.quote import Quote
from wrapcommand.backend.repositories.base import TenantScopedRepository


class QuoteRepository(TenantScopedRepository[Quote]):
    model = Quote

    async def list_for_organization(
        self,
        organization_id: str,
        status: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[Quote], int]:
        """
        List an organization's quotes, newest first.

        Returns:
            Tuple of (quotes, total matching count)
        """
        conditions = [Quote.organization_id == organization_id]
        if status:
            conditions.append(Quote.status == status)
        query = select(Quote).order_by(Quote.created_at.desc(), Quote.quote_number.desc())
        return await self._paginate(query, conditions, limit, offset)

    async def count_numbers_with_prefix(self, prefix: str) -> int:
        """Count quote numbers starting with ``prefix`` (used for daily sequencing)."""
        return await self.count(Quote.quote_number.like(f"{prefix}%"))
