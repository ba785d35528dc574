"""
Product Repository.

Data access for tenant and global wholesale products.
"""

from sqlalchemy import or_, select

from wrapcommand.backend.models.product import Product
from wrapcommand.backend.repositories.base import BaseRepository


class ProductRepository(BaseRepository[Product]):
    model = Product

    async def list_visible(
        self,
        organization_id: str,
        include_global: bool = True,
        include_inactive: bool = False,
    ) -> list[Product]:
        """
        Products an organization can quote with.

        Args:
            organization_id: Tenant whose products to list
            include_global: Also return products with no owning organization
            include_inactive: Include soft-deleted products
        """
        owner = Product.organization_id == organization_id
        if include_global:
            owner = or_(owner, Product.organization_id.is_(None))

        query = select(Product).where(owner)
        if not include_inactive:
            query = query.where(Product.is_active == True)  # noqa: E712

        result = await self.session.execute(
            query.order_by(Product.display_order, Product.product_name)
        )
        return list(result.scalars().all())
