"""
Product Service.

Tenant product catalog. Tenants see their own products plus global
wholesale products when ``show_wholesale_products`` is on. Global and
locked products are read-only to tenants.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.exceptions import (
    AuthorizationError,
    LockedResourceError,
    NotFoundError,
)
from wrapcommand.backend.models.organization import Organization
from wrapcommand.backend.models.product import Product
from wrapcommand.backend.repositories.product import ProductRepository
from wrapcommand.backend.schemas.product import ProductCreate, ProductUpdate
from wrapcommand.backend.services.base import BaseService


class ProductService(BaseService):
    resource_name = "Product"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = ProductRepository(session)

    async def list_products(
        self,
        organization: Organization,
        include_inactive: bool = False,
    ) -> list[Product]:
        return await self.repo.list_visible(
            organization.id,
            include_global=organization.show_wholesale_products,
            include_inactive=include_inactive,
        )

    async def get_visible_product(self, organization: Organization, product_id: str) -> Product:
        """
        Get an active product the organization may quote with.

        Raises:
            NotFoundError: If the product does not exist, is inactive or
                is not visible to the organization
        """
        product = await self.repo.get_by_id_or_none(product_id)
        if product is None or not product.is_active:
            raise NotFoundError("Product not found")
        if product.is_global:
            if not organization.show_wholesale_products:
                raise NotFoundError("Product not found")
        elif product.organization_id != organization.id:
            raise NotFoundError("Product not found")
        return product

    async def _get_editable(self, organization: Organization, product_id: str) -> Product:
        product = await self.repo.get_by_id_or_none(product_id)
        if product is None or (
            not product.is_global and product.organization_id != organization.id
        ):
            raise NotFoundError("Product not found")
        if product.is_global:
            raise AuthorizationError("Global products cannot be modified")
        if product.is_locked:
            raise LockedResourceError("Product is locked")
        return product

    async def create_product(self, organization: Organization, data: ProductCreate) -> Product:
        self._log_operation(
            "Creating product",
            organization=organization,
            product_name=data.product_name,
        )
        return await self._execute_db_operation(
            "create_product",
            self.repo.create(
                organization_id=organization.id,
                is_locked=False,
                **data.model_dump(),
            ),
        )

    async def update_product(
        self,
        organization: Organization,
        product_id: str,
        data: ProductUpdate,
    ) -> Product:
        """
        Raises:
            NotFoundError: Unknown product or owned by another tenant
            AuthorizationError: Global product
            LockedResourceError: Locked product
        """
        product = await self._get_editable(organization, product_id)
        update_data = self._changed_fields(data)
        if not update_data:
            return product

        self._log_operation(
            "Updating product",
            product_id=product_id,
            fields=list(update_data.keys()),
        )
        return await self._execute_db_operation(
            "update_product",
            self.repo.update(product_id, **update_data),
        )

    async def delete_product(self, organization: Organization, product_id: str) -> None:
        """Soft-delete a product by marking it inactive."""
        await self._get_editable(organization, product_id)
        self._log_operation("Deactivating product", product_id=product_id)
        await self._execute_db_operation(
            "delete_product",
            self.repo.update(product_id, is_active=False),
        )
