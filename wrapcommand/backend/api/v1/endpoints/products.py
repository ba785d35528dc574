"""
Product API Endpoints.

Tenant product catalog management.
"""

from fastapi import APIRouter, Query

from wrapcommand.backend.core.dependencies import CurrentOrganization, DbSession, RequestId
from wrapcommand.backend.schemas.base import ApiResponse, ResponseMetadata
from wrapcommand.backend.schemas.product import ProductCreate, ProductResponse, ProductUpdate
from wrapcommand.backend.services.product import ProductService

router = APIRouter()


@router.get("", response_model=ApiResponse[list[ProductResponse]], summary="List products")
async def list_products(
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
    include_inactive: bool = Query(default=False, description="Include deactivated products"),
) -> ApiResponse[list[ProductResponse]]:
    products = await ProductService(db).list_products(organization, include_inactive=include_inactive)
    return ApiResponse(
        data=[ProductResponse.model_validate(p) for p in products],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[ProductResponse],
    status_code=201,
    summary="Create a product",
)
async def create_product(
    data: ProductCreate,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[ProductResponse]:
    product = await ProductService(db).create_product(organization, data)
    return ApiResponse(
        data=ProductResponse.model_validate(product),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{product_id}",
    response_model=ApiResponse[ProductResponse],
    summary="Update a product",
    description="Refused for locked, global, or other tenants' products.",
)
async def update_product(
    product_id: str,
    data: ProductUpdate,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[ProductResponse]:
    product = await ProductService(db).update_product(organization, product_id, data)
    return ApiResponse(
        data=ProductResponse.model_validate(product),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete("/{product_id}", status_code=204, summary="Deactivate a product")
async def delete_product(
    product_id: str,
    db: DbSession,
    organization: CurrentOrganization,
) -> None:
    await ProductService(db).delete_product(organization, product_id)
