"""
Quote API Endpoints.

Tenant-scoped quote estimation and management.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from wrapcommand.backend.core.dependencies import CurrentOrganization, DbSession, RequestId
from wrapcommand.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from wrapcommand.backend.schemas.base import ApiResponse, ResponseMetadata
from wrapcommand.backend.schemas.quote import (
    QuoteCreate,
    QuoteEstimateRequest,
    QuoteEstimateResponse,
    QuoteListResponse,
    QuoteResponse,
    QuoteStatus,
    QuoteStatusUpdate,
)
from wrapcommand.backend.services.quote import QuoteService

router = APIRouter()


@router.post(
    "/estimate",
    response_model=ApiResponse[QuoteEstimateResponse],
    summary="Estimate a quote",
    description="Derive material, labor and margin for a vehicle without saving.",
)
async def estimate_quote(
    data: QuoteEstimateRequest,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[QuoteEstimateResponse]:
    estimate = await QuoteService(db).estimate(organization, data)
    return ApiResponse(
        data=QuoteEstimateResponse.model_validate(estimate),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.post(
    "",
    response_model=ApiResponse[QuoteResponse],
    status_code=201,
    summary="Create a quote",
)
async def create_quote(
    data: QuoteCreate,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[QuoteResponse]:
    quote = await QuoteService(db).create_quote(organization, data)
    return ApiResponse(
        data=QuoteResponse.model_validate(quote),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get("", summary="List quotes (paginated)")
async def list_quotes(
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
    pagination: PaginationParams = Depends(get_pagination_params),
    status: QuoteStatus | None = Query(default=None, description="Filter by status"),
) -> dict[str, Any]:
    quotes, total = await QuoteService(db).list_quotes(
        organization,
        status=status,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=quotes,
        item_schema=QuoteListResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.get("/{quote_id}", response_model=ApiResponse[QuoteResponse], summary="Get a quote")
async def get_quote(
    quote_id: str,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[QuoteResponse]:
    quote = await QuoteService(db).get_quote(organization, quote_id)
    return ApiResponse(
        data=QuoteResponse.model_validate(quote),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{quote_id}/status",
    response_model=ApiResponse[QuoteResponse],
    summary="Update quote status",
)
async def update_quote_status(
    quote_id: str,
    data: QuoteStatusUpdate,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[QuoteResponse]:
    quote = await QuoteService(db).update_status(organization, quote_id, data.status)
    return ApiResponse(
        data=QuoteResponse.model_validate(quote),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete("/{quote_id}", status_code=204, summary="Delete a quote")
async def delete_quote(
    quote_id: str,
    db: DbSession,
    organization: CurrentOrganization,
) -> None:
    await QuoteService(db).delete_quote(organization, quote_id)
