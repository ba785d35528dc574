"""
Vehicle API Endpoints.

Square-footage lookup and catalog endpoints are public; editing the
reference table requires a bearer token.
"""

from typing import Any

from fastapi import APIRouter, Depends, Query

from wrapcommand.backend.core.dependencies import DbSession, RequestId, get_current_organization
from wrapcommand.backend.core.pagination import (
    PaginationParams,
    create_paginated_response,
    get_pagination_params,
)
from wrapcommand.backend.schemas.base import ApiResponse, ResponseMetadata
from wrapcommand.backend.schemas.vehicle import (
    VehicleDimensionCreate,
    VehicleDimensionResponse,
    VehicleDimensionUpdate,
    VehicleLookupResponse,
    VehicleMatchResponse,
    VehicleOptionResponse,
)
from wrapcommand.backend.services.vehicle import VehicleService

router = APIRouter()


@router.get(
    "/sqft",
    response_model=ApiResponse[VehicleMatchResponse],
    summary="Look up vehicle square footage",
    description="Best match for year, make and model. 404 when no make and model row exists.",
)
async def get_vehicle_sqft(
    db: DbSession,
    request_id: RequestId,
    make: str = Query(..., min_length=1, max_length=100),
    model: str = Query(..., min_length=1, max_length=100),
    year: str | None = Query(default=None, max_length=20),
) -> ApiResponse[VehicleMatchResponse]:
    match = await VehicleService(db).lookup_sqft(year, make, model)
    return ApiResponse(
        data=VehicleMatchResponse.model_validate(match),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "/lookup",
    response_model=ApiResponse[VehicleLookupResponse],
    summary="Natural-language vehicle lookup",
    description="Parse a query such as '2020 Ford F150' and match it. ``match`` is null when nothing matches.",
)
async def lookup_vehicle(
    db: DbSession,
    request_id: RequestId,
    q: str = Query(..., min_length=1, max_length=200),
) -> ApiResponse[VehicleLookupResponse]:
    parsed, match = await VehicleService(db).lookup_query(q)
    return ApiResponse(
        data=VehicleLookupResponse(
            query=q,
            year=parsed.year,
            make=parsed.make,
            model=parsed.model,
            match=VehicleMatchResponse.model_validate(match) if match else None,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get("/makes", response_model=ApiResponse[list[str]], summary="List makes")
async def list_makes(db: DbSession, request_id: RequestId) -> ApiResponse[list[str]]:
    makes = await VehicleService(db).list_makes()
    return ApiResponse(data=makes, metadata=ResponseMetadata(request_id=request_id))


@router.get("/models", response_model=ApiResponse[list[str]], summary="List models for a make")
async def list_models(
    db: DbSession,
    request_id: RequestId,
    make: str = Query(..., min_length=1, max_length=100),
) -> ApiResponse[list[str]]:
    models = await VehicleService(db).list_models(make)
    return ApiResponse(data=models, metadata=ResponseMetadata(request_id=request_id))


@router.get("/years", response_model=ApiResponse[list[int]], summary="List model years")
async def list_years(
    db: DbSession,
    request_id: RequestId,
    make: str = Query(..., min_length=1, max_length=100),
    model: str = Query(..., min_length=1, max_length=100),
) -> ApiResponse[list[int]]:
    years = await VehicleService(db).list_years(make, model)
    return ApiResponse(data=years, metadata=ResponseMetadata(request_id=request_id))


@router.get(
    "/options",
    response_model=ApiResponse[list[VehicleOptionResponse]],
    summary="Vehicle dropdown options",
)
async def list_options(db: DbSession, request_id: RequestId) -> ApiResponse[list[VehicleOptionResponse]]:
    options = await VehicleService(db).list_options()
    return ApiResponse(
        data=[VehicleOptionResponse.model_validate(o) for o in options],
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.get(
    "",
    summary="List reference rows (paginated)",
    dependencies=[Depends(get_current_organization)],
)
async def list_vehicles(
    db: DbSession,
    request_id: RequestId,
    pagination: PaginationParams = Depends(get_pagination_params),
    make: str | None = Query(default=None, max_length=100),
) -> dict[str, Any]:
    vehicles, total = await VehicleService(db).list_vehicles(
        make=make,
        limit=pagination.limit,
        offset=pagination.offset,
    )
    return create_paginated_response(
        items=vehicles,
        item_schema=VehicleDimensionResponse,
        total=total,
        limit=pagination.limit,
        offset=pagination.offset,
        request_id=request_id,
    )


@router.post(
    "",
    response_model=ApiResponse[VehicleDimensionResponse],
    status_code=201,
    summary="Add a reference row",
    dependencies=[Depends(get_current_organization)],
)
async def create_vehicle(
    data: VehicleDimensionCreate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[VehicleDimensionResponse]:
    vehicle = await VehicleService(db).create_vehicle(data)
    return ApiResponse(
        data=VehicleDimensionResponse.model_validate(vehicle),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/{vehicle_id}",
    response_model=ApiResponse[VehicleDimensionResponse],
    summary="Update a reference row",
    dependencies=[Depends(get_current_organization)],
)
async def update_vehicle(
    vehicle_id: str,
    data: VehicleDimensionUpdate,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[VehicleDimensionResponse]:
    vehicle = await VehicleService(db).update_vehicle(vehicle_id, data)
    return ApiResponse(
        data=VehicleDimensionResponse.model_validate(vehicle),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.delete(
    "/{vehicle_id}",
    status_code=204,
    summary="Delete a reference row",
    dependencies=[Depends(get_current_organization)],
)
async def delete_vehicle(
    vehicle_id: str,
    db: DbSession,
) -> None:
    await VehicleService(db).delete_vehicle(vehicle_id)
