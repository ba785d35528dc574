"""
Organization API Endpoints.

Settings for the calling tenant.
"""

from fastapi import APIRouter

from wrapcommand.backend.core.dependencies import CurrentOrganization, DbSession, RequestId
from wrapcommand.backend.schemas.base import ApiResponse, ResponseMetadata
from wrapcommand.backend.schemas.organization import OrganizationResponse, OrganizationUpdate
from wrapcommand.backend.services.organization import OrganizationService

router = APIRouter()


@router.get(
    "/me",
    response_model=ApiResponse[OrganizationResponse],
    summary="Get the current organization",
)
async def get_current_organization(
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[OrganizationResponse]:
    return ApiResponse(
        data=OrganizationResponse.model_validate(organization),
        metadata=ResponseMetadata(request_id=request_id),
    )


@router.patch(
    "/me",
    response_model=ApiResponse[OrganizationResponse],
    summary="Update organization settings",
    description="Toggle installs, change default margin, labor rate or wholesale visibility.",
)
async def update_current_organization(
    data: OrganizationUpdate,
    db: DbSession,
    request_id: RequestId,
    organization: CurrentOrganization,
) -> ApiResponse[OrganizationResponse]:
    updated = await OrganizationService(db).update_organization(organization, data)
    return ApiResponse(
        data=OrganizationResponse.model_validate(updated),
        metadata=ResponseMetadata(request_id=request_id),
    )
