"""
Public API Endpoints.

Endpoints called by the website embed widget. Authenticated with the shared
X-Embed-Secret header rather than a bearer token.
"""

from fastapi import APIRouter, Depends

from wrapcommand.backend.core.dependencies import DbSession, RequestId, require_embed_secret
from wrapcommand.backend.schemas.base import ApiResponse, ResponseMetadata
from wrapcommand.backend.schemas.quote import PublicQuoteResponse, PublicQuoteSubmission
from wrapcommand.backend.services.quote import QuoteService

router = APIRouter(dependencies=[Depends(require_embed_secret)])


@router.post(
    "/quotes",
    response_model=ApiResponse[PublicQuoteResponse],
    status_code=201,
    summary="Submit a quote request from the embed widget",
)
async def submit_public_quote(
    data: PublicQuoteSubmission,
    db: DbSession,
    request_id: RequestId,
) -> ApiResponse[PublicQuoteResponse]:
    result = await QuoteService(db).submit_public_quote(data)
    quote = result.quote
    return ApiResponse(
        data=PublicQuoteResponse(
            quote_number=quote.quote_number,
            material=result.material,
            price_per_sqft=result.price_per_sqft,
            sqft=quote.sqft,
            total_price=quote.total_price,
            status=quote.status,
            is_commercial=quote.is_commercial,
            email_sent=quote.email_sent,
        ),
        metadata=ResponseMetadata(request_id=request_id),
    )
