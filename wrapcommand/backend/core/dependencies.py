"""
FastAPI Dependencies.

Shared dependencies for request handling: database session, request ID,
tenant resolution from bearer tokens and the embed secret check.
"""

import uuid
from typing import Annotated

from fastapi import Depends, Header
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.database import get_db_session
from wrapcommand.backend.core.exceptions import AuthenticationError, AuthorizationError
from wrapcommand.backend.core.logging import get_logger
from wrapcommand.backend.core.security import organization_id_from_token, verify_embed_secret
from wrapcommand.backend.models.organization import Organization
from wrapcommand.backend.repositories.organization import OrganizationRepository

logger = get_logger(__name__)

DbSession = Annotated[AsyncSession, Depends(get_db_session)]

_bearer = HTTPBearer(auto_error=False)


async def get_request_id(x_request_id: str | None = Header(None)) -> str:
    """Extract or generate request ID from headers."""
    return x_request_id or str(uuid.uuid4())


RequestId = Annotated[str, Depends(get_request_id)]


async def get_current_organization(
    db: DbSession,
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> Organization:
    """
    Resolve the calling tenant from the bearer token.

    Raises:
        AuthenticationError: Missing, invalid or unscoped token, or the
            organization no longer exists
        AuthorizationError: The organization has been deactivated
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Bearer token required")

    organization_id = organization_id_from_token(credentials.credentials)
    organization = await OrganizationRepository(db).get_by_id_or_none(organization_id)
    if organization is None:
        raise AuthenticationError("Organization not found for token")
    if not organization.is_active:
        raise AuthorizationError("Organization is inactive")
    return organization


CurrentOrganization = Annotated[Organization, Depends(get_current_organization)]


async def require_embed_secret(
    x_embed_secret: str | None = Header(None, alias="X-Embed-Secret"),
) -> None:
    """Reject embed requests that do not present the shared secret."""
    if not verify_embed_secret(x_embed_secret):
        logger.warning("Embed request rejected: bad or missing secret")
        raise AuthenticationError("Invalid embed secret")
