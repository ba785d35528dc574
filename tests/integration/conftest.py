"""
Integration Test Fixtures.

An ASGI client bound to the per-test database session from the root
conftest, envelope assertions, and credentials for each caller type:
dashboard tenants (bearer tokens) and the embed widget (shared secret).
"""

from collections.abc import AsyncGenerator
from typing import Any

import httpx
import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.database import get_db_session
from wrapcommand.backend.core.security import create_organization_token
from wrapcommand.backend.models.organization import Organization


@pytest.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[httpx.AsyncClient, None]:
    """App client whose requests share the test session, so nothing outlives the test."""
    from wrapcommand.backend.main import create_app

    async def override_get_db_session() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    app = create_app()
    app.dependency_overrides[get_db_session] = override_get_db_session

    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url="http://test") as test_client:
        yield test_client

    app.dependency_overrides.clear()


class ApiAssertions:
    """Checks for the success/error envelope. Each returns the decoded body."""

    @staticmethod
    def _body(response: httpx.Response, expected_status: int) -> dict[str, Any]:
        assert response.status_code == expected_status, (
            f"Expected {expected_status}, got {response.status_code}: {response.text}"
        )
        return response.json()

    def assert_success(self, response: httpx.Response, expected_status: int = 200) -> dict[str, Any]:
        data = self._body(response, expected_status)
        assert data["success"] is True, data
        assert data["error"] is None, data
        return data

    def assert_error(
        self,
        response: httpx.Response,
        expected_status: int,
        expected_code: str | None = None,
    ) -> dict[str, Any]:
        data = self._body(response, expected_status)
        assert data["success"] is False, data
        assert data["data"] is None, data
        if expected_code is not None:
            assert data["error"]["code"] == expected_code, data["error"]
        return data

    def assert_validation_error(self, response: httpx.Response, field: str | None = None) -> dict[str, Any]:
        """422 ``VAL_REQUEST_INVALID``; ``field`` matches any part of a dotted location."""
        data = self.assert_error(response, 422, "VAL_REQUEST_INVALID")
        if field is not None:
            fields = [e["field"] for e in data["error"]["details"]["validation_errors"]]
            assert any(field in f for f in fields), f"No error for {field!r} in {fields}"
        return data


@pytest.fixture
def api() -> ApiAssertions:
    return ApiAssertions()


def bearer_headers(organization: Organization) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_organization_token(organization.id)}", "X-Frontend-ID": "web"}


@pytest.fixture
def auth_headers(organization: Organization) -> dict[str, str]:
    """Dashboard headers for the material-only test organization."""
    return bearer_headers(organization)


@pytest.fixture
def install_auth_headers(install_organization: Organization) -> dict[str, str]:
    """Dashboard headers for the organization with installs enabled."""
    return bearer_headers(install_organization)


@pytest.fixture
def embed_headers(embed_secret: str) -> dict[str, str]:
    """Headers sent by the website embed widget."""
    return {"X-Embed-Secret": embed_secret, "X-Frontend-ID": "embed"}
