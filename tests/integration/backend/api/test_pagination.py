"""
Integration Tests for Pagination.

Tests the pagination functionality in API endpoints.
"""

from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.models.quote import Quote

BASE = "/api/v1/quotes"


async def _add_quotes(db_session: AsyncSession, organization, count: int, status: str = "draft") -> None:
    for i in range(count):
        db_session.add(Quote(
            organization_id=organization.id,
            quote_number=f"WPW-TEST-{uuid4().hex[:8]}",
            customer_name=f"Customer {i}",
            sqft=100.0,
            total_price=525.0,
            status=status,
        ))
    await db_session.flush()


class TestPaginatedListEndpoint:
    """Tests for paginated list endpoint."""

    @pytest.mark.asyncio
    async def test_returns_paginated_response_structure(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should return response with pagination info."""
        await _add_quotes(db_session, organization, 1)

        response = await client.get(BASE, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()

        assert data["success"] is True
        assert "data" in data
        assert "pagination" in data
        assert "metadata" in data

        pagination = data["pagination"]
        assert "total" in pagination
        assert "limit" in pagination
        assert "has_more" in pagination

    @pytest.mark.asyncio
    async def test_respects_limit_parameter(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should respect limit parameter."""
        await _add_quotes(db_session, organization, 10)

        response = await client.get(f"{BASE}?limit=3", headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 3
        assert data["pagination"]["limit"] == 3
        assert data["pagination"]["total"] == 10
        assert data["pagination"]["has_more"] is True

    @pytest.mark.asyncio
    async def test_respects_offset_parameter(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should respect offset parameter."""
        await _add_quotes(db_session, organization, 5)

        response = await client.get(f"{BASE}?limit=2&offset=2", headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 2
        assert data["pagination"]["offset"] == 2
        assert data["pagination"]["has_more"] is True

    @pytest.mark.asyncio
    async def test_has_more_false_at_end(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should set has_more to False when at end."""
        await _add_quotes(db_session, organization, 3)

        response = await client.get(f"{BASE}?limit=10", headers=auth_headers)

        data = response.json()
        assert data["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_empty_results(self, client: AsyncClient, auth_headers):
        """Should handle empty results."""
        response = await client.get(BASE, headers=auth_headers)

        data = response.json()
        assert data["success"] is True
        assert data["data"] == []
        assert data["pagination"]["total"] == 0
        assert data["pagination"]["has_more"] is False

    @pytest.mark.asyncio
    async def test_default_limit(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should use default limit of 20."""
        await _add_quotes(db_session, organization, 25)

        response = await client.get(BASE, headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 20
        assert data["pagination"]["limit"] == 20

    @pytest.mark.asyncio
    async def test_oversized_limit_is_clamped(self, client: AsyncClient, auth_headers):
        """Should clamp limit to the configured maximum of 100."""
        response = await client.get(f"{BASE}?limit=150", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["pagination"]["limit"] == 100

    @pytest.mark.asyncio
    async def test_limit_validation_min(self, client: AsyncClient, auth_headers):
        """Should reject limit under 1."""
        response = await client.get(f"{BASE}?limit=0", headers=auth_headers)

        assert response.status_code == 422

    @pytest.mark.asyncio
    async def test_offset_validation(self, client: AsyncClient, auth_headers):
        """Should reject negative offset."""
        response = await client.get(f"{BASE}?offset=-1", headers=auth_headers)

        assert response.status_code == 422


class TestPaginationWithFiltering:
    """Tests for pagination combined with filtering."""

    @pytest.mark.asyncio
    async def test_total_counts_filtered_rows(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        auth_headers,
    ):
        """Should count only quotes with the requested status."""
        await _add_quotes(db_session, organization, 3, status="draft")
        await _add_quotes(db_session, organization, 2, status="sent")

        response = await client.get(f"{BASE}?status=sent", headers=auth_headers)

        data = response.json()
        assert len(data["data"]) == 2
        assert data["pagination"]["total"] == 2

    @pytest.mark.asyncio
    async def test_total_counts_only_own_quotes(
        self,
        client: AsyncClient,
        db_session: AsyncSession,
        organization,
        install_organization,
        auth_headers,
    ):
        """Should not count another organization's quotes."""
        await _add_quotes(db_session, organization, 2)
        await _add_quotes(db_session, install_organization, 4, status="sent")

        response = await client.get(BASE, headers=auth_headers)

        assert response.json()["pagination"]["total"] == 2


class TestPaginationMetadata:
    """Tests for pagination metadata in responses."""

    @pytest.mark.asyncio
    async def test_includes_request_id(self, client: AsyncClient, auth_headers):
        """Should include request_id in metadata."""
        custom_id = "pagination-test-id"

        response = await client.get(BASE, headers={**auth_headers, "X-Request-ID": custom_id})

        data = response.json()
        assert data["metadata"]["request_id"] == custom_id

    @pytest.mark.asyncio
    async def test_includes_timestamp(self, client: AsyncClient, auth_headers):
        """Should include timestamp in metadata."""
        response = await client.get(BASE, headers=auth_headers)

        data = response.json()
        assert "timestamp" in data["metadata"]
