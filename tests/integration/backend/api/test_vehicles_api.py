"""
Integration Tests for Vehicle API.

Tests square-footage lookup, catalog and reference-table endpoints
against a real database.
"""

import pytest
from httpx import AsyncClient

BASE = "/api/v1/vehicles"


@pytest.mark.usefixtures("seeded_vehicles")
class TestVehicleSqft:
    """Tests for GET /api/v1/vehicles/sqft."""

    @pytest.mark.asyncio
    async def test_exact_year_match(self, client: AsyncClient, api):
        """Should return the row whose range covers the year."""
        response = await client.get(f"{BASE}/sqft", params={"year": "2018", "make": "Ford", "model": "F150"})

        data = api.assert_success(response)["data"]
        assert data["make"] == "Ford"
        assert data["model"] == "F-150"
        assert data["year_start"] == 2015
        assert data["year_end"] == 2020
        assert data["match_type"] == "exact"
        assert data["sqft"]["with_roof"] == 341.0
        assert data["sqft"]["without_roof"] == 291.0
        assert data["sqft"]["roof_only"] == 50.0
        assert data["sqft"]["panels"] == {"sides": 210.0, "back": 45.0, "hood": 36.0, "roof": 50.0}

    @pytest.mark.asyncio
    async def test_closest_year_match(self, client: AsyncClient, api):
        """Should fall back to the nearest range within the distance limit."""
        response = await client.get(f"{BASE}/sqft", params={"year": "2023", "make": "ford", "model": "f-150"})

        data = api.assert_success(response)["data"]
        assert data["match_type"] == "closest_year"
        assert data["year_end"] == 2020

    @pytest.mark.asyncio
    async def test_any_year_match_when_too_far(self, client: AsyncClient, api):
        """Should return the first row for the model when no year is close."""
        response = await client.get(f"{BASE}/sqft", params={"year": "1990", "make": "Ford", "model": "F-150"})

        data = api.assert_success(response)["data"]
        assert data["match_type"] == "any_year"
        assert data["year_start"] == 2009

    @pytest.mark.asyncio
    async def test_make_alias_and_van_suffix(self, client: AsyncClient, api):
        """Should resolve 'Mercedes' and 'Sprinter Van' to the stored row."""
        response = await client.get(
            f"{BASE}/sqft",
            params={"year": "2021", "make": "Mercedes", "model": "Sprinter Van"},
        )

        data = api.assert_success(response)["data"]
        assert data["make"] == "Mercedes-Benz"
        assert data["sqft"]["with_roof"] == 560.0

    @pytest.mark.asyncio
    async def test_year_is_optional(self, client: AsyncClient, api):
        """Should match without a year."""
        response = await client.get(f"{BASE}/sqft", params={"make": "Ford", "model": "Transit"})

        data = api.assert_success(response)["data"]
        assert data["model"] == "Transit"
        assert data["match_type"] == "exact"

    @pytest.mark.asyncio
    async def test_unknown_vehicle_returns_404(self, client: AsyncClient, api):
        """Should return VEHICLE_NOT_MATCHED when no make and model row exists."""
        response = await client.get(f"{BASE}/sqft", params={"year": "2020", "make": "Ford", "model": "Bronco"})

        data = api.assert_error(response, 404, "VEHICLE_NOT_MATCHED")
        assert data["error"]["details"]["model"] == "Bronco"

    @pytest.mark.asyncio
    async def test_missing_model_is_rejected(self, client: AsyncClient, api):
        """Should reject requests without a model."""
        response = await client.get(f"{BASE}/sqft", params={"make": "Ford"})

        api.assert_validation_error(response, field="model")


@pytest.mark.usefixtures("seeded_vehicles")
class TestVehicleLookup:
    """Tests for GET /api/v1/vehicles/lookup."""

    @pytest.mark.asyncio
    async def test_parses_and_matches_query(self, client: AsyncClient, api):
        """Should split '2020 Ford F150' and match it."""
        response = await client.get(f"{BASE}/lookup", params={"q": "2020 Ford F150"})

        data = api.assert_success(response)["data"]
        assert data["query"] == "2020 Ford F150"
        assert data["year"] == 2020
        assert data["make"] == "ford"
        assert data["model"] == "f-150"
        assert data["match"]["year_start"] == 2015

    @pytest.mark.asyncio
    async def test_unmatched_query_returns_null_match(self, client: AsyncClient, api):
        """Should answer 200 with a null match rather than 404."""
        response = await client.get(f"{BASE}/lookup", params={"q": "2022 Tesla Cybertruck"})

        data = api.assert_success(response)["data"]
        assert data["year"] == 2022
        assert data["match"] is None


@pytest.mark.usefixtures("seeded_vehicles")
class TestVehicleCatalog:
    """Tests for the makes, models, years and options endpoints."""

    @pytest.mark.asyncio
    async def test_list_makes(self, client: AsyncClient, api):
        response = await client.get(f"{BASE}/makes")

        assert api.assert_success(response)["data"] == ["Ford", "Mercedes-Benz"]

    @pytest.mark.asyncio
    async def test_list_models(self, client: AsyncClient, api):
        response = await client.get(f"{BASE}/models", params={"make": "ford"})

        assert api.assert_success(response)["data"] == ["F-150", "Transit"]

    @pytest.mark.asyncio
    async def test_list_years_newest_first(self, client: AsyncClient, api):
        response = await client.get(f"{BASE}/years", params={"make": "Ford", "model": "F-150"})

        years = api.assert_success(response)["data"]
        assert years[0] == 2020
        assert years[-1] == 2009
        assert len(years) == 12

    @pytest.mark.asyncio
    async def test_list_options(self, client: AsyncClient, api):
        """Should return one option per row, newest range first within a model."""
        response = await client.get(f"{BASE}/options")

        options = api.assert_success(response)["data"]
        assert len(options) == 4
        assert options[0] == {"label": "2015–2020 Ford F-150", "value": "ford|f-150|2015-2020"}
        assert options[1]["value"] == "ford|f-150|2009-2014"
        assert {"label": "2015+ Ford Transit", "value": "ford|transit|2015+"} in options


@pytest.mark.usefixtures("seeded_vehicles")
class TestVehicleAdmin:
    """Tests for the authenticated reference-table endpoints."""

    @pytest.mark.asyncio
    async def test_list_requires_token(self, client: AsyncClient, api):
        response = await client.get(BASE)

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_invalid_token_rejected(self, client: AsyncClient, api):
        response = await client.get(BASE, headers={"Authorization": "Bearer not-a-token"})

        api.assert_error(response, 401, "AUTH_UNAUTHORIZED")

    @pytest.mark.asyncio
    async def test_list_paginated_with_make_filter(self, client: AsyncClient, api, auth_headers):
        response = await client.get(BASE, params={"make": "FORD", "limit": 2}, headers=auth_headers)

        data = api.assert_success(response)
        assert len(data["data"]) == 2
        assert data["pagination"]["total"] == 3
        assert data["pagination"]["has_more"] is True

    @pytest.mark.asyncio
    async def test_create_defaults_total_to_panel_sum(self, client: AsyncClient, api, auth_headers):
        payload = {
            "make": "Ram",
            "model": "ProMaster",
            "year_start": 2014,
            "year_end": 2023,
            "side_sqft": 200.0,
            "back_sqft": 40.0,
            "hood_sqft": 20.0,
            "roof_sqft": 60.0,
        }
        response = await client.post(BASE, json=payload, headers=auth_headers)

        data = api.assert_success(response, 201)["data"]
        assert data["total_sqft"] == 320.0

        lookup = await client.get(f"{BASE}/sqft", params={"year": "2016", "make": "RAM", "model": "promaster"})
        assert api.assert_success(lookup)["data"]["sqft"]["with_roof"] == 320.0

    @pytest.mark.asyncio
    async def test_create_duplicate_conflicts(self, client: AsyncClient, api, auth_headers):
        payload = {"make": "Ford", "model": "Transit", "year_start": 2015, "total_sqft": 500.0}

        response = await client.post(BASE, json=payload, headers=auth_headers)

        api.assert_error(response, 409, "RES_CONFLICT")

    @pytest.mark.asyncio
    async def test_create_rejects_inverted_years(self, client: AsyncClient, api, auth_headers):
        payload = {"make": "Ford", "model": "Ranger", "year_start": 2020, "year_end": 2019}

        response = await client.post(BASE, json=payload, headers=auth_headers)

        api.assert_validation_error(response)

    @pytest.mark.asyncio
    async def test_update_row(self, client: AsyncClient, api, auth_headers, seeded_vehicles):
        transit = seeded_vehicles[2]

        response = await client.patch(
            f"{BASE}/{transit.id}",
            json={"total_sqft": 555.0},
            headers=auth_headers,
        )

        assert api.assert_success(response)["data"]["total_sqft"] == 555.0

    @pytest.mark.asyncio
    async def test_update_rejects_inverted_range(self, client: AsyncClient, api, auth_headers, seeded_vehicles):
        """year_start after the stored year_end should be refused."""
        older_f150 = seeded_vehicles[0]

        response = await client.patch(
            f"{BASE}/{older_f150.id}",
            json={"year_start": 2016},
            headers=auth_headers,
        )

        api.assert_error(response, 400, "VAL_VALIDATION_ERROR")

    @pytest.mark.asyncio
    async def test_delete_row(self, client: AsyncClient, api, auth_headers, seeded_vehicles):
        sprinter = seeded_vehicles[3]

        response = await client.delete(f"{BASE}/{sprinter.id}", headers=auth_headers)
        assert response.status_code == 204

        lookup = await client.get(f"{BASE}/sqft", params={"make": "Mercedes-Benz", "model": "Sprinter"})
        api.assert_error(lookup, 404, "VEHICLE_NOT_MATCHED")

    @pytest.mark.asyncio
    async def test_update_unknown_row_returns_404(self, client: AsyncClient, api, auth_headers):
        response = await client.patch(f"{BASE}/does-not-exist", json={"total_sqft": 1.0}, headers=auth_headers)

        api.assert_error(response, 404, "RES_NOT_FOUND")
