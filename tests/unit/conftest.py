"""
Unit Test Fixtures.

Fixtures for unit tests - external dependencies are mocked.
Unit tests should be fast and isolated, never touching real databases
or the network.
"""

from unittest.mock import AsyncMock, MagicMock

import pytest

from wrapcommand.backend.services.vehicle_matching import VehicleRecord


# =============================================================================
# Database Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_db_session() -> AsyncMock:
    """
    Mock database session for unit tests.

    Usage:
        def test_repository(mock_db_session: AsyncMock):
            repo = QuoteRepository(mock_db_session)
    """
    session = AsyncMock()
    session.commit = AsyncMock()
    session.rollback = AsyncMock()
    session.flush = AsyncMock()
    session.refresh = AsyncMock()
    session.execute = AsyncMock()
    session.add = MagicMock()
    session.delete = AsyncMock()
    session.get = AsyncMock()
    return session


@pytest.fixture
def mock_db_result() -> MagicMock:
    """
    Mock database query result.

    Usage:
        def test_query(mock_db_session, mock_db_result):
            mock_db_result.scalar_one_or_none.return_value = organization
            mock_db_session.execute.return_value = mock_db_result
    """
    result = MagicMock()
    result.scalar_one_or_none = MagicMock(return_value=None)
    result.scalars = MagicMock()
    result.scalars.return_value.all = MagicMock(return_value=[])
    result.scalars.return_value.first = MagicMock(return_value=None)
    return result


# =============================================================================
# Settings Mock Fixtures
# =============================================================================


@pytest.fixture
def mock_settings() -> MagicMock:
    """
    Mock secrets.

    Usage:
        def test_with_settings(mock_settings):
            with patch("module.get_settings", return_value=mock_settings):
                ...
    """
    settings = MagicMock()
    settings.db_password = "test_pass"
    settings.jwt_secret = "unit-test-jwt-secret-with-32-characters"
    settings.embed_secret = "unit-test-embed-secret"
    settings.resend_api_key = "re_test_key"
    return settings


# =============================================================================
# Reference Data Fixtures
# =============================================================================


@pytest.fixture
def reference_rows() -> list[VehicleRecord]:
    """In-memory reference rows for matcher tests, in table order."""
    return [
        VehicleRecord("Ford", "F-150", 2009, 2014, 295.0, 180.0, 40.0, 30.0, 45.0),
        VehicleRecord("Ford", "F-150", 2015, 2020, 341.0, 210.0, 45.0, 36.0, 50.0),
        VehicleRecord("Ford", "F-150", 2021, None, 349.0, 214.0, 46.0, 37.0, 52.0),
        VehicleRecord("Ford", "Transit", 2015, None, 540.0, 360.0, 60.0, 20.0, 100.0),
        VehicleRecord("Ford", "Transit Connect", 2014, 2023, 330.0, 220.0, 40.0, 15.0, 55.0),
        VehicleRecord("Chevrolet", "Silverado 1500", 2019, None, 350.0, 216.0, 46.0, 36.0, 52.0),
        VehicleRecord("Mercedes-Benz", "Sprinter", 2007, 2018, 520.0, 345.0, 60.0, 18.0, 97.0),
        VehicleRecord("Mercedes-Benz", "Sprinter", 2019, None, 560.0, 370.0, 65.0, 20.0, 105.0),
        VehicleRecord("Tesla", "Model 3", None, None, 250.0, 150.0, 30.0, 25.0, 45.0),
    ]
