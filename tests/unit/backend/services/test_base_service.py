"""
Unit Tests for Base Service.

Covers the plumbing every service inherits: database error translation,
required-field checks, PATCH field selection and tenant-aware logging.
"""

from types import SimpleNamespace
from unittest.mock import AsyncMock, patch

import pytest
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wrapcommand.backend.core.exceptions import (
    ConflictError,
    DatabaseError,
    ValidationError,
)
from wrapcommand.backend.schemas.organization import OrganizationUpdate
from wrapcommand.backend.schemas.vehicle import VehicleDimensionUpdate
from wrapcommand.backend.services.base import BaseService
from wrapcommand.backend.services.organization import OrganizationService
from wrapcommand.backend.services.product import ProductService


def _integrity_error(message: str) -> IntegrityError:
    return IntegrityError("INSERT ...", {}, Exception(message))


async def _raise(exc: Exception):
    raise exc


class TestExecuteDbOperation:
    """Tests for _execute_db_operation."""

    @pytest.mark.asyncio
    async def test_returns_result(self, mock_db_session):
        async def load():
            return ["F-150", "Transit"]

        result = await BaseService(mock_db_session)._execute_db_operation("load_vehicle_rows", load())

        assert result == ["F-150", "Transit"]

    @pytest.mark.asyncio
    async def test_unique_violation_names_the_resource(self, mock_db_session):
        service = OrganizationService(mock_db_session)

        with pytest.raises(ConflictError) as exc_info:
            await service._execute_db_operation(
                "create_organization",
                _raise(_integrity_error("UNIQUE constraint failed: organizations.slug")),
            )

        assert exc_info.value.message == "Organization already exists"
        assert exc_info.value.code == "RES_CONFLICT"

    @pytest.mark.asyncio
    async def test_postgres_duplicate_key_is_a_conflict(self, mock_db_session):
        with pytest.raises(ConflictError) as exc_info:
            await ProductService(mock_db_session)._execute_db_operation(
                "create_product",
                _raise(_integrity_error('duplicate key value violates unique constraint "products_pkey"')),
            )

        assert exc_info.value.message == "Product already exists"

    @pytest.mark.asyncio
    async def test_other_integrity_error_is_database_error(self, mock_db_session):
        with pytest.raises(DatabaseError) as exc_info:
            await BaseService(mock_db_session)._execute_db_operation(
                "create_quote",
                _raise(_integrity_error("FOREIGN KEY constraint failed")),
            )

        assert exc_info.value.message == "Database constraint violation: create_quote"

    @pytest.mark.asyncio
    async def test_driver_error_is_database_error(self, mock_db_session):
        with pytest.raises(DatabaseError) as exc_info:
            await BaseService(mock_db_session)._execute_db_operation(
                "load_vehicle_rows",
                _raise(SQLAlchemyError("connection reset")),
            )

        assert exc_info.value.message == "Database operation failed: load_vehicle_rows"


class TestValidateRequired:
    """Tests for _validate_required."""

    @pytest.fixture
    def service(self, mock_db_session):
        return BaseService(mock_db_session)

    def test_passes_with_make_and_model(self, service):
        service._validate_required({"make": "Ford", "model": "F-150"}, ["make", "model"])

    @pytest.mark.parametrize("model", [None, "", "   "])
    def test_blank_values_are_missing(self, service, model):
        with pytest.raises(ValidationError) as exc_info:
            service._validate_required({"make": "Ford", "model": model}, ["make", "model"])

        assert exc_info.value.details == {"missing_fields": ["model"]}

    def test_reports_every_missing_field_in_order(self, service):
        with pytest.raises(ValidationError) as exc_info:
            service._validate_required({"year": "2020"}, ["make", "model"])

        assert exc_info.value.details["missing_fields"] == ["make", "model"]


class TestChangedFields:
    """Tests for _changed_fields."""

    def test_only_sent_fields(self):
        data = OrganizationUpdate(installs_enabled=True)

        assert BaseService._changed_fields(data) == {"installs_enabled": True}

    def test_explicit_null_dropped_by_default(self):
        data = OrganizationUpdate(name=None, labor_rate_per_hour=90.0)

        assert BaseService._changed_fields(data) == {"labor_rate_per_hour": 90.0}

    def test_keep_none_reopens_a_year_range(self):
        data = VehicleDimensionUpdate(year_end=None)

        assert BaseService._changed_fields(data, keep_none=True) == {"year_end": None}


class TestLogging:
    """Tests for the logging helpers."""

    def test_log_operation_tags_service(self, mock_db_session):
        service = ProductService(mock_db_session)

        with patch.object(service._logger, "info") as mock_info:
            service._log_operation("Deactivating product", product_id="p-1")

        extra = mock_info.call_args.kwargs["extra"]
        assert extra == {"service": "ProductService", "product_id": "p-1"}

    def test_log_operation_tags_tenant(self, mock_db_session):
        service = BaseService(mock_db_session)
        organization = SimpleNamespace(id="org-1", slug="test-wrap-shop")

        with patch.object(service._logger, "info") as mock_info:
            service._log_operation("Creating quote", organization=organization, total_price=1527.75)

        extra = mock_info.call_args.kwargs["extra"]
        assert extra["organization_id"] == "org-1"
        assert extra["organization_slug"] == "test-wrap-shop"
        assert extra["total_price"] == 1527.75

    def test_log_debug_tags_service(self, mock_db_session):
        service = BaseService(mock_db_session)

        with patch.object(service._logger, "debug") as mock_debug:
            service._log_debug("Vehicle matched", match_type="exact")

        assert mock_debug.call_args.kwargs["extra"] == {"service": "BaseService", "match_type": "exact"}


def test_session_property(mock_db_session):
    assert OrganizationService(mock_db_session).session is mock_db_session
