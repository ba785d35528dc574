"""
Vehicle Service.

Runs the vehicle matcher over the vehicle_dimensions table and manages the
table itself (admin edits and seeding from the bundled reference data).
"""

from collections.abc import Iterable

from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.config import get_app_config
from wrapcommand.backend.core.exceptions import ConflictError, ValidationError, VehicleNotMatchedError
from wrapcommand.backend.models.vehicle import VehicleDimension
from wrapcommand.backend.repositories.vehicle import VehicleDimensionRepository
from wrapcommand.backend.schemas.vehicle import VehicleDimensionCreate, VehicleDimensionUpdate
from wrapcommand.backend.services import vehicle_matching
from wrapcommand.backend.services.base import BaseService
from wrapcommand.backend.services.vehicle_matching import (
    ParsedVehicleQuery,
    VehicleMatch,
    VehicleOption,
    VehicleRecord,
)


class VehicleService(BaseService):
    """
    Service for vehicle square-footage lookups and the reference table.

    Lookups load the full table and match in memory; the table is small
    and changes only through admin edits.
    """

    resource_name = "Vehicle dimensions"

    def __init__(self, session: AsyncSession) -> None:
        super().__init__(session)
        self.repo = VehicleDimensionRepository(session)
        self.max_year_distance = get_app_config().pricing.vehicle_match.max_year_distance

    async def _rows(self) -> list[VehicleDimension]:
        return await self._execute_db_operation("load_vehicle_rows", self.repo.get_all_rows())

    async def find_sqft(self, year: str | None, make: str, model: str) -> VehicleMatch | None:
        """Match a vehicle, returning None when no make and model row exists."""
        rows = await self._rows()
        return vehicle_matching.match_vehicle(
            rows, year, make, model, max_year_distance=self.max_year_distance
        )

    async def lookup_sqft(self, year: str | None, make: str | None, model: str | None) -> VehicleMatch:
        """
        Match a vehicle against the reference table.

        Raises:
            ValidationError: If make or model is missing
            VehicleNotMatchedError: If no row shares make and model
        """
        self._validate_required({"make": make, "model": model}, ["make", "model"])
        match = await self.find_sqft(year, make, model)
        if match is None:
            self._log_debug("Vehicle not matched", year=year, make=make, model=model)
            raise VehicleNotMatchedError(year or "", make, model)
        self._log_debug(
            "Vehicle matched",
            make=match.make,
            model=match.model,
            match_type=match.match_type,
        )
        return match

    async def lookup_query(self, text: str) -> tuple[ParsedVehicleQuery, VehicleMatch | None]:
        """Parse a free-text query such as ``2020 Ford F150`` and match it."""
        if not text or not text.strip():
            raise ValidationError("Query must not be empty", details={"q": "required"})
        rows = await self._rows()
        return vehicle_matching.lookup_query(rows, text, max_year_distance=self.max_year_distance)

    async def list_makes(self) -> list[str]:
        return vehicle_matching.list_makes(await self._rows())

    async def list_models(self, make: str) -> list[str]:
        return vehicle_matching.list_models(await self._rows(), make)

    async def list_years(self, make: str, model: str) -> list[int]:
        return vehicle_matching.list_years(await self._rows(), make, model)

    async def list_options(self) -> list[VehicleOption]:
        return vehicle_matching.vehicle_options(await self._rows())

    async def list_vehicles(
        self,
        make: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VehicleDimension], int]:
        return await self.repo.list_page(make=make, limit=limit, offset=offset)

    async def get_vehicle(self, vehicle_id: str) -> VehicleDimension:
        return await self.repo.get_by_id(vehicle_id)

    async def create_vehicle(self, data: VehicleDimensionCreate) -> VehicleDimension:
        """
        Add a reference row. ``total_sqft`` defaults to the panel sum.

        Raises:
            ConflictError: If a row with the same make, model and years exists
        """
        existing = await self.repo.find_existing(data.make, data.model, data.year_start, data.year_end)
        if existing is not None:
            raise ConflictError("Vehicle dimensions already exist for this make, model and years")

        values = data.model_dump()
        if values["total_sqft"] is None:
            values["total_sqft"] = round(
                data.side_sqft + data.back_sqft + data.hood_sqft + data.roof_sqft, 1
            )

        self._log_operation("Creating vehicle dimensions", make=data.make, model=data.model)
        return await self._execute_db_operation("create_vehicle", self.repo.create(**values))

    async def update_vehicle(self, vehicle_id: str, data: VehicleDimensionUpdate) -> VehicleDimension:
        """
        Update a reference row.

        Raises:
            NotFoundError: If the row does not exist
            ValidationError: If the resulting year range is inverted
        """
        vehicle = await self.repo.get_by_id(vehicle_id)
        update_data = self._changed_fields(data, keep_none=True)
        if not update_data:
            return vehicle

        year_start = update_data.get("year_start", vehicle.year_start)
        year_end = update_data.get("year_end", vehicle.year_end)
        if year_start is not None and year_end is not None and year_start > year_end:
            raise ValidationError(
                "year_start must not be after year_end",
                details={"year_start": year_start, "year_end": year_end},
            )

        self._log_operation(
            "Updating vehicle dimensions",
            vehicle_id=vehicle_id,
            fields=list(update_data.keys()),
        )
        return await self._execute_db_operation(
            "update_vehicle",
            self.repo.update(vehicle_id, **update_data),
        )

    async def delete_vehicle(self, vehicle_id: str) -> None:
        self._log_operation("Deleting vehicle dimensions", vehicle_id=vehicle_id)
        await self._execute_db_operation("delete_vehicle", self.repo.delete(vehicle_id))

    async def seed_reference_table(
        self,
        records: Iterable[VehicleRecord] | None = None,
    ) -> tuple[int, int]:
        """
        Insert reference rows that are not already present.

        Args:
            records: Rows to seed; defaults to the bundled reference table

        Returns:
            Tuple of (inserted, skipped)
        """
        if records is None:
            records = vehicle_matching.load_reference_table()

        inserted = skipped = 0
        for record in records:
            existing = await self.repo.find_existing(
                record.make, record.model, record.year_start, record.year_end
            )
            if existing is not None:
                skipped += 1
                continue
            await self._execute_db_operation(
                "seed_vehicle",
                self.repo.create(
                    make=record.make,
                    model=record.model,
                    year_start=record.year_start,
                    year_end=record.year_end,
                    total_sqft=record.total_sqft,
                    side_sqft=record.side_sqft,
                    back_sqft=record.back_sqft,
                    hood_sqft=record.hood_sqft,
                    roof_sqft=record.roof_sqft,
                ),
            )
            inserted += 1

        self._log_operation("Vehicle reference table seeded", inserted=inserted, skipped=skipped)
        return inserted, skipped
