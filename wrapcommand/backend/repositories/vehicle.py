"""
Vehicle Dimension Repository.

Data access for the vehicle reference table.
"""

from sqlalchemy import func, select

from wrapcommand.backend.models.vehicle import VehicleDimension
from wrapcommand.backend.repositories.base import BaseRepository


class VehicleDimensionRepository(BaseRepository[VehicleDimension]):
    """
    Repository for VehicleDimension rows.

    Rows are always returned in a stable order (make, model, year_start)
    because the matcher breaks ties by position.
    """

    model = VehicleDimension

    def _ordered(self):
        return select(VehicleDimension).order_by(
            VehicleDimension.make,
            VehicleDimension.model,
            VehicleDimension.year_start.asc().nulls_last(),
        )

    async def get_all_rows(self) -> list[VehicleDimension]:
        """Load the whole table for matching."""
        result = await self.session.execute(self._ordered())
        return list(result.scalars().all())

    async def list_page(
        self,
        make: str | None = None,
        limit: int = 50,
        offset: int = 0,
    ) -> tuple[list[VehicleDimension], int]:
        """
        List rows with an optional case-insensitive make filter.

        Returns:
            Tuple of (rows, total matching count)
        """
        conditions = []
        if make:
            conditions.append(func.lower(VehicleDimension.make) == make.strip().lower())
        return await self._paginate(self._ordered(), conditions, limit, offset)

    async def find_existing(
        self,
        make: str,
        model: str,
        year_start: int | None,
        year_end: int | None,
    ) -> VehicleDimension | None:
        """Find a row with the same make, model and year range (case-insensitive)."""
        query = select(VehicleDimension).where(
            func.lower(VehicleDimension.make) == make.lower(),
            func.lower(VehicleDimension.model) == model.lower(),
        )
        query = query.where(
            VehicleDimension.year_start.is_(None) if year_start is None
            else VehicleDimension.year_start == year_start
        )
        query = query.where(
            VehicleDimension.year_end.is_(None) if year_end is None
            else VehicleDimension.year_end == year_end
        )
        result = await self.session.execute(query.limit(1))
        return result.scalar_one_or_none()
