"""
Base Repository.

Async CRUD over a single model, plus a tenant-scoped variant for rows that
belong to one organization.

Usage:
    class QuoteRepository(TenantScopedRepository[Quote]):
        model = Quote

    quote = await QuoteRepository(session).get_for_organization(org.id, quote_id)
"""

from typing import Any, Generic, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.exceptions import NotFoundError
from wrapcommand.backend.models.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Common operations for a model keyed by a string UUID ``id``."""

    model: type[ModelType]

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def get_by_id(self, id: str | UUID) -> ModelType:
        """
        Get a row by ID.

        Raises:
            NotFoundError: If no row has this ID
        """
        instance = await self.get_by_id_or_none(id)
        if instance is None:
            raise NotFoundError(f"{self.model.__name__} not found")
        return instance

    async def get_by_id_or_none(self, id: str | UUID) -> ModelType | None:
        result = await self.session.execute(
            select(self.model).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none()

    async def create(self, **kwargs: Any) -> ModelType:
        """Insert a row and reload it so server-side values are populated."""
        instance = self.model(**kwargs)
        self.session.add(instance)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def update(self, id: str | UUID, **kwargs: Any) -> ModelType:
        """
        Set attributes on an existing row. Unknown keys are ignored.

        Raises:
            NotFoundError: If no row has this ID
        """
        instance = await self.get_by_id(id)
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        await self.session.flush()
        await self.session.refresh(instance)
        return instance

    async def delete(self, id: str | UUID) -> None:
        """
        Hard-delete a row.

        Raises:
            NotFoundError: If no row has this ID
        """
        instance = await self.get_by_id(id)
        await self.session.delete(instance)
        await self.session.flush()

    async def count(self, *conditions: ColumnElement[bool]) -> int:
        result = await self.session.execute(
            select(func.count()).select_from(self.model).where(*conditions)
        )
        return result.scalar_one()

    async def exists(self, id: str | UUID) -> bool:
        result = await self.session.execute(
            select(self.model.id).where(self.model.id == str(id))
        )
        return result.scalar_one_or_none() is not None

    async def _paginate(
        self,
        query: Select,
        conditions: list[ColumnElement[bool]],
        limit: int,
        offset: int,
    ) -> tuple[list[ModelType], int]:
        """
        Run an ordered query for one page and count every matching row.

        Returns:
            Tuple of (rows on this page, total matching count)
        """
        result = await self.session.execute(
            query.where(*conditions).limit(limit).offset(offset)
        )
        return list(result.scalars().all()), await self.count(*conditions)


class TenantScopedRepository(BaseRepository[ModelType]):
    """Repository for models with an ``organization_id`` owner column."""

    async def get_for_organization(self, organization_id: str, id: str | UUID) -> ModelType | None:
        """Get a row only if it belongs to the organization."""
        result = await self.session.execute(
            select(self.model)
            .where(self.model.id == str(id))
            .where(self.model.organization_id == organization_id)
        )
        return result.scalar_one_or_none()
