"""
Base Service.

Shared plumbing for the vehicle, quote, product and organization services:
SQLAlchemy error translation, required-field checks, partial-update
handling and tenant-aware operation logging.

Usage:
    class ProductService(BaseService):
        resource_name = "Product"

        def __init__(self, session: AsyncSession) -> None:
            super().__init__(session)
            self.repo = ProductRepository(session)

        async def create_product(self, organization, data) -> Product:
            self._log_operation("Creating product", organization=organization)
            return await self._execute_db_operation(
                "create_product",
                self.repo.create(organization_id=organization.id, **data.model_dump()),
            )
"""

from typing import TYPE_CHECKING, Any, TypeVar

from pydantic import BaseModel
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from wrapcommand.backend.core.exceptions import (
    ConflictError,
    DatabaseError,
    ValidationError,
)
from wrapcommand.backend.core.logging import get_logger

if TYPE_CHECKING:
    from wrapcommand.backend.models.organization import Organization

T = TypeVar("T")


class BaseService:
    """
    Base class for services.

    Subclasses set ``resource_name`` so constraint violations read as
    "Quote already exists" rather than a driver message, and create their
    repositories in ``__init__`` after calling ``super().__init__``.
    """

    resource_name: str = "Resource"

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._logger = get_logger(self.__class__.__module__)

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def _execute_db_operation(self, operation: str, coro: Any) -> T:
        """
        Await a repository call, translating SQLAlchemy failures.

        Raises:
            ConflictError: Unique constraint hit (duplicate slug, quote number, ...)
            DatabaseError: Any other constraint or driver failure
        """
        try:
            return await coro
        except IntegrityError as e:
            error_str = str(e).lower()
            self._logger.warning(
                "Database integrity error",
                extra={"operation": operation, "resource": self.resource_name, "error": str(e)},
            )
            if "unique" in error_str or "duplicate" in error_str:
                raise ConflictError(f"{self.resource_name} already exists")
            raise DatabaseError(f"Database constraint violation: {operation}")
        except SQLAlchemyError as e:
            self._logger.error(
                "Database error",
                extra={"operation": operation, "resource": self.resource_name, "error": str(e)},
            )
            raise DatabaseError(f"Database operation failed: {operation}")

    def _validate_required(self, fields: dict[str, Any], field_names: list[str]) -> None:
        """
        Reject missing or blank values.

        All offending names are reported together in ``missing_fields``.
        """
        missing = [
            name for name in field_names
            if fields.get(name) is None
            or (isinstance(fields[name], str) and not fields[name].strip())
        ]
        if missing:
            raise ValidationError(
                "Required fields missing",
                details={"missing_fields": missing},
            )

    @staticmethod
    def _changed_fields(data: BaseModel, keep_none: bool = False) -> dict[str, Any]:
        """Fields the client actually sent in a PATCH body.

        Explicit nulls are dropped unless ``keep_none`` is set, for columns
        where null is meaningful (an open-ended vehicle year range).
        """
        return data.model_dump(exclude_unset=True, exclude_none=not keep_none)

    def _log_operation(
        self,
        operation: str,
        organization: "Organization | None" = None,
        **context: Any,
    ) -> None:
        """Log a write at info level, tagged with the service and tenant."""
        if organization is not None:
            context.setdefault("organization_id", organization.id)
            context.setdefault("organization_slug", organization.slug)
        self._logger.info(
            operation,
            extra={"service": self.__class__.__name__, **context},
        )

    def _log_debug(self, message: str, **context: Any) -> None:
        self._logger.debug(
            message,
            extra={"service": self.__class__.__name__, **context},
        )
