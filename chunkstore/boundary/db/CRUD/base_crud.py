"""
Base CRUD operations for SQLAlchemy models.

Provides generic create and composite-key read operations that can be
inherited and extended by model-specific CRUD classes.

Dependencies: sqlalchemy
System role: Foundation for all database CRUD operations
"""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from chunkstore.boundary.db.base import Base

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Generic base class for CRUD operations.

    Key lookups take every primary key column as keyword arguments, so a
    partitioned table is never queried by a partial key.

    Type Parameters:
        ModelT: SQLAlchemy model class inheriting from Base

    Attributes:
        model: The SQLAlchemy model class to operate on
    """

    def __init__(self, model: type[ModelT]) -> None:
        """
        Initialize CRUD with target model.

        Args:
            model: SQLAlchemy model class for database operations
        """
        self.model = model
        self.key_columns = [column.key for column in model.__table__.primary_key.columns]

    def _key_clause(self, key: dict[str, Any]) -> list:
        missing = [name for name in self.key_columns if key.get(name) is None]
        if missing:
            raise ValueError(f"Missing primary key column(s): {', '.join(missing)}")
        return [getattr(self.model, name) == key[name] for name in self.key_columns]

    async def create(self, session: AsyncSession, **kwargs) -> ModelT:
        """
        Create a new record in the database.

        Args:
            session: Async database session
            **kwargs: Model field values

        Returns:
            Created model instance with generated ID and defaults
        """
        instance = self.model(**kwargs)
        session.add(instance)
        await session.flush()
        await session.refresh(instance)
        return instance

    async def get_by_key(self, session: AsyncSession, **key: Any) -> ModelT | None:
        """
        Retrieve a single record by its full primary key.

        Args:
            session: Async database session
            **key: Values for every primary key column

        Returns:
            Model instance if found, None otherwise

        Raises:
            ValueError: If a primary key column is missing
        """
        stmt = select(self.model).where(*self._key_clause(key))
        result = await session.execute(stmt)
        return result.scalar_one_or_none()
