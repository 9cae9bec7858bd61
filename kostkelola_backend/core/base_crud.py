"""
Base CRUD operations for consistent data access patterns across all modules.

CRUD helpers only add/flush; the calling service owns the transaction and
decides when to commit or roll back.
"""

from abc import ABC
from typing import Any, Generic, TypeVar

from sqlalchemy import delete, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

from ..modules.commons.schemas import ListParams, SortDirection
from .utils import utc_now

# Generic type variables for type safety
ModelType = TypeVar("ModelType")
CreateSchemaType = TypeVar("CreateSchemaType")
UpdateSchemaType = TypeVar("UpdateSchemaType")


class BaseCRUD(Generic[ModelType, CreateSchemaType, UpdateSchemaType], ABC):
    """
    Base CRUD class providing common database operations.

    Attributes:
        model: SQLAlchemy model class
        search_fields: Fields to search in for text-based queries
        default_order_by: Default ordering field
        default_order_desc: Whether the default ordering is descending
    """

    def __init__(self, model: type[ModelType]):
        """Initialize CRUD operations for a specific model."""
        self.model = model

    # Configuration attributes that can be overridden by subclasses
    search_fields: list[str] = []
    default_order_by: str = "created_at"
    default_order_desc: bool = True

    def _apply_search_filter(
        self, query: Select, search_query: str | None = None
    ) -> Select:
        """Apply case-insensitive substring search across configured fields."""
        if search_query and self.search_fields:
            search_conditions = []
            for field_name in self.search_fields:
                if hasattr(self.model, field_name):
                    field = getattr(self.model, field_name)
                    search_conditions.append(field.ilike(f"%{search_query}%"))
            if search_conditions:
                query = query.where(or_(*search_conditions))
        return query

    def _apply_custom_filters(
        self, query: Select, filters: dict[str, Any] | None = None
    ) -> Select:
        """Apply equality filters, skipping None values and unknown fields."""
        if not filters:
            return query

        for field_name, value in filters.items():
            if value is not None and hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                query = query.where(field == value)
        return query

    def _apply_ordering(
        self,
        query: Select,
        order_by: str | None = None,
        direction: SortDirection | None = None,
    ) -> Select:
        """Apply ordering to query."""
        order_field = order_by if order_by and hasattr(self.model, order_by) else None
        order_field = order_field or self.default_order_by
        if direction is None:
            descending = self.default_order_desc if not order_by else False
        else:
            descending = direction == SortDirection.DESC

        if hasattr(self.model, order_field):
            field = getattr(self.model, order_field)
            query = query.order_by(field.desc() if descending else field.asc())
        return query

    async def get(self, db: AsyncSession, id: int) -> ModelType | None:
        """Get a single record by primary key."""
        result = await db.execute(select(self.model).where(self.model.id == id))
        return result.scalar_one_or_none()

    async def get_multi(
        self,
        db: AsyncSession,
        filters: dict[str, Any] | None = None,
        params: ListParams | None = None,
    ) -> list[ModelType]:
        """
        Get every record matching the filters, searched and sorted.

        Args:
            db: Database session
            filters: Equality filters to apply
            params: Search and sort parameters

        Returns:
            The full matching list (no pagination)
        """
        params = params or ListParams()
        query = select(self.model)
        query = self._apply_custom_filters(query, filters)
        query = self._apply_search_filter(query, params.search)
        query = self._apply_ordering(query, params.sort_field, params.sort_direction)

        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_property_id(
        self,
        db: AsyncSession,
        property_id: int,
        params: ListParams | None = None,
        **filters,
    ) -> list[ModelType]:
        """Get every record belonging to a property."""
        return await self.get_multi(
            db, filters={"property_id": property_id, **filters}, params=params
        )

    async def create(
        self,
        db: AsyncSession,
        obj_in: CreateSchemaType | dict[str, Any],
        **kwargs,
    ) -> ModelType:
        """
        Create a new record.

        Args:
            db: Database session
            obj_in: Data for creating the record
            **kwargs: Additional fields to set on the model

        Returns:
            The created (flushed, not committed) model instance
        """
        if isinstance(obj_in, dict):
            obj_data = dict(obj_in)
        else:
            obj_data = obj_in.model_dump(exclude_unset=True)
        obj_data.update(kwargs)

        db_obj = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        db_obj: ModelType,
        obj_in: UpdateSchemaType | dict[str, Any],
    ) -> ModelType:
        """
        Update a record and stamp ``updated_at``.

        Args:
            db: Database session
            db_obj: Existing database object
            obj_in: Update data

        Returns:
            The updated model instance
        """
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)

        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        if hasattr(db_obj, "updated_at"):
            db_obj.updated_at = utc_now()

        await db.flush()
        return db_obj

    async def delete(self, db: AsyncSession, db_obj: ModelType) -> None:
        """Delete a record."""
        await db.delete(db_obj)
        await db.flush()

    async def delete_where(self, db: AsyncSession, **filters) -> int:
        """Bulk delete by equality filters. Returns the number of rows removed."""
        statement = delete(self.model)
        for field_name, value in filters.items():
            statement = statement.where(getattr(self.model, field_name) == value)
        result = await db.execute(statement)
        return result.rowcount or 0

    async def exists(self, db: AsyncSession, **filters) -> bool:
        """Check if a record exists with the given filters."""
        return await self.count(db, **filters) > 0

    async def count(self, db: AsyncSession, **filters) -> int:
        """Count records matching the given field filters."""
        query = select(func.count(self.model.id))

        for field_name, value in filters.items():
            if hasattr(self.model, field_name):
                field = getattr(self.model, field_name)
                query = query.where(field == value)

        result = await db.execute(query)
        return result.scalar() or 0
