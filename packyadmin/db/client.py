"""
Catalog data-store client.

A small table-scoped client over an async session factory. Every call runs
in its own session and commits before returning, so each call is an
independent request against the store: a failed call never undoes an
earlier one.

One client is built at startup and handed to whatever needs it through the
``get_client`` dependency.
"""

from collections.abc import Iterable, Sequence
from typing import Any, TypeVar

from sqlalchemy import delete, func, or_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from packyadmin.models.db import Base

ModelT = TypeVar("ModelT", bound=Base)


class CatalogClientError(Exception):
    """A store operation failed."""

    def __init__(self, operation: str, table: str, cause: Exception) -> None:
        self.operation = operation
        self.table = table
        self.cause = cause
        super().__init__(f"{operation} on '{table}' failed: {cause}")


class CatalogClient:
    """Select / insert / update / delete against the catalog tables."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def select(
        self,
        model: type[ModelT],
        *,
        filters: dict[str, Any] | None = None,
        search: str | None = None,
        search_columns: Sequence[str] = (),
        order_by: str | None = None,
        ascending: bool = True,
        limit: int | None = None,
    ) -> list[ModelT]:
        """
        Fetch rows from a table.

        Args:
            model: ORM model naming the table
            filters: Column equality filters, AND-ed together
            search: Case-insensitive substring matched against search_columns (OR-ed)
            search_columns: Columns the search term applies to
            order_by: Column to sort by
            ascending: Sort direction
            limit: Maximum rows to return
        """
        stmt = select(model)
        for column, value in (filters or {}).items():
            stmt = stmt.where(getattr(model, column) == value)

        if search and search_columns:
            pattern = f"%{search}%"
            stmt = stmt.where(or_(*(getattr(model, col).ilike(pattern) for col in search_columns)))

        if order_by:
            column = getattr(model, order_by)
            stmt = stmt.order_by(column.asc() if ascending else column.desc())

        if limit is not None:
            stmt = stmt.limit(limit)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except SQLAlchemyError as e:
                raise CatalogClientError("select", model.__tablename__, e) from e
            return list(result.scalars().all())

    async def get(self, model: type[ModelT], row_id: str) -> ModelT | None:
        """Fetch one row by primary key, or None."""
        async with self._session_factory() as session:
            try:
                return await session.get(model, row_id)
            except SQLAlchemyError as e:
                raise CatalogClientError("get", model.__tablename__, e) from e

    async def insert(self, model: type[ModelT], rows: Iterable[dict[str, Any]]) -> list[ModelT]:
        """
        Insert rows in a single transaction.

        Either every row is stored or none is.
        """
        async with self._session_factory() as session:
            objects = [model(**row) for row in rows]
            session.add_all(objects)
            try:
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise CatalogClientError("insert", model.__tablename__, e) from e
            return objects

    async def update(
        self, model: type[ModelT], row_id: str, values: dict[str, Any]
    ) -> ModelT | None:
        """Apply values to one row. Returns None if the row does not exist."""
        async with self._session_factory() as session:
            try:
                obj = await session.get(model, row_id)
                if obj is None:
                    return None
                for column, value in values.items():
                    setattr(obj, column, value)
                await session.commit()
                await session.refresh(obj)
            except SQLAlchemyError as e:
                await session.rollback()
                raise CatalogClientError("update", model.__tablename__, e) from e
            return obj

    async def delete(self, model: type[ModelT], row_id: str) -> bool:
        """Delete one row by primary key. Returns False if nothing was deleted."""
        async with self._session_factory() as session:
            try:
                stmt = delete(model).where(model.id == row_id)  # type: ignore[attr-defined]
                result = await session.execute(stmt)
                await session.commit()
            except SQLAlchemyError as e:
                await session.rollback()
                raise CatalogClientError("delete", model.__tablename__, e) from e
            # rowcount is available on DELETE results; type stubs incomplete for async
            return int(result.rowcount) > 0  # type: ignore[attr-defined]

    async def count(self, model: type[ModelT], *, filters: dict[str, Any] | None = None) -> int:
        """Number of rows matching the equality filters."""
        stmt = select(func.count()).select_from(model)
        for column, value in (filters or {}).items():
            stmt = stmt.where(getattr(model, column) == value)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except SQLAlchemyError as e:
                raise CatalogClientError("count", model.__tablename__, e) from e
            return int(result.scalar_one())

    async def count_by(self, model: type[ModelT], column: str) -> dict[str, int]:
        """Row counts grouped by the values of one column."""
        col = getattr(model, column)
        stmt = select(col, func.count()).group_by(col)

        async with self._session_factory() as session:
            try:
                result = await session.execute(stmt)
            except SQLAlchemyError as e:
                raise CatalogClientError("count", model.__tablename__, e) from e
            return {str(key): int(total) for key, total in result.all()}
