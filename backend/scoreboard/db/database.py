# Connection manager: owns the pooled async engine and the query primitive
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, AsyncEngine, create_async_engine
from sqlalchemy.sql.elements import TextClause

from scoreboard.db.base import Base
import scoreboard.models  # noqa: F401  (registers tables on Base.metadata)

logger = logging.getLogger(__name__)


@dataclass
class QueryResult:
    rows: list[dict[str, Any]] = field(default_factory=list)
    row_count: int = 0


class Database:
    def __init__(self, connection_string: str):
        self.connection_string = connection_string
        self.engine: AsyncEngine | None = None
        # close() tasks scheduled by the pool error observer
        self.pending: set[asyncio.Task] = set()

    @property
    def is_open(self) -> bool:
        return self.engine is not None

    def open(self):
        """
        Create the connection pool. Nothing connects until the first query.
        Opening again replaces the pool without disposing the previous one.
        """
        self.engine = create_async_engine(self.connection_string)
        event.listen(self.engine.sync_engine, "handle_error", self._on_error)

    def _on_error(self, context):
        # only connection level faults take the pool down, statement errors
        # are handled in query()
        if not context.is_disconnect:
            return
        logger.error(f"Error in database pool: {context.original_exception}")
        try:
            task = asyncio.get_running_loop().create_task(self.close())
        except RuntimeError:
            logger.error("No running event loop, unable to close database pool")
            return
        self.pending.add(task)
        task.add_done_callback(self.pending.discard)

    async def close(self) -> bool:
        if self.engine is None:
            logger.error("Unable to close database connection that is not open")
            return False

        try:
            await self.engine.dispose()
            return True
        except Exception as e:
            logger.error(f"Error closing database pool: {e}")
            return False
        finally:
            self.engine = None

    async def connect(self) -> AsyncConnection | None:
        if self.engine is None:
            logger.error("Tried to use a database that is not open")
            return None

        try:
            return await self.engine.connect()
        except Exception as e:
            logger.error(f"Error connecting to database: {e}")
            return None

    async def query(
        self, sql: str | TextClause, params: dict[str, Any] | None = None
    ) -> QueryResult | None:
        """
        Run a single statement on a pooled connection and commit it.
        Returns None if no connection could be had or the statement failed;
        the connection goes back to the pool either way.
        """
        conn = await self.connect()
        if conn is None:
            return None

        stmt = text(sql) if isinstance(sql, str) else sql
        try:
            result = await conn.execute(stmt, params or {})
            rows = [dict(row) for row in result.mappings().all()] if result.returns_rows else []
            row_count = result.rowcount
            await conn.commit()
            return QueryResult(rows=rows, row_count=row_count)
        except SQLAlchemyError as e:
            logger.error(f"Error running query: {e}")
            return None
        finally:
            await conn.close()

    async def create_schema(self, drop: bool = False) -> bool:
        if self.engine is None:
            logger.error("Unable to create schema, database is not open")
            return False

        try:
            async with self.engine.begin() as conn:
                if drop:
                    await conn.run_sync(Base.metadata.drop_all)
                await conn.run_sync(Base.metadata.create_all)
        except SQLAlchemyError as e:
            logger.error(f"Error creating schema: {e}")
            return False
        return True
