"""
PostgreSQL Client

Store connection with an owned lifecycle: connect (optionally retrying with
capped exponential backoff), is_connected, disconnect. Built on an asyncpg
pool and injected into repositories rather than imported as global state.

Usage:
    from core.postgres_client import PostgresClient

    db = PostgresClient(settings.infrastructure, service_name="campaign_service")
    await db.connect_with_retry()

    rows = await db.query("SELECT * FROM campaigns WHERE id = $1", [campaign_id])

    async with db.transaction() as conn:
        await conn.execute("DELETE FROM payouts WHERE id = $1", [payout_id])
"""

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Awaitable, Callable, Dict, List, Optional

import asyncpg
from tenacity import AsyncRetrying, RetryCallState, retry_if_exception_type, wait_exponential

from core.config import InfraConfig

logger = logging.getLogger(__name__)

# Timeout for acquiring a connection from the pool (seconds)
POOL_ACQUIRE_TIMEOUT = 10.0

# Errors that mean the store itself is unreachable, as opposed to a bad query
CONNECTION_ERRORS = (
    OSError,
    asyncio.TimeoutError,
    asyncpg.exceptions.PostgresConnectionError,
    asyncpg.exceptions.InterfaceError,
    asyncpg.exceptions.CannotConnectNowError,
)


class StoreUnavailableError(RuntimeError):
    """Raised when the database is not connected or cannot be reached"""


class DBConnection:
    """Consistent interface over a single asyncpg connection"""

    def __init__(self, conn: asyncpg.Connection):
        self.conn = conn

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        """Execute query and return all rows"""
        return [dict(r) for r in await self.conn.fetch(sql, *(params or []))]

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        """Execute query and return a single row"""
        row = await self.conn.fetchrow(sql, *(params or []))
        return dict(row) if row else None

    async def query_value(self, sql: str, params: Optional[List[Any]] = None) -> Any:
        """Execute query and return the first column of the first row"""
        return await self.conn.fetchval(sql, *(params or []))

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> str:
        """Execute statement, returns the command status (e.g. 'DELETE 1')"""
        return await self.conn.execute(sql, *(params or []))

    async def execute_many(self, sql: str, params_list: List[List[Any]]) -> None:
        """Execute statement once per parameter set"""
        await self.conn.executemany(sql, params_list)


class PostgresClient:
    """
    PostgreSQL store connection.

    Provides:
    - Pool lifecycle (connect / disconnect / is_connected)
    - Reconnect with exponential backoff capped at ``db_retry_max`` seconds
    - An optional ``on_connect`` hook (schema creation) run in a transaction
      before the pool is published
    - Query helpers that acquire a pooled connection per call
    """

    def __init__(
        self,
        config: Optional[InfraConfig] = None,
        service_name: str = "campaign_service",
        on_connect: Optional[Callable[[DBConnection], Awaitable[None]]] = None,
    ):
        self.config = config or InfraConfig.from_env()
        self.service_name = service_name
        self.on_connect = on_connect
        self._pool: Optional[asyncpg.Pool] = None
        self._connect_lock = asyncio.Lock()
        self._connect_task: Optional[asyncio.Task] = None
        self.connect_attempts = 0

    @property
    def is_connected(self) -> bool:
        return self._pool is not None and not self._pool.is_closing()

    @property
    def is_connecting(self) -> bool:
        return self._connect_task is not None and not self._connect_task.done()

    async def connect(self) -> None:
        """Create the connection pool (single attempt)"""
        async with self._connect_lock:
            if self.is_connected:
                return

            cfg = self.config
            self.connect_attempts += 1
            logger.info(
                f"Connecting to PostgreSQL at {cfg.postgres_host}:{cfg.postgres_port}/{cfg.postgres_db} "
                f"(attempt {self.connect_attempts})"
            )
            pool = await asyncpg.create_pool(
                host=cfg.postgres_host,
                port=cfg.postgres_port,
                user=cfg.postgres_user,
                password=cfg.postgres_password,
                database=cfg.postgres_db,
                min_size=cfg.db_pool_min,
                max_size=cfg.db_pool_max,
                command_timeout=cfg.db_command_timeout,
                max_inactive_connection_lifetime=300,
            )
            if self.on_connect:
                try:
                    await self._run_on_connect(pool)
                except Exception:
                    await pool.close()
                    raise

            # Published only once the hook has finished
            self._pool = pool
            logger.info(
                f"PostgreSQL pool initialized for {self.service_name} "
                f"(min={cfg.db_pool_min}, max={cfg.db_pool_max})"
            )
            self.connect_attempts = 0

    async def _run_on_connect(self, pool: asyncpg.Pool) -> None:
        """Run the on_connect hook in a transaction on a connection from ``pool``"""
        conn = await pool.acquire(timeout=POOL_ACQUIRE_TIMEOUT)
        try:
            async with conn.transaction():
                await self.on_connect(DBConnection(conn))
        finally:
            await pool.release(conn)

    async def connect_with_retry(self) -> None:
        """Connect, retrying with capped exponential backoff until success"""
        retrying = AsyncRetrying(
            wait=wait_exponential(
                multiplier=self.config.db_retry_initial,
                min=self.config.db_retry_initial,
                max=self.config.db_retry_max,
            ),
            retry=retry_if_exception_type(Exception),
            before_sleep=self._log_retry,
            reraise=True,
        )
        async for attempt in retrying:
            with attempt:
                await self.connect()

    def start_background_connect(self) -> asyncio.Task:
        """Schedule connect_with_retry without blocking the caller"""
        if not self.is_connecting:
            self._connect_task = asyncio.create_task(self.connect_with_retry())
        return self._connect_task

    def _log_retry(self, retry_state: RetryCallState) -> None:
        exc = retry_state.outcome.exception() if retry_state.outcome else None
        wait = retry_state.next_action.sleep if retry_state.next_action else 0
        logger.error(
            f"Database connection attempt {retry_state.attempt_number} failed: {exc}. "
            f"Retrying in {wait:.0f}s"
        )

    async def disconnect(self) -> None:
        """Stop any pending reconnect and close the pool"""
        task, self._connect_task = self._connect_task, None
        if task and not task.done():
            task.cancel()
            try:
                await task
            except asyncio.CancelledError:
                pass
            except Exception as e:
                logger.error(f"Background connect for {self.service_name} failed during shutdown: {e}")

        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("PostgreSQL pool closed")

    @asynccontextmanager
    async def acquire(self) -> AsyncIterator[DBConnection]:
        """Get a connection from the pool with timeout"""
        if not self.is_connected:
            raise StoreUnavailableError("Database connection is not established")

        try:
            conn = await self._pool.acquire(timeout=POOL_ACQUIRE_TIMEOUT)
        except asyncio.TimeoutError:
            logger.error(f"Failed to acquire DB connection within {POOL_ACQUIRE_TIMEOUT}s - pool may be exhausted")
            raise StoreUnavailableError(f"Database connection pool timeout after {POOL_ACQUIRE_TIMEOUT}s")

        try:
            yield DBConnection(conn)
        finally:
            await self._pool.release(conn)

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[DBConnection]:
        """Acquire a connection and run the block in a transaction"""
        async with self.acquire() as db:
            async with db.conn.transaction():
                yield db

    async def query(self, sql: str, params: Optional[List[Any]] = None) -> List[Dict[str, Any]]:
        async with self.acquire() as db:
            return await db.query(sql, params)

    async def query_row(self, sql: str, params: Optional[List[Any]] = None) -> Optional[Dict[str, Any]]:
        async with self.acquire() as db:
            return await db.query_row(sql, params)

    async def query_value(self, sql: str, params: Optional[List[Any]] = None) -> Any:
        async with self.acquire() as db:
            return await db.query_value(sql, params)

    async def execute(self, sql: str, params: Optional[List[Any]] = None) -> str:
        async with self.acquire() as db:
            return await db.execute(sql, params)

    async def health_check(self) -> bool:
        """Check database health"""
        if not self.is_connected:
            return False
        try:
            return await self.query_value("SELECT 1") == 1
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


__all__ = [
    "PostgresClient",
    "DBConnection",
    "StoreUnavailableError",
    "CONNECTION_ERRORS",
]
