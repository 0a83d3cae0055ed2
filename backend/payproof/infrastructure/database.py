"""Database Session Manager: async engine, sessions with rollback, and startup connectivity retry.

Invariants:
    - Every session auto-rolls-back on exception (no partial commits leak)
    - All SQLAlchemy exceptions leave this module as DatabaseError
    - connect_with_retry makes at most policy.max_attempts attempts, then raises StoreUnavailableError
    - Retry state lives in the call, never in module globals

Design Decisions:
    - pool_size/max_overflow only passed for server databases; SQLite uses its default pool
    - Startup retry wraps the whole "open store" step (ping + create tables), not single queries
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import AsyncGenerator, TypeVar

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from payproof.core.errors import StoreUnavailableError
from payproof.db.base import Base

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DatabaseError(Exception):
    """Database operation failed; operation names the failing step."""

    def __init__(self, message: str, operation: str):
        super().__init__(f"Database {operation} failed: {message}")
        self.operation = operation


class DatabaseSessionManager:
    """Manages async database sessions with pooling, rollback, and health checks."""

    def __init__(
        self, database_url: str, pool_size: int = 10, max_overflow: int = 5,
    ):
        engine_kwargs: dict = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_kwargs.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_kwargs)
        self._session_factory = async_sessionmaker(
            self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        """Provide session with auto-rollback on exception."""
        session = self._session_factory()
        try:
            yield session
        except IntegrityError as e:
            await session.rollback()
            logger.error(f"DB integrity error: {e}")
            raise DatabaseError("Integrity constraint violated", "commit") from e
        except OperationalError as e:
            await session.rollback()
            logger.error(f"DB operational error: {e}")
            raise DatabaseError("Connection or operational error", "execute") from e
        except DBAPIError as e:
            await session.rollback()
            logger.error(f"DB driver error: {e}")
            raise DatabaseError("Database driver error", "query") from e
        except SQLAlchemyError as e:
            await session.rollback()
            logger.error(f"SQLAlchemy error: {e}")
            raise DatabaseError("Database operation failed", "unknown") from e
        finally:
            await session.close()

    async def create_schema(self) -> None:
        """Ping the database and create missing tables."""
        from payproof.models import payment as _payment_model  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
            await conn.run_sync(Base.metadata.create_all)

    async def health_check(self) -> bool:
        """Check database connectivity (for readiness probes)."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded startup retry: fixed delay between attempts."""
    max_attempts: int = 5
    delay_seconds: float = 5.0


async def connect_with_retry(
    connect: Callable[[], Awaitable[T]],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> T:
    """Run connect() until it succeeds or the policy is exhausted.

    Returns whatever connect() returns. Raises StoreUnavailableError after
    max_attempts failures; callers at startup let it abort the process.
    """
    last_error: Exception | None = None
    for attempt in range(1, policy.max_attempts + 1):
        try:
            result = await connect()
            logger.info(
                "Record store connected", extra={"attempt": attempt},
            )
            return result
        except Exception as e:
            last_error = e
            logger.error(
                f"Record store connection failed: {e}",
                extra={"attempt": attempt},
            )
            if attempt < policy.max_attempts:
                logger.info(
                    f"Retrying record store connection in {policy.delay_seconds}s "
                    f"({attempt}/{policy.max_attempts})",
                    extra={"attempt": attempt},
                )
                await sleep(policy.delay_seconds)

    logger.critical(
        "Max record store connection attempts reached",
        extra={"attempt": policy.max_attempts},
    )
    raise StoreUnavailableError(
        f"gave up after {policy.max_attempts} attempts: {last_error}",
    )
