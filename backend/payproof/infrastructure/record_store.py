"""Record Store: persistence of PaymentRecords behind a swappable protocol.

Invariants:
    - insert() returns the stored record with store-assigned id and created_at
    - insert() failures raise PersistenceFailureError; list_all() failures raise StoreUnavailableError
    - list_all() is ordered newest first (created_at desc, then id desc)
    - created_at is always timezone-aware (UTC when the backend returns naive values)

Design Decisions:
    - SqlRecordStore serves both variants: PostgreSQL (relational) and SQLite (embedded),
      chosen by DATABASE_URL
    - InMemoryRecordStore keeps rows in a list; ids come from a per-instance counter
      updated without awaiting, so concurrent requests on one event loop never share an id
"""

import logging
from datetime import datetime, timezone
from typing import Protocol

from sqlalchemy import select

from payproof.core.domain_types import PaymentDraft, PaymentRecord
from payproof.core.errors import PersistenceFailureError, StoreUnavailableError
from payproof.infrastructure.database import DatabaseError, DatabaseSessionManager
from payproof.models.payment import Payment

logger = logging.getLogger(__name__)


class RecordStore(Protocol):
    """Persistence contract used by the orchestrator and listing service."""

    async def insert(self, draft: PaymentDraft, proof_url: str) -> PaymentRecord: ...

    async def list_all(self) -> list[PaymentRecord]: ...

    async def check(self) -> None: ...


def _as_utc(moment: datetime) -> datetime:
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment


def _to_record(row: Payment) -> PaymentRecord:
    return PaymentRecord(
        id=row.id,
        name=row.name,
        phone_number=row.phone_number,
        payment_method=row.payment_method,
        reason=row.reason,
        proof_url=row.proof_url,
        created_at=_as_utc(row.created_at),
    )


class SqlRecordStore:
    """RecordStore over SQLAlchemy async sessions."""

    def __init__(self, db: DatabaseSessionManager):
        self._db = db

    @classmethod
    async def open(
        cls, database_url: str, pool_size: int = 10, max_overflow: int = 5,
    ) -> "SqlRecordStore":
        """Create the engine, verify connectivity and ensure the payments table exists."""
        manager = DatabaseSessionManager(
            database_url, pool_size=pool_size, max_overflow=max_overflow,
        )
        try:
            await manager.create_schema()
        except Exception:
            await manager.dispose()
            raise
        return cls(manager)

    async def insert(self, draft: PaymentDraft, proof_url: str) -> PaymentRecord:
        try:
            async with self._db.session() as session:
                row = Payment(
                    name=draft.name,
                    phone_number=draft.phone_number,
                    payment_method=draft.payment_method,
                    reason=draft.reason,
                    proof_url=proof_url,
                )
                session.add(row)
                await session.commit()
                await session.refresh(row)
                return _to_record(row)
        except DatabaseError as e:
            raise PersistenceFailureError(str(e)) from e
        except OSError as e:
            logger.error(f"DB connection error on insert: {e}")
            raise PersistenceFailureError("database unreachable") from e

    async def list_all(self) -> list[PaymentRecord]:
        try:
            async with self._db.session() as session:
                result = await session.execute(
                    select(Payment).order_by(
                        Payment.created_at.desc(), Payment.id.desc(),
                    ),
                )
                return [_to_record(row) for row in result.scalars().all()]
        except DatabaseError as e:
            raise StoreUnavailableError(str(e)) from e
        except OSError as e:
            logger.error(f"DB connection error on list: {e}")
            raise StoreUnavailableError("database unreachable") from e

    async def check(self) -> None:
        if not await self._db.health_check():
            raise StoreUnavailableError("health check failed")

    async def close(self) -> None:
        await self._db.dispose()


class InMemoryRecordStore:
    """Process-local RecordStore for development and tests."""

    def __init__(self):
        self._rows: list[PaymentRecord] = []
        self._next_id = 1

    @classmethod
    async def open(cls) -> "InMemoryRecordStore":
        return cls()

    async def insert(self, draft: PaymentDraft, proof_url: str) -> PaymentRecord:
        record = PaymentRecord(
            id=self._next_id,
            name=draft.name,
            phone_number=draft.phone_number,
            payment_method=draft.payment_method,
            reason=draft.reason,
            proof_url=proof_url,
            created_at=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._rows.append(record)
        return record

    async def list_all(self) -> list[PaymentRecord]:
        return sorted(
            self._rows, key=lambda r: (r.created_at, r.id), reverse=True,
        )

    async def check(self) -> None:
        return None

    async def close(self) -> None:
        return None
