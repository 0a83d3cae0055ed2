"""Listing Service: every stored payment, newest first.

Invariants:
    - Read-only; no pagination, no filtering
    - Store failures surface as StoreUnavailableError
"""

import logging

from payproof.core.domain_types import PaymentRecord
from payproof.core.errors import StoreUnavailableError
from payproof.infrastructure.record_store import RecordStore

logger = logging.getLogger(__name__)


class ListingService:
    """Reads payment records from the record store."""

    def __init__(self, record_store: RecordStore):
        self.record_store = record_store

    async def list_payments(self) -> list[PaymentRecord]:
        try:
            return await self.record_store.list_all()
        except StoreUnavailableError:
            raise
        except Exception as e:
            logger.error(f"Listing payments failed: {e}", exc_info=True)
            raise StoreUnavailableError(type(e).__name__) from e
