"""Submission Orchestrator: store proof, persist record, notify admin, in that order.

Invariants:
    - Steps run strictly sequentially: put -> insert -> send
    - Storage failure: no insert, no notification, StorageFailureError raised
    - Persistence failure: StorageFailure not retried, object left orphaned, PersistenceFailureError raised
    - Notification failure: logged at WARNING, never raised; the persisted record is returned
    - Each collaborator is called at most once per submission
    - No state shared between submissions beyond the two stores
    - Proof bytes are released as soon as the object store call returns, before persist and notify

Design Decisions:
    - No compensating delete of an orphaned object; the orphan is logged with its key
    - Key generation is injectable (key_factory) so tests can pin keys
    - Notification may be handed to a scheduler (FastAPI BackgroundTasks) so the HTTP
      response does not wait on the email provider
"""

import logging
from collections.abc import Callable

from payproof.core.domain_types import PaymentDraft, PaymentRecord, UploadedProof
from payproof.core.errors import (
    ErrorContext, PersistenceFailureError, StorageFailureError,
)
from payproof.core.intake import normalize_content_type
from payproof.core.object_keys import generate_object_key
from payproof.infrastructure.notifier import Notifier
from payproof.infrastructure.object_store import ObjectStore
from payproof.infrastructure.record_store import RecordStore

logger = logging.getLogger(__name__)


class SubmissionOrchestrator:
    """Runs one payment submission against the configured collaborators."""

    def __init__(
        self,
        object_store: ObjectStore,
        record_store: RecordStore,
        notifier: Notifier,
        key_factory: Callable[[str], str] = generate_object_key,
    ):
        self.object_store = object_store
        self.record_store = record_store
        self.notifier = notifier
        self.key_factory = key_factory

    async def submit(
        self,
        draft: PaymentDraft,
        proof: UploadedProof,
        *,
        schedule: Callable[..., None] | None = None,
    ) -> PaymentRecord:
        """Execute store -> persist -> notify and return the persisted record.

        With schedule (e.g. BackgroundTasks.add_task) the notify step is queued
        as schedule(coroutine_fn, record) instead of awaited inline.
        """
        key = self.key_factory(proof.filename)
        proof_url = await self._store(key, proof)
        record = await self._persist(key, draft, proof_url)
        if schedule is None:
            await self._notify(record)
        else:
            schedule(self._notify, record)
        return record

    async def _store(self, key: str, proof: UploadedProof) -> str:
        try:
            url = await self.object_store.put(
                key, proof.data, normalize_content_type(proof.content_type),
            )
        except StorageFailureError:
            raise
        except Exception as e:
            logger.error(
                f"Unexpected object store error: {e}",
                exc_info=True, extra={"object_key": key},
            )
            raise StorageFailureError(
                type(e).__name__, ErrorContext(object_key=key),
            ) from e
        finally:
            proof.release()
        logger.info("Proof stored", extra={"object_key": key})
        return url

    async def _persist(
        self, key: str, draft: PaymentDraft, proof_url: str,
    ) -> PaymentRecord:
        try:
            record = await self.record_store.insert(draft, proof_url)
        except Exception as e:
            logger.warning(
                f"Payment insert failed; stored proof is orphaned: {e}",
                extra={"object_key": key, "error_code": "PersistenceFailure"},
            )
            if isinstance(e, PersistenceFailureError):
                raise
            raise PersistenceFailureError(
                type(e).__name__, ErrorContext(object_key=key),
            ) from e
        logger.info(
            "Payment persisted",
            extra={"payment_id": record.id, "object_key": key},
        )
        return record

    async def _notify(self, record: PaymentRecord) -> None:
        try:
            await self.notifier.send(record)
        except Exception as e:
            logger.warning(
                f"Notification failed (submission unaffected): {e}",
                extra={"payment_id": record.id, "error_code": "NotifyFailure"},
            )
