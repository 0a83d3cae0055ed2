"""Service Wiring: picks collaborator implementations from settings at startup.

Invariants:
    - One Services bundle per process, built in the lifespan and stored on app.state
    - The record store is opened through connect_with_retry; exhaustion aborts startup
    - Only backend names and non-secret endpoints are logged
"""

import logging
from dataclasses import dataclass

from payproof.config import Settings
from payproof.infrastructure.database import RetryPolicy, connect_with_retry
from payproof.infrastructure.notifier import LogNotifier, Notifier, ResendNotifier
from payproof.infrastructure.object_store import (
    LocalObjectStore, ObjectStore, S3ObjectStore,
)
from payproof.infrastructure.record_store import (
    InMemoryRecordStore, RecordStore, SqlRecordStore,
)
from payproof.services.listing import ListingService
from payproof.services.submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)


@dataclass
class Services:
    """Everything the HTTP layer needs, built once per process."""
    object_store: ObjectStore
    record_store: RecordStore
    notifier: Notifier
    orchestrator: SubmissionOrchestrator
    listing: ListingService

    async def close(self) -> None:
        for component in (self.record_store, self.notifier):
            close = getattr(component, "close", None)
            if close is not None:
                await close()


def build_object_store(settings: Settings) -> ObjectStore:
    if settings.object_store_backend == "s3":
        logger.info(f"Object store: s3 (bucket={settings.s3_bucket}, endpoint={settings.s3_endpoint or 'aws'})")
        return S3ObjectStore(
            settings.s3_bucket,
            region=settings.s3_region,
            endpoint=settings.s3_endpoint,
            key_id=settings.s3_key_id,
            key_secret=settings.s3_key_secret,
            public_base_url=settings.s3_public_base_url,
        )
    logger.info(f"Object store: local (dir={settings.local_upload_dir})")
    return LocalObjectStore(settings.local_upload_dir, settings.local_public_base_url)


async def open_record_store(settings: Settings) -> RecordStore:
    if settings.record_store_backend == "memory":
        logger.info("Record store: memory")
        return await InMemoryRecordStore.open()

    logger.info("Record store: sql")
    policy = RetryPolicy(
        max_attempts=settings.db_connect_max_attempts,
        delay_seconds=settings.db_connect_retry_delay_seconds,
    )
    return await connect_with_retry(
        lambda: SqlRecordStore.open(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        ),
        policy,
    )


def build_notifier(settings: Settings) -> Notifier:
    if settings.resend_api_key and settings.admin_email:
        logger.info("Notifier: resend")
        return ResendNotifier(
            settings.resend_api_key,
            settings.notify_from,
            settings.admin_email,
            api_url=settings.resend_api_url,
            locale=settings.notify_locale,
            timezone=settings.notify_timezone,
            timeout_seconds=settings.notify_timeout_seconds,
        )
    logger.warning("Notifier: log only (RESEND_API_KEY or ADMIN_EMAIL not set)")
    return LogNotifier(locale=settings.notify_locale, timezone=settings.notify_timezone)


async def build_services(settings: Settings) -> Services:
    """Select and open every collaborator, then assemble the services."""
    object_store = build_object_store(settings)
    record_store = await open_record_store(settings)
    notifier = build_notifier(settings)
    return Services(
        object_store=object_store,
        record_store=record_store,
        notifier=notifier,
        orchestrator=SubmissionOrchestrator(object_store, record_store, notifier),
        listing=ListingService(record_store),
    )
