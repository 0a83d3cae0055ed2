"""Root conftest: environment defaults and fake collaborators shared by all tests.

Invariants:
    - Environment set before any payproof import: memory record store, local uploads in a temp dir
    - Fakes record every call so tests can assert call counts and ordering
"""

import os
import tempfile
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest

os.environ.setdefault("RECORD_STORE_BACKEND", "memory")
os.environ.setdefault("OBJECT_STORE_BACKEND", "local")
os.environ.setdefault("LOCAL_UPLOAD_DIR", tempfile.mkdtemp(prefix="payproof-test-"))
os.environ.setdefault("RESEND_API_KEY", "")
os.environ.setdefault("LOG_FORMAT", "text")

from payproof.core.domain_types import (  # noqa: E402
    PaymentDraft, PaymentRecord, UploadedProof,
)
from payproof.core.errors import (  # noqa: E402
    NotifyFailureError, PersistenceFailureError, StorageFailureError,
)

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class FakeObjectStore:
    """In-memory ObjectStore; resolve(url) returns the stored bytes."""

    def __init__(self, fail: bool = False, base_url: str = "https://files.test/proofs"):
        self.fail = fail
        self.base_url = base_url
        self.objects: dict[str, tuple[bytes, str]] = {}
        self.calls: list[str] = []
        self.events: list[str] | None = None

    async def put(self, key: str, data: bytes, content_type: str) -> str:
        self.calls.append(key)
        if self.events is not None:
            self.events.append("put")
        if self.fail:
            raise StorageFailureError("bucket unreachable")
        self.objects[key] = (data, content_type)
        return f"{self.base_url}/{key}"

    def resolve(self, url: str) -> bytes:
        key = url.rsplit("/", 1)[-1]
        return self.objects[key][0]

    async def check(self) -> None:
        if self.fail:
            raise StorageFailureError("bucket unreachable")


class FakeRecordStore:
    """Record store that can be told to fail inserts or listings."""

    def __init__(self, fail_insert: bool = False, fail_list: bool = False):
        self.fail_insert = fail_insert
        self.fail_list = fail_list
        self.rows: list[PaymentRecord] = []
        self.insert_calls = 0
        self.events: list[str] | None = None
        self._clock = datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc)

    async def insert(self, draft: PaymentDraft, proof_url: str) -> PaymentRecord:
        self.insert_calls += 1
        if self.events is not None:
            self.events.append("insert")
        if self.fail_insert:
            raise PersistenceFailureError("connection reset")
        self._clock += timedelta(seconds=1)
        record = PaymentRecord(
            id=len(self.rows) + 1,
            name=draft.name,
            phone_number=draft.phone_number,
            payment_method=draft.payment_method,
            reason=draft.reason,
            proof_url=proof_url,
            created_at=self._clock,
        )
        self.rows.append(record)
        return record

    async def list_all(self) -> list[PaymentRecord]:
        if self.fail_list:
            raise ConnectionError("database went away")
        return sorted(self.rows, key=lambda r: (r.created_at, r.id), reverse=True)

    async def check(self) -> None:
        if self.fail_list:
            raise ConnectionError("database went away")


class FakeNotifier:
    """Notifier that records sends and optionally fails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.sent: list[PaymentRecord] = []
        self.events: list[str] | None = None

    async def send(self, record: PaymentRecord) -> None:
        if self.events is not None:
            self.events.append("send")
        if self.fail:
            raise NotifyFailureError("smtp relay down")
        self.sent.append(record)


@pytest.fixture
def draft() -> PaymentDraft:
    return PaymentDraft(
        name="Sari",
        phone_number="0812xxxx",
        payment_method="bank_transfer",
        reason="order #4",
    )


@pytest.fixture
def png_proof() -> UploadedProof:
    return UploadedProof(
        filename="receipt.png",
        content_type="image/png",
        data=PNG_HEADER + b"\x00" * 2040,
    )


@pytest.fixture
def object_store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def record_store() -> FakeRecordStore:
    return FakeRecordStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def fakes() -> SimpleNamespace:
    """The fake classes themselves, for tests that need fresh instances."""
    return SimpleNamespace(
        ObjectStore=FakeObjectStore, RecordStore=FakeRecordStore, Notifier=FakeNotifier,
    )
