"""Domain Types: value objects passed between intake, orchestrator and stores.

Invariants:
    - PaymentDraft fields are stripped and non-empty (guaranteed by core/intake.py)
    - PaymentRecord is only built by a RecordStore, after insertion
    - UploadedProof.data is held only until the object store call returns; release() drops it
    - UploadedProof.size keeps the received size after release()

Design Decisions:
    - Frozen dataclasses: drafts and records are never mutated after creation
    - UploadedProof is mutable so the orchestrator can release the bytes mid-submission
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class NotifyLocale(str, Enum):
    """Languages the notification email can be rendered in."""
    ID = "id"
    EN = "en"


@dataclass
class UploadedProof:
    """Transient proof file as received from the multipart form.

    size defaults to len(data); pass it explicitly when data was not read in full.
    """
    filename: str
    content_type: str
    data: bytes
    size: int = -1

    def __post_init__(self) -> None:
        if self.size < 0:
            self.size = len(self.data)

    def release(self) -> None:
        self.data = b""


@dataclass(frozen=True)
class PaymentDraft:
    """Validated, not-yet-persisted submission."""
    name: str
    phone_number: str
    payment_method: str
    reason: str


@dataclass(frozen=True)
class PaymentRecord:
    """Persisted payment submission."""
    id: int
    name: str
    phone_number: str
    payment_method: str
    reason: str
    proof_url: str
    created_at: datetime
