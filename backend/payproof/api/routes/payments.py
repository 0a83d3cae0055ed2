"""Payment Routes: proof upload and payment listing.

Invariants:
    - Text fields are accepted as optional form values so intake can report MissingField itself
    - The "proof" part is read from the parsed form; a non-file value counts as no file attached
    - An upload whose declared size exceeds the limit is rejected without reading its body;
      otherwise at most max_bytes + 1 bytes are read
    - Validation runs before any collaborator call
    - Errors are raised as PayProofError and rendered by api/error_handlers.py
    - The uploaded bytes are released once the object store call returns

Design Decisions:
    - Paths and payload shapes match the existing frontend: /api/upload-payment, /api/payments,
      file field "proof", {success, data} envelopes
    - Notification runs as a background task after the response is sent
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Request
from starlette.datastructures import UploadFile

from payproof.api.dependencies import get_listing_service, get_orchestrator
from payproof.config import Settings, get_settings
from payproof.core.domain_types import UploadedProof
from payproof.core.intake import validate_submission
from payproof.schemas.payment import (
    PaymentEnvelope, PaymentListEnvelope, PaymentOut,
)
from payproof.services.listing import ListingService
from payproof.services.submission import SubmissionOrchestrator

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api", tags=["payments"])


async def proof_part(request: Request) -> UploadFile | None:
    """The "proof" form part if it is a file, else None."""
    form = await request.form()
    part = form.get("proof")
    return part if isinstance(part, UploadFile) else None


async def read_proof(proof: UploadFile | None, max_bytes: int) -> UploadedProof | None:
    if proof is None:
        return None
    try:
        if proof.size is not None and proof.size > max_bytes:
            data = b""
        else:
            data = await proof.read(max_bytes + 1)
    finally:
        await proof.close()
    return UploadedProof(
        filename=proof.filename or "",
        content_type=proof.content_type or "",
        data=data,
        size=proof.size if proof.size is not None else len(data),
    )


@router.post("/upload-payment", response_model=PaymentEnvelope)
async def upload_payment(
    background_tasks: BackgroundTasks,
    name: str | None = Form(None),
    phone_number: str | None = Form(None),
    payment_method: str | None = Form(None),
    reason: str | None = Form(None),
    proof: UploadFile | None = Depends(proof_part),
    orchestrator: SubmissionOrchestrator = Depends(get_orchestrator),
    settings: Settings = Depends(get_settings),
):
    """Store a payment proof, record the payment and notify the admin."""
    uploaded = await read_proof(proof, settings.max_upload_bytes)
    draft = validate_submission(
        name, phone_number, payment_method, reason, uploaded,
        allowed_content_types=settings.allowed_content_types,
        max_bytes=settings.max_upload_bytes,
    )
    record = await orchestrator.submit(
        draft, uploaded, schedule=background_tasks.add_task,
    )
    return PaymentEnvelope(data=PaymentOut.model_validate(record))


@router.get("/payments", response_model=PaymentListEnvelope)
async def list_payments(
    listing: ListingService = Depends(get_listing_service),
):
    """All payments, newest first."""
    records = await listing.list_payments()
    return PaymentListEnvelope(
        data=[PaymentOut.model_validate(r) for r in records],
    )
