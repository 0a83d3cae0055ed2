"""Intake Validator: turns raw form input into a PaymentDraft or rejects it.

Invariants:
    - Pure: no IO, no logging, no side effects
    - Check order: required fields, file presence, media type, size
    - Every missing field is reported in one MissingFieldError
    - Content type compared without parameters and case-insensitively
"""

from payproof.core.domain_types import PaymentDraft, UploadedProof
from payproof.core.errors import (
    FileTooLargeError, MissingFieldError, NoFileAttachedError,
    UnsupportedMediaTypeError,
)

REQUIRED_FIELDS = ("name", "phone_number", "payment_method", "reason")


def normalize_content_type(content_type: str | None) -> str:
    """'Image/PNG; charset=binary' -> 'image/png'."""
    if not content_type:
        return ""
    return content_type.split(";", 1)[0].strip().lower()


def validate_submission(
    name: str | None,
    phone_number: str | None,
    payment_method: str | None,
    reason: str | None,
    proof: UploadedProof | None,
    *,
    allowed_content_types: list[str],
    max_bytes: int,
) -> PaymentDraft:
    """Validate a candidate submission. Raises a validation PayProofError."""
    values = {
        "name": name,
        "phone_number": phone_number,
        "payment_method": payment_method,
        "reason": reason,
    }
    cleaned = {k: (v or "").strip() for k, v in values.items()}
    missing = [k for k in REQUIRED_FIELDS if not cleaned[k]]
    if missing:
        raise MissingFieldError(missing)

    if proof is None or not proof.filename:
        raise NoFileAttachedError()

    allowed = [normalize_content_type(t) for t in allowed_content_types]
    content_type = normalize_content_type(proof.content_type)
    if content_type not in allowed:
        raise UnsupportedMediaTypeError(proof.content_type or "unknown", allowed)

    if proof.size > max_bytes:
        raise FileTooLargeError(proof.size, max_bytes)

    return PaymentDraft(**cleaned)
