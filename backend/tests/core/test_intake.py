"""Intake validator tests: pure validation of form input.

Tests cover:
    - Valid input produces a stripped PaymentDraft
    - Each required field missing, empty, or whitespace-only -> MissingField
    - All missing fields reported together
    - No file / unnamed file -> NoFileAttached
    - Non-image content types -> UnsupportedMediaType (pdf scenario)
    - Content-type parameters and case ignored
    - Size ceiling: exactly at limit accepted, above rejected (6 MiB scenario)
    - Fields checked before file, media type before size
"""

import pytest

from payproof.core.domain_types import UploadedProof
from payproof.core.errors import (
    FileTooLargeError, MissingFieldError, NoFileAttachedError,
    UnsupportedMediaTypeError,
)
from payproof.core.intake import normalize_content_type, validate_submission

ALLOWED = ["image/jpeg", "image/png", "image/gif", "image/webp"]
FIVE_MIB = 5 * 1024 * 1024


def _validate(proof, **overrides):
    fields = {
        "name": "Sari",
        "phone_number": "0812xxxx",
        "payment_method": "bank_transfer",
        "reason": "order #4",
    }
    fields.update(overrides)
    return validate_submission(
        fields["name"], fields["phone_number"], fields["payment_method"],
        fields["reason"], proof,
        allowed_content_types=ALLOWED, max_bytes=FIVE_MIB,
    )


def _proof(content_type="image/png", size=2048, filename="receipt.png"):
    return UploadedProof(filename=filename, content_type=content_type, data=b"x" * size)


def test_valid_submission_returns_stripped_draft():
    draft = _validate(_proof(), name="  Sari  ", reason="order #4\n")
    assert draft.name == "Sari"
    assert draft.reason == "order #4"
    assert draft.payment_method == "bank_transfer"


@pytest.mark.parametrize("field", ["name", "phone_number", "payment_method", "reason"])
@pytest.mark.parametrize("value", [None, "", "   "])
def test_missing_required_field_rejected(field, value):
    with pytest.raises(MissingFieldError) as exc:
        _validate(_proof(), **{field: value})
    assert exc.value.fields == [field]
    assert exc.value.code == "MissingField"
    assert exc.value.http_status == 400


def test_all_missing_fields_reported():
    with pytest.raises(MissingFieldError) as exc:
        _validate(_proof(), name=None, reason="")
    assert exc.value.fields == ["name", "reason"]
    assert "name, reason" in exc.value.message


def test_missing_fields_checked_before_file():
    with pytest.raises(MissingFieldError):
        _validate(None, name="")


def test_no_file_rejected():
    with pytest.raises(NoFileAttachedError) as exc:
        _validate(None)
    assert exc.value.code == "NoFileAttached"


def test_file_without_filename_rejected():
    with pytest.raises(NoFileAttachedError):
        _validate(_proof(filename=""))


def test_pdf_rejected_as_unsupported_media_type():
    with pytest.raises(UnsupportedMediaTypeError) as exc:
        _validate(_proof(content_type="application/pdf", filename="invoice.pdf"))
    assert exc.value.code == "UnsupportedMediaType"
    assert exc.value.http_status == 415
    assert "application/pdf" in exc.value.message


def test_missing_content_type_rejected():
    with pytest.raises(UnsupportedMediaTypeError):
        _validate(_proof(content_type=""))


def test_content_type_parameters_and_case_ignored():
    draft = _validate(_proof(content_type="Image/JPEG; charset=binary"))
    assert draft.name == "Sari"


def test_file_at_size_limit_accepted():
    _validate(_proof(size=FIVE_MIB))


def test_six_mib_file_rejected():
    with pytest.raises(FileTooLargeError) as exc:
        _validate(_proof(size=6 * 1024 * 1024))
    assert exc.value.code == "FileTooLarge"
    assert exc.value.http_status == 413
    assert exc.value.max_bytes == FIVE_MIB


def test_media_type_checked_before_size():
    with pytest.raises(UnsupportedMediaTypeError):
        _validate(_proof(content_type="application/pdf", size=6 * 1024 * 1024))


def test_normalize_content_type():
    assert normalize_content_type(" IMAGE/PNG ; q=1") == "image/png"
    assert normalize_content_type(None) == ""
