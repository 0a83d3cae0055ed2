"""Notifier tests: Resend transport over httpx.MockTransport, and the log-only notifier.

Tests cover:
    - Request shape: bearer auth, from/to/subject/html/text
    - Non-2xx responses -> NotifyFailureError
    - Network errors -> NotifyFailureError
    - LogNotifier logs the subject and never raises
"""

import json
import logging
from datetime import datetime, timezone

import httpx
import pytest

from payproof.core.domain_types import PaymentRecord
from payproof.core.errors import NotifyFailureError
from payproof.infrastructure.notifier import LogNotifier, ResendNotifier


@pytest.fixture
def record() -> PaymentRecord:
    return PaymentRecord(
        id=7, name="Sari", phone_number="0812xxxx",
        payment_method="bank_transfer", reason="order #4",
        proof_url="https://files.test/proof_1_t.png",
        created_at=datetime(2026, 10, 18, 7, 0, tzinfo=timezone.utc),
    )


def _notifier(handler) -> ResendNotifier:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return ResendNotifier(
        "re_test_key", "Khairi Payment <onboarding@resend.dev>", "admin@example.com",
        client=client,
    )


async def test_resend_request_shape(record):
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["url"] = str(request.url)
        captured["auth"] = request.headers["Authorization"]
        captured["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "email_123"})

    notifier = _notifier(handler)
    await notifier.send(record)
    await notifier.close()

    assert captured["url"] == "https://api.resend.com/emails"
    assert captured["auth"] == "Bearer re_test_key"
    body = captured["body"]
    assert body["from"] == "Khairi Payment <onboarding@resend.dev>"
    assert body["to"] == ["admin@example.com"]
    assert body["subject"] == "Pembayaran Baru dari Sari - #7"
    assert record.proof_url in body["html"]
    assert "0812xxxx" in body["text"]


async def test_resend_error_status_raises_notify_failure(record):
    notifier = _notifier(lambda request: httpx.Response(422, json={"message": "invalid from"}))

    with pytest.raises(NotifyFailureError) as exc:
        await notifier.send(record)
    assert "422" in exc.value.message
    assert exc.value.context.payment_id == 7


async def test_resend_network_error_raises_notify_failure(record):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(NotifyFailureError):
        await _notifier(handler).send(record)


async def test_log_notifier_logs_subject(record, caplog):
    with caplog.at_level(logging.INFO, logger="payproof.infrastructure.notifier"):
        await LogNotifier(locale="en").send(record)

    assert "New payment from Sari - #7" in caplog.text
