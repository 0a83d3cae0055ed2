"""Notification Content: pure rendering of a PaymentRecord into an email message.

Invariants:
    - Pure: same record, locale, timezone and sent_at give the same message
    - Every user-supplied value is HTML-escaped in the html body
    - Message carries id, name, phone, method, reason, proof link and a localized timestamp
    - Labels exist for every NotifyLocale

Design Decisions:
    - Labels kept as plain dict data per locale, the same way user-facing strings
      are kept elsewhere; no template engine
    - Timestamp formats mirror the browser renderings for id-ID and en-US
"""

from dataclasses import dataclass
from datetime import datetime, timezone as dt_timezone
from html import escape
from zoneinfo import ZoneInfo

from payproof.core.domain_types import NotifyLocale, PaymentRecord


@dataclass(frozen=True)
class NotificationMessage:
    """Rendered email: subject plus html and plain-text bodies."""
    subject: str
    html: str
    text: str


_LABELS: dict[NotifyLocale, dict[str, str]] = {
    NotifyLocale.ID: {
        "subject": "Pembayaran Baru dari {name} - #{id}",
        "heading": "Pembayaran Baru Diterima",
        "intro": (
            "Ada pembayaran baru yang telah diupload oleh pelanggan. "
            "Berikut detailnya:"
        ),
        "id": "ID Pembayaran",
        "name": "Nama Pelanggan",
        "phone_number": "Nomor WhatsApp",
        "payment_method": "Metode Pembayaran",
        "reason": "Alasan Pembayaran",
        "time": "Waktu",
        "proof": "Bukti Pembayaran",
        "proof_link": "Lihat Bukti Pembayaran",
        "footer": (
            "Email ini dikirim secara otomatis oleh sistem pembayaran Khairi. "
            "Harap segera verifikasi pembayaran ini dan hubungi pelanggan jika diperlukan."
        ),
    },
    NotifyLocale.EN: {
        "subject": "New payment from {name} - #{id}",
        "heading": "New Payment Received",
        "intro": "A customer has uploaded a new payment. Details below:",
        "id": "Payment ID",
        "name": "Customer Name",
        "phone_number": "WhatsApp Number",
        "payment_method": "Payment Method",
        "reason": "Payment Reason",
        "time": "Time",
        "proof": "Payment Proof",
        "proof_link": "View Payment Proof",
        "footer": (
            "This email was sent automatically by the Khairi payment system. "
            "Please verify this payment and contact the customer if needed."
        ),
    },
}

_STYLE = (
    "body{font-family:Arial,sans-serif;line-height:1.6;color:#333;"
    "max-width:600px;margin:0 auto;padding:20px}"
    ".header{background-color:#4f46e5;color:white;padding:20px;"
    "text-align:center;border-radius:5px 5px 0 0}"
    ".content{background-color:#f9fafb;padding:20px;border:1px solid #e5e7eb;"
    "border-radius:0 0 5px 5px}"
    ".detail-row{display:flex;justify-content:space-between;margin-bottom:10px;"
    "padding-bottom:10px;border-bottom:1px solid #e5e7eb}"
    ".detail-label{font-weight:bold;color:#4b5563}"
    ".detail-value{color:#1f2937}"
    ".proof-link{display:inline-block;background-color:#4f46e5;color:white;"
    "padding:10px 15px;text-decoration:none;border-radius:4px;margin-top:15px}"
    ".footer{margin-top:20px;font-size:12px;color:#6b7280;text-align:center}"
)


def format_timestamp(moment: datetime, locale: NotifyLocale) -> str:
    """Render a timestamp the way the locale's browsers print it.

    id: 18/10/2026, 14.05.09
    en: 10/18/2026, 2:05:09 PM
    """
    if locale == NotifyLocale.ID:
        return (
            f"{moment.day:02d}/{moment.month:02d}/{moment.year}, "
            f"{moment.hour:02d}.{moment.minute:02d}.{moment.second:02d}"
        )
    hour12 = moment.hour % 12 or 12
    meridiem = "AM" if moment.hour < 12 else "PM"
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour12}:{moment.minute:02d}:{moment.second:02d} {meridiem}"
    )


def render_payment_notification(
    record: PaymentRecord,
    *,
    locale: NotifyLocale | str = NotifyLocale.ID,
    timezone: str = "Asia/Jakarta",
    sent_at: datetime | None = None,
) -> NotificationMessage:
    """Build the admin notification for a newly persisted payment."""
    locale = NotifyLocale(locale)
    labels = _LABELS[locale]
    sent_at = sent_at or datetime.now(dt_timezone.utc)
    if sent_at.tzinfo is None:
        sent_at = sent_at.replace(tzinfo=dt_timezone.utc)
    when = format_timestamp(sent_at.astimezone(ZoneInfo(timezone)), locale)

    rows = [
        (labels["id"], f"#{record.id}"),
        (labels["name"], record.name),
        (labels["phone_number"], record.phone_number),
        (labels["payment_method"], record.payment_method),
        (labels["reason"], record.reason),
        (labels["time"], when),
    ]
    subject = labels["subject"].format(name=record.name, id=record.id)
    return NotificationMessage(
        subject=subject,
        html=_render_html(labels, rows, record.proof_url),
        text=_render_text(labels, rows, record.proof_url),
    )


def _render_html(labels: dict[str, str], rows: list[tuple[str, str]], proof_url: str) -> str:
    detail_rows = "\n".join(
        '<div class="detail-row">'
        f'<span class="detail-label">{escape(label)}:</span>'
        f'<span class="detail-value">{escape(value)}</span>'
        "</div>"
        for label, value in rows
    )
    return (
        "<!DOCTYPE html>\n"
        f"<html><head><meta charset=\"utf-8\"><style>{_STYLE}</style></head>\n"
        "<body>\n"
        f'<div class="header"><h1>{escape(labels["heading"])}</h1></div>\n'
        '<div class="content">\n'
        f"<p>{escape(labels['intro'])}</p>\n"
        f"{detail_rows}\n"
        f"<p><strong>{escape(labels['proof'])}:</strong></p>\n"
        f'<a href="{escape(proof_url, quote=True)}" class="proof-link">'
        f"{escape(labels['proof_link'])}</a>\n"
        f'<div class="footer"><p>{escape(labels["footer"])}</p></div>\n'
        "</div>\n"
        "</body></html>\n"
    )


def _render_text(labels: dict[str, str], rows: list[tuple[str, str]], proof_url: str) -> str:
    lines = [labels["heading"], "", labels["intro"], ""]
    lines += [f"{label}: {value}" for label, value in rows]
    lines += ["", f"{labels['proof']}: {proof_url}", "", labels["footer"]]
    return "\n".join(lines)
