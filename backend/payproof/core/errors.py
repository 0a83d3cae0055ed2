"""Error Hierarchy: typed, categorized exceptions for every submission failure mode.

Invariants:
    - Every error has a code (the machine-readable kind), category, severity and http_status
    - Validation errors (4xx) are raised before any side effect
    - Infrastructure errors (5xx) are surfaced, never rolled back
    - NotifyFailureError is never propagated past the orchestrator
    - to_response() never includes driver or SDK internals

Design Decisions:
    - Single hierarchy with PayProofError base: one global FastAPI handler renders all of them
    - code carries the kind name verbatim (MissingField, FileTooLarge, ...) so clients can switch on it
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    STORAGE = "storage"
    DATABASE = "database"
    NOTIFICATION = "notification"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs; not rendered to clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    payment_id: int | None = None
    object_key: str | None = None
    debug_info: dict[str, Any] | None = None


class PayProofError(Exception):
    """Base exception for all PayProof errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to the REST error envelope: {success, error, detail, ...}."""
        return {
            "success": False,
            "error": self.code,
            "detail": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }


# ─── Validation Errors (400-level) ──────────────────────────────

class MissingFieldError(PayProofError):
    """One or more required text fields are absent or blank."""
    def __init__(self, fields: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Missing required field(s): {', '.join(fields)}",
            "MissingField", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.fields = fields


class NoFileAttachedError(PayProofError):
    """No proof file was attached to the submission."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No file uploaded",
            "NoFileAttached", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


class UnsupportedMediaTypeError(PayProofError):
    """Declared content type of the proof is not an allowed image type."""
    def __init__(
        self, content_type: str, allowed: list[str],
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Unsupported file type '{content_type}'. Allowed: {', '.join(allowed)}",
            "UnsupportedMediaType", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 415,
        )
        self.content_type = content_type


class FileTooLargeError(PayProofError):
    """Proof file exceeds the configured byte ceiling."""
    def __init__(self, size: int, max_bytes: int, context: ErrorContext | None = None):
        super().__init__(
            f"File is {size} bytes; the limit is {max_bytes} bytes",
            "FileTooLarge", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 413,
        )
        self.size = size
        self.max_bytes = max_bytes


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageFailureError(PayProofError):
    """Object store rejected or failed the upload."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Object storage failed: {message}",
            "StorageFailure", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 502,
        )


class PersistenceFailureError(PayProofError):
    """Record store insert failed."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Saving the payment failed: {message}",
            "PersistenceFailure", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )


class StoreUnavailableError(PayProofError):
    """Record store could not be reached."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Record store unavailable: {message}",
            "StoreUnavailable", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )


class NotifyFailureError(PayProofError):
    """Notification could not be delivered. Logged, never surfaced."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            f"Notification failed: {message}",
            "NotifyFailure", ErrorCategory.NOTIFICATION,
            ErrorSeverity.WARNING, context, 500,
        )
