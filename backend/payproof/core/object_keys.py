"""Object Key Generator: collision-resistant storage keys for proof files.

Invariants:
    - Key shape: proof_<epoch ms>_<12 hex chars>[.<lowercase ext>]
    - No shared counter or lock; uniqueness comes from time + uuid4 randomness
    - Never emits a trailing dot: extensionless names produce extensionless keys
    - Directory components of the original filename never reach the key
"""

import time
import uuid
from pathlib import PurePosixPath

_TOKEN_LENGTH = 12
_MAX_EXTENSION_LENGTH = 10


def file_extension(filename: str) -> str:
    """Lowercase extension without the dot, or '' when there is none."""
    base = PurePosixPath(filename.replace("\\", "/")).name
    stem, dot, ext = base.rpartition(".")
    if not dot or not stem or not ext:
        return ""
    ext = ext.lower()
    if not ext.isalnum() or len(ext) > _MAX_EXTENSION_LENGTH:
        return ""
    return ext


def generate_object_key(
    original_filename: str,
    *,
    now_ms: int | None = None,
    token: str | None = None,
) -> str:
    """Derive a unique object key from the current time, randomness and extension."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    if token is None:
        token = uuid.uuid4().hex[:_TOKEN_LENGTH]
    key = f"proof_{now_ms}_{token}"
    ext = file_extension(original_filename)
    return f"{key}.{ext}" if ext else key
