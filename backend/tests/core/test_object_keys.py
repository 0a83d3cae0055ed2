"""Object key generator tests.

Tests cover:
    - Key shape proof_<ms>_<token>.<ext> with pinned time and token
    - Extension lowercased; directories in the filename ignored
    - Extensionless names (no dot, trailing dot, dot-file) give extensionless keys
    - Identical filenames generated concurrently give distinct keys
"""

import asyncio
import re

from payproof.core.object_keys import file_extension, generate_object_key

KEY_PATTERN = re.compile(r"^proof_\d{13}_[0-9a-f]{12}\.png$")


def test_key_shape_with_pinned_inputs():
    key = generate_object_key("receipt.png", now_ms=1760771100123, token="abc123def456")
    assert key == "proof_1760771100123_abc123def456.png"


def test_default_key_matches_pattern():
    assert KEY_PATTERN.match(generate_object_key("receipt.png"))


def test_extension_lowercased():
    assert generate_object_key("IMG_0001.JPEG", now_ms=1, token="t").endswith(".jpeg")


def test_only_last_extension_used():
    assert generate_object_key("scan.tar.PNG", now_ms=1, token="t") == "proof_1_t.png"


def test_directory_components_ignored():
    assert file_extension("C:\\Users\\sari\\bukti.WebP") == "webp"
    assert file_extension("../../etc/passwd") == ""


def test_extensionless_names_produce_extensionless_keys():
    for name in ("receipt", "receipt.", ".bashrc", ""):
        key = generate_object_key(name, now_ms=1, token="t")
        assert key == "proof_1_t", name
        assert not key.endswith(".")


def test_suspicious_extension_dropped():
    assert file_extension("photo.png%2F..") == ""


async def test_concurrent_identical_filenames_get_distinct_keys():
    async def make_key():
        await asyncio.sleep(0)
        return generate_object_key("receipt.png")

    keys = await asyncio.gather(*(make_key() for _ in range(200)))
    assert len(set(keys)) == 200
    assert all(KEY_PATTERN.match(k) for k in keys)


def test_same_millisecond_distinct_tokens():
    keys = {generate_object_key("receipt.png", now_ms=1760771100123) for _ in range(500)}
    assert len(keys) == 500
