"""Traceability id and tracking number generation."""

from __future__ import annotations

import hashlib
import random
import string
import time
from datetime import datetime

TRACEABILITY_PREFIX = "S2S"
DELIMITER = "-"
HASH_LENGTH = 6
TRACKING_SUFFIX_LENGTH = 4

_BASE36_ALPHABET = string.digits + string.ascii_lowercase


def now_ms() -> int:
    return time.time_ns() // 1_000_000


def to_base36(value: int) -> str:
    """Encode a non-negative integer in lower-case base 36."""
    if value < 0:
        raise ValueError(f"base36 value must be non-negative: {value}")
    if value == 0:
        return "0"
    digits: list[str] = []
    while value:
        value, remainder = divmod(value, 36)
        digits.append(_BASE36_ALPHABET[remainder])
    return "".join(reversed(digits))


def from_base36(text: str) -> int:
    return int(text, 36)


def hash_fragment(key: object) -> str:
    """Return the first six hex characters of the MD5 digest of `str(key)`.

    Labels only. Six hex characters of MD5 do not make the id tamper-proof.
    """
    return hashlib.md5(str(key).encode("utf-8")).hexdigest()[:HASH_LENGTH]


def _timestamp_ms(timestamp: int | datetime | None) -> int:
    if timestamp is None:
        return now_ms()
    if isinstance(timestamp, datetime):
        return int(timestamp.timestamp() * 1000)
    return int(timestamp)


def compose_traceability_id(
    product_id: object,
    farmer_id: object,
    timestamp: int | datetime | None = None,
) -> str:
    """Compose a traceability id for a product and farmer pairing.

    Args:
        product_id: Product key; stringified before hashing.
        farmer_id: Farmer key; stringified before hashing.
        timestamp: Epoch milliseconds or a datetime. Defaults to now.

    Returns:
        `S2S-<base36 timestamp>-<product hash>-<farmer hash>`, upper-cased.
    """
    segments = [
        TRACEABILITY_PREFIX,
        to_base36(_timestamp_ms(timestamp)),
        hash_fragment(product_id),
        hash_fragment(farmer_id),
    ]
    return DELIMITER.join(segments).upper()


def generate_tracking_number(
    timestamp: int | datetime | None = None,
    rng: random.Random | None = None,
) -> str:
    """Generate a shipment tracking number.

    Not unique by construction; four random base36 characters follow the
    timestamp so collisions within one millisecond are unlikely.
    """
    chooser = rng or random
    suffix = "".join(chooser.choices(_BASE36_ALPHABET, k=TRACKING_SUFFIX_LENGTH))
    return f"{TRACEABILITY_PREFIX}{to_base36(_timestamp_ms(timestamp))}{suffix}".upper()
