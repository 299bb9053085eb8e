"""Traceability id verification."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timezone

from shamba_trace.schema import VerificationResult
from shamba_trace.traceability import DELIMITER, TRACEABILITY_PREFIX, from_base36, hash_fragment

logger = logging.getLogger(__name__)

REASON_VALID = "Valid traceability code"
REASON_MISMATCH = "Hash verification failed"
REASON_INVALID_FORMAT = "Invalid traceability ID format"

# Segments exactly as compose_traceability_id emits them.
_TIMESTAMP_SEGMENT = re.compile(r"[0-9A-Z]+")
_HASH_SEGMENT = re.compile(r"[0-9A-F]{6}")


def verify_traceability_id(
    traceability_id: str,
    product_id: object,
    farmer_id: object,
) -> VerificationResult:
    """Check that a traceability id was issued for the given product and farmer.

    Never raises: malformed ids and decoding failures come back as
    `valid=False` with a readable reason.
    """
    if not isinstance(traceability_id, str):
        return VerificationResult(valid=False, reason=REASON_INVALID_FORMAT)

    parts = traceability_id.split(DELIMITER)
    if len(parts) != 4 or parts[0] != TRACEABILITY_PREFIX:
        return VerificationResult(valid=False, reason=REASON_INVALID_FORMAT)

    _, timestamp, product_hash, farmer_hash = parts
    if not (
        _TIMESTAMP_SEGMENT.fullmatch(timestamp)
        and _HASH_SEGMENT.fullmatch(product_hash)
        and _HASH_SEGMENT.fullmatch(farmer_hash)
    ):
        return VerificationResult(valid=False, reason=REASON_INVALID_FORMAT)

    try:
        expected_product = hash_fragment(product_id).upper()
        expected_farmer = hash_fragment(farmer_id).upper()
        generated_at = datetime.fromtimestamp(from_base36(timestamp) / 1000, tz=timezone.utc)
    except Exception as exc:
        logger.debug("traceability id %s failed to decode: %s", traceability_id, exc)
        return VerificationResult(
            valid=False,
            reason=f"Verification error: {exc}",
            traceability_id=traceability_id,
        )

    valid = product_hash == expected_product and farmer_hash == expected_farmer
    return VerificationResult(
        valid=valid,
        reason=REASON_VALID if valid else REASON_MISMATCH,
        traceability_id=traceability_id,
        generated_at=generated_at,
    )
