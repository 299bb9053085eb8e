"""Count-based summaries over issued traceability records."""

from __future__ import annotations

import logging
from collections import Counter
from collections.abc import Iterable, Mapping

from pydantic import ValidationError

from shamba_trace.schema import AnalyticsSummary, ProductPayload, QualityDistribution, TraceabilityData

logger = logging.getLogger(__name__)

UNKNOWN_KEY = "unknown"
HIGH_QUALITY_MIN = 80
MEDIUM_QUALITY_MIN = 60


def _as_traceability(item: object) -> TraceabilityData | None:
    if isinstance(item, ProductPayload):
        return item.traceability
    if isinstance(item, TraceabilityData):
        return item
    if not isinstance(item, Mapping):
        return None
    try:
        if "traceability" in item:
            return ProductPayload.model_validate(item).traceability
        return TraceabilityData.model_validate(item)
    except ValidationError:
        return None


def quality_bucket(score: float | None) -> str:
    value = score or 0
    if value >= HIGH_QUALITY_MIN:
        return "high"
    if value >= MEDIUM_QUALITY_MIN:
        return "medium"
    return "standard"


def aggregate(payloads: Iterable[ProductPayload | TraceabilityData | Mapping]) -> AnalyticsSummary:
    """Fold product payloads into variety, county, processing and quality counts.

    Elements that are neither payloads nor traceability records are skipped
    and reported in `skipped`. Missing keys are counted under `unknown`.
    """
    varieties: Counter[str] = Counter()
    counties: Counter[str] = Counter()
    processing: Counter[str] = Counter()
    certifications: Counter[str] = Counter()
    buckets: Counter[str] = Counter()
    total = 0
    skipped = 0

    for item in payloads:
        data = _as_traceability(item)
        if data is None:
            skipped += 1
            continue
        total += 1
        varieties[data.variety or UNKNOWN_KEY] += 1
        counties[data.county or UNKNOWN_KEY] += 1
        processing[data.processing_method or UNKNOWN_KEY] += 1
        buckets[quality_bucket(data.quality_score)] += 1
        certifications.update(data.farmer_certifications)

    if skipped:
        logger.warning("analytics skipped %d malformed payloads", skipped)

    return AnalyticsSummary(
        total_generated=total,
        skipped=skipped,
        varieties=dict(sorted(varieties.items())),
        counties=dict(sorted(counties.items())),
        processing_methods=dict(sorted(processing.items())),
        certifications=dict(sorted(certifications.items())),
        quality_distribution=QualityDistribution(**buckets),
    )
