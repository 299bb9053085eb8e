"""shamba-trace: traceability ids and QR payloads for farm-to-buyer coffee."""

from shamba_trace.analytics import aggregate
from shamba_trace.config import TraceConfig
from shamba_trace.payloads import (
    PayloadBuilder,
    build_farmer_profile_payload,
    build_logistics_payload,
    build_product_payload,
)
from shamba_trace.schema import (
    AnalyticsSummary,
    ConsumerSummary,
    FarmerRecord,
    OrderRecord,
    ProductPayload,
    ProductRecord,
    VerificationResult,
)
from shamba_trace.traceability import compose_traceability_id, generate_tracking_number
from shamba_trace.verification import verify_traceability_id

__version__ = "0.1.0"

__all__ = [
    "aggregate",
    "build_farmer_profile_payload",
    "build_logistics_payload",
    "build_product_payload",
    "compose_traceability_id",
    "generate_tracking_number",
    "verify_traceability_id",
    "AnalyticsSummary",
    "ConsumerSummary",
    "FarmerRecord",
    "OrderRecord",
    "PayloadBuilder",
    "ProductPayload",
    "ProductRecord",
    "TraceConfig",
    "VerificationResult",
    "__version__",
]
