"""QR payload builders for products, farmer profiles and shipments."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import TypeVar

from pydantic import ValidationError

from shamba_trace.config import DEFAULT_BASE_URL, TraceConfig
from shamba_trace.exceptions import InvalidInputError
from shamba_trace.schema import (
    BatchPayload,
    ConsumerSummary,
    FarmerProfileData,
    FarmerProfilePayload,
    FarmerRecord,
    FarmFacts,
    LogisticsData,
    LogisticsPayload,
    OrderRecord,
    ProductFacts,
    ProductPayload,
    ProductRecord,
    QROptions,
    QualityFacts,
    SustainabilityFacts,
    TraceabilityData,
)
from shamba_trace.traceability import compose_traceability_id, generate_tracking_number

logger = logging.getLogger(__name__)

PRODUCT_QR_OPTIONS = QROptions(width=256, margin=2, dark="#2D5016", light="#FFFFFF", error_correction="H")
DETAILED_QR_OPTIONS = PRODUCT_QR_OPTIONS.model_copy(update={"width": 512})
FARMER_QR_OPTIONS = QROptions(width=256, margin=2, dark="#8B4513", light="#FFFFFF")
LOGISTICS_QR_OPTIONS = QROptions(width=200, margin=1, dark="#1E40AF", light="#FFFFFF")

SUMMARY_STORY_LIMIT = 200
PROFILE_STORY_LIMIT = 300
ELLIPSIS = "..."

RecordT = TypeVar("RecordT", ProductRecord, FarmerRecord, OrderRecord)
ProductFarmerPair = tuple[ProductRecord | Mapping, FarmerRecord | Mapping]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _coerce(model: type[RecordT], value: RecordT | Mapping, label: str) -> RecordT:
    if isinstance(value, model):
        return value
    if not isinstance(value, Mapping):
        raise InvalidInputError(f"{label} must be a mapping, got {type(value).__name__}")
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise InvalidInputError(f"Invalid {label} record: {exc}") from exc


def _require_id(record: ProductRecord | FarmerRecord | OrderRecord, label: str) -> str:
    if record.id is None:
        raise InvalidInputError(f"{label} id is required")
    return record.id


def _format_number(value: float | None, unit: str) -> str | None:
    if value is None:
        return None
    number = int(value) if float(value).is_integer() else value
    return f"{number}{unit}"


def truncate_story(story: str | None, limit: int = SUMMARY_STORY_LIMIT, marker: str = ELLIPSIS) -> str:
    """Cut a brand story to `limit` characters, appending `marker` if anything was dropped."""
    if not story:
        return ""
    if len(story) <= limit:
        return story
    return story[:limit] + marker


def create_consumer_summary(data: TraceabilityData) -> ConsumerSummary:
    """Select the consumer-facing subset of a traceability record."""
    return ConsumerSummary(
        product=ProductFacts(
            name=data.product_name,
            variety=data.variety,
            roast=data.roast_level,
            processing=data.processing_method,
            flavors=data.flavor_notes[:3],
            organic=data.is_organic,
            fair_trade=data.is_fair_trade,
        ),
        farm=FarmFacts(
            farmer=data.farmer_name,
            location=data.county,
            altitude=_format_number(data.altitude_grown, "m"),
            size=_format_number(data.farm_size, " acres"),
            rating=data.farmer_rating,
        ),
        quality=QualityFacts(
            score=data.quality_score,
            harvest=data.harvest_date.year if data.harvest_date else "Current",
            certifications=data.farmer_certifications[:3],
        ),
        sustainability=SustainabilityFacts(
            practices=data.sustainability_practices[:4],
            verified=data.verification_level == "Verified",
        ),
        story=truncate_story(data.brand_story),
        id=data.traceability_id,
        url=data.verification_url or "",
        generated=data.qr_generated_at or _utc_now(),
    )


class PayloadBuilder:
    """Builds QR payloads against one site origin."""

    def __init__(self, config: TraceConfig | None = None):
        self.config = config or TraceConfig()

    @property
    def base_url(self) -> str:
        return self.config.base_url

    def build_product_payload(
        self,
        product: ProductRecord | Mapping,
        farmer: FarmerRecord | Mapping,
        *,
        now: datetime | None = None,
    ) -> ProductPayload:
        """Build the verification URL and consumer summary for a product.

        Args:
            product: Product record or mapping with at least an `id`/`_id`.
            farmer: Farmer record or mapping with at least an `id`/`_id`.
            now: Generation time. Defaults to the current UTC time.

        Returns:
            ProductPayload holding both QR tiers and the full record.

        Raises:
            InvalidInputError: If either record lacks its id or does not validate.
        """
        product = _coerce(ProductRecord, product, "product")
        farmer = _coerce(FarmerRecord, farmer, "farmer")
        product_id = _require_id(product, "product")
        farmer_id = _require_id(farmer, "farmer")

        generated_at = now or _utc_now()
        traceability_id = compose_traceability_id(product_id, farmer_id, generated_at)
        verification_url = f"{self.base_url}/trace/{product_id}"

        data = TraceabilityData(
            product_id=product_id,
            traceability_id=traceability_id,
            product_name=product.name,
            variety=product.variety,
            roast_level=product.roast_level,
            processing_method=product.processing_method,
            altitude_grown=product.altitude_grown,
            harvest_date=product.harvest_date,
            quality_score=product.quality_score,
            flavor_notes=product.flavor_notes or [],
            is_organic=product.is_organic,
            is_fair_trade=product.is_fair_trade,
            farmer_id=farmer_id,
            farmer_name=farmer.name,
            county=farmer.county,
            coordinates=farmer.location,
            farm_size=farmer.farm_size,
            altitude_range=farmer.altitude_range,
            farmer_certifications=farmer.certifications or [],
            sustainability_practices=farmer.sustainability_practices or [],
            farmer_rating=farmer.average_rating,
            farmer_quality_score=farmer.quality_score,
            brand_story=farmer.brand_story,
            farm_images=farmer.farm_images or [],
            social_media=farmer.social_media or {},
            qr_generated_at=generated_at,
            verification_level="Verified" if farmer.is_verified else "Pending",
            verification_url=verification_url,
        )
        logger.debug("issued traceability id %s for product %s", traceability_id, product_id)

        return ProductPayload(
            traceability_id=traceability_id,
            verification_url=verification_url,
            consumer_summary=create_consumer_summary(data),
            traceability=data,
            qr_options=PRODUCT_QR_OPTIONS,
            detailed_qr_options=DETAILED_QR_OPTIONS,
        )

    def build_farmer_profile_payload(
        self,
        farmer: FarmerRecord | Mapping,
        *,
        now: datetime | None = None,
    ) -> FarmerProfilePayload:
        farmer = _coerce(FarmerRecord, farmer, "farmer")
        farmer_id = _require_id(farmer, "farmer")
        profile_url = f"{self.base_url}/farmers/{farmer_id}"

        profile = FarmerProfileData(
            farmer_id=farmer_id,
            farmer_name=farmer.name,
            county=farmer.county,
            farm_size=farmer.farm_size,
            certifications=farmer.certifications or [],
            average_rating=farmer.average_rating,
            total_reviews=farmer.total_reviews,
            brand_story=(farmer.brand_story or "")[:PROFILE_STORY_LIMIT],
            sustainability_practices=farmer.sustainability_practices or [],
            profile_url=profile_url,
            generated_at=now or _utc_now(),
        )
        return FarmerProfilePayload(profile_url=profile_url, profile=profile, qr_options=FARMER_QR_OPTIONS)

    def build_logistics_payload(
        self,
        order: OrderRecord | Mapping,
        *,
        now: datetime | None = None,
    ) -> LogisticsPayload:
        """Build a shipment payload, generating a tracking number if the order has none."""
        order = _coerce(OrderRecord, order, "order")
        order_id = _require_id(order, "order")
        generated_at = now or _utc_now()
        tracking_url = f"{self.base_url}/track/{order_id}"
        tracking_number = order.tracking_number or generate_tracking_number(generated_at)

        logistics = LogisticsData(
            order_id=order_id,
            tracking_number=tracking_number,
            status=order.status,
            estimated_delivery=order.delivery_date,
            tracking_url=tracking_url,
            generated_at=generated_at,
        )
        return LogisticsPayload(
            tracking_url=tracking_url,
            tracking_number=tracking_number,
            logistics=logistics,
            qr_options=LOGISTICS_QR_OPTIONS,
        )

    def build_batch(
        self,
        items: Iterable[ProductFarmerPair | Mapping],
        *,
        now: datetime | None = None,
    ) -> BatchPayload:
        """Build product payloads for many pairs concurrently, keeping input order."""
        pairs = [_split_pair(item) for item in items]
        generated_at = now or _utc_now()
        if not pairs:
            return BatchPayload(count=0, payloads=[], generated_at=generated_at)

        workers = min(self.config.max_workers, len(pairs))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            payloads = list(
                pool.map(lambda pair: self.build_product_payload(pair[0], pair[1], now=now), pairs)
            )
        logger.debug("built %d product payloads", len(payloads))
        return BatchPayload(count=len(payloads), payloads=payloads, generated_at=generated_at)


def _split_pair(item: ProductFarmerPair | Mapping) -> ProductFarmerPair:
    if isinstance(item, Mapping):
        if "product" not in item or "farmer" not in item:
            raise InvalidInputError("batch item requires 'product' and 'farmer'")
        return item["product"], item["farmer"]
    if isinstance(item, (tuple, list)) and len(item) == 2:
        return item[0], item[1]
    raise InvalidInputError(f"batch item must be a (product, farmer) pair, got {type(item).__name__}")


def build_product_payload(
    product: ProductRecord | Mapping,
    farmer: FarmerRecord | Mapping,
    base_url: str = DEFAULT_BASE_URL,
    *,
    now: datetime | None = None,
) -> ProductPayload:
    """Build both QR tiers for a product against `base_url`."""
    return PayloadBuilder(TraceConfig(base_url=base_url)).build_product_payload(product, farmer, now=now)


def build_farmer_profile_payload(
    farmer: FarmerRecord | Mapping,
    base_url: str = DEFAULT_BASE_URL,
    *,
    now: datetime | None = None,
) -> FarmerProfilePayload:
    return PayloadBuilder(TraceConfig(base_url=base_url)).build_farmer_profile_payload(farmer, now=now)


def build_logistics_payload(
    order: OrderRecord | Mapping,
    base_url: str = DEFAULT_BASE_URL,
    *,
    now: datetime | None = None,
) -> LogisticsPayload:
    return PayloadBuilder(TraceConfig(base_url=base_url)).build_logistics_payload(order, now=now)
