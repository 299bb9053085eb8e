"""Data models for shamba-trace."""

from datetime import datetime
from typing import Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

ErrorCorrection = Literal["L", "M", "Q", "H"]
VerificationLevel = Literal["Verified", "Pending"]


class _Model(BaseModel):
    """Accepts snake_case or camelCase keys and dumps camelCase by alias."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
    )


class _Record(_Model):
    """Input record carrying a database key under `id` or `_id`."""

    id: str | None = Field(default=None, validation_alias=AliasChoices("id", "_id"))

    @field_validator("id", mode="before")
    @classmethod
    def _stringify_id(cls, value):
        return None if value is None else str(value)


class Coordinates(_Model):
    """Farm geolocation."""

    latitude: float | None = None
    longitude: float | None = None


class AltitudeRange(_Model):
    """Altitude band of a farm in metres."""

    min: float | None = None
    max: float | None = None


class ProductRecord(_Record):
    """Coffee product as stored by the marketplace backend."""

    name: str | None = None
    variety: str | None = None
    roast_level: str | None = None
    processing_method: str | None = None
    altitude_grown: float | None = Field(
        default=None,
        validation_alias=AliasChoices("altitude_grown", "altitudeGrown", "altitude"),
    )
    harvest_date: datetime | None = None
    quality_score: float | None = Field(default=None, ge=0, le=100)
    flavor_notes: list[str] | None = None
    is_organic: bool = False
    is_fair_trade: bool = False


class FarmerRecord(_Record):
    """Farmer profile as stored by the marketplace backend."""

    name: str | None = None
    county: str | None = None
    location: Coordinates | None = None
    farm_size: float | None = None
    altitude_range: AltitudeRange | None = None
    certifications: list[str] | None = None
    sustainability_practices: list[str] | None = None
    average_rating: float | None = None
    total_reviews: int | None = None
    quality_score: float | None = None
    is_verified: bool = False
    brand_story: str | None = None
    farm_images: list[str] | None = None
    social_media: dict[str, str] | None = None


class OrderRecord(_Record):
    """Order fields needed for a shipment label."""

    tracking_number: str | None = None
    status: str | None = None
    delivery_date: datetime | None = None


class QROptions(_Model):
    """Rendering hints handed to the QR image encoder."""

    width: int = Field(default=256, gt=0)
    margin: int = Field(default=2, ge=0)
    dark: str = "#000000"
    light: str = "#FFFFFF"
    error_correction: ErrorCorrection = "M"


class TraceabilityData(_Model):
    """Full traceability record for a product and farmer pairing."""

    product_id: str
    traceability_id: str
    product_name: str | None = None
    variety: str | None = None
    roast_level: str | None = None
    processing_method: str | None = None
    altitude_grown: float | None = None
    harvest_date: datetime | None = None
    quality_score: float | None = None
    flavor_notes: list[str] = Field(default_factory=list)
    is_organic: bool = False
    is_fair_trade: bool = False
    farmer_id: str | None = None
    farmer_name: str | None = None
    county: str | None = None
    coordinates: Coordinates | None = None
    farm_size: float | None = None
    altitude_range: AltitudeRange | None = None
    farmer_certifications: list[str] = Field(default_factory=list)
    sustainability_practices: list[str] = Field(default_factory=list)
    farmer_rating: float | None = None
    farmer_quality_score: float | None = None
    brand_story: str | None = None
    farm_images: list[str] = Field(default_factory=list)
    social_media: dict[str, str] = Field(default_factory=dict)
    qr_generated_at: datetime | None = None
    verification_level: VerificationLevel = "Pending"
    verification_url: str | None = None


class ProductFacts(_Model):
    name: str | None = None
    variety: str | None = None
    roast: str | None = None
    processing: str | None = None
    flavors: list[str] = Field(default_factory=list)
    organic: bool = False
    fair_trade: bool = False


class FarmFacts(_Model):
    farmer: str | None = None
    location: str | None = None
    altitude: str | None = None
    size: str | None = None
    rating: float | None = None


class QualityFacts(_Model):
    score: float | None = None
    harvest: int | str = "Current"
    certifications: list[str] = Field(default_factory=list)


class SustainabilityFacts(_Model):
    practices: list[str] = Field(default_factory=list)
    verified: bool = False


class ConsumerSummary(_Model):
    """Size-limited view of a traceability record for the detailed QR code."""

    product: ProductFacts
    farm: FarmFacts
    quality: QualityFacts
    sustainability: SustainabilityFacts
    story: str = ""
    id: str
    url: str
    generated: datetime

    def to_qr_text(self) -> str:
        return self.model_dump_json(by_alias=True)


class ProductPayload(_Model):
    """Both QR tiers for a product plus the record they were built from."""

    traceability_id: str
    verification_url: str
    consumer_summary: ConsumerSummary
    traceability: TraceabilityData
    qr_options: QROptions
    detailed_qr_options: QROptions


class FarmerProfileData(_Model):
    farmer_id: str
    farmer_name: str | None = None
    county: str | None = None
    farm_size: float | None = None
    certifications: list[str] = Field(default_factory=list)
    average_rating: float | None = None
    total_reviews: int | None = None
    brand_story: str = ""
    sustainability_practices: list[str] = Field(default_factory=list)
    profile_url: str
    qr_type: Literal["farmer-profile"] = "farmer-profile"
    generated_at: datetime


class FarmerProfilePayload(_Model):
    profile_url: str
    profile: FarmerProfileData
    qr_options: QROptions


class LogisticsData(_Model):
    order_id: str
    tracking_number: str
    status: str | None = None
    estimated_delivery: datetime | None = None
    tracking_url: str
    qr_type: Literal["logistics"] = "logistics"
    generated_at: datetime


class LogisticsPayload(_Model):
    tracking_url: str
    tracking_number: str
    logistics: LogisticsData
    qr_options: QROptions


class BatchPayload(_Model):
    count: int
    payloads: list[ProductPayload]
    generated_at: datetime


class VerificationResult(_Model):
    """Outcome of checking a traceability id against a product and farmer."""

    valid: bool
    reason: str
    traceability_id: str | None = None
    generated_at: datetime | None = None


class QualityDistribution(_Model):
    high: int = 0
    medium: int = 0
    standard: int = 0


class AnalyticsSummary(_Model):
    """Count-based summary over a batch of traceability records."""

    total_generated: int = 0
    skipped: int = 0
    varieties: dict[str, int] = Field(default_factory=dict)
    counties: dict[str, int] = Field(default_factory=dict)
    processing_methods: dict[str, int] = Field(default_factory=dict)
    certifications: dict[str, int] = Field(default_factory=dict)
    quality_distribution: QualityDistribution = Field(default_factory=QualityDistribution)
