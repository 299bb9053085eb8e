import logging
import os
from pathlib import Path
import sys
from typing import Any

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

# Ensure local src package is importable in serverless runtime.
ROOT = Path(__file__).resolve().parent.parent
SRC = ROOT / "src"
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from shamba_trace.analytics import aggregate  # noqa: E402
from shamba_trace.config import TraceConfig  # noqa: E402
from shamba_trace.exceptions import InvalidInputError, RenderError  # noqa: E402
from shamba_trace.payloads import PayloadBuilder  # noqa: E402
from shamba_trace.rendering import (  # noqa: E402
    render_farmer_profile_image,
    render_logistics_image,
    render_product_images,
)
from shamba_trace.schema import (  # noqa: E402
    AnalyticsSummary,
    BatchPayload,
    FarmerProfilePayload,
    LogisticsPayload,
    ProductPayload,
    VerificationResult,
)
from shamba_trace.verification import verify_traceability_id  # noqa: E402

app = FastAPI(title="shamba-trace API", version="1.0.0")
logger = logging.getLogger(__name__)
CONFIG = TraceConfig.from_env()
BUILDER = PayloadBuilder(CONFIG)

raw_origins = os.getenv("FRONTEND_ORIGINS", "*")
allow_origins = [origin.strip() for origin in raw_origins.split(",") if origin.strip()]
MAX_BATCH_ITEMS = int(os.getenv("MAX_BATCH_ITEMS", "500"))

app.add_middleware(
    CORSMiddleware,
    allow_origins=allow_origins,
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


class _Body(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ProductQRRequest(_Body):
    product: dict[str, Any]
    farmer: dict[str, Any]
    render: bool = False


class FarmerQRRequest(_Body):
    farmer: dict[str, Any]
    render: bool = False


class LogisticsQRRequest(_Body):
    order: dict[str, Any]
    render: bool = False


class BatchItem(_Body):
    product: dict[str, Any]
    farmer: dict[str, Any]


class BatchQRRequest(_Body):
    items: list[BatchItem] = Field(default_factory=list)


class VerifyRequest(_Body):
    traceability_id: str
    product_id: str
    farmer_id: str

    @field_validator("product_id", "farmer_id", mode="before")
    @classmethod
    def _stringify_key(cls, value):
        return value if value is None else str(value)


class AnalyticsRequest(_Body):
    payloads: list[Any] = Field(default_factory=list)


class ProductQRResponse(_Body):
    payload: ProductPayload
    qr_code_image: str | None = None
    detailed_qr_data: str | None = None


class FarmerQRResponse(_Body):
    payload: FarmerProfilePayload
    qr_code_image: str | None = None


class LogisticsQRResponse(_Body):
    payload: LogisticsPayload
    qr_code_image: str | None = None


@app.get("/health")
def health() -> dict[str, bool]:
    return {"ok": True}


@app.post("/qr/product", response_model=ProductQRResponse, response_model_by_alias=True)
def product_qr(body: ProductQRRequest) -> ProductQRResponse:
    try:
        payload = BUILDER.build_product_payload(body.product, body.farmer)
        images = render_product_images(payload) if body.render else {}
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RenderError as exc:
        logger.exception("product qr render failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return ProductQRResponse(
        payload=payload,
        qr_code_image=images.get("qrCodeImage"),
        detailed_qr_data=images.get("detailedQrData"),
    )


@app.post("/qr/farmer", response_model=FarmerQRResponse, response_model_by_alias=True)
def farmer_qr(body: FarmerQRRequest) -> FarmerQRResponse:
    try:
        payload = BUILDER.build_farmer_profile_payload(body.farmer)
        image = render_farmer_profile_image(payload) if body.render else None
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RenderError as exc:
        logger.exception("farmer qr render failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return FarmerQRResponse(payload=payload, qr_code_image=image)


@app.post("/qr/logistics", response_model=LogisticsQRResponse, response_model_by_alias=True)
def logistics_qr(body: LogisticsQRRequest) -> LogisticsQRResponse:
    try:
        payload = BUILDER.build_logistics_payload(body.order)
        image = render_logistics_image(payload) if body.render else None
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except RenderError as exc:
        logger.exception("logistics qr render failed")
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return LogisticsQRResponse(payload=payload, qr_code_image=image)


@app.post("/qr/batch", response_model=BatchPayload, response_model_by_alias=True)
def batch_qr(body: BatchQRRequest) -> BatchPayload:
    if len(body.items) > MAX_BATCH_ITEMS:
        raise HTTPException(status_code=413, detail="too many batch items")
    try:
        return BUILDER.build_batch([(item.product, item.farmer) for item in body.items])
    except InvalidInputError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except Exception as exc:
        logger.exception("batch qr failed")
        raise HTTPException(status_code=500, detail="internal_error") from exc


@app.post("/verify", response_model=VerificationResult, response_model_by_alias=True)
def verify(body: VerifyRequest) -> VerificationResult:
    return verify_traceability_id(body.traceability_id, body.product_id, body.farmer_id)


@app.post("/analytics", response_model=AnalyticsSummary, response_model_by_alias=True)
def analytics(body: AnalyticsRequest) -> AnalyticsSummary:
    return aggregate(body.payloads)
