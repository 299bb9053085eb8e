"""QR image rendering for built payloads."""

from __future__ import annotations

import base64
from io import BytesIO

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q
from PIL import Image

from shamba_trace.exceptions import RenderError
from shamba_trace.schema import FarmerProfilePayload, LogisticsPayload, ProductPayload, QROptions

_ERROR_CORRECTION = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}


def render_image(data: str, options: QROptions | None = None) -> Image.Image:
    """Encode `data` as a square QR image `options.width` pixels wide."""
    options = options or QROptions()
    try:
        qr = qrcode.QRCode(
            version=None,
            error_correction=_ERROR_CORRECTION[options.error_correction],
            box_size=10,
            border=options.margin,
        )
        qr.add_data(data)
        qr.make(fit=True)
        image = qr.make_image(fill_color=options.dark, back_color=options.light).get_image()
    except Exception as exc:
        raise RenderError(f"Failed to generate QR code: {exc}") from exc

    return image.convert("RGB").resize((options.width, options.width), Image.Resampling.NEAREST)


def render_png(data: str, options: QROptions | None = None) -> bytes:
    with BytesIO() as buffer:
        render_image(data, options).save(buffer, format="PNG")
        return buffer.getvalue()


def render_data_url(data: str, options: QROptions | None = None) -> str:
    """Return a `data:image/png;base64,...` URL for `data`."""
    encoded = base64.b64encode(render_png(data, options)).decode("ascii")
    return f"data:image/png;base64,{encoded}"


def render_product_images(payload: ProductPayload) -> dict[str, str]:
    """Render the short verification code and the detailed summary code."""
    return {
        "qrCodeImage": render_data_url(payload.verification_url, payload.qr_options),
        "detailedQrData": render_data_url(payload.consumer_summary.to_qr_text(), payload.detailed_qr_options),
    }


def render_farmer_profile_image(payload: FarmerProfilePayload) -> str:
    return render_data_url(payload.profile_url, payload.qr_options)


def render_logistics_image(payload: LogisticsPayload) -> str:
    return render_data_url(payload.tracking_url, payload.qr_options)
