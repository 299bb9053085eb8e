"""Tests for QR image rendering."""

import base64
from io import BytesIO

import pytest
from PIL import Image

from shamba_trace import build_product_payload
from shamba_trace.exceptions import RenderError
from shamba_trace.payloads import build_logistics_payload
from shamba_trace.rendering import (
    render_data_url,
    render_image,
    render_logistics_image,
    render_png,
    render_product_images,
)
from shamba_trace.schema import QROptions


def _decode(data_url: str) -> Image.Image:
    prefix = "data:image/png;base64,"
    assert data_url.startswith(prefix)
    return Image.open(BytesIO(base64.b64decode(data_url[len(prefix):])))


def test_render_image_uses_requested_width():
    image = render_image("https://trace.example/trace/1", QROptions(width=200, margin=1))

    assert image.size == (200, 200)
    assert image.mode == "RGB"


def test_render_png_is_png():
    payload = render_png("hello")

    assert payload.startswith(b"\x89PNG")


def test_render_image_uses_dark_colour():
    image = render_image("hello", QROptions(width=256, margin=0, dark="#2D5016"))

    assert (0x2D, 0x50, 0x16) in {color for _, color in image.getcolors(maxcolors=16)}


def test_render_data_url_round_trips_through_pillow():
    image = _decode(render_data_url("hello", QROptions(width=128)))

    assert image.format == "PNG"
    assert image.size == (128, 128)


def test_render_product_images(product, farmer):
    payload = build_product_payload(product, farmer, "https://trace.example")

    images = render_product_images(payload)

    assert _decode(images["qrCodeImage"]).size == (256, 256)
    assert _decode(images["detailedQrData"]).size == (512, 512)


def test_render_logistics_image():
    payload = build_logistics_payload({"id": "order-1"}, "https://trace.example")

    assert _decode(render_logistics_image(payload)).size == (200, 200)


def test_oversized_data_raises_render_error():
    with pytest.raises(RenderError):
        render_png("x" * 5000, QROptions(error_correction="H"))
