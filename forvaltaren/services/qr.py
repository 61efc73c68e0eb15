"""QR images for the public report link of a property."""

import io

import qrcode
from qrcode.image.svg import SvgPathImage

from forvaltaren.core.config import get_settings

MEDIA_TYPES = {
    "svg": "image/svg+xml; charset=utf-8",
    "png": "image/png",
}


def intake_url(intake_token: str) -> str:
    return f"{get_settings().public_app_url.rstrip('/')}/report/{intake_token}"


def render_qr(url: str, fmt: str = "svg") -> bytes:
    """Encode ``url`` as an SVG or PNG QR code."""
    buf = io.BytesIO()
    if fmt == "png":
        img = qrcode.make(url, box_size=8, border=1)
        img.save(buf, format="PNG")
    else:
        img = qrcode.make(url, box_size=8, border=1, image_factory=SvgPathImage)
        img.save(buf)
    return buf.getvalue()
