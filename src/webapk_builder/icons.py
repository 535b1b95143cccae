# Icon download, type validation and PNG conversion.
"""Fetch the manifest's primary icon and normalise it to PNG bytes."""

from __future__ import annotations

import asyncio
import io
import logging

import httpx
from PIL import Image, UnidentifiedImageError

from webapk_builder.errors import (
    IconConversionFailed,
    IconFetchFailed,
    IconFetchTimedOut,
    UnsupportedIconType,
)

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = (
    "apng",
    "bmp",
    "gif",
    "x-icon",
    "jpeg",
    "png",
    "svg+xml",
    "tiff",
    "webp",
)

PNG_MIME = "image/png"
SVG_MIME = "image/svg+xml"


def _mime(content_type: str | None) -> str:
    return (content_type or "").split(";", 1)[0].strip()


def is_valid_image_type(content_type: str | None) -> bool:
    """True if the MIME subtype contains one of ``ALLOWED_IMAGE_TYPES``."""
    mime = _mime(content_type)
    if "/" not in mime:
        return False
    subtype = mime.split("/", 1)[1]
    return any(allowed in subtype for allowed in ALLOWED_IMAGE_TYPES)


def is_png(content_type: str | None) -> bool:
    return _mime(content_type) == PNG_MIME


def _svg_to_png(data: bytes) -> bytes:
    # cairosvg loads libcairo on import; a missing system library is a conversion failure.
    try:
        import cairosvg
    except (ImportError, OSError) as exc:
        raise IconConversionFailed(f"SVG support unavailable: {exc}") from exc
    try:
        return cairosvg.svg2png(bytestring=data)
    except Exception as exc:
        raise IconConversionFailed(f"Could not render SVG icon: {exc}") from exc


def _raster_to_png(data: bytes) -> bytes:
    try:
        with Image.open(io.BytesIO(data)) as img:
            if img.mode not in ("RGB", "RGBA"):
                img = img.convert("RGBA")
            buffer = io.BytesIO()
            img.save(buffer, format="PNG")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError, ValueError) as exc:
        raise IconConversionFailed(f"Could not convert icon to PNG: {exc}") from exc
    return buffer.getvalue()


def convert_to_png(data: bytes, content_type: str | None) -> bytes:
    """Re-encode ``data`` as PNG; raises ``IconConversionFailed``."""
    if _mime(content_type) == SVG_MIME:
        return _svg_to_png(data)
    return _raster_to_png(data)


async def fetch_icon(client: httpx.AsyncClient, src: str) -> tuple[bytes, str | None]:
    """Download the icon, returning its body and content type."""
    try:
        resp = await client.get(src, follow_redirects=True)
        resp.raise_for_status()
    except httpx.TimeoutException as exc:
        raise IconFetchTimedOut(f"Timed out fetching icon {src}") from exc
    except httpx.HTTPStatusError as exc:
        raise IconFetchFailed(
            f"Icon {src} returned HTTP {exc.response.status_code}"
        ) from exc
    except httpx.HTTPError as exc:
        raise IconFetchFailed(f"Could not fetch icon {src}: {exc}") from exc
    return resp.content, resp.headers.get("content-type")


async def load_icon_png(client: httpx.AsyncClient, src: str) -> bytes:
    """Fetch the icon at ``src`` and return PNG bytes.

    Raises ``UnsupportedIconType`` or ``IconConversionFailed`` when the image
    cannot be embedded; ``IconFetchFailed`` when it cannot be downloaded.
    """
    data, content_type = await fetch_icon(client, src)
    if not is_valid_image_type(content_type):
        raise UnsupportedIconType(content_type)
    if is_png(content_type):
        return data
    logger.debug("Converting %s icon to PNG", _mime(content_type))
    return await asyncio.to_thread(convert_to_png, data, content_type)


__all__ = [
    "ALLOWED_IMAGE_TYPES",
    "is_valid_image_type",
    "is_png",
    "convert_to_png",
    "fetch_icon",
    "load_icon_png",
]
