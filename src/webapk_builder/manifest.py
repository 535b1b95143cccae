# Manifest model and field extraction for WebAPK build requests.
"""Typed view of the host's manifest object.

The host hands over a mapping shaped like::

    {"content": {...W3C manifest...}, "default": {"short_name": ...},
     "generatedUrl": "https://example.com/manifest.json"}

``Manifest`` validates it once; ``ManifestFields.from_manifest`` applies the
defaults and URL resolution used to populate the wire request.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from PIL import ImageColor
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from webapk_builder.errors import InvalidManifest

logger = logging.getLogger(__name__)

DEFAULT_START_URL = "/"
DEFAULT_SCOPE = "/"
DEFAULT_ORIENTATION = "portrait"
DEFAULT_DISPLAY = "standalone"
DEFAULT_VERSION = "1"
DEFAULT_COLOR = 0

_INT32_MAX = 2**31 - 1
_UINT32 = 2**32


class ManifestIcon(BaseModel):
    model_config = ConfigDict(extra="allow")

    src: str
    sizes: str | None = None
    type: str | None = None


class ManifestContent(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str | None = None
    short_name: str | None = None
    start_url: str | None = None
    scope: str | None = None
    orientation: str | None = None
    display: str | None = None
    theme_color: str | None = None
    background_color: str | None = None
    icons: list[ManifestIcon] = Field(default_factory=list)
    version: str | int | None = None


class ManifestDefaults(BaseModel):
    model_config = ConfigDict(extra="allow")

    short_name: str | None = None


class Manifest(BaseModel):
    """Manifest object as produced by the host's manifest tools."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    content: ManifestContent
    default: ManifestDefaults | None = None
    generated_url: str | None = Field(default=None, alias="generatedUrl")

    @classmethod
    def parse(cls, data: Manifest | Mapping[str, Any]) -> Manifest:
        """Validate ``data`` once, turning pydantic errors into ``InvalidManifest``."""
        if isinstance(data, cls):
            return data
        try:
            return cls.model_validate(data)
        except ValidationError as exc:
            raise InvalidManifest(f"Manifest failed validation: {exc}") from exc

    def content_dict(self) -> dict[str, Any]:
        """The W3C manifest as supplied, without defaults filled in."""
        return self.content.model_dump(mode="json", exclude_unset=True)


def resolve_url(value: str, origin: str | None) -> str:
    """Return ``value`` unchanged if absolute, else prefixed with ``origin``."""
    if value.startswith(("http://", "https://")):
        return value
    if not origin:
        raise InvalidManifest(f"Relative URL {value!r} needs a page origin to resolve")
    return origin + value


def hex_to_signed_long(color: str | None) -> int:
    """Convert a CSS color to the signed 32-bit ARGB integer Android expects.

    ``#RRGGBB`` gets a full ``0xFF`` alpha, so ``"#000000"`` becomes
    ``0xFF000000`` and then ``-16777216``. Colors that carry their own alpha
    (``#RRGGBBAA``) keep it and may come out positive. ``None`` gives ``0``.
    """
    if not color:
        return DEFAULT_COLOR
    try:
        rgba = ImageColor.getrgb(color.strip())
    except ValueError:
        logger.warning("Ignoring unparseable color %r", color)
        return DEFAULT_COLOR
    alpha = rgba[3] if len(rgba) == 4 else 0xFF
    red, green, blue = rgba[:3]
    value = (alpha << 24) | (red << 16) | (green << 8) | blue
    if value > _INT32_MAX:
        value -= _UINT32
    return value


@dataclass(frozen=True)
class ManifestFields:
    """Manifest values after defaults and URL resolution."""

    name: str
    short_name: str
    package_name: str
    start_url: str
    scope: str
    orientation: str
    display: str
    theme_color: int
    background_color: int
    version: str
    manifest_url: str
    icon_src: str

    @classmethod
    def from_manifest(cls, manifest: Manifest, page_origin: str | None = None) -> ManifestFields:
        content = manifest.content
        if not content.icons:
            raise InvalidManifest("Manifest declares no icons")

        default_short_name = manifest.default.short_name if manifest.default else None
        return cls(
            name=content.name or "",
            short_name=content.short_name or "",
            package_name=content.short_name or default_short_name or "",
            start_url=resolve_url(content.start_url or DEFAULT_START_URL, page_origin),
            scope=resolve_url(content.scope or DEFAULT_SCOPE, page_origin),
            orientation=content.orientation or DEFAULT_ORIENTATION,
            display=content.display or DEFAULT_DISPLAY,
            theme_color=hex_to_signed_long(content.theme_color),
            background_color=hex_to_signed_long(content.background_color),
            version=str(content.version) if content.version else DEFAULT_VERSION,
            manifest_url=manifest.generated_url or "",
            icon_src=resolve_url(content.icons[0].src, page_origin),
        )


__all__ = [
    "Manifest",
    "ManifestContent",
    "ManifestDefaults",
    "ManifestIcon",
    "ManifestFields",
    "resolve_url",
    "hex_to_signed_long",
]
