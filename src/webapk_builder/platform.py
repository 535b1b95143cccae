# WebAPK platform: manifest in, installable APK out.
"""Android WebAPK platform for the PWA packaging host.

``WebApkPlatform.convert`` runs one forward pipeline per call:

1. prepare ``<output_root>/<PLATFORM_ID>``
2. extract manifest fields with defaults
3. fetch the first icon and normalise it to PNG
4. build the ``WebApk`` request
5. POST it to the build service
6. decode the reply into a download URL
7. download the APK
8. write ``source/app.apk`` and ``manifest.json``

Any fatal step raises a ``WebApkError`` and the remaining steps are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping

import httpx

from webapk_builder import icons, storage, wire
from webapk_builder.config import Settings, get_settings
from webapk_builder.errors import (
    BuildRequestFailed,
    BuildRequestTimedOut,
    IconConversionFailed,
    PackageDownloadFailed,
    PackageDownloadTimedOut,
    UnsupportedIconType,
)
from webapk_builder.manifest import Manifest, ManifestFields

logger = logging.getLogger(__name__)

PLATFORM_ID = "android-webapk"
PLATFORM_NAME = "Android (WebAPK)"

PROTOBUF_MIME = "application/x-protobuf"
ANDROID_ABI = "armeabi-v7a"
UPDATE_REASON = "1"
STALE_MANIFEST = False


@dataclass
class ConversionResult:
    """What a successful ``convert`` call produced."""

    output_dir: Path
    apk_path: Path
    manifest_path: Path
    download_url: str
    package_name: str
    version: str
    icon_embedded: bool


def download_url(cdn_base_url: str, response: Any) -> str:
    return f"{cdn_base_url}{response.token}/{response.version}/{response.package_name}.apk"


class WebApkPlatform:
    """Builds WebAPKs through the remote build service.

    Holds only configuration; every ``convert`` call builds its own request
    and HTTP client, so concurrent calls for different output roots are safe.
    """

    id = PLATFORM_ID
    name = PLATFORM_NAME

    def __init__(
        self,
        settings: Settings | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.settings.require_complete()
        self._transport = transport

    def output_dir(self, output_root: str | Path) -> Path:
        return Path(output_root) / self.id

    def initialize(self, output_root: str | Path) -> Path:
        """Create and return the platform's output directory."""
        return storage.ensure_dir(self.output_dir(output_root))

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.settings.request_timeout, transport=self._transport)

    async def convert(
        self,
        manifest: Manifest | Mapping[str, Any],
        output_root: str | Path,
        browser_version: str,
        page_origin: str | None = None,
    ) -> ConversionResult:
        manifest = Manifest.parse(manifest)
        fields = ManifestFields.from_manifest(manifest, page_origin)
        output_dir = self.initialize(output_root)
        logger.info("Building WebAPK for %r (%s)", fields.name, fields.package_name)

        async with self._client() as client:
            image_data = await self._icon_data(client, fields.icon_src)
            request = self.build_request(fields, browser_version, image_data)
            response = await self._submit(client, request)
            url = download_url(self.settings.cdn_base_url, response)
            logger.info("Downloading WebAPK from %s", url)
            apk = await self._download(client, url)

        apk_path = storage.write_package(output_dir, apk)
        manifest_path = storage.write_manifest(output_dir, manifest.content_dict())
        return ConversionResult(
            output_dir=output_dir,
            apk_path=apk_path,
            manifest_path=manifest_path,
            download_url=url,
            package_name=response.package_name,
            version=response.version,
            icon_embedded=image_data is not None,
        )

    async def _icon_data(self, client: httpx.AsyncClient, src: str) -> bytes | None:
        try:
            return await icons.load_icon_png(client, src)
        except UnsupportedIconType as exc:
            logger.warning("Icon %s not embedded: %s", src, exc)
        except IconConversionFailed as exc:
            logger.warning("Icon %s not embedded, PNG conversion failed: %s", src, exc)
        return None

    def build_request(
        self, fields: ManifestFields, browser_version: str, image_data: bytes | None = None
    ):
        """Assemble the ``WebApk`` message for ``fields``."""
        image = wire.Image(src=fields.icon_src, usages=[wire.PRIMARY_ICON])
        if image_data is not None:
            image.image_data = image_data

        app_manifest = wire.WebAppManifest(
            name=fields.name,
            short_name=fields.short_name,
            start_url=fields.start_url,
            scopes=[fields.scope],
            icons=[image],
            orientation=fields.orientation,
            display_mode=fields.display,
            theme_color=fields.theme_color,
            background_color=fields.background_color,
        )
        return wire.WebApk(
            package_name=fields.package_name,
            version=fields.version,
            manifest_url=fields.manifest_url,
            requester_application_package=self.settings.requester_package_id,
            requester_application_version=browser_version,
            manifest=app_manifest,
            android_abi=ANDROID_ABI,
            stale_manifest=STALE_MANIFEST,
            update_reason=UPDATE_REASON,
        )

    async def _submit(self, client: httpx.AsyncClient, request):
        headers = {
            "Accept": PROTOBUF_MIME,
            "Content-Type": PROTOBUF_MIME,
            "X-Api-Key": self.settings.api_key,
        }
        endpoint = self.settings.build_service_url
        try:
            resp = await client.post(
                endpoint, content=wire.encode_request(request), headers=headers
            )
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise BuildRequestTimedOut(f"Build service timed out: {endpoint}") from exc
        except httpx.HTTPStatusError as exc:
            raise BuildRequestFailed(
                f"Build service returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise BuildRequestFailed(f"Build request failed: {exc}") from exc

        response = wire.decode_response(resp.content)
        logger.debug(
            "Build service answered package=%s version=%s", response.package_name, response.version
        )
        return response

    async def _download(self, client: httpx.AsyncClient, url: str) -> bytes:
        try:
            resp = await client.get(url, follow_redirects=True)
            resp.raise_for_status()
        except httpx.TimeoutException as exc:
            raise PackageDownloadTimedOut(f"Timed out downloading {url}") from exc
        except httpx.HTTPStatusError as exc:
            raise PackageDownloadFailed(
                f"Download of {url} returned HTTP {exc.response.status_code}"
            ) from exc
        except httpx.HTTPError as exc:
            raise PackageDownloadFailed(f"Could not download {url}: {exc}") from exc
        return resp.content


__all__ = ["WebApkPlatform", "ConversionResult", "PLATFORM_ID", "PLATFORM_NAME", "download_url"]
