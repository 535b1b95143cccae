import io
import json

import httpx
import pytest
from PIL import Image

from webapk_builder import wire
from webapk_builder.config import Settings, get_settings

ICON_URL = "https://x/icon.png"
BUILD_URL = "https://build.example/webapk"
CDN_BASE = "https://cdn/"

_ENV_VARS = (
    "WEBAPK_API_KEY",
    "WEBAPK_BUILD_SERVICE_URL",
    "WEBAPK_CDN_BASE_URL",
    "WEBAPK_REQUESTER_PACKAGE_ID",
    "WEBAPK_REQUEST_TIMEOUT",
    "WEBAPK_DEBUG",
    "WEBAPKTOKEN",
    "WEBAPKAPIURL",
    "WEBAPKURL",
    "ORIGINAPKNAME",
)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        api_key="secret-key",
        build_service_url=BUILD_URL,
        cdn_base_url=CDN_BASE,
        requester_package_id="com.android.chrome",
        request_timeout=5,
    )


def image_bytes(fmt: str, mode: str = "RGB") -> bytes:
    buffer = io.BytesIO()
    Image.new(mode, (4, 4), color=(255, 0, 0) if mode == "RGB" else 1).save(buffer, format=fmt)
    return buffer.getvalue()


@pytest.fixture
def png_bytes():
    return image_bytes("PNG")


@pytest.fixture
def manifest():
    return {
        "content": {
            "name": "App",
            "short_name": "app",
            "start_url": "/",
            "icons": [{"src": ICON_URL, "sizes": "192x192"}],
            "version": 2,
        },
        "generatedUrl": "https://x/manifest.json",
    }


def build_response(package_name="app", version="2", token="tok123") -> bytes:
    return wire.WebApkResponse(
        package_name=package_name, version=version, token=token
    ).SerializeToString()


class FakeServices:
    """Routes requests for the icon host, build service and CDN."""

    def __init__(self, icon_body: bytes, icon_type: str = "image/png"):
        self.icon_body = icon_body
        self.icon_type = icon_type
        self.build_status = 200
        self.build_body = build_response()
        self.build_error: Exception | None = None
        self.apk_body = b"PK\x03\x04fake-apk"
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        url = str(request.url)
        if url.startswith(BUILD_URL):
            if self.build_error is not None:
                raise self.build_error
            return httpx.Response(self.build_status, content=self.build_body)
        if url.startswith(CDN_BASE):
            return httpx.Response(200, content=self.apk_body)
        if url.startswith("https://x/"):
            return httpx.Response(
                200, content=self.icon_body, headers={"content-type": self.icon_type}
            )
        return httpx.Response(404)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def build_request(self) -> httpx.Request:
        return next(r for r in self.requests if str(r.url).startswith(BUILD_URL))

    def sent_webapk(self):
        message = wire.WebApk()
        message.ParseFromString(self.build_request().content)
        return message


@pytest.fixture
def services(png_bytes):
    return FakeServices(png_bytes)


def read_json(path):
    return json.loads(path.read_text(encoding="utf-8"))
