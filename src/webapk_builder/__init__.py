"""WebAPK platform plugin: turns a web app manifest into an Android WebAPK."""

from webapk_builder.config import Settings, get_settings
from webapk_builder.errors import WebApkError
from webapk_builder.platform import PLATFORM_ID, ConversionResult, WebApkPlatform

__version__ = "0.1.0"

__all__ = [
    "WebApkPlatform",
    "ConversionResult",
    "Settings",
    "get_settings",
    "WebApkError",
    "PLATFORM_ID",
]
