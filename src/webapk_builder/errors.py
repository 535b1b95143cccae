# Error kinds raised by the WebAPK conversion pipeline.
"""Exceptions for the WebAPK platform.

Every fatal failure aborts ``WebApkPlatform.convert`` and reaches the caller
as one of the ``WebApkError`` subclasses below. ``UnsupportedIconType`` and
``IconConversionFailed`` are raised by the icon helpers but handled inside the
converter, which continues without an embedded image.
"""

from __future__ import annotations


class WebApkError(Exception):
    """Base class for every error raised by this package."""


class ConfigurationError(WebApkError):
    """A required setting (API key, endpoint, CDN base, requester id) is missing."""


class InvalidManifest(WebApkError):
    """The manifest could not be validated or lacks data the request needs."""


class DirectoryCreationFailed(WebApkError):
    """The platform output directory could not be created."""


class IconFetchFailed(WebApkError):
    """The first manifest icon could not be downloaded."""


class UnsupportedIconType(WebApkError):
    """The icon was served with a content type outside the allow-list."""

    def __init__(self, content_type: str | None):
        self.content_type = content_type
        super().__init__(f"Unsupported icon content type: {content_type!r}")


class IconConversionFailed(WebApkError):
    """A non-PNG icon could not be re-encoded as PNG."""


class BuildRequestFailed(WebApkError):
    """The build service could not be reached or answered with an error status."""


class BuildResponseDecodeFailed(WebApkError):
    """The build service reply is not a usable WebApkResponse."""


class PackageDownloadFailed(WebApkError):
    """The generated APK could not be downloaded."""


class FileWriteFailed(WebApkError):
    """The APK or the manifest copy could not be written to disk."""


class RequestTimedOut(WebApkError):
    """An outbound HTTP call exceeded the configured timeout."""


class IconFetchTimedOut(IconFetchFailed, RequestTimedOut):
    pass


class BuildRequestTimedOut(BuildRequestFailed, RequestTimedOut):
    pass


class PackageDownloadTimedOut(PackageDownloadFailed, RequestTimedOut):
    pass


__all__ = [
    "WebApkError",
    "ConfigurationError",
    "InvalidManifest",
    "DirectoryCreationFailed",
    "IconFetchFailed",
    "UnsupportedIconType",
    "IconConversionFailed",
    "BuildRequestFailed",
    "BuildResponseDecodeFailed",
    "PackageDownloadFailed",
    "FileWriteFailed",
    "RequestTimedOut",
    "IconFetchTimedOut",
    "BuildRequestTimedOut",
    "PackageDownloadTimedOut",
]
