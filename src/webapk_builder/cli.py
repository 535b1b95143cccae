"""Command-line entry point: ``webapk-builder manifest.json --browser-version 120.0``."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from webapk_builder.errors import InvalidManifest, WebApkError
from webapk_builder.log import setup_logging
from webapk_builder.platform import WebApkPlatform

logger = logging.getLogger(__name__)


def load_manifest(path: Path, manifest_url: str | None = None) -> dict[str, Any]:
    """Read a manifest file, wrapping a bare W3C manifest in the host's shape."""
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise InvalidManifest(f"Could not read manifest {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise InvalidManifest(f"Manifest {path} is not a JSON object")

    if "content" not in data:
        data = {"content": data}
    if manifest_url:
        data["generatedUrl"] = manifest_url
    return data


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="webapk-builder",
        description="Build an Android WebAPK from a web app manifest.",
    )
    parser.add_argument("manifest", type=Path, help="Path to the manifest JSON file")
    parser.add_argument(
        "-o",
        "--output",
        type=Path,
        default=Path("."),
        help="Output root; files go under <output>/android-webapk (default: .)",
    )
    parser.add_argument(
        "--browser-version",
        required=True,
        help="Requesting browser version, e.g. from the user agent",
    )
    parser.add_argument(
        "--origin",
        default=None,
        help="Page origin used to resolve relative manifest URLs",
    )
    parser.add_argument(
        "--manifest-url",
        default=None,
        help="Public URL of the manifest (overrides generatedUrl)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        setup_logging(verbose=args.verbose)
        manifest = load_manifest(args.manifest, args.manifest_url)
        platform = WebApkPlatform()
        result = asyncio.run(
            platform.convert(manifest, args.output, args.browser_version, args.origin)
        )
    except WebApkError as exc:
        logger.error("%s: %s", type(exc).__name__, exc)
        return 1

    print(result.apk_path)
    return 0
