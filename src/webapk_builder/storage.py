# Output directory and artifact writes.

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from webapk_builder.errors import DirectoryCreationFailed, FileWriteFailed

logger = logging.getLogger(__name__)

APK_RELATIVE_PATH = Path("source") / "app.apk"
MANIFEST_FILENAME = "manifest.json"


def ensure_dir(path: Path) -> Path:
    """Create ``path`` (and parents) if needed."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise DirectoryCreationFailed(f"Could not create {path}: {exc}") from exc
    return path


def write_package(output_dir: Path, data: bytes) -> Path:
    apk_path = output_dir / APK_RELATIVE_PATH
    try:
        apk_path.parent.mkdir(parents=True, exist_ok=True)
        apk_path.write_bytes(data)
    except OSError as exc:
        raise FileWriteFailed(f"Could not write {apk_path}: {exc}") from exc
    logger.info("Wrote %d bytes to %s", len(data), apk_path)
    return apk_path


def write_manifest(output_dir: Path, content: dict[str, Any]) -> Path:
    manifest_path = output_dir / MANIFEST_FILENAME
    try:
        manifest_path.write_text(json.dumps(content, indent=4), encoding="utf-8")
    except OSError as exc:
        raise FileWriteFailed(f"Could not write {manifest_path}: {exc}") from exc
    logger.info("Wrote manifest to %s", manifest_path)
    return manifest_path


__all__ = [
    "ensure_dir",
    "write_package",
    "write_manifest",
    "APK_RELATIVE_PATH",
    "MANIFEST_FILENAME",
]
