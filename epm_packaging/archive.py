"""Compress the staged distribution and describe the resulting archive."""

from __future__ import annotations

import hashlib
import json
import tarfile
from pathlib import Path
from typing import Optional

from loguru import logger

from .errors import ArchiveError

ARCHIVE_SUFFIX = ".tar.gz"


def archive_path_for(staging_dir: Path) -> Path:
    staging_dir = Path(staging_dir)
    return staging_dir.parent / f"{staging_dir.name}{ARCHIVE_SUFFIX}"


def archive_directory(staging_dir: Path) -> Path:
    """Write ``<staging_dir>.tar.gz`` next to the staging directory.

    The staging directory itself is the single top-level entry, so extracting
    the archive recreates ``<product>-<version>-<arch>/``. An existing archive
    of the same name is replaced.
    """

    staging_dir = Path(staging_dir)
    archive_path = archive_path_for(staging_dir)
    logger.info("Creating tarball {}", archive_path)
    try:
        with tarfile.open(archive_path, "w:gz") as tar:
            tar.add(staging_dir, arcname=staging_dir.name)
    except (OSError, tarfile.TarError) as exc:
        raise ArchiveError(f"Failed to write archive {archive_path}: {exc}") from exc

    size_mb = archive_path.stat().st_size / (1024 * 1024)
    logger.debug("Archive size: {:.2f} MB", size_mb)
    return archive_path


def sha256_file(file_path: Path) -> str:
    digest = hashlib.sha256()
    with open(file_path, "rb") as handle:
        for chunk in iter(lambda: handle.read(8192), b""):
            digest.update(chunk)
    return digest.hexdigest()


def write_release_manifest(
    archive_path: Path,
    product: str,
    version: str,
    arch: str,
    interpreter: Optional[str],
) -> Path:
    """Write ``<release>.json`` beside the archive with its checksum."""

    archive_path = Path(archive_path)
    manifest_path = archive_path.with_name(archive_path.name[: -len(ARCHIVE_SUFFIX)] + ".json")
    try:
        manifest = {
            "app": product,
            "version": version,
            "arch": arch,
            "archive": archive_path.name,
            "size": archive_path.stat().st_size,
            "checksum": sha256_file(archive_path),
            "interpreter": interpreter,
        }
        manifest_path.write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    except OSError as exc:
        raise ArchiveError(f"Failed to write release manifest {manifest_path}: {exc}") from exc
    return manifest_path


__all__ = ["archive_directory", "archive_path_for", "sha256_file", "write_release_manifest"]
