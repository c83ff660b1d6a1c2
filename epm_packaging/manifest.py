"""Read the release version from the project manifest."""

from __future__ import annotations

import tomllib
from pathlib import Path
from typing import Any, Mapping

from loguru import logger

from .errors import ManifestParseError

_FORBIDDEN_CHARACTERS = ("/", "\\", "\x00")


def read_version(manifest_path: Path) -> str:
    """Return the manifest's ``version`` value exactly as written.

    The value is an opaque label used to name the staging directory and the
    archive. It is never parsed as a semantic version, so ``"nightly"`` is as
    valid as ``"2.3.1"``. Only values that cannot form a single file name
    (empty, or containing a path separator) are rejected.
    """

    manifest_path = Path(manifest_path)
    try:
        with open(manifest_path, "rb") as handle:
            data = tomllib.load(handle)
    except OSError as exc:
        raise ManifestParseError(f"Cannot read manifest {manifest_path}: {exc}") from exc
    except (tomllib.TOMLDecodeError, UnicodeDecodeError) as exc:
        raise ManifestParseError(f"Malformed manifest {manifest_path}: {exc}") from exc

    version = _lookup_version(data, manifest_path)
    _check_file_name_safe(version, manifest_path)
    logger.debug("Read version {} from {}", version, manifest_path)
    return version


def _lookup_version(data: Mapping[str, Any], manifest_path: Path) -> str:
    package = data.get("package")
    if isinstance(package, Mapping) and "version" in package:
        value = package["version"]
        if isinstance(value, Mapping) and value.get("workspace") is True:
            value = _workspace_version(data, manifest_path)
    elif "version" in data:
        value = data["version"]
    else:
        raise ManifestParseError(f"No version field in {manifest_path}")

    if not isinstance(value, str):
        raise ManifestParseError(
            f"version in {manifest_path} must be a string, got {type(value).__name__}"
        )
    return value


def _workspace_version(data: Mapping[str, Any], manifest_path: Path) -> Any:
    workspace = data.get("workspace", {})
    workspace_package = workspace.get("package", {}) if isinstance(workspace, Mapping) else {}
    if not isinstance(workspace_package, Mapping) or "version" not in workspace_package:
        raise ManifestParseError(
            f"{manifest_path} inherits version from a workspace that does not declare one"
        )
    return workspace_package["version"]


def _check_file_name_safe(version: str, manifest_path: Path) -> None:
    if not version.strip():
        raise ManifestParseError(f"Empty version in {manifest_path}")
    if any(char in version for char in _FORBIDDEN_CHARACTERS):
        raise ManifestParseError(
            f"Version {version!r} in {manifest_path} cannot be used in a file name"
        )


__all__ = ["read_version"]
