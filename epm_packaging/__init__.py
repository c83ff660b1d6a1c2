"""Portable release packaging for EVE Preview Manager."""

from importlib.metadata import PackageNotFoundError, version

from .build import ReleaseArtifacts, build_release
from .build_config import BuildConfig
from .errors import (
    ArchiveError,
    ArtifactNotFoundError,
    ManifestParseError,
    PackagingError,
    RelocationError,
    StagingError,
    ToolUnavailableError,
)

try:
    __version__ = version("epm-packaging")
except PackageNotFoundError:  # pragma: no cover - package metadata absent in dev
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "build_release",
    "BuildConfig",
    "ReleaseArtifacts",
    "PackagingError",
    "ManifestParseError",
    "ArtifactNotFoundError",
    "StagingError",
    "ToolUnavailableError",
    "RelocationError",
    "ArchiveError",
]
