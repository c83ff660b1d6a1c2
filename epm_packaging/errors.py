"""Exception hierarchy for the release pipeline."""

from __future__ import annotations


class PackagingError(Exception):
    """Base class for fatal release pipeline failures."""

    stage = "package"


class ManifestParseError(PackagingError):
    """The manifest is unreadable or has no usable ``version`` field."""

    stage = "version"


class ArtifactNotFoundError(PackagingError):
    """Neither the private nor the public executable could be packaged."""

    stage = "locate"


class StagingError(PackagingError, OSError):
    """Filesystem failure while assembling the staging directory."""

    stage = "stage"


class ToolUnavailableError(PackagingError):
    """The binary relocation utility cannot be found or launched."""

    stage = "relocate"


class RelocationError(PackagingError):
    """The relocation utility rejected the staged executable."""

    stage = "relocate"


class PermissionRestoreError(RelocationError, OSError):
    """The patched executable could not be made executable again."""

    stage = "relocate"


class ArchiveError(PackagingError, OSError):
    """Filesystem failure while writing the archive or release manifest."""

    stage = "archive"


__all__ = [
    "PackagingError",
    "ManifestParseError",
    "ArtifactNotFoundError",
    "StagingError",
    "ToolUnavailableError",
    "RelocationError",
    "PermissionRestoreError",
    "ArchiveError",
]
