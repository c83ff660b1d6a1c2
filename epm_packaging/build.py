"""Build orchestration for portable Linux releases."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from loguru import logger

from .archive import archive_directory, write_release_manifest
from .build_config import BuildConfig
from .locator import locate_executable
from .manifest import read_version
from .relocate import BinaryRelocator, RelocationResult
from .staging import stage_executable


@dataclass(slots=True)
class ReleaseArtifacts:
    version: str
    staging_dir: Path
    executable: Path
    archive: Path
    release_manifest: Path
    relocation: RelocationResult


def build_release(
    config: Optional[BuildConfig] = None,
    relocator: Optional[BinaryRelocator] = None,
) -> ReleaseArtifacts:
    """Run every stage: version, locate, stage, relocate, archive."""

    if config is None:
        config = BuildConfig.default(Path.cwd())

    version = read_version(config.manifest_path)
    logger.info("Building {} {} distribution for {}", config.product, version, config.arch)

    source = locate_executable(config.result_dir, config.product)

    # Resolve the tool before touching dist/ so a missing patchelf aborts cleanly.
    if relocator is None:
        relocator = BinaryRelocator(
            command=config.relocation_command,
            interpreters=config.interpreters,
        )

    executable = stage_executable(
        source,
        config.dist_dir,
        config.product,
        version,
        config.arch,
    )
    relocation = relocator.relocate(executable)
    logger.info("Distribution binary created: {}", executable)

    archive = archive_directory(executable.parent)
    release_manifest = write_release_manifest(
        archive,
        product=config.product,
        version=version,
        arch=config.arch,
        interpreter=relocation.metadata.interpreter,
    )
    logger.info("Release tarball: {}", archive)

    return ReleaseArtifacts(
        version=version,
        staging_dir=executable.parent,
        executable=executable,
        archive=archive,
        release_manifest=release_manifest,
        relocation=relocation,
    )


__all__ = ["ReleaseArtifacts", "build_release"]
