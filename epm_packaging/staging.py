"""Assemble the versioned staging directory."""

from __future__ import annotations

import shutil
import stat
from pathlib import Path

from loguru import logger

from .errors import StagingError


def staging_dir_name(product: str, version: str, arch: str) -> str:
    return f"{product}-{version}-{arch}"


def stage_executable(
    executable: Path,
    dist_dir: Path,
    product: str,
    version: str,
    arch: str,
) -> Path:
    """Copy ``executable`` into a freshly created staging directory.

    Any previous directory with the same name is removed first so repeated
    runs never merge with stale output. The copy is named after the product
    and made owner-writable so the relocator can patch it in place.
    Returns the path of the staged executable.
    """

    staging_dir = Path(dist_dir) / staging_dir_name(product, version, arch)
    _prepare_staging_dir(staging_dir)

    target = staging_dir / product
    logger.info("Copying {} to {}", executable, target)
    try:
        shutil.copy(executable, target)
    except OSError as exc:
        raise StagingError(f"Failed to copy {executable} to {target}: {exc}") from exc

    try:
        mode = target.stat().st_mode
        target.chmod(mode | stat.S_IWUSR)
    except OSError as exc:
        raise StagingError(f"Failed to make {target} writable: {exc}") from exc

    return target


def _prepare_staging_dir(staging_dir: Path) -> None:
    try:
        if staging_dir.is_dir() and not staging_dir.is_symlink():
            logger.debug("Removing previous staging directory {}", staging_dir)
            shutil.rmtree(staging_dir)
        elif staging_dir.exists() or staging_dir.is_symlink():
            staging_dir.unlink()
        staging_dir.mkdir(parents=True)
    except OSError as exc:
        raise StagingError(f"Failed to prepare staging directory {staging_dir}: {exc}") from exc


__all__ = ["stage_executable", "staging_dir_name"]
