"""Locate the real executable inside an external build result."""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from .errors import ArtifactNotFoundError

SHEBANG = b"#!"


def private_executable_name(product: str) -> str:
    """Name given to the real binary when a launcher wrapper replaces it."""

    return f".{product}-wrapped"


def locate_executable(result_dir: Path, product: str) -> Path:
    """Return the path of the binary that should be distributed.

    Wrapper-aware builds put a launcher script at ``bin/<product>`` and the
    real executable at ``bin/.<product>-wrapped``. The private path wins
    whenever it exists. Without it the public path must itself be the binary;
    a launcher script there is refused rather than packaged.
    """

    bin_dir = Path(result_dir) / "bin"
    private_path = bin_dir / private_executable_name(product)
    public_path = bin_dir / product

    if private_path.is_file():
        logger.debug("Using unwrapped executable {}", private_path)
        return private_path

    if not public_path.is_file():
        raise ArtifactNotFoundError(
            f"No executable found at {private_path} or {public_path}"
        )

    if _is_launcher_script(public_path):
        raise ArtifactNotFoundError(
            f"{public_path} is a launcher wrapper and {private_path} is missing"
        )

    logger.debug("Using executable {}", public_path)
    return public_path


def _is_launcher_script(path: Path) -> bool:
    try:
        with open(path, "rb") as handle:
            return handle.read(len(SHEBANG)) == SHEBANG
    except OSError as exc:
        raise ArtifactNotFoundError(f"Cannot read {path}: {exc}") from exc


__all__ = ["locate_executable", "private_executable_name"]
