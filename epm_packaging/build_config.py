"""Packaging configuration dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Sequence, Tuple

DEFAULT_PRODUCT = "eve-preview-manager"
DEFAULT_ARCH = "x86_64"

# Tried in order; the first loader path patchelf accepts is embedded.
DEFAULT_INTERPRETERS: Tuple[str, ...] = (
    "/lib64/ld-linux-x86-64.so.2",
    "/lib/x86_64-linux-gnu/ld-linux-x86-64.so.2",
)


@dataclass(slots=True)
class BuildConfig:
    """Top-level configuration describing one release run."""

    product: str
    arch: str
    base_dir: Path
    manifest_path: Path
    result_dir: Path
    dist_dir: Path
    relocation_command: Optional[Sequence[str]] = None
    interpreters: Tuple[str, ...] = field(default=DEFAULT_INTERPRETERS)

    @classmethod
    def default(cls, base_dir: Path) -> "BuildConfig":
        base_dir = Path(base_dir)
        return cls(
            product=DEFAULT_PRODUCT,
            arch=DEFAULT_ARCH,
            base_dir=base_dir,
            manifest_path=base_dir / "Cargo.toml",
            result_dir=base_dir / "result",
            dist_dir=base_dir / "dist",
        )
