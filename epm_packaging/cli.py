"""CLI to build the portable Linux release."""

from __future__ import annotations

import argparse
import shlex
from dataclasses import replace
from pathlib import Path
from typing import Optional, Sequence

from loguru import logger

from .build import build_release
from .build_config import BuildConfig
from .errors import PackagingError
from .logger import setup_logging

LOG_LEVELS = ["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"]


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Build a portable release tarball for non-Nix Linux systems")
    parser.add_argument("--base-dir", type=Path, default=Path.cwd(), help="Project root (default: current directory)")
    parser.add_argument("--manifest", type=Path, help="Manifest to read the version from (default: Cargo.toml)")
    parser.add_argument("--result-dir", type=Path, help="Build result tree (default: result)")
    parser.add_argument("--dist-dir", type=Path, help="Output directory (default: dist)")
    parser.add_argument("--product", help="Executable and release name")
    parser.add_argument("--arch", help="Architecture label used in release names")
    parser.add_argument("--patchelf", help="Command used to run patchelf, e.g. 'nix shell nixpkgs#patchelf -c patchelf'")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Console log level",
    )
    parser.add_argument("--log-file", help="Also write JSON logs to this file")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> BuildConfig:
    config = BuildConfig.default(args.base_dir)
    overrides = {}
    if args.manifest:
        overrides["manifest_path"] = args.manifest
    if args.result_dir:
        overrides["result_dir"] = args.result_dir
    if args.dist_dir:
        overrides["dist_dir"] = args.dist_dir
    if args.product:
        overrides["product"] = args.product
    if args.arch:
        overrides["arch"] = args.arch
    if args.patchelf:
        overrides["relocation_command"] = shlex.split(args.patchelf)
    return replace(config, **overrides)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    setup_logging(console_level=args.log_level, log_file=args.log_file)
    config = config_from_args(args)
    try:
        build_release(config)
    except PackagingError as exc:
        logger.error("{} stage failed: {}", exc.stage, exc)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
