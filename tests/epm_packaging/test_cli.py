"""Tests for the command line entry point."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

import pytest
from loguru import logger

from epm_packaging import cli
from epm_packaging.relocate import BinaryRelocator


def test_config_from_args_defaults(tmp_path: Path) -> None:
    config = cli.config_from_args(cli.parse_args(["--base-dir", str(tmp_path)]))
    assert config.product == "eve-preview-manager"
    assert config.manifest_path == tmp_path / "Cargo.toml"
    assert config.relocation_command is None


def test_config_from_args_overrides(tmp_path: Path) -> None:
    args = cli.parse_args(
        [
            "--base-dir", str(tmp_path),
            "--product", "widget",
            "--arch", "aarch64",
            "--dist-dir", str(tmp_path / "out"),
            "--patchelf", "nix shell nixpkgs#patchelf -c patchelf",
        ]
    )
    config = cli.config_from_args(args)
    assert config.product == "widget"
    assert config.arch == "aarch64"
    assert config.dist_dir == tmp_path / "out"
    assert config.relocation_command == ["nix", "shell", "nixpkgs#patchelf", "-c", "patchelf"]


def test_main_success(
    make_project: Callable[..., Path], fake_patchelf, monkeypatch: pytest.MonkeyPatch
) -> None:
    base = make_project()

    monkeypatch.setattr(
        "epm_packaging.build.BinaryRelocator",
        lambda command=None, interpreters=(): BinaryRelocator(
            command=["patchelf"], interpreters=interpreters, runner=fake_patchelf
        ),
    )

    assert cli.main(["--base-dir", str(base), "--product", "widget"]) == 0
    assert (base / "dist" / "widget-2.3.1-x86_64.tar.gz").is_file()


def test_main_reports_failed_stage(
    make_project: Callable[..., Path], capsys: pytest.CaptureFixture[str]
) -> None:
    base = make_project()
    (base / "result" / "bin" / ".widget-wrapped").unlink()

    assert cli.main(["--base-dir", str(base), "--product", "widget"]) == 1
    assert "locate stage failed" in capsys.readouterr().err


def test_main_writes_json_log(make_project: Callable[..., Path], tmp_path: Path) -> None:
    base = make_project()
    (base / "Cargo.toml").unlink()
    log_file = tmp_path / "logs" / "release.log"

    assert cli.main(["--base-dir", str(base), "--log-file", str(log_file)]) == 1
    logger.remove()
    assert "version stage failed" in log_file.read_text(encoding="utf-8")


def test_main_reports_undecodable_manifest(
    make_project: Callable[..., Path], capsys: pytest.CaptureFixture[str]
) -> None:
    base = make_project()
    (base / "Cargo.toml").write_bytes(b'[package]\nversion = "1.0\xff"\n')

    assert cli.main(["--base-dir", str(base), "--product", "widget"]) == 1
    assert "version stage failed" in capsys.readouterr().err


def test_log_level_is_case_insensitive(tmp_path: Path) -> None:
    args = cli.parse_args(["--base-dir", str(tmp_path), "--log-level", "debug"])
    assert args.log_level == "DEBUG"


def test_unknown_log_level_rejected(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    with pytest.raises(SystemExit) as excinfo:
        cli.parse_args(["--base-dir", str(tmp_path), "--log-level", "verbose"])
    assert excinfo.value.code == 2
    assert "invalid choice" in capsys.readouterr().err
