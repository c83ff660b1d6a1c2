"""Pytest configuration and shared fixtures for packaging tests."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import pytest
from loguru import logger

ROOT = Path(__file__).resolve().parents[1]

if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

ELF_BYTES = b"\x7fELF\x02\x01\x01\x00" + b"\x00" * 56 + b"fake program body"
WRAPPER_SCRIPT = b"#! /nix/store/abc-bash/bin/bash -e\nexec -a \"$0\" /nix/store/xyz/bin/.widget-wrapped \"$@\"\n"


class FakePatchelf:
    """Stand-in for ``subprocess.run`` that records patchelf invocations.

    Interpreters listed in ``rejected`` fail as an invalid loader would.
    """

    def __init__(
        self,
        rejected: Sequence[str] = (),
        rpath_fails: bool = False,
        initial_interpreter: str = "/nix/store/glibc/lib/ld-linux-x86-64.so.2",
    ) -> None:
        self.rejected = set(rejected)
        self.rpath_fails = rpath_fails
        self.calls: List[List[str]] = []
        self.rpath: Optional[str] = "/nix/store/libs/lib"
        self.interpreter = initial_interpreter

    def __call__(self, cmd: Sequence[str], **kwargs: object) -> "subprocess.CompletedProcess[str]":
        cmd = list(cmd)
        self.calls.append(cmd)
        flag = cmd[1]
        if flag == "--remove-rpath":
            if self.rpath_fails:
                return subprocess.CompletedProcess(cmd, 1, "", "not an ELF executable")
            self.rpath = ""
            return subprocess.CompletedProcess(cmd, 0, "", "")
        if flag == "--set-interpreter":
            if cmd[2] in self.rejected:
                return subprocess.CompletedProcess(cmd, 1, "", "cannot set interpreter")
            self.interpreter = cmd[2]
            return subprocess.CompletedProcess(cmd, 0, "", "")
        if flag == "--print-rpath":
            return subprocess.CompletedProcess(cmd, 0, f"{self.rpath}\n", "")
        if flag == "--print-interpreter":
            return subprocess.CompletedProcess(cmd, 0, f"{self.interpreter}\n", "")
        return subprocess.CompletedProcess(cmd, 2, "", f"unknown option {flag}")

    def flags(self) -> List[str]:
        return [call[1] for call in self.calls]


@pytest.fixture
def fake_patchelf() -> FakePatchelf:
    return FakePatchelf()


@pytest.fixture
def make_project(tmp_path: Path) -> Callable[..., Path]:
    """Create a project root with a Cargo.toml and a Nix-style result tree."""

    def _make(
        version: str = "2.3.1",
        product: str = "widget",
        wrapped: bool = True,
        public: bool = True,
    ) -> Path:
        base = tmp_path / "project"
        bin_dir = base / "result" / "bin"
        bin_dir.mkdir(parents=True, exist_ok=True)
        (base / "Cargo.toml").write_text(
            f'[package]\nname = "{product}"\nversion = "{version}"\nedition = "2021"\n',
            encoding="utf-8",
        )
        if wrapped:
            private = bin_dir / f".{product}-wrapped"
            private.write_bytes(ELF_BYTES)
            private.chmod(0o555)
            if public:
                (bin_dir / product).write_bytes(WRAPPER_SCRIPT)
                (bin_dir / product).chmod(0o555)
        elif public:
            (bin_dir / product).write_bytes(ELF_BYTES)
            (bin_dir / product).chmod(0o555)
        return base

    return _make


@pytest.fixture
def patchelf_factory() -> Callable[..., FakePatchelf]:
    return FakePatchelf


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger.remove()
