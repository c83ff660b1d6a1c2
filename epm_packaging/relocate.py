"""Rewrite dynamic-linking metadata of the staged executable with patchelf.

Nix builds embed an RPATH and an ELF interpreter that both point into
``/nix/store``. Neither exists on an ordinary distribution, so the staged
copy has its RPATH cleared and its interpreter pointed at the system loader.
Libraries are then resolved through the default search path or
``LD_LIBRARY_PATH`` on the target host.
"""

from __future__ import annotations

import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

from loguru import logger

from .build_config import DEFAULT_INTERPRETERS
from .errors import PermissionRestoreError, RelocationError, ToolUnavailableError

EXECUTABLE_MODE = 0o755
NIX_PATCHELF_COMMAND = ("shell", "nixpkgs#patchelf", "-c", "patchelf")

Runner = Callable[..., "subprocess.CompletedProcess[str]"]


@dataclass(slots=True)
class ElfMetadata:
    """Linker metadata read back from a patched executable."""

    rpath: Optional[str]
    interpreter: Optional[str]


@dataclass(slots=True)
class RelocationResult:
    executable: Path
    interpreter: Optional[str]
    metadata: ElfMetadata


def resolve_relocation_tool(which: Optional[Callable[[str], Optional[str]]] = None) -> List[str]:
    """Return the command prefix used to invoke patchelf.

    A ``patchelf`` on ``PATH`` is preferred. Otherwise patchelf is borrowed
    from nixpkgs through ``nix shell`` when nix is installed.
    """

    which = which or shutil.which
    patchelf = which("patchelf")
    if patchelf:
        return [patchelf]
    nix = which("nix")
    if nix:
        logger.debug("patchelf not on PATH; using it through nix shell")
        return [nix, *NIX_PATCHELF_COMMAND]
    raise ToolUnavailableError("patchelf is not installed and nix is not available to provide it")


class BinaryRelocator:
    """Clear the RPATH and reset the ELF interpreter of an executable."""

    def __init__(
        self,
        command: Optional[Sequence[str]] = None,
        interpreters: Sequence[str] = DEFAULT_INTERPRETERS,
        runner: Runner = subprocess.run,
    ) -> None:
        self.command = list(command) if command else resolve_relocation_tool()
        self.interpreters = tuple(interpreters)
        self.runner = runner

    def relocate(self, executable: Path) -> RelocationResult:
        executable = Path(executable)
        logger.info("Patching {} for system libraries", executable)
        self.remove_rpath(executable)
        interpreter = self.set_interpreter(executable)
        try:
            executable.chmod(EXECUTABLE_MODE)
        except OSError as exc:
            raise PermissionRestoreError(f"Failed to restore permissions on {executable}: {exc}") from exc
        metadata = self.read_metadata(executable)
        logger.bind(rpath=metadata.rpath, interpreter=metadata.interpreter).debug(
            "Relocated {}", executable
        )
        return RelocationResult(executable=executable, interpreter=interpreter, metadata=metadata)

    def remove_rpath(self, executable: Path) -> None:
        result = self._run("--remove-rpath", str(executable))
        if result.returncode != 0:
            raise RelocationError(
                f"patchelf could not remove RPATH from {executable}: {_stderr(result)}"
            )

    def set_interpreter(self, executable: Path) -> Optional[str]:
        """Embed the first loader path patchelf accepts.

        Returns ``None`` when every candidate is rejected; the interpreter
        already present in the binary is then left untouched.
        """

        for interpreter in self.interpreters:
            result = self._run("--set-interpreter", interpreter, str(executable))
            if result.returncode == 0:
                logger.info("Interpreter set to {}", interpreter)
                return interpreter
            logger.debug("patchelf rejected interpreter {}: {}", interpreter, _stderr(result))
        logger.warning("No interpreter candidate accepted for {}; keeping the embedded one", executable)
        return None

    def read_metadata(self, executable: Path) -> ElfMetadata:
        return ElfMetadata(
            rpath=self._query("--print-rpath", executable),
            interpreter=self._query("--print-interpreter", executable),
        )

    def _query(self, flag: str, executable: Path) -> Optional[str]:
        result = self._run(flag, str(executable))
        if result.returncode != 0:
            return None
        return (result.stdout or "").strip()

    def _run(self, *args: str) -> "subprocess.CompletedProcess[str]":
        cmd = [*self.command, *args]
        logger.debug("Running patchelf: {}", " ".join(cmd))
        try:
            return self.runner(cmd, capture_output=True, text=True, check=False)
        except OSError as exc:
            raise ToolUnavailableError(f"Cannot run {self.command[0]}: {exc}") from exc


def relocate_binary(
    executable: Path,
    command: Optional[Sequence[str]] = None,
    interpreters: Sequence[str] = DEFAULT_INTERPRETERS,
) -> RelocationResult:
    return BinaryRelocator(command=command, interpreters=interpreters).relocate(executable)


def _stderr(result: "subprocess.CompletedProcess[str]") -> str:
    return (result.stderr or "").strip() or f"exit status {result.returncode}"


__all__ = [
    "BinaryRelocator",
    "ElfMetadata",
    "RelocationResult",
    "relocate_binary",
    "resolve_relocation_tool",
]
