"""CLI to build the portable Linux release tarball."""

from __future__ import annotations

from epm_packaging.cli import main


if __name__ == "__main__":
    raise SystemExit(main())
