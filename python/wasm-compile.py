#!/usr/bin/env python3
"""Entry point for the wasm-compile tool."""

from python.wasmic.cli import main


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
