"""wasm-compile CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path
from typing import List

from .errors import LoweringError, ToolchainError
from .harness import SKIP_FILES, compile_wat_file, discover_wat_files, generate_svh
from .hexfile import BRANCH_HEX, EXPECTED_TXT, PROG_HEX, write_branch_hex, write_expected, write_prog_hex
from .oracle import DEFAULT_EXPORT

LOG = logging.getLogger("wasmic.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _default_skip() -> List[str]:
    raw = os.environ.get("WASMIC_SKIP")
    if raw is None:
        return list(SKIP_FILES)
    return [item.strip() for item in raw.split(",") if item.strip()]


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="wasm-compile", description="Compile WAT to hex files for wasm-ic")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("WASMIC_LOG", "WARNING"),
        help="Logging level (default WARNING, or $WASMIC_LOG)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    compile_cmd = sub.add_parser("compile", help="Compile a WAT file to hex files for the hardware core")
    compile_cmd.add_argument("input", type=Path, help="Input WAT file")
    compile_cmd.add_argument("--out-dir", type=Path, default=Path("."), help="Output directory for hex files")
    compile_cmd.add_argument("--export", default=DEFAULT_EXPORT, help="Exported () -> i32 function to run")
    compile_cmd.add_argument("--strict", action="store_true", help="Reject stray else/end instead of ignoring them")

    gen_cmd = sub.add_parser("gen-tests", help="Generate a SystemVerilog header with test tasks for all WAT files")
    gen_cmd.add_argument("--wat-dir", type=Path, required=True, help="Directory containing WAT files")
    gen_cmd.add_argument("--output", type=Path, required=True, help="Output .svh file path")
    gen_cmd.add_argument(
        "--skip",
        action="append",
        default=None,
        metavar="NAME",
        help="WAT file stem to leave out (repeatable; default from $WASMIC_SKIP or 'loop')",
    )
    gen_cmd.add_argument("--export", default=DEFAULT_EXPORT, help="Exported () -> i32 function to run")
    gen_cmd.add_argument("--strict", action="store_true", help="Reject stray else/end instead of ignoring them")
    return parser


def _cmd_compile(args: argparse.Namespace) -> int:
    info = compile_wat_file(args.input, export=args.export, strict=args.strict)
    out_dir: Path = args.out_dir
    out_dir.mkdir(parents=True, exist_ok=True)
    write_prog_hex(out_dir / PROG_HEX, info.body_bytes)
    write_branch_hex(out_dir / BRANCH_HEX, info.branch_table)
    write_expected(out_dir / EXPECTED_TXT, info.expected)
    LOG.info("wrote %s, %s, %s to %s", PROG_HEX, BRANCH_HEX, EXPECTED_TXT, out_dir)
    print(
        f"{info.name}: {len(info.body_bytes)} bytes, "
        f"{len(info.branch_table)} branch entries, expected={info.expected}"
    )
    return 0


def _cmd_gen_tests(args: argparse.Namespace) -> int:
    skip = args.skip if args.skip is not None else _default_skip()
    tests = []
    for path in discover_wat_files(args.wat_dir, skip):
        try:
            info = compile_wat_file(path, export=args.export, strict=args.strict)
        except (LoweringError, ToolchainError) as exc:
            print(f"error: compiling {path}: {exc}", file=sys.stderr)
            return 1
        print(
            f"  {info.name}: {len(info.body_bytes)} bytes, "
            f"{len(info.branch_table)} branches, expected={info.expected}"
        )
        tests.append(info)

    output: Path = args.output
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(generate_svh(tests), encoding="utf-8")
    print(f"Generated {output} with {len(tests)} WAT test(s)")
    return 0


def main(argv: List[str] | None = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    handlers = {"compile": _cmd_compile, "gen-tests": _cmd_gen_tests}
    try:
        return handlers[args.command](args)
    except (LoweringError, ToolchainError, OSError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
