"""SystemVerilog test-harness generation for WAT test programs.

Each WAT file becomes one ``run_wat_<name>`` task that resets the core,
loads the program ROM and branch table, runs, and checks the result against
the reference engine's value.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Sequence

from .branch_table import BranchEntry
from .errors import WatCompileError
from .oracle import DEFAULT_EXPORT, compile_wat, run_reference
from .pipeline import lower_module

LOGGER = logging.getLogger("wasmic.harness")

# Files to skip (hardware doesn't support all opcodes yet)
SKIP_FILES = ("loop",)


@dataclass
class WatTestInfo:
    name: str
    body_bytes: bytes
    branch_table: List[BranchEntry] = field(default_factory=list)
    expected: int = 0


def compile_wat_file(path: Path, *, export: str = DEFAULT_EXPORT, strict: bool = False) -> WatTestInfo:
    path = Path(path)
    try:
        source = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise WatCompileError(f"{path.name} is not UTF-8 text: {exc}") from exc
    wasm_bytes = compile_wat(source)
    lowered = lower_module(wasm_bytes, strict=strict)
    expected = run_reference(wasm_bytes, export=export)
    return WatTestInfo(
        name=path.stem,
        body_bytes=lowered.body,
        branch_table=list(lowered.branch_table),
        expected=expected,
    )


def discover_wat_files(wat_dir: Path, skip: Iterable[str] = SKIP_FILES) -> List[Path]:
    """Return ``*.wat`` files in ``wat_dir`` sorted by path, minus skipped stems."""

    skipped = set(skip)
    found = []
    for path in sorted(Path(wat_dir).iterdir(), key=lambda p: p.as_posix()):
        if path.suffix != ".wat" or not path.is_file():
            continue
        if path.stem in skipped:
            LOGGER.info("skipping %s", path.name)
            continue
        found.append(path)
    return found


def _sv_signed(value: int) -> str:
    if value < 0:
        return f"-32'sd{-value}"
    return f"32'sd{value}"


def generate_svh(tests: Sequence[WatTestInfo]) -> str:
    out: List[str] = ["// Auto-generated by wasm-compile gen-tests. Do not edit.\n\n"]

    for t in tests:
        out.append(f"task run_wat_{t.name};\n")
        out.append("    do_reset();\n")
        for i, b in enumerate(t.body_bytes):
            out.append(f"    prog_rom[{i}] = 8'h{b:02X};\n")
        for entry in t.branch_table:
            out.append(f"    bt_write(32'h{entry.source_pc:08X}, 32'h{entry.target_pc:08X});\n")
        out.append("    run_program();\n")
        out.append(f"    check_wat(\"{t.name}\", {_sv_signed(t.expected)});\n")
        out.append("endtask\n\n")

    out.append("task run_all_wat_tests;\n")
    for t in tests:
        out.append(f"    run_wat_{t.name}();\n")
    out.append("endtask\n")
    return "".join(out)
