"""Hex artifacts consumed by the hardware loader.

``prog.hex``      one byte per line, two uppercase hex digits
``branch.hex``    ``SSSSSSSS TTTTTTTT`` per branch table entry
``expected.txt``  signed decimal i32 result
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from .branch_table import BranchEntry

PROG_HEX = "prog.hex"
BRANCH_HEX = "branch.hex"
EXPECTED_TXT = "expected.txt"


def format_prog_hex(body: bytes) -> str:
    return "\n".join(f"{b:02X}" for b in body) + "\n"


def format_branch_hex(entries: Iterable[BranchEntry]) -> str:
    return "".join(f"{e.source_pc & 0xFFFFFFFF:08X} {e.target_pc & 0xFFFFFFFF:08X}\n" for e in entries)


def format_expected(value: int) -> str:
    return f"{value}\n"


def write_prog_hex(path: Path, body: bytes) -> None:
    Path(path).write_bytes(format_prog_hex(body).encode("ascii"))


def write_branch_hex(path: Path, entries: Iterable[BranchEntry]) -> None:
    Path(path).write_bytes(format_branch_hex(entries).encode("ascii"))


def write_expected(path: Path, value: int) -> None:
    Path(path).write_bytes(format_expected(value).encode("ascii"))
