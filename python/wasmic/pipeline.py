"""Module bytes -> (program bytes, branch table)."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from .branch_table import BranchEntry, compute_branch_table
from .container import extract_function_body


@dataclass(frozen=True)
class LoweredFunction:
    body: bytes
    branch_table: List[BranchEntry] = field(default_factory=list)

    def branch_pairs(self) -> List[Tuple[int, int]]:
        return [entry.as_tuple() for entry in self.branch_table]


def lower_module(wasm_bytes: bytes, *, strict: bool = False) -> LoweredFunction:
    """Lower the first function of ``wasm_bytes`` for the flat core.

    Pure: identical input always yields identical output, and any failure
    aborts the whole lowering rather than returning a partial table.
    """

    body = extract_function_body(wasm_bytes)
    return LoweredFunction(body, compute_branch_table(body, strict=strict))
