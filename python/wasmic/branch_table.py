"""Branch table computation for the flat execution core.

The core has no notion of block nesting, so every structured transfer of
control is turned into an explicit ``(source_pc, target_pc)`` pair:

* ``if`` without ``else``: the if instruction jumps past the matching end
  when its condition is false.
* ``if`` with ``else``: the if instruction jumps to the first byte of the
  else body, and the else marker jumps past the end once the then-body
  falls through to it.
* ``br``/``br_if``: a loop target re-enters the loop body; a block or if
  target lands on the byte after its end.

Two passes are required.  A forward branch out of a block needs the offset
of an ``end`` that has not been scanned yet, so the first pass records the
end offset of every block-open instruction (keyed by its index in the record
sequence) and the second pass only ever looks ends up.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple

from .errors import DepthExceeded, MalformedInput, UnresolvedEnd
from .scanner import BLOCK_OPEN_KINDS, BRANCH_KINDS, InstrKind, InstrRecord, collect_instructions

LOGGER = logging.getLogger("wasmic.branch_table")

# opcode + block type byte
BLOCK_HEADER_SIZE = 2


class BlockKind(Enum):
    BLOCK = "block"
    LOOP = "loop"
    IF = "if"


_OPEN_KINDS = {
    InstrKind.BLOCK: BlockKind.BLOCK,
    InstrKind.LOOP: BlockKind.LOOP,
    InstrKind.IF: BlockKind.IF,
}


@dataclass
class BlockScope:
    kind: BlockKind
    start_offset: int
    body_offset: int
    instr_index: int
    else_offset: Optional[int] = None


@dataclass(frozen=True)
class BranchEntry:
    """A single branch table entry: source_pc -> target_pc."""

    source_pc: int
    target_pc: int

    def as_tuple(self) -> Tuple[int, int]:
        return (self.source_pc, self.target_pc)


def resolve_block_ends(records: Sequence[InstrRecord], *, strict: bool = False) -> Dict[int, int]:
    """Map the index of every block-open record to the offset of its end.

    An ``end`` with nothing open produces no mapping.  With ``strict`` set,
    such an ``end`` raises :class:`MalformedInput` unless it is the final
    instruction (the function's own terminator), and so does any block left
    open at the end of the stream.
    """

    ends: Dict[int, int] = {}
    open_blocks: List[int] = []
    last_index = len(records) - 1
    for index, record in enumerate(records):
        if record.kind in BLOCK_OPEN_KINDS:
            open_blocks.append(index)
        elif record.kind is InstrKind.END:
            if open_blocks:
                ends[open_blocks.pop()] = record.offset
            elif strict and index != last_index:
                raise MalformedInput("end without an open block", offset=record.offset)
    if strict and open_blocks:
        unclosed = records[open_blocks[-1]]
        raise MalformedInput(f"{unclosed.kind.value} has no matching end", offset=unclosed.offset)
    return ends


def _branch_target(scope: BlockScope, block_ends: Dict[int, int]) -> int:
    if scope.kind is BlockKind.LOOP:
        return scope.body_offset
    end_offset = block_ends.get(scope.instr_index)
    if end_offset is None:
        raise UnresolvedEnd(f"no end found for {scope.kind.value}", offset=scope.start_offset)
    return end_offset + 1


def resolve_branch_targets(
    records: Sequence[InstrRecord],
    block_ends: Dict[int, int],
    *,
    strict: bool = False,
) -> List[BranchEntry]:
    """Walk the live scope stack and emit branch table entries in discovery order."""

    entries: List[BranchEntry] = []
    scopes: List[BlockScope] = []

    def emit(source_pc: int, target_pc: int, reason: str) -> None:
        LOGGER.debug("%s: 0x%08X -> 0x%08X", reason, source_pc, target_pc)
        entries.append(BranchEntry(source_pc, target_pc))

    for index, record in enumerate(records):
        kind = record.kind
        if kind in BLOCK_OPEN_KINDS:
            scopes.append(
                BlockScope(
                    kind=_OPEN_KINDS[kind],
                    start_offset=record.offset,
                    body_offset=record.offset + BLOCK_HEADER_SIZE,
                    instr_index=index,
                )
            )
        elif kind is InstrKind.ELSE:
            scope = scopes[-1] if scopes else None
            if scope is None or scope.kind is not BlockKind.IF:
                if strict:
                    raise MalformedInput("else outside of an if block", offset=record.offset)
                continue
            if strict and scope.else_offset is not None:
                raise MalformedInput("duplicate else in if block", offset=record.offset)
            scope.else_offset = record.offset
            emit(scope.start_offset, record.offset + 1, "if->else")
        elif kind is InstrKind.END:
            if not scopes:
                continue
            scope = scopes.pop()
            if scope.kind is BlockKind.IF:
                if scope.else_offset is not None:
                    emit(scope.else_offset, record.offset + 1, "else->end")
                else:
                    emit(scope.start_offset, record.offset + 1, "if->end")
        elif kind in BRANCH_KINDS:
            depth = record.depth or 0
            if depth >= len(scopes):
                raise DepthExceeded(depth, len(scopes), offset=record.offset)
            target = scopes[len(scopes) - 1 - depth]
            emit(record.offset, _branch_target(target, block_ends), f"{kind.value} {depth}")
        elif kind is InstrKind.OTHER:
            continue
        else:  # pragma: no cover - every InstrKind is handled above
            raise AssertionError(f"unhandled instruction kind {kind}")

    return entries


def compute_branch_table(body: bytes, *, strict: bool = False) -> List[BranchEntry]:
    """Compute branch table entries from raw function body bytes.

    ``body`` holds the operators only (no locals prefix); offsets are relative
    to its first byte, which is PC 0 on the hardware.
    """

    records = collect_instructions(body)
    block_ends = resolve_block_ends(records, strict=strict)
    entries = resolve_branch_targets(records, block_ends, strict=strict)
    LOGGER.debug("%d branch entries from %d instructions", len(entries), len(records))
    return entries
