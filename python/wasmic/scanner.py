"""Decode a function byte stream into offset-tagged instruction records."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from .errors import MalformedInput
from .opcodes import (
    BLOCKTYPE,
    F32,
    F64,
    LABELS,
    LANE,
    MEMARG,
    MEMARG_MEMIDX_FLAG,
    OP_BLOCK,
    OP_BR,
    OP_BR_IF,
    OP_ELSE,
    OP_END,
    OP_IF,
    OP_LOOP,
    OPCODES,
    PREFIXED_OPCODES,
    REFTYPE,
    S32,
    S64,
    SHUFFLE,
    U32,
    V128,
    VALTYPES,
    Operands,
    describe_opcode,
)
from .reader import ByteReader

LOGGER = logging.getLogger("wasmic.scanner")


class InstrKind(Enum):
    BLOCK = "block"
    LOOP = "loop"
    IF = "if"
    ELSE = "else"
    END = "end"
    BR = "br"
    BR_IF = "br_if"
    OTHER = "other"


BLOCK_OPEN_KINDS = frozenset({InstrKind.BLOCK, InstrKind.LOOP, InstrKind.IF})
BRANCH_KINDS = frozenset({InstrKind.BR, InstrKind.BR_IF})

_STRUCTURAL = {
    OP_BLOCK: InstrKind.BLOCK,
    OP_LOOP: InstrKind.LOOP,
    OP_IF: InstrKind.IF,
    OP_ELSE: InstrKind.ELSE,
    OP_END: InstrKind.END,
    OP_BR: InstrKind.BR,
    OP_BR_IF: InstrKind.BR_IF,
}


@dataclass(frozen=True)
class InstrRecord:
    offset: int
    kind: InstrKind
    depth: Optional[int] = None
    mnemonic: str = ""

    @property
    def is_block_open(self) -> bool:
        return self.kind in BLOCK_OPEN_KINDS


def _read_operands(reader: ByteReader, operands: Operands) -> List[int]:
    """Consume the immediates listed in ``operands``; return the integer ones."""

    values: List[int] = []
    for operand in operands:
        if operand == U32:
            values.append(reader.uleb(32))
        elif operand == BLOCKTYPE:
            values.append(reader.sleb(33))
        elif operand == S32:
            values.append(reader.sleb(32))
        elif operand == S64:
            values.append(reader.sleb(64))
        elif operand == F32:
            reader.skip(4)
        elif operand == F64:
            reader.skip(8)
        elif operand == MEMARG:
            flags = reader.uleb(32)
            values.append(flags)
            if flags & MEMARG_MEMIDX_FLAG:
                values.append(reader.uleb(32))
            values.append(reader.uleb(64))
        elif operand in (V128, SHUFFLE):
            reader.skip(16)
        elif operand == LANE:
            values.append(reader.byte())
        elif operand == LABELS:
            count = reader.uleb(32)
            for _ in range(count + 1):
                values.append(reader.uleb(32))
        elif operand == VALTYPES:
            count = reader.uleb(32)
            reader.skip(count)
        elif operand == REFTYPE:
            reader.byte()
        else:
            raise ValueError(f"unknown operand kind {operand!r}")
    return values


def collect_instructions(body: bytes) -> List[InstrRecord]:
    """Scan ``body`` into one record per instruction, in offset order.

    Raises :class:`MalformedInput` on an unknown opcode or a truncated operand.
    """

    reader = ByteReader(body)
    records: List[InstrRecord] = []
    while not reader.eof():
        offset = reader.pos
        opcode = reader.byte()
        family = PREFIXED_OPCODES.get(opcode)
        if family is not None:
            sub_opcode = reader.uleb(32)
            entry = family.get(sub_opcode)
            if entry is None:
                raise MalformedInput(f"unknown opcode {describe_opcode(opcode, sub_opcode)}", offset=offset)
            mnemonic, operands = entry
            _read_operands(reader, operands)
            records.append(InstrRecord(offset, InstrKind.OTHER, mnemonic=mnemonic))
            continue
        entry = OPCODES.get(opcode)
        if entry is None:
            raise MalformedInput(f"unknown opcode {describe_opcode(opcode)}", offset=offset)
        mnemonic, operands = entry
        values = _read_operands(reader, operands)
        kind = _STRUCTURAL.get(opcode, InstrKind.OTHER)
        depth = values[0] if kind in BRANCH_KINDS else None
        records.append(InstrRecord(offset, kind, depth, mnemonic))
    LOGGER.debug("scanned %d instructions from %d bytes", len(records), len(body))
    return records
