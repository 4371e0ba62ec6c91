"""Module container walker and function body extractor.

Only the framing needed to reach the code section is decoded: the preamble,
the section headers, and each code entry's size and locals vector.  Section
payloads other than the code section are skipped by size.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

from .errors import MalformedInput, NoCodeSection
from .opcodes import OP_END, OP_RETURN
from .reader import ByteReader

LOGGER = logging.getLogger("wasmic.container")

WASM_MAGIC = b"\x00asm"
WASM_VERSION = 1
SECTION_CODE = 10


@dataclass(frozen=True)
class Section:
    id: int
    offset: int
    size: int


@dataclass(frozen=True)
class FunctionBody:
    index: int
    offset: int
    size: int
    operator_offset: int
    local_groups: int

    @property
    def end(self) -> int:
        return self.offset + self.size


def iter_sections(wasm_bytes: bytes) -> Iterator[Section]:
    reader = ByteReader(wasm_bytes)
    magic = reader.read(4) if reader.remaining() >= 4 else b""
    if magic != WASM_MAGIC:
        raise MalformedInput("missing \\0asm magic", offset=0)
    version = int.from_bytes(reader.read(4), "little")
    if version != WASM_VERSION:
        raise MalformedInput(f"unsupported binary version {version}", offset=4)
    while not reader.eof():
        section_id = reader.byte()
        size = reader.uleb(32)
        offset = reader.pos
        reader.skip(size)
        yield Section(section_id, offset, size)


def iter_function_bodies(wasm_bytes: bytes) -> Iterator[FunctionBody]:
    """Yield the entries of the code section in declaration order."""

    for section in iter_sections(wasm_bytes):
        if section.id != SECTION_CODE:
            continue
        payload = wasm_bytes[section.offset : section.offset + section.size]
        reader = ByteReader(payload, base=section.offset)
        count = reader.uleb(32)
        for index in range(count):
            size = reader.uleb(32)
            body_offset = reader.pos
            body = ByteReader(reader.read(size), base=body_offset)
            groups = body.uleb(32)
            for _ in range(groups):
                body.uleb(32)
                body.byte()
            yield FunctionBody(index, body_offset, size, body.pos, groups)
        return


def extract_function_body(wasm_bytes: bytes) -> bytes:
    """Return the operator bytes of the first function, locals stripped.

    The trailing ``end`` that closes the function is rewritten to ``return``
    so the flat core sees an explicit exit instruction.
    """

    for body in iter_function_bodies(wasm_bytes):
        ops = bytearray(wasm_bytes[body.operator_offset : body.end])
        if ops and ops[-1] == OP_END:
            ops[-1] = OP_RETURN
        LOGGER.debug(
            "function %d: %d operator bytes at module offset 0x%X (%d local groups)",
            body.index,
            len(ops),
            body.operator_offset,
            body.local_groups,
        )
        return bytes(ops)
    raise NoCodeSection("no code section found in module")
