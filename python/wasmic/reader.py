"""Cursor over a byte buffer with LEB128 helpers.

Shared by the container walker and the instruction scanner.  Positions are
absolute: ``base`` is added to every offset so a reader over a slice of a
module still reports offsets into the original buffer.
"""

from __future__ import annotations

from .errors import MalformedInput


class ByteReader:
    def __init__(self, data: bytes, *, base: int = 0) -> None:
        self.data = bytes(data)
        self.base = base
        self._pos = 0

    @property
    def pos(self) -> int:
        return self.base + self._pos

    def remaining(self) -> int:
        return len(self.data) - self._pos

    def eof(self) -> bool:
        return self._pos >= len(self.data)

    def byte(self) -> int:
        if self._pos >= len(self.data):
            raise MalformedInput("unexpected end of input", offset=self.pos)
        value = self.data[self._pos]
        self._pos += 1
        return value

    def read(self, size: int) -> bytes:
        if size < 0 or self._pos + size > len(self.data):
            raise MalformedInput(f"truncated read of {size} bytes", offset=self.pos)
        chunk = self.data[self._pos : self._pos + size]
        self._pos += size
        return chunk

    def skip(self, size: int) -> None:
        self.read(size)

    def uleb(self, bits: int = 32) -> int:
        start = self.pos
        max_bytes = (bits + 6) // 7
        result = 0
        shift = 0
        for _ in range(max_bytes):
            value = self.byte()
            result |= (value & 0x7F) << shift
            shift += 7
            if not value & 0x80:
                if result >> bits:
                    raise MalformedInput(f"uleb{bits} out of range", offset=start)
                return result
        raise MalformedInput(f"uleb{bits} longer than {max_bytes} bytes", offset=start)

    def sleb(self, bits: int = 32) -> int:
        start = self.pos
        max_bytes = (bits + 6) // 7
        result = 0
        shift = 0
        for _ in range(max_bytes):
            value = self.byte()
            result |= (value & 0x7F) << shift
            shift += 7
            if not value & 0x80:
                if value & 0x40:
                    result -= 1 << shift
                return result
        raise MalformedInput(f"sleb{bits} longer than {max_bytes} bytes", offset=start)
