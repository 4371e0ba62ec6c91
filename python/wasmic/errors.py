"""Exception hierarchy for the wasm-ic toolchain.

Lowering failures carry the byte offset at which they were detected so the
CLI can point at the offending instruction.  Failures of the external
collaborators (WAT compilation, the reference engine) are kept in a separate
branch because they say nothing about the structure of the function body.
"""

from __future__ import annotations

from typing import Optional


class LoweringError(Exception):
    """Base class for failures while lowering a function body."""

    def __init__(self, message: str, *, offset: Optional[int] = None) -> None:
        self.detail = message
        self.offset = offset
        if offset is not None:
            message = f"{message} at offset 0x{offset:X}"
        super().__init__(message)


class NoCodeSection(LoweringError):
    """The module container holds no function body."""


class MalformedInput(LoweringError):
    """Container framing or instruction decoding failed."""


class DepthExceeded(LoweringError):
    """A br/br_if names a scope deeper than the live nesting."""

    def __init__(self, depth: int, live_scopes: int, *, offset: int) -> None:
        self.depth = depth
        self.live_scopes = live_scopes
        super().__init__(
            f"br depth {depth} exceeds block nesting ({live_scopes} open)",
            offset=offset,
        )


class UnresolvedEnd(LoweringError):
    """A block targeted by a branch has no recorded end offset."""


class ToolchainError(Exception):
    """Base class for failures in WAT compilation or the reference engine."""


class WatCompileError(ToolchainError):
    pass


class OracleError(ToolchainError):
    pass


__all__ = [
    "LoweringError",
    "NoCodeSection",
    "MalformedInput",
    "DepthExceeded",
    "UnresolvedEnd",
    "ToolchainError",
    "WatCompileError",
    "OracleError",
]
