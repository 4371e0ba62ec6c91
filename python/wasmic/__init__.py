"""
wasmic - lowering of structured WebAssembly for the wasm-ic hardware core.

The core executes a flat byte stream addressed by PC and has no notion of
block nesting.  This package turns the first function of a module into that
stream plus an explicit branch table:

    container.py     → module framing, function body extraction
    scanner.py       → offset-tagged instruction records
    branch_table.py  → block-end pass and branch-target pass
    pipeline.py      → module bytes to lowered function
    oracle.py        → WAT compilation and reference execution (wasmtime)
    hexfile.py       → prog.hex / branch.hex / expected.txt writers
    harness.py       → SystemVerilog test task generation
    cli.py           → wasm-compile command line
"""

from .branch_table import (  # noqa: F401
    BlockKind,
    BlockScope,
    BranchEntry,
    compute_branch_table,
    resolve_block_ends,
    resolve_branch_targets,
)
from .container import extract_function_body  # noqa: F401
from .errors import (  # noqa: F401
    DepthExceeded,
    LoweringError,
    MalformedInput,
    NoCodeSection,
    OracleError,
    ToolchainError,
    UnresolvedEnd,
    WatCompileError,
)
from .pipeline import LoweredFunction, lower_module  # noqa: F401
from .scanner import InstrKind, InstrRecord, collect_instructions  # noqa: F401

__all__ = [
    "BlockKind",
    "BlockScope",
    "BranchEntry",
    "compute_branch_table",
    "resolve_block_ends",
    "resolve_branch_targets",
    "extract_function_body",
    "LoweringError",
    "NoCodeSection",
    "MalformedInput",
    "DepthExceeded",
    "UnresolvedEnd",
    "ToolchainError",
    "WatCompileError",
    "OracleError",
    "LoweredFunction",
    "lower_module",
    "InstrKind",
    "InstrRecord",
    "collect_instructions",
]

__version__ = "0.1.0-dev"
