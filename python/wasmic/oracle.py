"""WAT compilation and reference execution through wasmtime.

The reference engine only supplies the value the hardware is expected to
produce; nothing computed here feeds back into lowering.
"""

from __future__ import annotations

import logging

import wasmtime

from .errors import OracleError, WatCompileError

LOGGER = logging.getLogger("wasmic.oracle")

DEFAULT_EXPORT = "main"


def compile_wat(source: str) -> bytes:
    """Compile WAT text source to WASM binary bytes."""

    try:
        wasm = wasmtime.wat2wasm(source)
    except wasmtime.WasmtimeError as exc:
        raise WatCompileError(f"invalid WAT: {exc}") from exc
    return bytes(wasm)


def run_reference(wasm_bytes: bytes, *, export: str = DEFAULT_EXPORT) -> int:
    """Instantiate ``wasm_bytes`` and call ``export`` as ``() -> i32``."""

    engine = wasmtime.Engine()
    store = wasmtime.Store(engine)
    try:
        module = wasmtime.Module(engine, wasm_bytes)
        instance = wasmtime.Instance(store, module, [])
    except wasmtime.WasmtimeError as exc:
        raise OracleError(f"could not instantiate module: {exc}") from exc

    try:
        func = instance.exports(store)[export]
    except KeyError as exc:
        raise OracleError(f"could not find exported function '{export}'") from exc
    if not isinstance(func, wasmtime.Func):
        raise OracleError(f"export '{export}' is not a function")
    func_type = func.type(store)
    if list(func_type.params) or list(func_type.results) != [wasmtime.ValType.i32()]:
        raise OracleError(f"export '{export}' must have signature () -> i32")

    try:
        result = func(store)
    except (wasmtime.Trap, wasmtime.WasmtimeError) as exc:
        raise OracleError(f"'{export}' trapped: {exc}") from exc
    LOGGER.debug("reference result for '%s': %d", export, result)
    return int(result)
