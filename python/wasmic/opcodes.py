"""WebAssembly opcode definitions shared by the wasm-ic toolchain.

Each entry pairs a mnemonic and its opcode byte with the immediate operands
that follow it in the binary encoding.  The scanner only interprets the
structural opcodes, but it must step over every other instruction's operands
to keep offsets exact, so the operand layout is listed for the whole set,
including the 0xFC (misc) and 0xFD (SIMD) prefixed families.
"""

from __future__ import annotations

from typing import Dict, Iterable, Optional, Tuple

# Operand kinds
BLOCKTYPE = "blocktype"  # 0x40, a value type, or an s33 type index
U32 = "u32"  # uleb index (local, global, function, label, table, memory, ...)
LABELS = "labels"  # br_table: vec(labelidx) followed by the default label
MEMARG = "memarg"  # align:u32 [memidx:u32 when align bit 6 is set] offset:u64
S32 = "s32"
S64 = "s64"
F32 = "f32"  # four raw bytes
F64 = "f64"  # eight raw bytes
VALTYPES = "valtypes"  # vec(valtype), typed select
REFTYPE = "reftype"  # single byte
V128 = "v128"  # sixteen raw bytes
SHUFFLE = "shuffle"  # sixteen lane index bytes
LANE = "lane"  # single lane index byte

Operands = Tuple[str, ...]

OP_BLOCK = 0x02
OP_LOOP = 0x03
OP_IF = 0x04
OP_ELSE = 0x05
OP_END = 0x0B
OP_BR = 0x0C
OP_BR_IF = 0x0D
OP_RETURN = 0x0F
PREFIX_MISC = 0xFC
PREFIX_SIMD = 0xFD

# Flag in a memarg's alignment field announcing an explicit memory index.
MEMARG_MEMIDX_FLAG = 0x40
OPCODE_LIST: Tuple[Tuple[str, int, Operands], ...] = (
    ("unreachable", 0x00, ()),
    ("nop", 0x01, ()),
    ("block", OP_BLOCK, (BLOCKTYPE,)),
    ("loop", OP_LOOP, (BLOCKTYPE,)),
    ("if", OP_IF, (BLOCKTYPE,)),
    ("else", OP_ELSE, ()),
    ("end", OP_END, ()),
    ("br", OP_BR, (U32,)),
    ("br_if", OP_BR_IF, (U32,)),
    ("br_table", 0x0E, (LABELS,)),
    ("return", OP_RETURN, ()),
    ("call", 0x10, (U32,)),
    ("call_indirect", 0x11, (U32, U32)),
    ("return_call", 0x12, (U32,)),
    ("return_call_indirect", 0x13, (U32, U32)),
    ("drop", 0x1A, ()),
    ("select", 0x1B, ()),
    ("select", 0x1C, (VALTYPES,)),
    ("local.get", 0x20, (U32,)),
    ("local.set", 0x21, (U32,)),
    ("local.tee", 0x22, (U32,)),
    ("global.get", 0x23, (U32,)),
    ("global.set", 0x24, (U32,)),
    ("table.get", 0x25, (U32,)),
    ("table.set", 0x26, (U32,)),
    ("i32.load", 0x28, (MEMARG,)),
    ("i64.load", 0x29, (MEMARG,)),
    ("f32.load", 0x2A, (MEMARG,)),
    ("f64.load", 0x2B, (MEMARG,)),
    ("i32.load8_s", 0x2C, (MEMARG,)),
    ("i32.load8_u", 0x2D, (MEMARG,)),
    ("i32.load16_s", 0x2E, (MEMARG,)),
    ("i32.load16_u", 0x2F, (MEMARG,)),
    ("i64.load8_s", 0x30, (MEMARG,)),
    ("i64.load8_u", 0x31, (MEMARG,)),
    ("i64.load16_s", 0x32, (MEMARG,)),
    ("i64.load16_u", 0x33, (MEMARG,)),
    ("i64.load32_s", 0x34, (MEMARG,)),
    ("i64.load32_u", 0x35, (MEMARG,)),
    ("i32.store", 0x36, (MEMARG,)),
    ("i64.store", 0x37, (MEMARG,)),
    ("f32.store", 0x38, (MEMARG,)),
    ("f64.store", 0x39, (MEMARG,)),
    ("i32.store8", 0x3A, (MEMARG,)),
    ("i32.store16", 0x3B, (MEMARG,)),
    ("i64.store8", 0x3C, (MEMARG,)),
    ("i64.store16", 0x3D, (MEMARG,)),
    ("i64.store32", 0x3E, (MEMARG,)),
    ("memory.size", 0x3F, (U32,)),
    ("memory.grow", 0x40, (U32,)),
    ("i32.const", 0x41, (S32,)),
    ("i64.const", 0x42, (S64,)),
    ("f32.const", 0x43, (F32,)),
    ("f64.const", 0x44, (F64,)),
    ("ref.null", 0xD0, (REFTYPE,)),
    ("ref.is_null", 0xD1, ()),
    ("ref.func", 0xD2, (U32,)),
)

# Operand-free numeric instructions, contiguous from 0x45 to 0xC4.
_NUMERIC_BASE = 0x45
_NUMERIC_NAMES: Tuple[str, ...] = (
    "i32.eqz", "i32.eq", "i32.ne", "i32.lt_s", "i32.lt_u", "i32.gt_s", "i32.gt_u",
    "i32.le_s", "i32.le_u", "i32.ge_s", "i32.ge_u",
    "i64.eqz", "i64.eq", "i64.ne", "i64.lt_s", "i64.lt_u", "i64.gt_s", "i64.gt_u",
    "i64.le_s", "i64.le_u", "i64.ge_s", "i64.ge_u",
    "f32.eq", "f32.ne", "f32.lt", "f32.gt", "f32.le", "f32.ge",
    "f64.eq", "f64.ne", "f64.lt", "f64.gt", "f64.le", "f64.ge",
    "i32.clz", "i32.ctz", "i32.popcnt", "i32.add", "i32.sub", "i32.mul", "i32.div_s",
    "i32.div_u", "i32.rem_s", "i32.rem_u", "i32.and", "i32.or", "i32.xor", "i32.shl",
    "i32.shr_s", "i32.shr_u", "i32.rotl", "i32.rotr",
    "i64.clz", "i64.ctz", "i64.popcnt", "i64.add", "i64.sub", "i64.mul", "i64.div_s",
    "i64.div_u", "i64.rem_s", "i64.rem_u", "i64.and", "i64.or", "i64.xor", "i64.shl",
    "i64.shr_s", "i64.shr_u", "i64.rotl", "i64.rotr",
    "f32.abs", "f32.neg", "f32.ceil", "f32.floor", "f32.trunc", "f32.nearest", "f32.sqrt",
    "f32.add", "f32.sub", "f32.mul", "f32.div", "f32.min", "f32.max", "f32.copysign",
    "f64.abs", "f64.neg", "f64.ceil", "f64.floor", "f64.trunc", "f64.nearest", "f64.sqrt",
    "f64.add", "f64.sub", "f64.mul", "f64.div", "f64.min", "f64.max", "f64.copysign",
    "i32.wrap_i64", "i32.trunc_f32_s", "i32.trunc_f32_u", "i32.trunc_f64_s", "i32.trunc_f64_u",
    "i64.extend_i32_s", "i64.extend_i32_u", "i64.trunc_f32_s", "i64.trunc_f32_u",
    "i64.trunc_f64_s", "i64.trunc_f64_u",
    "f32.convert_i32_s", "f32.convert_i32_u", "f32.convert_i64_s", "f32.convert_i64_u",
    "f32.demote_f64",
    "f64.convert_i32_s", "f64.convert_i32_u", "f64.convert_i64_s", "f64.convert_i64_u",
    "f64.promote_f32",
    "i32.reinterpret_f32", "i64.reinterpret_f64", "f32.reinterpret_i32", "f64.reinterpret_i64",
    "i32.extend8_s", "i32.extend16_s", "i64.extend8_s", "i64.extend16_s", "i64.extend32_s",
)

# 0xFC-prefixed instructions, keyed by their u32 sub-opcode.
MISC_OPCODE_LIST: Tuple[Tuple[str, int, Operands], ...] = (
    ("i32.trunc_sat_f32_s", 0, ()),
    ("i32.trunc_sat_f32_u", 1, ()),
    ("i32.trunc_sat_f64_s", 2, ()),
    ("i32.trunc_sat_f64_u", 3, ()),
    ("i64.trunc_sat_f32_s", 4, ()),
    ("i64.trunc_sat_f32_u", 5, ()),
    ("i64.trunc_sat_f64_s", 6, ()),
    ("i64.trunc_sat_f64_u", 7, ()),
    ("memory.init", 8, (U32, U32)),
    ("data.drop", 9, (U32,)),
    ("memory.copy", 10, (U32, U32)),
    ("memory.fill", 11, (U32,)),
    ("table.init", 12, (U32, U32)),
    ("elem.drop", 13, (U32,)),
    ("table.copy", 14, (U32, U32)),
    ("table.grow", 15, (U32,)),
    ("table.size", 16, (U32,)),
    ("table.fill", 17, (U32,)),
)


def _operand_free(base: int, names: Iterable[str]) -> Tuple[Tuple[str, int, Operands], ...]:
    return tuple((name, base + index, ()) for index, name in enumerate(names) if name)


def _lanewise(shape: str, ops: Iterable[str]) -> Tuple[str, ...]:
    return tuple(f"{shape}.{op}" if op else "" for op in ops)


_INT_COMPARE = ("eq", "ne", "lt_s", "lt_u", "gt_s", "gt_u", "le_s", "le_u", "ge_s", "ge_u")
_FLOAT_COMPARE = ("eq", "ne", "lt", "gt", "le", "ge")

# 0xFD-prefixed (SIMD) instructions, keyed by their u32 sub-opcode.  Empty
# names mark sub-opcodes the proposal leaves unassigned.
SIMD_OPCODE_LIST: Tuple[Tuple[str, int, Operands], ...] = (
    ("v128.load", 0x00, (MEMARG,)),
    ("v128.load8x8_s", 0x01, (MEMARG,)),
    ("v128.load8x8_u", 0x02, (MEMARG,)),
    ("v128.load16x4_s", 0x03, (MEMARG,)),
    ("v128.load16x4_u", 0x04, (MEMARG,)),
    ("v128.load32x2_s", 0x05, (MEMARG,)),
    ("v128.load32x2_u", 0x06, (MEMARG,)),
    ("v128.load8_splat", 0x07, (MEMARG,)),
    ("v128.load16_splat", 0x08, (MEMARG,)),
    ("v128.load32_splat", 0x09, (MEMARG,)),
    ("v128.load64_splat", 0x0A, (MEMARG,)),
    ("v128.store", 0x0B, (MEMARG,)),
    ("v128.const", 0x0C, (V128,)),
    ("i8x16.shuffle", 0x0D, (SHUFFLE,)),
    ("i8x16.swizzle", 0x0E, ()),
    ("i8x16.splat", 0x0F, ()),
    ("i16x8.splat", 0x10, ()),
    ("i32x4.splat", 0x11, ()),
    ("i64x2.splat", 0x12, ()),
    ("f32x4.splat", 0x13, ()),
    ("f64x2.splat", 0x14, ()),
    ("i8x16.extract_lane_s", 0x15, (LANE,)),
    ("i8x16.extract_lane_u", 0x16, (LANE,)),
    ("i8x16.replace_lane", 0x17, (LANE,)),
    ("i16x8.extract_lane_s", 0x18, (LANE,)),
    ("i16x8.extract_lane_u", 0x19, (LANE,)),
    ("i16x8.replace_lane", 0x1A, (LANE,)),
    ("i32x4.extract_lane", 0x1B, (LANE,)),
    ("i32x4.replace_lane", 0x1C, (LANE,)),
    ("i64x2.extract_lane", 0x1D, (LANE,)),
    ("i64x2.replace_lane", 0x1E, (LANE,)),
    ("f32x4.extract_lane", 0x1F, (LANE,)),
    ("f32x4.replace_lane", 0x20, (LANE,)),
    ("f64x2.extract_lane", 0x21, (LANE,)),
    ("f64x2.replace_lane", 0x22, (LANE,)),
    *_operand_free(0x23, _lanewise("i8x16", _INT_COMPARE)),
    *_operand_free(0x2D, _lanewise("i16x8", _INT_COMPARE)),
    *_operand_free(0x37, _lanewise("i32x4", _INT_COMPARE)),
    *_operand_free(0x41, _lanewise("f32x4", _FLOAT_COMPARE)),
    *_operand_free(0x47, _lanewise("f64x2", _FLOAT_COMPARE)),
    *_operand_free(
        0x4D,
        ("v128.not", "v128.and", "v128.andnot", "v128.or", "v128.xor", "v128.bitselect", "v128.any_true"),
    ),
    ("v128.load8_lane", 0x54, (MEMARG, LANE)),
    ("v128.load16_lane", 0x55, (MEMARG, LANE)),
    ("v128.load32_lane", 0x56, (MEMARG, LANE)),
    ("v128.load64_lane", 0x57, (MEMARG, LANE)),
    ("v128.store8_lane", 0x58, (MEMARG, LANE)),
    ("v128.store16_lane", 0x59, (MEMARG, LANE)),
    ("v128.store32_lane", 0x5A, (MEMARG, LANE)),
    ("v128.store64_lane", 0x5B, (MEMARG, LANE)),
    ("v128.load32_zero", 0x5C, (MEMARG,)),
    ("v128.load64_zero", 0x5D, (MEMARG,)),
    *_operand_free(
        0x5E,
        (
            "f32x4.demote_f64x2_zero", "f64x2.promote_low_f32x4",
            "i8x16.abs", "i8x16.neg", "i8x16.popcnt", "i8x16.all_true", "i8x16.bitmask",
            "i8x16.narrow_i16x8_s", "i8x16.narrow_i16x8_u",
            "f32x4.ceil", "f32x4.floor", "f32x4.trunc", "f32x4.nearest",
            "i8x16.shl", "i8x16.shr_s", "i8x16.shr_u",
            "i8x16.add", "i8x16.add_sat_s", "i8x16.add_sat_u",
            "i8x16.sub", "i8x16.sub_sat_s", "i8x16.sub_sat_u",
            "f64x2.ceil", "f64x2.floor",
            "i8x16.min_s", "i8x16.min_u", "i8x16.max_s", "i8x16.max_u",
            "f64x2.trunc", "i8x16.avgr_u",
            "i16x8.extadd_pairwise_i8x16_s", "i16x8.extadd_pairwise_i8x16_u",
            "i32x4.extadd_pairwise_i16x8_s", "i32x4.extadd_pairwise_i16x8_u",
        ),
    ),
    *_operand_free(
        0x80,
        _lanewise(
            "i16x8",
            (
                "abs", "neg", "q15mulr_sat_s", "all_true", "bitmask",
                "narrow_i32x4_s", "narrow_i32x4_u",
                "extend_low_i8x16_s", "extend_high_i8x16_s",
                "extend_low_i8x16_u", "extend_high_i8x16_u",
                "shl", "shr_s", "shr_u", "add", "add_sat_s", "add_sat_u",
                "sub", "sub_sat_s", "sub_sat_u", "", "mul",
                "min_s", "min_u", "max_s", "max_u", "", "avgr_u",
                "extmul_low_i8x16_s", "extmul_high_i8x16_s",
                "extmul_low_i8x16_u", "extmul_high_i8x16_u",
            ),
        ),
    ),
    ("f64x2.nearest", 0x94, ()),
    *_operand_free(
        0xA0,
        _lanewise(
            "i32x4",
            (
                "abs", "neg", "", "all_true", "bitmask", "", "",
                "extend_low_i16x8_s", "extend_high_i16x8_s",
                "extend_low_i16x8_u", "extend_high_i16x8_u",
                "shl", "shr_s", "shr_u", "add", "", "",
                "sub", "", "", "", "mul",
                "min_s", "min_u", "max_s", "max_u", "dot_i16x8_s", "",
                "extmul_low_i16x8_s", "extmul_high_i16x8_s",
                "extmul_low_i16x8_u", "extmul_high_i16x8_u",
            ),
        ),
    ),
    *_operand_free(
        0xC0,
        _lanewise(
            "i64x2",
            (
                "abs", "neg", "", "all_true", "bitmask", "", "",
                "extend_low_i32x4_s", "extend_high_i32x4_s",
                "extend_low_i32x4_u", "extend_high_i32x4_u",
                "shl", "shr_s", "shr_u", "add", "", "",
                "sub", "", "", "", "mul",
                "eq", "ne", "lt_s", "gt_s", "le_s", "ge_s",
                "extmul_low_i32x4_s", "extmul_high_i32x4_s",
                "extmul_low_i32x4_u", "extmul_high_i32x4_u",
            ),
        ),
    ),
    *_operand_free(
        0xE0,
        _lanewise("f32x4", ("abs", "neg", "", "sqrt", "add", "sub", "mul", "div", "min", "max", "pmin", "pmax")),
    ),
    *_operand_free(
        0xEC,
        _lanewise("f64x2", ("abs", "neg", "", "sqrt", "add", "sub", "mul", "div", "min", "max", "pmin", "pmax")),
    ),
    *_operand_free(
        0xF8,
        (
            "i32x4.trunc_sat_f32x4_s", "i32x4.trunc_sat_f32x4_u",
            "f32x4.convert_i32x4_s", "f32x4.convert_i32x4_u",
            "i32x4.trunc_sat_f64x2_s_zero", "i32x4.trunc_sat_f64x2_u_zero",
            "f64x2.convert_low_i32x4_s", "f64x2.convert_low_i32x4_u",
        ),
    ),
    # relaxed SIMD
    *_operand_free(
        0x100,
        (
            "i8x16.relaxed_swizzle",
            "i32x4.relaxed_trunc_f32x4_s", "i32x4.relaxed_trunc_f32x4_u",
            "i32x4.relaxed_trunc_f64x2_s_zero", "i32x4.relaxed_trunc_f64x2_u_zero",
            "f32x4.relaxed_madd", "f32x4.relaxed_nmadd",
            "f64x2.relaxed_madd", "f64x2.relaxed_nmadd",
            "i8x16.relaxed_laneselect", "i16x8.relaxed_laneselect",
            "i32x4.relaxed_laneselect", "i64x2.relaxed_laneselect",
            "f32x4.relaxed_min", "f32x4.relaxed_max",
            "f64x2.relaxed_min", "f64x2.relaxed_max",
            "i16x8.relaxed_q15mulr_s",
            "i16x8.relaxed_dot_i8x16_i7x16_s", "i32x4.relaxed_dot_i8x16_i7x16_add_s",
        ),
    ),
)


def _build_table() -> Dict[int, Tuple[str, Operands]]:
    table: Dict[int, Tuple[str, Operands]] = {}
    for mnemonic, opcode, operands in OPCODE_LIST:
        table[opcode] = (mnemonic, operands)
    for index, mnemonic in enumerate(_NUMERIC_NAMES):
        table[_NUMERIC_BASE + index] = (mnemonic, ())
    return table


def _sub_table(entries: Iterable[Tuple[str, int, Operands]]) -> Dict[int, Tuple[str, Operands]]:
    return {sub: (mnemonic, operands) for mnemonic, sub, operands in entries}


OPCODES: Dict[int, Tuple[str, Operands]] = _build_table()
MISC_OPCODES: Dict[int, Tuple[str, Operands]] = _sub_table(MISC_OPCODE_LIST)
SIMD_OPCODES: Dict[int, Tuple[str, Operands]] = _sub_table(SIMD_OPCODE_LIST)
PREFIXED_OPCODES: Dict[int, Dict[int, Tuple[str, Operands]]] = {
    PREFIX_MISC: MISC_OPCODES,
    PREFIX_SIMD: SIMD_OPCODES,
}

__all__ = [
    "OPCODE_LIST",
    "MISC_OPCODE_LIST",
    "SIMD_OPCODE_LIST",
    "OPCODES",
    "MISC_OPCODES",
    "SIMD_OPCODES",
    "PREFIXED_OPCODES",
    "describe_opcode",
]


def describe_opcode(opcode: int, sub_opcode: Optional[int] = None) -> str:
    """Return the mnemonic for ``opcode`` or a hex placeholder when unknown.

    Prefixed families (0xFC, 0xFD) are looked up by ``sub_opcode``.
    """

    family = PREFIXED_OPCODES.get(opcode)
    if family is not None and sub_opcode is not None:
        entry = family.get(sub_opcode)
        return entry[0] if entry else f"0x{opcode:02X} {sub_opcode}"
    entry = OPCODES.get(opcode)
    return entry[0] if entry else f"0x{opcode:02X}"
