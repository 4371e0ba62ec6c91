import logging

import pytest

from python.wasmic.container import (
    SECTION_CODE,
    extract_function_body,
    iter_function_bodies,
    iter_sections,
)
from python.wasmic.errors import MalformedInput, NoCodeSection
from python.wasmic.pipeline import lower_module
from python.tests.wasm_builders import MAGIC_VERSION, build_module, code_entry, section


def test_extracts_first_body_and_rewrites_final_end():
    module = build_module(bytes.fromhex("41 0A 41 14 6A 0B"))
    assert extract_function_body(module) == bytes.fromhex("41 0A 41 14 6A 0F")


def test_locals_prefix_is_stripped():
    # two groups: 1 x i32, 2 x i64
    module = build_module(bytes.fromhex("41 05 0B"), locals_decl=bytes.fromhex("02 01 7F 02 7E"))
    (body,) = list(iter_function_bodies(module))
    assert body.local_groups == 2
    assert body.operator_offset == body.offset + 5
    assert extract_function_body(module) == bytes.fromhex("41 05 0F")


def test_body_not_ending_in_end_is_left_alone():
    module = build_module(bytes.fromhex("41 05 0F"))
    assert extract_function_body(module) == bytes.fromhex("41 05 0F")


def test_only_first_function_is_returned():
    first = code_entry(bytes.fromhex("41 01 0B"))
    second = code_entry(bytes.fromhex("41 02 0B"))
    module = (
        MAGIC_VERSION
        + section(1, b"\x01\x60\x00\x01\x7f")
        + section(3, b"\x02\x00\x00")
        + section(SECTION_CODE, b"\x02" + first + second)
    )
    bodies = list(iter_function_bodies(module))
    assert [b.index for b in bodies] == [0, 1]
    assert extract_function_body(module) == bytes.fromhex("41 01 0F")


def test_sections_are_walked_in_order():
    module = build_module(bytes.fromhex("41 01 0B"))
    assert [s.id for s in iter_sections(module)] == [1, 3, 7, SECTION_CODE]


def test_module_without_code_section():
    module = MAGIC_VERSION + section(1, b"\x01\x60\x00\x01\x7f")
    with pytest.raises(NoCodeSection, match="no code section"):
        extract_function_body(module)


def test_bad_magic_rejected():
    with pytest.raises(MalformedInput, match="magic") as excinfo:
        extract_function_body(b"\x00wat\x01\x00\x00\x00")
    assert excinfo.value.offset == 0


def test_short_input_rejected():
    with pytest.raises(MalformedInput):
        extract_function_body(b"\x00as")


def test_unsupported_version_rejected():
    with pytest.raises(MalformedInput, match="version 2") as excinfo:
        extract_function_body(b"\x00asm\x02\x00\x00\x00")
    assert excinfo.value.offset == 4


def test_truncated_section_rejected():
    module = build_module(bytes.fromhex("41 01 0B"))
    with pytest.raises(MalformedInput):
        extract_function_body(module[:-2])


def test_extraction_logged_at_debug(caplog):
    caplog.set_level(logging.DEBUG, logger="wasmic.container")
    extract_function_body(build_module(bytes.fromhex("41 01 0B")))
    assert any("3 operator bytes" in rec.getMessage() for rec in caplog.records)


def test_lower_module_combines_body_and_table():
    module = build_module(bytes.fromhex("02 40 0C 00 0B 41 E3 00 0B"))
    lowered = lower_module(module)
    assert lowered.body == bytes.fromhex("02 40 0C 00 0B 41 E3 00 0F")
    assert lowered.branch_pairs() == [(2, 5)]
    assert lower_module(module) == lowered


def test_lower_module_strict_flag_is_forwarded():
    module = build_module(bytes.fromhex("02 40 05 0B 0B"))
    assert lower_module(module).branch_pairs() == []
    with pytest.raises(MalformedInput):
        lower_module(module, strict=True)


def test_empty_code_section_counts_as_missing():
    module = MAGIC_VERSION + section(SECTION_CODE, b"\x00")
    with pytest.raises(NoCodeSection):
        extract_function_body(module)
