from python.wasmic.branch_table import BranchEntry
from python.wasmic.hexfile import (
    format_branch_hex,
    format_expected,
    format_prog_hex,
    write_branch_hex,
    write_expected,
    write_prog_hex,
)


def test_prog_hex_one_uppercase_byte_per_line():
    assert format_prog_hex(bytes.fromhex("41 0a 0f")) == "41\n0A\n0F\n"


def test_prog_hex_empty_body():
    assert format_prog_hex(b"") == "\n"


def test_branch_hex_pads_to_eight_digits():
    entries = [BranchEntry(2, 7), BranchEntry(6, 0x1A)]
    assert format_branch_hex(entries) == "00000002 00000007\n00000006 0000001A\n"


def test_branch_hex_empty_table():
    assert format_branch_hex([]) == ""


def test_expected_is_signed_decimal():
    assert format_expected(42) == "42\n"
    assert format_expected(-7) == "-7\n"


def test_writers_use_unix_newlines(tmp_path):
    prog = tmp_path / "prog.hex"
    branch = tmp_path / "branch.hex"
    expected = tmp_path / "expected.txt"
    write_prog_hex(prog, bytes.fromhex("02 40 0C 00 0B 0F"))
    write_branch_hex(branch, [BranchEntry(2, 5)])
    write_expected(expected, 99)
    assert prog.read_bytes() == b"02\n40\n0C\n00\n0B\n0F\n"
    assert branch.read_bytes() == b"00000002 00000005\n"
    assert expected.read_bytes() == b"99\n"
