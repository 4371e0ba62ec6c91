import logging

import pytest

pytest.importorskip("wasmtime")

from python.wasmic.branch_table import BranchEntry  # noqa: E402
from python.wasmic.errors import WatCompileError  # noqa: E402
from python.wasmic.harness import (  # noqa: E402
    SKIP_FILES,
    WatTestInfo,
    compile_wat_file,
    discover_wat_files,
    generate_svh,
)


def test_default_skip_list():
    assert SKIP_FILES == ("loop",)


def test_discover_sorted_and_filtered(wat_dir, caplog):
    caplog.set_level(logging.INFO, logger="wasmic.harness")
    names = [p.name for p in discover_wat_files(wat_dir)]
    assert names == ["add.wat", "arith.wat", "block_br.wat", "if_else.wat", "sub.wat"]
    assert any("skipping loop.wat" in rec.message for rec in caplog.records)


def test_discover_with_empty_skip(wat_dir):
    names = [p.stem for p in discover_wat_files(wat_dir, skip=())]
    assert "loop" in names
    assert len(names) == 6


def test_compile_wat_file(wat_dir):
    info = compile_wat_file(wat_dir / "if_else.wat")
    assert info.name == "if_else"
    assert info.body_bytes == bytes.fromhex("41 01 04 7F 41 2A 05 41 00 0B 0F")
    assert info.branch_table == [BranchEntry(2, 7), BranchEntry(6, 10)]
    assert info.expected == 42


def test_compile_wat_file_bad_source(tmp_path):
    path = tmp_path / "broken.wat"
    path.write_text("(module (func", encoding="utf-8")
    with pytest.raises(WatCompileError):
        compile_wat_file(path)


def test_generate_svh_layout():
    tests = [
        WatTestInfo("block_br", bytes.fromhex("02 40 0C 00 0B 41 E3 00 0F"), [BranchEntry(2, 5)], 99),
        WatTestInfo("neg", bytes.fromhex("41 79 0F"), [], -7),
    ]
    text = generate_svh(tests)
    lines = text.splitlines()
    assert lines[0] == "// Auto-generated by wasm-compile gen-tests. Do not edit."
    assert lines[1] == ""
    assert lines[2] == "task run_wat_block_br;"
    assert lines[3] == "    do_reset();"
    assert lines[4] == "    prog_rom[0] = 8'h02;"
    assert "    prog_rom[6] = 8'hE3;" in lines
    assert "    bt_write(32'h00000002, 32'h00000005);" in lines
    assert '    check_wat("block_br", 32\'sd99);' in lines
    assert '    check_wat("neg", -32\'sd7);' in lines
    assert text.endswith("task run_all_wat_tests;\n    run_wat_block_br();\n    run_wat_neg();\nendtask\n")
    assert text.count("run_program();") == 2


def test_generate_svh_no_tests():
    text = generate_svh([])
    assert text == (
        "// Auto-generated by wasm-compile gen-tests. Do not edit.\n\n"
        "task run_all_wat_tests;\n"
        "endtask\n"
    )


def test_compile_wat_file_rejects_non_utf8(tmp_path):
    path = tmp_path / "latin.wat"
    path.write_bytes(b"(module) ;; caf\xe9\n")
    with pytest.raises(WatCompileError, match="latin.wat is not UTF-8 text"):
        compile_wat_file(path)
