"""WAT sources shared by the toolchain tests."""

SAMPLE_WAT = {
    "add": """
(module
  (func (export "main") (result i32)
    i32.const 10
    i32.const 20
    i32.add))
""",
    "arith": """
(module
  (func (export "main") (result i32)
    i32.const 3
    i32.const 5
    i32.add
    i32.const 2
    i32.mul))
""",
    "sub": """
(module
  (func (export "main") (result i32)
    i32.const 20
    i32.const 7
    i32.sub))
""",
    "block_br": """
(module
  (func (export "main") (result i32)
    (block
      (br 0))
    i32.const 99))
""",
    "if_else": """
(module
  (func (export "main") (result i32)
    i32.const 1
    (if (result i32)
      (then (i32.const 42))
      (else (i32.const 0)))))
""",
    "loop": """
(module
  (func (export "main") (result i32)
    (local $i i32)
    (loop $again
      local.get $i
      i32.const 1
      i32.add
      local.tee $i
      i32.const 5
      i32.lt_s
      br_if $again)
    local.get $i))
""",
}
