"""
Tests for the bytecode compiler and the stack virtual machine.

Tests cover:
- Post-order emission and the constant pool
- VM arithmetic and runtime errors
- Stack bounds and malformed chunks
- Agreement between the VM and the tree evaluator
"""

import math
import random
import unittest
import sys
import os

# Add the project root to the Python path
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
sys.path.insert(0, project_root)

from exprcalc.lexer import TokenType
from exprcalc.parser import parse_string, NumberLiteral, BinaryOp
from exprcalc.runtime import evaluate, same_bits, EvaluationError, DivisionByZeroError
from exprcalc.bytecode import (
    BytecodeCompiler, Chunk, Instruction, OpCode, VirtualMachine, VMError,
    compile_expression, run_chunk
)


def compile_source(source):
    return compile_expression(parse_string(source))


def opcodes(chunk):
    return [instruction.opcode for instruction in chunk.code]


class TestCompiler(unittest.TestCase):
    """Instruction sequences produced by the compiler."""

    def test_number(self):
        chunk = compile_source("4.5")
        self.assertEqual(chunk.code, [Instruction(OpCode.CONSTANT, 0), Instruction(OpCode.HALT)])
        self.assertEqual(chunk.constants, [4.5])

    def test_post_order_emission(self):
        chunk = compile_source("1 + 2 * 3")
        self.assertEqual(opcodes(chunk), [
            OpCode.CONSTANT, OpCode.CONSTANT, OpCode.CONSTANT,
            OpCode.MULTIPLY, OpCode.ADD, OpCode.HALT,
        ])
        self.assertEqual(chunk.constants, [1.0, 2.0, 3.0])
        self.assertEqual([i.operand for i in chunk.code[:3]], [0, 1, 2])

    def test_negation_and_identity(self):
        self.assertEqual(opcodes(compile_source("-(1 - 2)")), [
            OpCode.CONSTANT, OpCode.CONSTANT, OpCode.SUBTRACT, OpCode.NEGATE, OpCode.HALT,
        ])
        self.assertEqual(opcodes(compile_source("+3")), [OpCode.CONSTANT, OpCode.HALT])

    def test_every_binary_operator(self):
        expected = {
            "1 + 2": OpCode.ADD,
            "1 - 2": OpCode.SUBTRACT,
            "1 * 2": OpCode.MULTIPLY,
            "1 / 2": OpCode.DIVIDE,
            "1 % 2": OpCode.MODULO,
            "1 ^ 2": OpCode.POWER,
        }
        for source, opcode in expected.items():
            with self.subTest(source=source):
                self.assertEqual(opcodes(compile_source(source))[2], opcode)

    def test_exactly_one_halt(self):
        chunk = compile_source("(1 + 2) ^ -3 % 4")
        self.assertEqual(opcodes(chunk).count(OpCode.HALT), 1)
        self.assertEqual(chunk.code[-1].opcode, OpCode.HALT)

    def test_constant_indices_in_range(self):
        chunk = compile_source("1 + 2 - 3 * 4 / 5 % 6 ^ 7")
        for instruction in chunk.code:
            if instruction.opcode == OpCode.CONSTANT:
                self.assertLess(instruction.operand, len(chunk.constants))

    def test_emit_without_halt(self):
        compiler = BytecodeCompiler()
        compiler.emit_expression(parse_string("1 + 2"))
        self.assertNotIn(OpCode.HALT, opcodes(compiler.chunk))

    def test_unknown_operator(self):
        node = BinaryOp(TokenType.RPAREN, NumberLiteral(1.0, 0, 0), NumberLiteral(2.0, 2, 2), 0, 2)
        with self.assertRaises(EvaluationError):
            compile_expression(node)

    def test_max_stack_depth(self):
        self.assertEqual(compile_source("1").max_stack_depth(), 1)
        self.assertEqual(compile_source("1 + 2 + 3 + 4").max_stack_depth(), 2)
        self.assertEqual(compile_source("2 ^ 2 ^ 2 ^ 2").max_stack_depth(), 4)

    def test_disassemble(self):
        listing = compile_source("1 + 2").disassemble("sum")
        lines = listing.splitlines()
        self.assertEqual(lines[0], "== sum ==")
        self.assertIn("CONSTANT", lines[1])
        self.assertIn("(1)", lines[1])
        self.assertIn("ADD", lines[3])
        self.assertIn("HALT", lines[4])


class TestVirtualMachine(unittest.TestCase):
    """Execution of compiled chunks."""

    def run_source(self, source, **kwargs):
        return run_chunk(compile_source(source), **kwargs)

    def test_values(self):
        self.assertEqual(self.run_source("2 + 3 * 4"), 14.0)
        self.assertEqual(self.run_source("(2 + 3) * 4"), 20.0)
        self.assertEqual(self.run_source("2 ^ 3 ^ 2"), 512.0)
        self.assertEqual(self.run_source("-2 ^ 2"), -4.0)
        self.assertEqual(self.run_source("8 - 2 - 1"), 5.0)
        self.assertEqual(self.run_source("-7 % 3"), -1.0)

    def test_operand_order(self):
        self.assertEqual(self.run_source("10 - 4"), 6.0)
        self.assertEqual(self.run_source("1 / 4"), 0.25)
        self.assertEqual(self.run_source("2 ^ 5"), 32.0)

    def test_division_by_zero(self):
        for source in ["1 / 0", "1 % 0"]:
            with self.subTest(source=source):
                with self.assertRaises(DivisionByZeroError):
                    self.run_source(source)

    def test_division_by_zero_offset_matches_evaluator(self):
        source = "3 * (4 / (2 - 2))"
        with self.assertRaises(DivisionByZeroError) as vm_ctx:
            self.run_source(source)
        with self.assertRaises(DivisionByZeroError) as tree_ctx:
            evaluate(parse_string(source))
        self.assertEqual(vm_ctx.exception.offset, tree_ctx.exception.offset)

    def test_stack_overflow(self):
        chunk = compile_source("2 ^ 2 ^ 2")
        self.assertEqual(run_chunk(chunk, stack_capacity=3), 16.0)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk, stack_capacity=2)
        self.assertEqual(ctx.exception.code, "V001")
        self.assertEqual(ctx.exception.instruction_pointer, 2)

    def test_long_chain_needs_two_slots(self):
        chunk = compile_source("1" + " + 1" * 2999)
        self.assertEqual(chunk.max_stack_depth(), 2)
        self.assertEqual(run_chunk(chunk, stack_capacity=2), 3000.0)

    def test_stack_underflow(self):
        chunk = Chunk()
        chunk.emit(OpCode.ADD)
        chunk.emit(OpCode.HALT)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V002")

    def test_halt_on_empty_stack(self):
        chunk = Chunk()
        chunk.emit(OpCode.HALT)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V002")

    def test_bad_constant_index(self):
        chunk = Chunk()
        chunk.emit(OpCode.CONSTANT, 3)
        chunk.emit(OpCode.HALT)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V003")

    def test_unknown_opcode(self):
        chunk = Chunk()
        chunk.emit_constant(1.0)
        chunk.code.append(Instruction(99))
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V004")

    def test_missing_halt(self):
        chunk = Chunk()
        chunk.emit_constant(1.0)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V005")

    def test_values_left_at_halt(self):
        chunk = Chunk()
        chunk.emit_constant(1.0)
        chunk.emit_constant(2.0)
        chunk.emit(OpCode.HALT)
        with self.assertRaises(VMError) as ctx:
            run_chunk(chunk)
        self.assertEqual(ctx.exception.code, "V006")

    def test_vm_instance_is_reusable(self):
        vm = VirtualMachine(stack_capacity=8)
        self.assertEqual(vm.run(compile_source("1 + 1")), 2.0)
        self.assertEqual(vm.run(compile_source("3 * 3")), 9.0)
        self.assertEqual(vm.stack_top, 0)

    def test_trace_mode(self):
        with self.assertLogs("exprcalc.bytecode.vm", level="DEBUG") as logs:
            run_chunk(compile_source("1 + 2"), trace=True)
        self.assertTrue(any("ADD" in line for line in logs.output))

    def test_invalid_capacity(self):
        with self.assertRaises(ValueError):
            VirtualMachine(stack_capacity=0)


class TestCrossCheck(unittest.TestCase):
    """The evaluator and the VM must agree bit for bit."""

    NUMBERS = ["0", "1", "2", "3", "0.5", "2.5", "7", "1e3", "1.5e-2", ".25", "10"]
    OPERATORS = ["+", "-", "*", "/", "%", "^"]

    def _random_expression(self, rng, depth):
        choice = rng.random()
        if depth <= 0 or choice < 0.3:
            return rng.choice(self.NUMBERS)
        if choice < 0.45:
            return rng.choice("-+") + self._random_expression(rng, depth - 1)
        if choice < 0.6:
            return "(" + self._random_expression(rng, depth - 1) + ")"
        return "{} {} {}".format(
            self._random_expression(rng, depth - 1),
            rng.choice(self.OPERATORS),
            self._random_expression(rng, depth - 1),
        )

    def assertAgree(self, source):
        tree = parse_string(source)
        try:
            tree_value = evaluate(tree)
        except DivisionByZeroError:
            with self.assertRaises(DivisionByZeroError):
                run_chunk(compile_expression(tree))
            return
        vm_value = run_chunk(compile_expression(tree))
        self.assertTrue(same_bits(tree_value, vm_value),
                        f"{source!r}: evaluator {tree_value!r} != vm {vm_value!r}")

    def test_known_expressions(self):
        sources = [
            "(-3.24121 + 4) * 1e+20 / (1 - 5) ^ 2 ^ 3 % 7 - 9 * (8 + 6 / 3)",
            "(-8) ^ (1 / 3)",
            "0 ^ -1",
            "-0 * 1",
            "1e308 * 1e308 - 1e308 * 1e308",
            "+-+-1",
        ]
        for source in sources:
            with self.subTest(source=source):
                self.assertAgree(source)

    def test_random_expressions(self):
        rng = random.Random(20240101)
        for _ in range(500):
            source = self._random_expression(rng, 6)
            with self.subTest(source=source):
                self.assertAgree(source)

    def test_nan_results_agree(self):
        tree = parse_string("(-8) ^ 0.5")
        self.assertTrue(math.isnan(run_chunk(compile_expression(tree))))
        self.assertTrue(same_bits(evaluate(tree), run_chunk(compile_expression(tree))))


if __name__ == "__main__":
    unittest.main()
