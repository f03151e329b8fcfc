"""
Expression Bytecode Package

Compiles expression trees to a flat instruction list with a constant pool,
and executes that code on a bounded stack machine.
"""

from .chunk import Chunk, Instruction, OpCode
from .compiler import BytecodeCompiler, compile_expression
from .vm import VirtualMachine, run_chunk
from .errors import VMError

__all__ = [
    "Chunk",
    "Instruction",
    "OpCode",
    "BytecodeCompiler",
    "compile_expression",
    "VirtualMachine",
    "run_chunk",
    "VMError",
]
