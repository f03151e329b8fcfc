"""
exprcalc - an arithmetic expression engine

Turns a text expression into a 64-bit float through two independent
execution strategies that must agree bit for bit:

    source -> lexer -> tokens -> parser -> AST -> evaluator          -> value
                                               -> compiler -> chunk -> VM -> value

Architecture:
    exprcalc/
    ├── lexer/           # Tokenization
    ├── parser/          # Pratt parser and AST
    ├── runtime/         # Tree evaluator and shared float arithmetic
    ├── bytecode/        # Compiler, chunk format and stack VM
    ├── render.py        # S-expression / JSON / token renderings
    ├── pipeline.py      # lex -> parse -> evaluate/run, cross-check
    └── cli.py           # Command line front end

License: MIT
"""

__version__ = "0.1.0"
__license__ = "MIT"

from .config import CalcConfig
from .diagnostics import CalcError, Diagnostic
from .lexer import Lexer, Token, TokenType, LexError, tokenize
from .parser import Parser, ParseError, parse_string
from .runtime import Evaluator, evaluate, EvaluationError, DivisionByZeroError, CrossCheckError
from .bytecode import BytecodeCompiler, Chunk, OpCode, VirtualMachine, VMError, compile_expression, run_chunk
from .pipeline import Evaluation, run_expression, evaluate_string

__all__ = [
    # Core classes
    "Lexer",
    "Parser",
    "Evaluator",
    "BytecodeCompiler",
    "VirtualMachine",
    "Chunk",
    "OpCode",
    "Token",
    "TokenType",
    "CalcConfig",
    "Evaluation",

    # Functions
    "tokenize",
    "parse_string",
    "evaluate",
    "compile_expression",
    "run_chunk",
    "run_expression",
    "evaluate_string",

    # Errors
    "CalcError",
    "Diagnostic",
    "LexError",
    "ParseError",
    "EvaluationError",
    "DivisionByZeroError",
    "CrossCheckError",
    "VMError",

    # Version info
    "__version__",
    "__license__",
]
