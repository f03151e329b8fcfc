"""
End-to-end pipeline: source text -> tokens -> AST -> value.

The value can come from the tree evaluator, the bytecode VM, or both; in
the latter case the two results must agree bit for bit.
"""

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .config import CalcConfig
from .diagnostics import CalcError
from .lexer import Token, tokenize
from .parser import Expression, parse_tokens
from .runtime import evaluate, same_bits
from .runtime.errors import create_cross_check_error
from .bytecode import Chunk, compile_expression, run_chunk

logger = logging.getLogger(__name__)


MODES = ("eval", "vm", "both")


@dataclass
class Evaluation:
    """Everything one pipeline invocation produced."""
    source: str
    tokens: List[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    chunk: Optional[Chunk] = None
    value: Optional[float] = None

    @property
    def is_empty(self) -> bool:
        return self.ast is None


def run_expression(source: str, mode: str = "both", config: Optional[CalcConfig] = None) -> Evaluation:
    """
    Run one expression through the selected execution strategy.

    Args:
        source: Expression text
        mode: "eval" (tree walk), "vm" (compile and execute) or "both"
        config: Limits to apply; defaults to CalcConfig()

    Returns:
        Evaluation; value and ast are None for an empty expression

    Raises:
        CalcError: Any lex, parse, runtime or VM failure. No partial
            result is returned.
    """
    if mode not in MODES:
        raise ValueError(f"mode must be one of {MODES}, got {mode!r}")
    config = config or CalcConfig()
    result = Evaluation(source)

    try:
        result.tokens = tokenize(source)
        result.ast = parse_tokens(result.tokens, config)
        if result.ast is None:
            logger.info("empty expression")
            return result

        tree_value = vm_value = None
        if mode in ("eval", "both"):
            tree_value = evaluate(result.ast)
        if mode in ("vm", "both"):
            result.chunk = compile_expression(result.ast)
            vm_value = run_chunk(result.chunk, config.stack_capacity, config.trace)

        if mode == "both" and not same_bits(tree_value, vm_value):
            raise create_cross_check_error(tree_value, vm_value)
    except CalcError as e:
        logger.debug("%s while processing %r", e.kind, source)
        raise e.with_source(source)

    result.value = tree_value if tree_value is not None else vm_value
    logger.info("%r = %r (%s)", source, result.value, mode)
    return result


def evaluate_string(source: str, mode: str = "both", config: Optional[CalcConfig] = None) -> Optional[float]:
    """Value of an expression, or None when it is empty."""
    return run_expression(source, mode, config).value
