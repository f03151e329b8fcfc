"""
Command line front end.

    exprcalc "2 + 3 * 4"
    exprcalc --ast sexpr --mode vm --disassemble "(1 - 5) ^ 2"

Exit status is 0 on success (an empty expression included), 1 when the
expression fails to lex, parse or evaluate, and 2 on usage errors.
"""

import logging
import sys
from typing import Optional

import click

from . import __version__
from .config import (
    CalcConfig, DEFAULT_MAX_DEPTH, DEFAULT_RESULT_DIGITS, DEFAULT_STACK_CAPACITY, MAX_DEPTH_LIMIT
)
from .diagnostics import CalcError
from .bytecode import compile_expression
from .pipeline import MODES, run_expression
from .render import format_result, format_tokens, to_json, to_sexpr

logger = logging.getLogger(__name__)

DEMO_EXPRESSION = "(-3.24121 + 4) * 1e+20 / (1 - 5) ^ 2 ^ 3 % 7 - 9 * (8 + 6 / 3)"


def configure_logging(verbosity: int) -> None:
    if verbosity <= 0:
        return
    level = logging.INFO if verbosity == 1 else logging.DEBUG
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.argument("expression", required=False)
@click.option("-e", "--expression", "expression_option", metavar="EXPR",
              help="Expression to evaluate (alternative to the positional argument).")
@click.option("--mode", type=click.Choice(MODES), default="both", show_default=True,
              help="Tree evaluator, bytecode VM, or both with a cross-check.")
@click.option("--ast", "ast_format", type=click.Choice(["sexpr", "json"]),
              help="Print the syntax tree in the given format.")
@click.option("--tokens", "show_tokens", is_flag=True, help="Print the token list.")
@click.option("--disassemble", is_flag=True, help="Print the compiled bytecode.")
@click.option("--stack-capacity", type=click.IntRange(min=1), default=DEFAULT_STACK_CAPACITY,
              show_default=True, envvar="EXPRCALC_STACK_CAPACITY",
              help="Maximum operand stack depth of the VM.")
@click.option("--max-depth", type=click.IntRange(1, MAX_DEPTH_LIMIT), default=DEFAULT_MAX_DEPTH,
              show_default=True, envvar="EXPRCALC_MAX_DEPTH",
              help="Maximum nesting depth accepted by the parser.")
@click.option("--digits", type=click.IntRange(1, 17), default=DEFAULT_RESULT_DIGITS,
              show_default=True, help="Significant digits in the printed result.")
@click.option("--trace", is_flag=True, help="Log every VM instruction (use with -vv).")
@click.option("-v", "--verbose", count=True, help="Increase log verbosity (-v, -vv).")
@click.version_option(__version__, prog_name="exprcalc")
@click.pass_context
def main(ctx: click.Context, expression: Optional[str], expression_option: Optional[str],
         mode: str, ast_format: Optional[str], show_tokens: bool, disassemble: bool,
         stack_capacity: int, max_depth: int, digits: int, trace: bool, verbose: int):
    """Evaluate an arithmetic EXPRESSION.

    Supports + - * / % ^ and parentheses over 64-bit floats. Without an
    expression a built-in demonstration expression is evaluated.
    """
    configure_logging(verbose)

    if expression is not None and expression_option is not None:
        raise click.UsageError("give the expression either as an argument or with -e, not both")
    source = expression if expression is not None else expression_option
    if source is None:
        source = DEMO_EXPRESSION

    config = CalcConfig(
        stack_capacity=stack_capacity,
        max_depth=max_depth,
        result_digits=digits,
        trace=trace,
    )

    try:
        result = run_expression(source, mode, config)

        if show_tokens:
            click.echo(format_tokens(result.tokens))

        if result.is_empty:
            click.echo("empty expression", err=True)
            return

        if ast_format == "sexpr":
            click.echo(to_sexpr(result.ast))
        elif ast_format == "json":
            click.echo(to_json(result.ast))

        if disassemble:
            chunk = result.chunk if result.chunk is not None else compile_expression(result.ast)
            click.echo(chunk.disassemble(source))
    except CalcError as e:
        click.echo(str(e).rstrip(), err=True)
        ctx.exit(1)

    click.echo(f"Result: {format_result(result.value, config.result_digits)}")


if __name__ == "__main__":
    main()
