"""Command line front end.

Usage:
    rpn-calc "(a + b + c) * 2" -v a=1 -v b=1 -v c=7   # prints 18.0
    rpn-calc "2^3^2" --postfix                         # prints the RPN, then 512.0
    DEBUG=1 rpn-calc "1 + x" -v x=2                    # with debug logging
"""
import logging
import os
from typing import List, Optional

import typer
from rich.console import Console

from infix import (
    ExpressionError,
    InsufficientValues,
    MismatchedParenthesis,
    TooManyValues,
    UnknownToken,
    VariableValueMissing,
    compile_expr,
    format_postfix,
    is_variable,
)
from rpn import evaluate_postfix

DEBUG = bool(os.getenv("DEBUG", False))

MESSAGES = {
    MismatchedParenthesis: "There are mismatched parenthesis",
    InsufficientValues: "There are insufficient values",
    TooManyValues: "There are too many values",
    VariableValueMissing: "Missing variable value",
    UnknownToken: "Unknown token",
}

app = typer.Typer(
    name="rpn-calc",
    help="Evaluate an infix math expression with single letter variables",
    add_completion=False,
)
console = Console()
err_console = Console(stderr=True)


def describe(error: ExpressionError) -> str:
    message = MESSAGES[type(error)]
    if isinstance(error, VariableValueMissing):
        message += f": {error.name}"
    elif isinstance(error, UnknownToken):
        message += f": {error.token!r}"
    return message


def parse_binding(text: str) -> tuple:
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not is_variable(name):
        raise typer.BadParameter(f"expected NAME=VALUE with a single letter NAME, got {text!r}")
    try:
        return name, float(value)
    except ValueError:
        raise typer.BadParameter(f"{value!r} is not a number") from None


@app.command()
def main(
    expression: str = typer.Argument(help="Infix expression, e.g. '(a + b) * 2'"),
    var: Optional[List[str]] = typer.Option(None, "--var", "-v", help="Variable binding NAME=VALUE (repeatable)"),
    postfix: bool = typer.Option(False, "--postfix", "-p", help="Also print the postfix (RPN) program"),
    strict: bool = typer.Option(False, "--strict", help="Reject unknown tokens instead of skipping them"),
) -> None:
    """Evaluate EXPRESSION and print the result."""
    logging.basicConfig(level=logging.DEBUG if DEBUG else logging.WARNING)
    bindings = dict(parse_binding(v) for v in var or [])
    try:
        program = compile_expr(expression, strict=strict)
        if postfix:
            console.print(format_postfix(program), markup=False, highlight=False, soft_wrap=True)
        result = float(evaluate_postfix(program, bindings))
    except ExpressionError as e:
        err_console.print(describe(e), style="red", markup=False, highlight=False, soft_wrap=True)
        raise typer.Exit(1)
    console.print(repr(result), markup=False, highlight=False, soft_wrap=True)


if __name__ == "__main__":
    app()
