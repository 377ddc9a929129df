"""Evaluate postfix (RPN) programs produced by `infix.compile_expr`.

`calc` is the one-shot entry point; `evaluator` compiles once and returns a
python-callable-function of the expression's free variables.
"""
import logging
from typing import Iterable, Mapping, Optional

import numpy as np

from infix import (
    InsufficientValues,
    Number,
    Op,
    Token,
    TooManyValues,
    Variable,
    VariableValueMissing,
    compile_expr,
)

logger = logging.getLogger(__name__)

expr_n33 = "3 + (8 - 7.5) * 10 / 5  - (2 + 5 * 7)"
expr_qf = "(0-b+(b^2-4*a*c)^0.5)/(2*a)"


def as_float64(value):
    # Indexing with () turns 0-d arrays into numpy scalars and leaves others be.
    return np.asarray(value, dtype=np.float64)[()]


def free_vars(postfix):
    """Return the free variables in the `postfix` program.

    >>> free_vars(compile_expr(expr_qf)) == {'a', 'b', 'c'}
    True
    """
    return frozenset(tok.name for tok in postfix if type(tok) is Variable)


def evaluate_postfix(postfix: Iterable[Token], bindings: Optional[Mapping] = None):
    """Reduce `postfix` to a single value, looking variables up in `bindings`.

    Values are float64 numpy scalars, or arrays if `bindings` holds arrays.
    Division by zero and overflow follow IEEE semantics rather than raising.

    >>> float(evaluate_postfix(compile_expr("x / 0"), {"x": -1}))
    -inf
    """
    bindings = bindings or {}
    stack = []
    with np.errstate(all="ignore"):
        for tok in postfix:
            if type(tok) is Number:
                stack.append(np.float64(tok.value))
            elif type(tok) is Op:
                if len(stack) < 2:
                    raise InsufficientValues()
                b = stack.pop()
                a = stack.pop()
                stack.append(tok(a, b))
            elif type(tok) is Variable:
                if tok.name not in bindings:
                    raise VariableValueMissing(tok.name)
                stack.append(as_float64(bindings[tok.name]))
            else:
                raise TypeError(f"Not a postfix token: {tok!r}")
    if len(stack) != 1:
        raise TooManyValues()
    (ans,) = stack
    return ans


def calc(expression, bindings=None, strict=False):
    """Evaluate the infix `expression` with variables taken from `bindings`.

    >>> calc("(a + b + c) * 2", {"a": 1, "b": 1, "c": 7})
    18.0
    >>> calc("2^3^2")
    512.0
    >>> calc(expr_n33)
    -33.0
    """
    return float(evaluate_postfix(compile_expr(expression, strict=strict), bindings))


def evaluator(expression, name="f_rpn"):
    """Return a function (named `name`) that evaluates `expression`.

    The returned function will take the free variables in `expression` in
    alphabetical order.

    Examples:

    >>> evaluator("x^13")(3) == 3**13
    True
    >>> f = evaluator('(2+3)/2')
    >>> f()
    2.5
    >>> f = evaluator("30*x/5  - (2 + 5 * 7)")
    >>> f(5)
    -7.0
    >>> evaluator(expr_qf)(5, 6, 1)
    -0.2
    """
    postfix = compile_expr(expression)
    arg_names = sorted(free_vars(postfix))
    logger.debug("%s(%s) compiled from %r", name, ", ".join(arg_names), expression)

    def f(*args):
        if len(args) != len(arg_names):
            raise TypeError(
                f"{name}() takes {len(arg_names)} arguments ({', '.join(arg_names)}), "
                f"{len(args)} given"
            )
        return float(evaluate_postfix(postfix, dict(zip(arg_names, args))))

    f.__name__ = name
    return f
