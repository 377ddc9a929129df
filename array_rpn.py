# Evaluating expressions over numpy arrays.
import functools
import logging

import numpy as np

from infix import compile_expr, format_postfix
from rpn import evaluate_postfix, free_vars

logger = logging.getLogger(__name__)


def calc_array(expression, bindings=None, strict=False):
    """Evaluate `expression` elementwise over the arrays in `bindings`.

    Arrays broadcast against each other and against number literals.

    >>> calc_array("x * 2 + y", {"x": [1, 2, 3], "y": 1})
    array([3., 5., 7.])
    """
    postfix = compile_expr(expression, strict=strict)
    return np.asarray(evaluate_postfix(postfix, bindings))


# Fold an expression of an accumulator and an element over an array -- the
# expression plays the role of the binary function in `functools.reduce`.
def make_array_aggregator(name, args, expr, initial):
    if len(args) != 2:
        raise ValueError(f"{name}: need an accumulator and an element name, got {args!r}")
    acc_name, item_name = args
    postfix = compile_expr(expr)
    if free_vars(postfix) != frozenset(args):
        raise ValueError(f"{name}: {expr!r} must use exactly the variables {args!r}")
    logger.debug("%s(%s) = %s", name, ", ".join(args), format_postfix(postfix))

    def step(acc, item):
        return evaluate_postfix(postfix, {acc_name: acc, item_name: item})

    def f(a, initial=initial):
        items = np.asarray(a, dtype=np.float64).ravel()
        return float(functools.reduce(step, items, np.float64(initial)))

    f.__name__ = name
    return f


asum = make_array_aggregator("asum", ["t", "x"], "t+x", 0.0)
aprod = make_array_aggregator("aprod", ["t", "x"], "t*x", 1.0)
