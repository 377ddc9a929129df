"""Tokenize infix arithmetic and convert it to postfix (RPN) tokens.

>>> format_postfix(compile_expr("(a + b + c) * 2"))
'a b + c + 2 *'
>>> format_postfix(compile_expr("2^3^2"))
'2 3 2 ^ ^'
"""
import logging
import math
from types import MappingProxyType
from typing import Callable, Iterable, List, Literal, NamedTuple, Union

import numpy as np

logger = logging.getLogger(__name__)


class ExpressionError(ValueError):
    """Base for all the ways an expression can fail to evaluate."""


class MismatchedParenthesis(ExpressionError):
    pass


class InsufficientValues(ExpressionError):
    pass


class TooManyValues(ExpressionError):
    pass


class VariableValueMissing(ExpressionError):
    def __init__(self, name):
        super().__init__(name)
        self.name = name


class UnknownToken(ExpressionError):
    def __init__(self, token):
        super().__init__(token)
        self.token = token


def canonicalize_num(num):
    """Render `num` the way it would be written: 2.0 as 2, 2.5 as 2.5."""
    return repr(integer if math.isfinite(num) and (integer := int(num)) == num else num)


class Number(NamedTuple):
    value: float

    def __str__(self):
        return canonicalize_num(self.value)


class Variable(NamedTuple):
    name: str

    def __str__(self):
        return self.name


class LeftParen(NamedTuple):
    def __str__(self):
        return "("


class RightParen(NamedTuple):
    def __str__(self):
        return ")"


class Op(NamedTuple):
    op: str
    prec: int
    assoc: Literal["l", "r"]  # left-associative, right-associative
    fun: Callable

    def __call__(self, a, b):
        return self.fun(a, b)

    def __repr__(self):
        return f"op({self.op!r:})"

    def __str__(self):
        return self.op

    def left_first(self, other):
        """Must `self` be applied before a following `other` of the same nesting?

        >>> OPS["*"].left_first(OPS["+"]), OPS["-"].left_first(OPS["-"])
        (True, True)
        >>> OPS["^"].left_first(OPS["^"]), OPS["+"].left_first(OPS["*"])
        (False, False)
        """
        return self.prec > other.prec or self.prec == other.prec and other.assoc == "l"


Token = Union[Number, Variable, Op, LeftParen, RightParen]

# The ufuncs give IEEE float64 semantics: 1/0 is inf, 0/0 and (-8)^(1/3) are
# nan, 10^400 is inf. Nothing raises.
OPS = MappingProxyType(
    {
        "+": Op("+", 1, "l", np.add),
        "-": Op("-", 1, "l", np.subtract),
        "*": Op("*", 2, "l", np.multiply),
        "/": Op("/", 2, "l", np.divide),
        "^": Op("^", 3, "r", np.power),
    }
)


def is_number_char(c):
    return c in "0123456789."


def tokenize(expression):
    """Split `expression` into number literals and single characters.

    Whitespace is not dropped; it comes out as tokens of its own.

    >>> tokenize("12.5")
    ['12.5']
    >>> tokenize("(a+10)*2.5")
    ['(', 'a', '+', '10', ')', '*', '2.5']
    >>> tokenize("1 +x")
    ['1', ' ', '+', 'x']
    """
    tokens = []
    literal = ""
    for c in expression:
        if is_number_char(c):
            literal += c
            continue
        if literal:
            tokens.append(literal)
            literal = ""
        tokens.append(c)
    if literal:
        tokens.append(literal)
    return tokens


def as_number(tok):
    # float() also reads non-ASCII digits such as "\u0663".
    if not tok.isascii():
        return None
    try:
        return Number(float(tok))
    except ValueError:
        return None


def is_variable(tok):
    return len(tok) == 1 and tok.isalpha()


def to_postfix(tokens: Iterable[str], strict=False) -> List[Token]:
    """Convert infix `tokens` to postfix order (shunting-yard).

    Tokens that are neither numbers, parentheses, operators nor single letter
    variables are skipped, unless `strict` is set, in which case anything but
    whitespace raises `UnknownToken`.

    >>> [str(t) for t in to_postfix(["1", "+", "2", "*", "3"])]
    ['1', '2', '3', '*', '+']
    >>> [str(t) for t in to_postfix(["(", "1", "+", "2", ")", "*", "3"])]
    ['1', '2', '+', '3', '*']
    >>> to_postfix(["1", ")"])  # doctest: +IGNORE_EXCEPTION_DETAIL
    Traceback (most recent call last):
    ...
    MismatchedParenthesis
    """
    output = []
    stack = []
    for tok in tokens:
        if num := as_number(tok):
            output.append(num)
        elif tok == "(":
            stack.append(LeftParen())
        elif tok == ")":
            while stack and type(stack[-1]) is not LeftParen:
                output.append(stack.pop())
            if not stack:
                raise MismatchedParenthesis()
            stack.pop()
        elif o := OPS.get(tok):
            while stack and type(stack[-1]) is Op and stack[-1].left_first(o):
                output.append(stack.pop())
            stack.append(o)
        elif is_variable(tok):
            output.append(Variable(tok))
        elif strict and not tok.isspace():
            raise UnknownToken(tok)
        elif not tok.isspace():
            logger.debug("ignoring unknown token %r", tok)
    while stack:
        if type(top := stack.pop()) is not Op:
            raise MismatchedParenthesis()
        output.append(top)
    return output


def compile_expr(expression, strict=False):
    """Return the postfix program for the infix string `expression`."""
    postfix = to_postfix(tokenize(expression), strict=strict)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("%r -> %s", expression, format_postfix(postfix))
    return postfix


def format_postfix(tokens: Iterable[Token]) -> str:
    return " ".join(map(str, tokens))
