"""Expression parser — free-form inequality text to canonical Constraint.

Accepted shapes, after whitespace removal and sign collapsing:

    [±coef](x|y)[±const] op 0          single variable
    [±coef]x±[coef]y[±const] op 0      two variables, x first

where ``op`` is one of ``<``, ``<=``, ``>``, ``>=``, ``=`` (the typeset
``≤``/``≥`` glyphs are read back as ``<=``/``>=``). The right-hand side is
always the literal ``0``. Anything else is rejected.

Parsing is purely syntactic: ``0x+y<0`` is kept with ``a = 0`` and
constant-only rows are left for the solver to classify.
"""

import logging
import math
import re
from enum import StrEnum

from src.engine.constraints.allocators import ConstraintAllocator
from src.engine.constraints.schema import Constraint, Operator

logger = logging.getLogger(__name__)

_NUMBER = r"(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_OPERATOR = r"(?P<op><=|>=|<|>|=)"

_SINGLE_VARIABLE = re.compile(
    rf"^(?P<coef>[+-]?(?:{_NUMBER})?)(?P<var>[xy])"
    rf"(?P<const>[+-]{_NUMBER})?{_OPERATOR}0$"
)
_TWO_VARIABLE = re.compile(
    rf"^(?P<a>[+-]?(?:{_NUMBER})?)x(?P<b>[+-](?:{_NUMBER})?)y"
    rf"(?P<const>[+-]{_NUMBER})?{_OPERATOR}0$"
)

# Applied repeatedly until the string stops changing.
_SIGN_RULES: tuple[tuple[str, str], ...] = (
    ("--", "+"),
    ("++", "+"),
    ("+-", "-"),
    ("-+", "-"),
)
_GLYPH_RULES: tuple[tuple[str, str], ...] = (
    ("≤", "<="),
    ("≥", ">="),
)


class ParseErrorKind(StrEnum):
    """Why a line of input could not be turned into a constraint."""

    UNRECOGNIZED_FORM = "UNRECOGNIZED_FORM"


class InequalityParseError(ValueError):
    """Input text matched neither supported linear template."""

    def __init__(
        self,
        text: str,
        kind: ParseErrorKind = ParseErrorKind.UNRECOGNIZED_FORM,
        detail: str | None = None,
    ) -> None:
        self.text = text
        self.kind = kind
        self.detail = detail
        message = f"{kind.value}: {text!r}"
        if detail:
            message += f" ({detail})"
        super().__init__(message)


def normalize_input(text: str) -> str:
    """Strip whitespace, read back glyphs and collapse sign runs."""
    normalized = re.sub(r"\s+", "", text)
    for glyph, ascii_op in _GLYPH_RULES:
        normalized = normalized.replace(glyph, ascii_op)
    previous = None
    while previous != normalized:
        previous = normalized
        for run, replacement in _SIGN_RULES:
            normalized = normalized.replace(run, replacement)
    return normalized


def _coefficient(token: str | None) -> float:
    """Empty or ``+`` means 1, ``-`` means -1."""
    if token is None or token in ("", "+"):
        return 1.0
    if token == "-":
        return -1.0
    return float(token)


def _constant(token: str | None) -> float:
    if not token:
        return 0.0
    return float(token)


def canonicalize(text: str) -> tuple[float, float, float, Operator]:
    """Parse text to ``(a, b, c, operator)`` without allocating anything.

    Raises:
        InequalityParseError: if the text matches neither template or a
            coefficient overflows to a non-finite value.
    """
    normalized = normalize_input(text)

    match = _SINGLE_VARIABLE.match(normalized)
    if match:
        coeff = _coefficient(match.group("coef"))
        if match.group("var") == "x":
            a, b = coeff, 0.0
        else:
            a, b = 0.0, coeff
    else:
        match = _TWO_VARIABLE.match(normalized)
        if not match:
            raise InequalityParseError(text)
        a = _coefficient(match.group("a"))
        b = _coefficient(match.group("b"))

    c = _constant(match.group("const"))
    if not all(math.isfinite(v) for v in (a, b, c)):
        raise InequalityParseError(text, detail="non-finite coefficient")

    return a + 0.0, b + 0.0, c + 0.0, Operator(match.group("op"))


class InequalityParser:
    """Parses inequality text into constraints using a session's allocator."""

    def __init__(self, allocator: ConstraintAllocator) -> None:
        self.allocator = allocator

    def parse(self, text: str) -> Constraint:
        """Parse one line of input.

        Id and hue are only allocated once the text has been accepted.

        Raises:
            InequalityParseError: if the text is not a supported linear form.
        """
        try:
            a, b, c, operator = canonicalize(text)
        except InequalityParseError:
            logger.debug("Rejected inequality input: %r", text)
            raise

        return Constraint(
            constraint_id=self.allocator.allocate_id(),
            a=a,
            b=b,
            c=c,
            operator=operator,
            hue=self.allocator.allocate_color(),
        )


def parse(text: str, allocator: ConstraintAllocator | None = None) -> Constraint:
    """Parse one line of input into a Constraint.

    Without an allocator a throwaway one is used, so hues are only
    guaranteed distinct across calls that share an allocator.
    """
    return InequalityParser(allocator or ConstraintAllocator()).parse(text)
