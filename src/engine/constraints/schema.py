"""Constraint schema — Pydantic models for canonical linear inequalities.

A Constraint is always stored as ``a*x + b*y + c <op> 0``. Its display
string is computed from the four numeric fields, so replacing a field
always regenerates it.
"""

from enum import StrEnum

from pydantic import Field, computed_field, field_validator

from src.engine.constraints.allocators import HUE_SPACE, ConstraintAllocator
from src.models.common import (
    EngineBase,
    FiniteFloat,
    UTCTimestamp,
    UUIDv7,
    new_uuid7,
    utc_now,
)

# ---------------------------------------------------------------------------
# Operators
# ---------------------------------------------------------------------------


class Operator(StrEnum):
    """Relational operators accepted by the parser."""

    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="
    EQ = "="

    @property
    def glyph(self) -> str:
        """Typeset form used in display strings."""
        return _GLYPHS[self]

    @property
    def is_strict(self) -> bool:
        return self in (Operator.LT, Operator.GT)

    @property
    def is_upper(self) -> bool:
        """True for ``<``/``<=``: the expression is bounded from above."""
        return self in (Operator.LT, Operator.LE)

    @property
    def is_lower(self) -> bool:
        """True for ``>``/``>=``: the expression is bounded from below."""
        return self in (Operator.GT, Operator.GE)

    def holds(self, value: float, tolerance: float = 0.0) -> bool:
        """Evaluate ``value <op> 0``.

        The tolerance widens the closed comparisons only; strict
        comparisons stay exact.
        """
        if self is Operator.LT:
            return value < 0.0
        if self is Operator.LE:
            return value <= tolerance
        if self is Operator.GT:
            return value > 0.0
        if self is Operator.GE:
            return value >= -tolerance
        return abs(value) <= tolerance


_GLYPHS: dict[Operator, str] = {
    Operator.LT: "<",
    Operator.LE: "≤",
    Operator.GT: ">",
    Operator.GE: "≥",
    Operator.EQ: "=",
}


# ---------------------------------------------------------------------------
# Display rendering
# ---------------------------------------------------------------------------


def format_number(value: float) -> str:
    """Render a non-negative magnitude without a trailing ``.0``."""
    if value.is_integer() and abs(value) < 1e16:
        return str(int(value))
    return repr(value)


def _variable_terms(a: float, b: float) -> list[tuple[str, str]]:
    """(sign, body) pairs for the non-zero variable terms, x first."""
    terms: list[tuple[str, str]] = []
    for coeff, name in ((a, "x"), (b, "y")):
        if coeff == 0.0:
            continue
        magnitude = abs(coeff)
        body = name if magnitude == 1.0 else f"{format_number(magnitude)}{name}"
        terms.append(("-" if coeff < 0 else "+", body))
    return terms


def render_expression(a: float, b: float) -> str:
    """Compact variable part, e.g. ``2x-y``; empty when both are zero."""
    parts = []
    for i, (sign, body) in enumerate(_variable_terms(a, b)):
        if i == 0 and sign == "+":
            parts.append(body)
        else:
            parts.append(sign + body)
    return "".join(parts)


def render_display(a: float, b: float, c: float, operator: Operator) -> str:
    """Typeset canonical form, e.g. ``2x + 3y - 6 < 0``."""
    text = ""
    for i, (sign, body) in enumerate(_variable_terms(a, b)):
        if i == 0:
            text = body if sign == "+" else f"-{body}"
        else:
            text += f" {sign} {body}"
    if c != 0.0:
        magnitude = format_number(abs(c))
        if text:
            text += f" {'-' if c < 0 else '+'} {magnitude}"
        else:
            text = f"-{magnitude}" if c < 0 else magnitude
    if not text:
        text = "0"
    return f"{text} {operator.glyph} 0"


# ---------------------------------------------------------------------------
# Constraint
# ---------------------------------------------------------------------------


class ConstraintPayload(EngineBase):
    """Structural serialization of a constraint's semantic content.

    Color and id are session-local and deliberately absent.
    """

    a: FiniteFloat
    b: FiniteFloat
    c: FiniteFloat
    operator: Operator
    display: str


class Constraint(EngineBase):
    """A canonical linear constraint ``a*x + b*y + c <op> 0``."""

    model_config = {**EngineBase.model_config, "frozen": True}

    constraint_id: str = Field(min_length=1)
    a: FiniteFloat
    b: FiniteFloat
    c: FiniteFloat
    operator: Operator
    hue: int = Field(ge=0, lt=HUE_SPACE)

    @field_validator("a", "b", "c")
    @classmethod
    def _drop_negative_zero(cls, value: float) -> float:
        return value + 0.0

    @computed_field  # type: ignore[prop-decorator]
    @property
    def display(self) -> str:
        return render_display(self.a, self.b, self.c, self.operator)

    @property
    def color(self) -> str:
        """CSS color for the plotting layer."""
        return f"hsl({self.hue}, 70%, 50%)"

    @property
    def rhs(self) -> float:
        """Right-hand side once the constant is moved across: ``a*x + b*y <op> rhs``."""
        return -self.c + 0.0

    @property
    def expression_key(self) -> str:
        """Syntactic key of the variable part, used for clash detection."""
        return render_expression(self.a, self.b)

    @property
    def is_degenerate(self) -> bool:
        """Both coefficients zero: a constant comparison with no variables."""
        return self.a == 0.0 and self.b == 0.0

    def evaluate(self, x: float, y: float) -> float:
        """Left-hand side ``a*x + b*y + c`` at a point."""
        return self.a * x + self.b * y + self.c

    def is_satisfied_by(self, x: float, y: float, tolerance: float = 0.0) -> bool:
        """Whether the point lies in this constraint's solution region."""
        return self.operator.holds(self.evaluate(x, y), tolerance)

    def replace(self, **changes: object) -> "Constraint":
        """Return a new constraint with some fields changed; id and hue are kept."""
        data = self.model_dump(exclude={"display"})
        data.update(changes)
        return Constraint.model_validate(data)

    def to_payload(self) -> ConstraintPayload:
        return ConstraintPayload(
            a=self.a,
            b=self.b,
            c=self.c,
            operator=self.operator,
            display=self.display,
        )

    @classmethod
    def from_payload(
        cls,
        payload: ConstraintPayload,
        *,
        allocator: ConstraintAllocator,
    ) -> "Constraint":
        """Rebuild a constraint from its payload with a fresh id and hue.

        Raises ValueError if the payload's display was not generated from
        its own coefficients.
        """
        expected = render_display(
            payload.a + 0.0, payload.b + 0.0, payload.c + 0.0, payload.operator,
        )
        if payload.display != expected:
            raise ValueError(
                f"Payload display {payload.display!r} does not match its "
                f"coefficients (expected {expected!r})."
            )
        return cls(
            constraint_id=allocator.allocate_id(),
            a=payload.a,
            b=payload.b,
            c=payload.c,
            operator=payload.operator,
            hue=allocator.allocate_color(),
        )


# ---------------------------------------------------------------------------
# ConstraintSystem — ordered collection owned by a session
# ---------------------------------------------------------------------------


class ConstraintSystem(EngineBase):
    """An ordered collection of constraints held by one session.

    Order matters for display only. Use the functions in
    ``src.engine.constraints.system`` to derive modified systems.
    """

    model_config = {**EngineBase.model_config, "frozen": True}

    system_id: UUIDv7 = Field(default_factory=new_uuid7)
    name: str = "session"
    constraints: tuple[Constraint, ...] = ()
    created_at: UTCTimestamp = Field(default_factory=utc_now)

    @property
    def ids(self) -> list[str]:
        return [c.constraint_id for c in self.constraints]

    def get(self, constraint_id: str) -> Constraint | None:
        """Look up a constraint by id."""
        for constraint in self.constraints:
            if constraint.constraint_id == constraint_id:
                return constraint
        return None
