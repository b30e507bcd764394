"""
Binary operators and bracket markers understood by the parser.
"""

from __future__ import annotations

import math
import operator as _op
from enum import Enum
from typing import Callable, Dict

from ..errors import UnknownOperator


class Operator(Enum):
    """Supported operators, keyed by their source symbol."""
    SUM = "+"
    SUBTRACTION = "-"
    MULTIPLICATION = "*"
    DIVISION = "/"
    OPEN_BRACKET = "("
    CLOSED_BRACKET = ")"

    @classmethod
    def build(cls, symbol: str) -> "Operator":
        """
        Map a symbol to its operator.

        Raises:
            UnknownOperator: If the symbol is not one of ``+ - * / ( )``.
        """
        try:
            return cls(symbol)
        except ValueError:
            raise UnknownOperator(symbol) from None

    @property
    def is_bracket(self) -> bool:
        return self in (Operator.OPEN_BRACKET, Operator.CLOSED_BRACKET)

    @property
    def is_additive(self) -> bool:
        return self in (Operator.SUM, Operator.SUBTRACTION)

    @property
    def is_multiplicative(self) -> bool:
        return self in (Operator.MULTIPLICATION, Operator.DIVISION)

    def precedence_at_least(self, other: "Operator") -> bool:
        """
        Decide whether this operator, sitting on the stack, must be applied
        before ``other`` is pushed.

        Operators of the same tier reduce (left associativity); brackets
        never reduce and never cause a reduction.
        """
        if self.is_bracket or other.is_bracket:
            return False
        if self.is_multiplicative:
            return True
        return other.is_additive

    def evaluate(self, a: float, b: float) -> float:
        """Apply the operator to two operands."""
        assert not self.is_bracket, f"Trying to evaluate a bracket: {self.value}"
        return _FUNCTIONS[self](a, b)

    def __str__(self) -> str:
        return self.value


def _divide(a: float, b: float) -> float:
    # IEEE-754 semantics instead of ZeroDivisionError
    if b == 0:
        if a == 0 or math.isnan(a):
            return math.nan
        return math.copysign(math.inf, a) * math.copysign(1.0, b)
    return a / b


_FUNCTIONS: Dict[Operator, Callable[[float, float], float]] = {
    Operator.SUM: _op.add,
    Operator.SUBTRACTION: _op.sub,
    Operator.MULTIPLICATION: _op.mul,
    Operator.DIVISION: _divide,
}
