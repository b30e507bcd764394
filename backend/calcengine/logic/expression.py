"""
Expression tree produced by the parser.

A ``Factor`` is either a resolved ``Value`` or a nested ``Expression``.
Brackets never appear in a built tree.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple

from ..errors import InvalidNumber, MissingFactor, NoPriorResult
from .operators import Operator
from .tokenizer import ANS_KEYWORD, NUMBER_PATTERN


class Factor(ABC):
    """Operand of an expression node."""

    @abstractmethod
    def evaluate(self) -> float:
        ...

    @abstractmethod
    def to_dict(self) -> Any:
        ...

    @staticmethod
    def resolve(token: Optional[Any], last_result: Optional[float]) -> "Value":
        """
        Turn an operand token into a value.

        Args:
            token: Token (or its text); None when the stream ran out.
            last_result: Result of the previous evaluation, if any.

        Returns:
            The resolved Value.

        Raises:
            MissingFactor: If no token was supplied.
            NoPriorResult: If ``ans`` is used before any result exists.
            InvalidNumber: If the text is not a floating-point literal.
        """
        if token is None:
            raise MissingFactor()

        text = str(token)

        if text.lower() == ANS_KEYWORD:
            if last_result is None:
                raise NoPriorResult(token=text)
            return Value(last_result)

        # Plain decimal literals only; "1_000", " 1 " and "inf" are rejected
        if NUMBER_PATTERN.fullmatch(text) is None:
            raise InvalidNumber(text)
        return Value(float(text))


@dataclass(frozen=True)
class Value(Factor):
    """A resolved numeric operand."""
    value: float

    def evaluate(self) -> float:
        return self.value

    def to_dict(self) -> float:
        return self.value

    def __str__(self) -> str:
        return repr(self.value)


@dataclass(frozen=True)
class Expression(Factor):
    """Binary node: ``left <operator> right``."""
    left: Factor
    right: Factor
    operator: Operator

    def __post_init__(self):
        if self.operator.is_bracket:
            raise ValueError(f"Brackets cannot be used as an expression operator: {self.operator}")

    def evaluate(self) -> float:
        """
        Reduce the tree bottom-up.

        Uses an explicit work stack so that long operator chains do not
        hit the interpreter's recursion limit.
        """
        # (node, visited) pairs; results collect evaluated children
        pending: List[Tuple[Factor, bool]] = [(self, False)]
        results: List[float] = []

        while pending:
            node, visited = pending.pop()
            if isinstance(node, Expression):
                if visited:
                    right = results.pop()
                    left = results.pop()
                    results.append(node.operator.evaluate(left, right))
                else:
                    pending.append((node, True))
                    pending.append((node.right, False))
                    pending.append((node.left, False))
            else:
                results.append(node.evaluate())

        return results[0]

    @property
    def depth(self) -> int:
        """Number of operator levels in the tree rooted at this node."""
        deepest = 0
        frontier: List[Tuple[Expression, int]] = [(self, 1)]
        while frontier:
            node, level = frontier.pop()
            deepest = max(deepest, level)
            for child in (node.left, node.right):
                if isinstance(child, Expression):
                    frontier.append((child, level + 1))
        return deepest

    def to_dict(self) -> Dict[str, Any]:
        return {self.operator.value: [self.left.to_dict(), self.right.to_dict()]}

    def __str__(self) -> str:
        return f"({self.left} {self.operator} {self.right})"

