"""
Expression Evaluator.

Evaluates parsed expression trees and runs calculator sessions that carry
the previous result forward for ``ans``.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Protocol

from ..errors import CalculatorError
from ..logging_utils import get_logger
from .expression import Factor
from .parser import ShuntingYardParser
from .tokenizer import Token, Tokenizer

logger = get_logger(__name__)


class HistorySink(Protocol):
    """Anything that accepts completed ``(expression, result)`` pairs."""

    def notify(self, expression: str, result: float) -> None:
        ...


def format_value(value: float) -> str:
    """Render a result the way the REPL prints it."""
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value.is_integer():
        return str(int(value))
    return repr(value)


@dataclass
class EvaluationResult:
    """Outcome of a single successful calculation."""
    expression: str
    value: float
    tokens: List[Token] = field(default_factory=list)

    def format_value(self) -> str:
        return format_value(self.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "expression": self.expression,
            "value": self.value,
            "tokens": [token.text for token in self.tokens],
        }


class ExpressionEvaluator:
    """Evaluates expression trees produced by the parser."""

    def evaluate(self, factor: Factor) -> float:
        """
        Evaluate a factor.

        Args:
            factor: A Value or an Expression tree.

        Returns:
            The numeric result. Division by zero yields inf or nan.
        """
        return factor.evaluate()


class Calculator:
    """
    A calculator session.

    Keeps the last successful result so that ``ans`` can refer to it, and
    forwards every result to an optional history sink.
    """

    def __init__(
        self,
        history: Optional[HistorySink] = None,
        parser: Optional[ShuntingYardParser] = None,
        last_result: Optional[float] = None,
    ):
        """
        Initialize the session.

        Args:
            history: Sink notified after each successful evaluation.
            parser: Parser to use; a default one is created if omitted.
            last_result: Initial value for ``ans``.
        """
        self.history = history
        self.parser = parser or ShuntingYardParser()
        self.evaluator = ExpressionEvaluator()
        self.last_result = last_result

    @property
    def tokenizer(self) -> Tokenizer:
        return self.parser.tokenizer

    def calculate(self, text: str) -> EvaluationResult:
        """
        Evaluate one line of input.

        ``last_result`` is only updated when the whole line succeeds.

        Raises:
            CalculatorError: If the line cannot be tokenized or parsed.
        """
        tokens = self.tokenizer.tokenize(text)
        return self.calculate_tokens(tokens)

    def calculate_tokens(self, tokens: List[Token]) -> EvaluationResult:
        """Evaluate an already tokenized line."""
        tree = self.parser.parse(tokens, self.last_result)
        value = self.evaluator.evaluate(tree)

        self.last_result = value
        result = EvaluationResult(
            expression=Tokenizer.join(tokens),
            value=value,
            tokens=list(tokens),
        )
        self._record(result)
        return result

    def reset(self) -> None:
        """Forget the previous result."""
        self.last_result = None

    def _record(self, result: EvaluationResult) -> None:
        if self.history is None:
            return
        try:
            self.history.notify(result.expression, result.value)
        except Exception as e:
            # The sink must never fail a calculation
            logger.warning("History sink failed for %s: %s", result.expression, e)


def evaluate_expression(text: str, last_result: Optional[float] = None) -> float:
    """
    Parse and evaluate an expression without keeping session state.

    Args:
        text: The expression.
        last_result: Value for ``ans``.

    Returns:
        The numeric result.
    """
    tree = ShuntingYardParser().parse_text(text, last_result)
    return ExpressionEvaluator().evaluate(tree)


def try_evaluate(text: str, last_result: Optional[float] = None) -> Dict[str, Any]:
    """Evaluate and report the outcome as a dictionary instead of raising."""
    try:
        value = evaluate_expression(text, last_result)
        return {"success": True, "value": value, "error": None}
    except CalculatorError as e:
        return {"success": False, "value": None, "error": str(e)}
