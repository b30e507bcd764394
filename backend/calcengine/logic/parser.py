"""
Shunting-yard parser.

Turns a token stream into an expression tree, honoring operator
precedence, left associativity and parentheses.
"""

from __future__ import annotations

from typing import Optional, Sequence, Tuple

from ..errors import (
    CalculatorError,
    MalformedExpression,
    MismatchedParentheses,
    MissingFactor,
    MissingOperator,
)
from ..logging_utils import get_logger
from ..stack import DEFAULT_CAPACITY, GROWTH_INCREMENT, Stack
from .expression import Expression, Factor
from .operators import Operator
from .tokenizer import Token, Tokenizer

logger = get_logger(__name__)


class ShuntingYardParser:
    """
    Parser driven by an operator stack and an operand stack.

    Converts token streams like:
        3 + 4 * 2
        (3 + 4) * 2

    Into trees like:
        {"+": [3.0, {"*": [4.0, 2.0]}]}
        {"*": [{"+": [3.0, 4.0]}, 2.0]}
    """

    def __init__(
        self,
        tokenizer: Optional[Tokenizer] = None,
        stack_capacity: int = DEFAULT_CAPACITY,
        stack_growth: int = GROWTH_INCREMENT,
    ):
        self.tokenizer = tokenizer or Tokenizer()
        self.stack_capacity = stack_capacity
        self.stack_growth = stack_growth

    def parse_text(self, text: str, last_result: Optional[float] = None) -> Factor:
        """Tokenize and parse a line of input."""
        return self.parse(self.tokenizer.tokenize(text), last_result)

    def parse(self, tokens: Sequence[Token], last_result: Optional[float] = None) -> Factor:
        """
        Parse tokens into an expression tree.

        Args:
            tokens: Tokens in source order.
            last_result: Value ``ans`` resolves to, or None if there is none.

        Returns:
            The root factor: a Value for a lone operand, else an Expression.

        Raises:
            ParseError: One of its subclasses, describing what is wrong.
        """
        if not tokens:
            raise MissingFactor("Empty expression")

        logger.debug("Parsing tokens: %s", [token.text for token in tokens])

        with Stack(self.stack_capacity, self.stack_growth) as operators, \
                Stack(self.stack_capacity, self.stack_growth) as operands:
            for token in tokens:
                if token.is_operand:
                    operands.push(Factor.resolve(token.text, last_result))
                    continue

                operator = Operator.build(token.text)

                if operator == Operator.CLOSED_BRACKET:
                    self._close_bracket(operators, operands)
                    continue

                while not operators.is_empty():
                    top = operators.peek()
                    if top == Operator.OPEN_BRACKET or not top.precedence_at_least(operator):
                        break
                    self._reduce(operands, operators.pop())

                operators.push(operator)

            logger.debug("Residual operator stack: %s", [str(op) for op in operators])

            while not operators.is_empty():
                operator = operators.pop()
                if operator.is_bracket:
                    raise MismatchedParentheses()
                self._reduce(operands, operator)

            return self._finish(operands)

    def _close_bracket(self, operators: Stack[Operator], operands: Stack[Factor]) -> None:
        """Reduce everything back to the matching open bracket."""
        while True:
            operator = operators.pop()
            if operator is None:
                raise MismatchedParentheses()
            if operator == Operator.OPEN_BRACKET:
                return
            self._reduce(operands, operator)

    @staticmethod
    def _reduce(operands: Stack[Factor], operator: Operator) -> None:
        """Combine the top two operands with an operator."""
        # Right operand is on top
        right = operands.pop()
        left = operands.pop()
        if left is None or right is None:
            raise MissingFactor(f"Missing a factor for operator {operator}")
        operands.push(Expression(left, right, operator))

    @staticmethod
    def _finish(operands: Stack[Factor]) -> Factor:
        """Check the single-result shape and return the root."""
        result = operands.pop()
        if result is None:
            raise MalformedExpression("Expression produced no result")
        if not operands.is_empty():
            raise MissingOperator()
        return result

    def validate(self, text: str) -> Tuple[bool, Optional[str]]:
        """
        Validate an expression without evaluating it.

        ``ans`` is accepted as if a previous result existed.

        Returns:
            Tuple of (is_valid, error_message).
        """
        try:
            self.parse_text(text, last_result=0.0)
            return True, None
        except CalculatorError as e:
            return False, str(e)


def parse_expression(text: str, last_result: Optional[float] = None) -> Factor:
    """Convenience wrapper around ``ShuntingYardParser().parse_text``."""
    return ShuntingYardParser().parse_text(text, last_result)

