"""
Error taxonomy for the expression engine.

Every failure caused by user input is a ``CalculatorError`` so callers can
report it and keep the session alive.
"""

from __future__ import annotations

from typing import Optional


class CalculatorError(Exception):
    """Base class for recoverable calculator failures."""


class ConfigError(CalculatorError):
    """Raised when a configuration file cannot be read."""


class LexError(CalculatorError, ValueError):
    """A piece of input cannot be classified as number, identifier or symbol."""

    def __init__(self, text: str, position: int):
        self.text = text
        self.position = position
        super().__init__(f"Unrecognized input {text!r} at column {position}")


class ParseError(CalculatorError, ValueError):
    """Base class for errors raised while building an expression tree."""

    default_message = "Cannot parse expression"

    def __init__(self, message: Optional[str] = None, token: Optional[str] = None):
        self.token = token
        super().__init__(message or self.default_message)


class MissingFactor(ParseError):
    default_message = "Missing a factor"


class UnknownOperator(ParseError):
    default_message = "Cannot parse operator"

    def __init__(self, token: str):
        super().__init__(f"Cannot parse operator: {token!r}", token=token)


class InvalidNumber(ParseError):
    default_message = "Cannot parse factor"

    def __init__(self, token: str):
        super().__init__(f"Cannot parse factor: {token!r}", token=token)


class NoPriorResult(ParseError):
    default_message = "No calculation was made previously"


class MismatchedParentheses(ParseError):
    default_message = "There are mismatched parentheses"


class MalformedExpression(ParseError):
    default_message = "Malformed expression"


class MissingOperator(MalformedExpression):
    """Operands were left over with no operator to combine them."""

    default_message = "Missing an operator between factors"
