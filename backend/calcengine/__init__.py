"""
Calcengine: interactive arithmetic expression evaluator.

This package provides a tokenizer, a shunting-yard parser, an expression
tree evaluator and the session plumbing (history log, configuration, REPL)
around them.
"""

from .errors import (
    CalculatorError,
    ConfigError,
    LexError,
    ParseError,
    MissingFactor,
    MissingOperator,
    UnknownOperator,
    InvalidNumber,
    NoPriorResult,
    MismatchedParentheses,
    MalformedExpression,
)
from .stack import Stack
from .logic import (
    Calculator,
    EvaluationResult,
    Expression,
    Factor,
    Operator,
    ShuntingYardParser,
    Token,
    Tokenizer,
    Value,
    evaluate_expression,
)

__version__ = "1.0.0"
__all__ = [
    "CalculatorError",
    "ConfigError",
    "LexError",
    "ParseError",
    "MissingFactor",
    "MissingOperator",
    "UnknownOperator",
    "InvalidNumber",
    "NoPriorResult",
    "MismatchedParentheses",
    "MalformedExpression",
    "Stack",
    "Calculator",
    "EvaluationResult",
    "Expression",
    "Factor",
    "Operator",
    "ShuntingYardParser",
    "Token",
    "Tokenizer",
    "Value",
    "evaluate_expression",
]
