"""
Expression engine for the calculator.

Provides tokenizing, shunting-yard parsing and evaluation of arithmetic
expressions.
"""

from .tokenizer import Token, TokenKind, Tokenizer
from .operators import Operator
from .expression import Expression, Factor, Value
from .parser import ShuntingYardParser, parse_expression
from .evaluator import Calculator, EvaluationResult, ExpressionEvaluator, evaluate_expression

__all__ = [
    "Token",
    "TokenKind",
    "Tokenizer",
    "Operator",
    "Expression",
    "Factor",
    "Value",
    "ShuntingYardParser",
    "parse_expression",
    "Calculator",
    "EvaluationResult",
    "ExpressionEvaluator",
    "evaluate_expression",
]
