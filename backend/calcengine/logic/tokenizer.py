"""
Tokenizer for calculator input lines.

Splits a raw line into numbers, identifiers and operator symbols,
skipping whitespace.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List

from ..errors import LexError


class TokenKind(Enum):
    """Lexical category of a token."""
    NUMBER = "number"
    IDENTIFIER = "identifier"
    SYMBOL = "symbol"


ANS_KEYWORD = "ans"
EXIT_KEYWORDS = frozenset({"quit", "exit"})

NUMBER_PATTERN = re.compile(r"[0-9]+(?:\.[0-9]+)?")
_WORD_PATTERN = re.compile(r"[A-Za-z_][A-Za-z0-9_]*")

_TOKEN_PATTERN = re.compile(
    r"""
    (?P<space>\s+)
    | (?P<number>[0-9]+(?:\.[0-9]+)?)
    | (?P<identifier>[A-Za-z_][A-Za-z0-9_]*)
    | (?P<symbol>[()*/+-])
    """,
    re.VERBOSE,
)


@dataclass(frozen=True)
class Token:
    """A single lexical unit and the column it started at."""
    kind: TokenKind
    text: str
    position: int = 0

    @property
    def is_ans(self) -> bool:
        return self.kind == TokenKind.IDENTIFIER and self.text.lower() == ANS_KEYWORD

    @property
    def is_exit(self) -> bool:
        return self.kind == TokenKind.IDENTIFIER and self.text.lower() in EXIT_KEYWORDS

    @property
    def is_operand(self) -> bool:
        """True for tokens that resolve to a value (numbers and ``ans``)."""
        return self.kind == TokenKind.NUMBER or self.is_ans

    def __str__(self) -> str:
        return self.text


class Tokenizer:
    """
    Converts an input line into an ordered list of tokens.

    Example:
        "3+4*(2-5)" -> ["3", "+", "4", "*", "(", "2", "-", "5", ")"]
    """

    def tokenize(self, line: str) -> List[Token]:
        """
        Tokenize a line of input.

        Args:
            line: Raw text as typed by the user.

        Returns:
            Tokens in source order.

        Raises:
            LexError: If a character sequence is not a number, identifier or symbol.
        """
        tokens = []
        pos = 0

        while pos < len(line):
            match = _TOKEN_PATTERN.match(line, pos)
            if match is None:
                raise LexError(line[pos], pos)

            kind = match.lastgroup
            if kind != "space":
                tokens.append(Token(TokenKind(kind), match.group(), pos))
            pos = match.end()

        return tokens

    @staticmethod
    def has_exit_command(tokens: Iterable[Token]) -> bool:
        """Check whether any token asks to end the session."""
        return any(token.is_exit for token in tokens)

    @staticmethod
    def mentions_exit(line: str) -> bool:
        """Look for an exit word in text that may not tokenize cleanly."""
        return any(word.lower() in EXIT_KEYWORDS for word in _WORD_PATTERN.findall(line))

    @staticmethod
    def join(tokens: Iterable[Token]) -> str:
        """Rebuild the expression text without whitespace."""
        return "".join(token.text for token in tokens)


def tokenize(line: str) -> List[Token]:
    """Convenience wrapper around ``Tokenizer().tokenize``."""
    return Tokenizer().tokenize(line)
