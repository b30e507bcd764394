"""
Interactive calculator loop.

Reads one expression per line, prints the result, and keeps going after
errors. ``quit`` or ``exit`` anywhere on a line ends the session.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional, TextIO

from .config import CalculatorConfig, load_config
from .errors import CalculatorError
from .history import HistoryLogger
from .logging_utils import configure_logging, get_logger
from .logic.evaluator import Calculator
from .logic.parser import ShuntingYardParser

logger = get_logger(__name__)

RESULT_PREFIX = "Result of your operation: "


class Repl:
    """Line-oriented front end around a ``Calculator`` session."""

    def __init__(
        self,
        calculator: Calculator,
        prompt: str = "> ",
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
    ):
        self.calculator = calculator
        self.prompt = prompt
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout
        self.stderr = stderr or sys.stderr

    def handle_line(self, line: str) -> bool:
        """
        Process one input line.

        Returns:
            False when the session should end, True otherwise.
        """
        try:
            tokens = self.calculator.tokenizer.tokenize(line)
        except CalculatorError as e:
            if self.calculator.tokenizer.mentions_exit(line):
                return False
            print(f"Error: {e}", file=self.stderr)
            return True

        if self.calculator.tokenizer.has_exit_command(tokens):
            return False
        if not tokens:
            return True

        try:
            result = self.calculator.calculate_tokens(tokens)
        except CalculatorError as e:
            print(f"Error: {e}", file=self.stderr)
            return True

        print(f"{RESULT_PREFIX}{result.format_value()}", file=self.stdout)
        return True

    def run(self) -> int:
        while True:
            self.stdout.write(self.prompt)
            self.stdout.flush()
            line = self.stdin.readline()
            if not line:
                # EOF
                self.stdout.write("\n")
                return 0
            if not self.handle_line(line):
                return 0


def build_calculator(config: CalculatorConfig) -> Calculator:
    history = None
    if config.history_enabled:
        try:
            history = HistoryLogger(
                config.history_file,
                fmt=config.history_format,
                truncate=config.history_truncate,
            )
        except OSError as e:
            logger.warning("History disabled, cannot open %s: %s", config.history_file, e)
    parser = ShuntingYardParser(
        stack_capacity=config.stack_capacity,
        stack_growth=config.stack_growth,
    )
    return Calculator(history=history, parser=parser)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="calcengine",
        description="Evaluate arithmetic expressions (+ - * / and parentheses, 'ans' for the last result).",
    )
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--history-file", type=Path, help="File to write the history log to")
    parser.add_argument("--no-history", action="store_true", help="Do not write a history log")
    parser.add_argument("--log-level", help="Diagnostic log level (DEBUG, INFO, WARNING, ...)")
    parser.add_argument("-e", "--expression", help="Evaluate a single expression and exit")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)

    try:
        config = load_config(args.config).with_overrides(
            history_file=args.history_file,
            log_level=args.log_level,
            history_enabled=False if args.no_history else None,
        )
    except (CalculatorError, ValueError) as e:
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 2

    configure_logging(config.log_level)
    calculator = build_calculator(config)

    try:
        if args.expression is not None:
            try:
                result = calculator.calculate(args.expression)
            except CalculatorError as e:
                print(f"Error: {e}", file=sys.stderr)
                return 1
            print(result.format_value())
            return 0

        return Repl(calculator, prompt=config.prompt).run()
    except KeyboardInterrupt:
        return 130
    finally:
        if calculator.history is not None:
            calculator.history.close()
            logger.debug("History written to %s", config.history_file)


if __name__ == "__main__":
    sys.exit(main())
