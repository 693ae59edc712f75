"""
Pipeline Parser - Hand-written recursive descent parser

Parses pipeline text made of steps separated by '|':
- select x + 1          (operators: + - * / // % **)
- select x              (identity)
- where x > 5           (comparisons: > < >= <= == !=)
- take 5
- order by desc         (asc is the default)

Operands are the variable x or numeric literals (optionally negative).
"""

import re
from typing import List, Optional

from pullchain.dsl.ast_nodes import (
    Operand,
    OrderByStep,
    PipelineStatement,
    SelectStep,
    Step,
    TakeStep,
    WhereStep,
)

ARITHMETIC_OPERATORS = ("+", "-", "*", "/", "//", "%", "**")
COMPARISON_OPERATORS = (">", "<", ">=", "<=", "==", "!=")

_TOKEN_RE = re.compile(r"\d+\.\d*|\.\d+|\d+|//|\*\*|>=|<=|==|!=|[|+\-*/%<>]|[A-Za-z_]\w*|\S")


class ParseError(Exception):
    """Raised when pipeline parsing fails"""

    pass


class PipelineParser:
    """
    Simple recursive descent parser for pipeline text

    Grammar:
        pipeline := step ['|' step]*
        step     := SELECT operand [arith operand]
                  | WHERE operand cmp operand
                  | TAKE integer
                  | ORDER BY [ASC | DESC]
        operand  := x | ['-'] number
    """

    def __init__(self, text: str):
        self.text = text.strip()
        self.tokens = self._tokenize(self.text)
        self.pos = 0

    def _tokenize(self, text: str) -> List[str]:
        """Split text into numbers, operators, words and pipes"""
        return _TOKEN_RE.findall(text)

    def current(self) -> Optional[str]:
        """Get current token without advancing"""
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return None

    def consume(self, expected: Optional[str] = None) -> str:
        """
        Consume and return current token, optionally checking it matches expected

        Args:
            expected: If provided, raises ParseError if current token doesn't match

        Returns:
            The consumed token

        Raises:
            ParseError: If expected token doesn't match or no more tokens
        """
        if self.pos >= len(self.tokens):
            raise ParseError(f"Unexpected end of pipeline. Expected: {expected}")

        token = self.tokens[self.pos]

        if expected and token.upper() != expected.upper():
            raise ParseError(f"Expected '{expected}' but got '{token}' at position {self.pos}")

        self.pos += 1
        return token

    def parse(self) -> PipelineStatement:
        """Parse pipeline text into AST"""
        if not self.tokens:
            raise ParseError("Empty pipeline")

        steps = [self._parse_step()]
        while self.current() == "|":
            self.consume("|")
            steps.append(self._parse_step())

        if self.current() is not None:
            raise ParseError(f"Unexpected token '{self.current()}' at position {self.pos}")

        return PipelineStatement(steps)

    def _parse_step(self) -> Step:
        """Dispatch on the step keyword"""
        keyword = self.current()
        if keyword is None:
            raise ParseError("Unexpected end of pipeline. Expected a step")

        keyword = keyword.upper()
        if keyword == "SELECT":
            return self._parse_select()
        if keyword == "WHERE":
            return self._parse_where()
        if keyword == "TAKE":
            return self._parse_take()
        if keyword == "ORDER":
            return self._parse_order_by()

        raise ParseError(f"Unknown step '{self.current()}' at position {self.pos}")

    def _parse_select(self) -> SelectStep:
        """Parse 'select operand [op operand]'"""
        self.consume("SELECT")
        left = self._parse_operand()

        if self.current() in (None, "|"):
            return SelectStep(left)

        operator = self.consume()
        if operator not in ARITHMETIC_OPERATORS:
            raise ParseError(f"Invalid operator: {operator}")

        right = self._parse_operand()
        return SelectStep(left, operator, right)

    def _parse_where(self) -> WhereStep:
        """Parse 'where operand cmp operand'"""
        self.consume("WHERE")
        left = self._parse_operand()

        operator = self.consume()
        if operator not in COMPARISON_OPERATORS:
            raise ParseError(f"Invalid comparison: {operator}")

        right = self._parse_operand()
        return WhereStep(left, operator, right)

    def _parse_take(self) -> TakeStep:
        """Parse 'take n'"""
        self.consume("TAKE")
        count_str = self.consume()
        if count_str == "-":
            count_str += self.consume()

        try:
            count = int(count_str)
        except ValueError:
            raise ParseError(f"TAKE must be an integer, got '{count_str}'")

        if count < 0:
            raise ParseError(f"TAKE must be non-negative, got {count}")
        return TakeStep(count)

    def _parse_order_by(self) -> OrderByStep:
        """Parse 'order by [asc|desc]'"""
        self.consume("ORDER")
        self.consume("BY")

        direction = "ASC"
        if self.current() and self.current().upper() in ("ASC", "DESC"):
            direction = self.consume().upper()

        return OrderByStep(direction)

    def _parse_operand(self) -> Operand:
        """
        Parse an operand

        Examples:
            'x' -> 'x'
            '3' -> 3 (int)
            '- 2.5' -> -2.5 (float)
        """
        token = self.consume()

        if token.lower() == "x":
            return "x"

        sign = 1
        if token == "-":
            sign = -1
            token = self.consume()

        try:
            if "." not in token:
                return sign * int(token)
            return sign * float(token)
        except ValueError:
            raise ParseError(f"Expected 'x' or a number, got '{token}'")


def parse(text: str) -> PipelineStatement:
    """
    Parse pipeline text into an AST

    Args:
        text: Pipeline text

    Returns:
        PipelineStatement AST

    Raises:
        ParseError: If the text is invalid

    Example:
        >>> parse("select x + 1 | take 2")
        select x + 1 | take 2
    """
    parser = PipelineParser(text)
    return parser.parse()
