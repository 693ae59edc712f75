"""
Pipeline Builder - builds Composers from parsed pipeline text

Takes a parsed PipelineStatement and appends one operator per step, in
source-to-sink order. Every generated callable carries a readable
__name__ so Composer.explain() shows what each step does.
"""

import operator
from typing import Any, Callable, Optional

from pullchain.core.composer import Composer
from pullchain.dsl.ast_nodes import (
    Operand,
    OrderByStep,
    PipelineStatement,
    SelectStep,
    TakeStep,
    WhereStep,
)
from pullchain.dsl.parser import parse

Tracer = Callable[[str], None]

_ARITHMETIC = {
    "+": operator.add,
    "-": operator.sub,
    "*": operator.mul,
    "/": operator.truediv,
    "//": operator.floordiv,
    "%": operator.mod,
    "**": operator.pow,
}

_COMPARISON = {
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
    "==": operator.eq,
    "!=": operator.ne,
}


class PipelineBuilder:
    """
    Pipeline builder - turns an AST into a Composer

    Operator chain is built in step order:
        select x + 1 | where x > 5 | take 5

    gives
        Take(5)
          ↓
        Where(x > 5)
          ↓
        Select(x + 1)
    """

    def __init__(self, tracer: Optional[Tracer] = None):
        """
        Initialize builder

        Args:
            tracer: Optional callback receiving one narration message per
                transform, predicate check and comparison
        """
        self.tracer = tracer

    def build(self, statement: PipelineStatement) -> Composer:
        """
        Build a Composer from a parsed pipeline

        Args:
            statement: Parsed pipeline

        Returns:
            Composer with one operator per step
        """
        composer = Composer()

        for step in statement.steps:
            if isinstance(step, SelectStep):
                composer.select(self._make_transform(step))
            elif isinstance(step, WhereStep):
                composer.where(self._make_predicate(step))
            elif isinstance(step, TakeStep):
                composer.take(step.count)
            elif isinstance(step, OrderByStep):
                composer.order_by(self._make_comparer(step))
            else:
                raise ValueError(f"Unsupported step: {step!r}")

        return composer

    def _make_transform(self, step: SelectStep) -> Callable[[Any], Any]:
        """Create the transform function for a select step"""
        tracer = self.tracer
        label = repr(step)[len("select "):]

        if not step.operator:

            def transform(x):
                value = _resolve(step.left, x)
                if tracer:
                    tracer(f"forwarding {value}")
                return value

        else:
            apply = _ARITHMETIC[step.operator]

            def transform(x):
                left, right = _resolve(step.left, x), _resolve(step.right, x)
                if tracer:
                    tracer(_describe_arithmetic(step, left, right))
                return apply(left, right)

        transform.__name__ = label
        return transform

    def _make_predicate(self, step: WhereStep) -> Callable[[Any], bool]:
        """Create the predicate for a where step"""
        tracer = self.tracer
        check = _COMPARISON[step.operator]

        def predicate(x):
            passed = bool(check(_resolve(step.left, x), _resolve(step.right, x)))
            if tracer:
                tracer(f"{'' if passed else 'not '}passing {x}")
            return passed

        predicate.__name__ = repr(step)[len("where "):]
        return predicate

    def _make_comparer(self, step: OrderByStep) -> Callable[[Any, Any], bool]:
        """Create the 'less than' comparer for an order by step"""
        tracer = self.tracer
        before = operator.gt if step.direction == "DESC" else operator.lt

        def comparer(a, b):
            if tracer:
                tracer(f"comparing {a} with {b}")
            return before(a, b)

        comparer.__name__ = step.direction.lower()
        return comparer


def _resolve(operand: Operand, x: Any) -> Any:
    """Substitute the current value for 'x'"""
    if operand == "x":
        return x
    return operand


def _describe_arithmetic(step: SelectStep, left: Any, right: Any) -> str:
    """
    Narrate one arithmetic step in words

    Examples:
        x + 1 with x = 3   -> "adding 1 to 3"
        x * x with x = 4   -> "squaring 4"
        x - 10 with x = 16 -> "subtracting 10 from 16"
    """
    op = step.operator
    literal_first = step.left != "x" and step.right == "x"

    if op == "+":
        if literal_first:
            return f"adding {left} to {right}"
        return f"adding {right} to {left}"
    if op == "-":
        return f"subtracting {right} from {left}"
    if op == "*":
        if step.left == "x" and step.right == "x":
            return f"squaring {left}"
        if literal_first:
            return f"multiplying {right} by {left}"
        return f"multiplying {left} by {right}"
    if op == "/":
        return f"dividing {left} by {right}"
    if op == "//":
        return f"floor dividing {left} by {right}"
    if op == "%":
        return f"taking {left} modulo {right}"
    return f"raising {left} to the power {right}"


def build_pipeline(text: str, tracer: Optional[Tracer] = None) -> Composer:
    """
    Parse pipeline text and build a Composer from it

    Args:
        text: Pipeline text, e.g. "select x * 2 | where x > 3 | take 2"
        tracer: Optional narration callback

    Returns:
        Composer ready to materialize

    Raises:
        ParseError: If the text is invalid

    Example:
        >>> build_pipeline("select x * 2 | where x > 3 | take 2")([1, 2, 3, 4])
        [4, 6]
    """
    return PipelineBuilder(tracer).build(parse(text))
