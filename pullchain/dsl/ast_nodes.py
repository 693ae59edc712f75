"""
AST (Abstract Syntax Tree) node definitions for pipeline text

These dataclasses represent the parsed steps of a pipeline such as:

    select x + 1 | where x > 5 | take 5 | order by desc
"""

from dataclasses import dataclass, field
from typing import List, Union

Operand = Union[str, int, float]  # 'x' or a numeric literal


@dataclass
class SelectStep:
    """select <left> <operator> <right>, or select x"""

    left: Operand
    operator: str = ""  # '+', '-', '*', '/', '//', '%', '**' or '' for identity
    right: Operand = ""

    def __repr__(self) -> str:
        if not self.operator:
            return f"select {self.left}"
        return f"select {self.left} {self.operator} {self.right}"


@dataclass
class WhereStep:
    """where <left> <comparison> <right>"""

    left: Operand
    operator: str  # '>', '<', '>=', '<=', '==', '!='
    right: Operand

    def __repr__(self) -> str:
        return f"where {self.left} {self.operator} {self.right}"


@dataclass
class TakeStep:
    """take <n>"""

    count: int

    def __repr__(self) -> str:
        return f"take {self.count}"


@dataclass
class OrderByStep:
    """order by [asc|desc]"""

    direction: str = "ASC"  # 'ASC' or 'DESC'

    def __repr__(self) -> str:
        return f"order by {self.direction.lower()}"


Step = Union[SelectStep, WhereStep, TakeStep, OrderByStep]


@dataclass
class PipelineStatement:
    """A whole pipeline: steps in source-to-sink order"""

    steps: List[Step] = field(default_factory=list)

    def __repr__(self) -> str:
        return " | ".join(repr(step) for step in self.steps)
