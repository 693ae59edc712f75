"""
Select operator - applies a transform to every value

The counterpart of a map: one value in, one value out.
"""

from typing import Any, Callable

from pullchain.operators.base import END, Operator, callable_name


class Select(Operator):
    """
    Select operator - transforms each pulled value

    Pulls one value from upstream with the caller's restart flag and
    yields transform(value). Has no memory between calls.
    """

    def __init__(self, transform: Callable[[Any], Any]):
        """
        Initialize select operator

        Args:
            transform: Function applied to every value
        """
        super().__init__()
        self.transform = transform

    def pull(self, restart: bool) -> Any:
        value = self.upstream.pull(restart)
        if value is END:
            return END
        return self.transform(value)

    def _copy_node(self) -> "Select":
        return Select(self.transform)

    def __repr__(self) -> str:
        return f"Select({callable_name(self.transform)})"
