"""
Where operator - keeps only values that satisfy a predicate
"""

from typing import Any, Callable

from pullchain.operators.base import END, Operator, callable_name


class Where(Operator):
    """
    Where operator - filters pulled values

    Pulls from upstream until a value satisfies the predicate or the
    upstream is exhausted. Only the first inner pull of a call carries the
    caller's restart flag; candidates skipped after it are pulled with
    restart=False, so a pass is restarted at most once per call.
    """

    def __init__(self, predicate: Callable[[Any], bool]):
        """
        Initialize where operator

        Args:
            predicate: Function returning True for values to keep
        """
        super().__init__()
        self.predicate = predicate

    def pull(self, restart: bool) -> Any:
        need_restart = restart
        while True:
            value = self.upstream.pull(need_restart)
            need_restart = False
            if value is END or self.predicate(value):
                return value

    def _copy_node(self) -> "Where":
        return Where(self.predicate)

    def __repr__(self) -> str:
        return f"Where({callable_name(self.predicate)})"
