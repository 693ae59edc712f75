"""
OrderBy Operator

Sorts the values of a pass with a "less than" comparer or a sort key.
"""

from collections import deque
from typing import Any, Callable, Deque, Optional

from pullchain.operators.base import END, Operator, callable_name


class OrderBy(Operator):
    """
    ORDER BY operator

    Drains its upstream completely on the first pull of a pass, sorts the
    buffered values, then hands them out one per pull.

    Note: This operator buffers the whole pass in memory (not lazy). Every
    upstream side effect of a pass happens before the first sorted value
    is returned. Python's sort is stable, so equal values keep their
    upstream order.
    """

    def __init__(
        self,
        comparer: Optional[Callable[[Any, Any], bool]] = None,
        *,
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ):
        """
        Initialize OrderBy operator

        Args:
            comparer: Two-argument function returning True when the first
                value must come before the second
            key: Sort key function (alternative to comparer)
            reverse: Reverse the resulting order

        Raises:
            ValueError: If both comparer and key are given
        """
        super().__init__()
        if comparer is not None and key is not None:
            raise ValueError("OrderBy accepts either a comparer or a key, not both")
        self.comparer = comparer
        self.key = key
        self.reverse = reverse
        self.drained = False
        self.buffer: Deque[Any] = deque()

    def pull(self, restart: bool) -> Any:
        if restart:
            self.drained = False
            self.buffer.clear()

        if not self.drained:
            need_restart = restart
            while True:
                value = self.upstream.pull(need_restart)
                need_restart = False
                if value is END:
                    break
                self.buffer.append(value)
            self.buffer = deque(sorted(self.buffer, key=self._sort_key, reverse=self.reverse))
            self.drained = True

        if not self.buffer:
            return END
        return self.buffer.popleft()

    def _sort_key(self, value: Any) -> Any:
        """
        Generate sort key for a value

        Args:
            value: Buffered value

        Returns:
            A comparer wrapper, the key function's result, or the value itself
        """
        if self.comparer is not None:
            return ComparerKey(value, self.comparer)
        if self.key is not None:
            return self.key(value)
        return value

    def _copy_node(self) -> "OrderBy":
        copied = OrderBy(self.comparer, key=self.key, reverse=self.reverse)
        copied.drained = self.drained
        copied.buffer = deque(self.buffer)
        return copied

    def __repr__(self) -> str:
        if self.comparer is not None:
            ordering = callable_name(self.comparer)
        elif self.key is not None:
            ordering = f"key={callable_name(self.key)}"
        else:
            ordering = "natural"
        if self.reverse:
            ordering += ", reverse"
        return f"OrderBy({ordering})"


class ComparerKey:
    """
    Wrapper class that orders values with a "less than" comparer

    sorted() only ever asks whether one key is less than another, so each
    comparison calls the comparer exactly once.
    """

    __slots__ = ("value", "comparer")

    def __init__(self, value, comparer):
        self.value = value
        self.comparer = comparer

    def __lt__(self, other):
        return bool(self.comparer(self.value, other.value))

    def __repr__(self):
        return f"ComparerKey({self.value!r})"
