"""
Take operator - yields at most N values per pass, then stops
"""

from typing import Any

from pullchain.operators.base import END, Operator


class Take(Operator):
    """
    Take operator - restricts the number of values in a pass

    Keeps a budget that is refilled to capacity on every restart. Once the
    budget is spent, or the upstream runs dry, the operator returns END
    without pulling upstream again until the next restart (early
    termination).
    """

    def __init__(self, capacity: int):
        """
        Initialize take operator

        Args:
            capacity: Maximum number of values to yield per pass

        Raises:
            TypeError: If capacity is not an integer
            ValueError: If capacity is negative
        """
        super().__init__()
        if isinstance(capacity, bool) or not isinstance(capacity, int):
            raise TypeError(f"Take capacity must be an integer, got {capacity!r}")
        if capacity < 0:
            raise ValueError(f"Take capacity must be non-negative, got {capacity}")
        self.capacity = capacity
        self.remaining = capacity

    def pull(self, restart: bool) -> Any:
        if restart:
            self.remaining = self.capacity
        if not self.remaining:
            return END

        self.remaining -= 1
        value = self.upstream.pull(restart)
        if value is END:
            # Upstream ran dry: close for the rest of this pass
            self.remaining = 0
        return value

    def _copy_node(self) -> "Take":
        copied = Take(self.capacity)
        copied.remaining = self.remaining
        return copied

    def __repr__(self) -> str:
        return f"Take({self.capacity})"
