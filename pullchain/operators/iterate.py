"""
Iterate operator - reads values from a finite Python iterable

This is the source of a chain (it has no upstream). The Composer attaches
a fresh Iterate for every materialization.
"""

import itertools
from typing import Any, Iterable

from pullchain.operators.base import END, Operator


class Iterate(Operator):
    """
    Iterate operator - wrapper around an iterable

    Holds a cursor into the iterable and advances it on every pull. The
    restart flag is ignored: the cursor never rewinds, and once the end is
    reached the operator returns END for good.
    """

    def __init__(self, values: Iterable[Any]):
        """
        Initialize iterate operator

        Args:
            values: Finite iterable to read from
        """
        super().__init__(upstream=None)  # Iterate has no upstream
        self._cursor = iter(values)

    def pull(self, restart: bool) -> Any:
        return next(self._cursor, END)

    def set_upstream(self, upstream) -> None:
        raise ValueError("Iterate is a source and cannot have an upstream")

    def get_upstream(self) -> None:
        return None

    def clone(self) -> "Iterate":
        # Split the cursor so both copies continue from the same position
        copied = Iterate(())
        self._cursor, copied._cursor = itertools.tee(self._cursor)
        return copied

    def __repr__(self) -> str:
        return "Iterate()"
