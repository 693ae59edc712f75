"""
Base operator class for restartable pull-based pipelines

Each operator pulls one value at a time from its upstream operator.
A pass over the data starts with pull(restart=True) and continues with
pull(restart=False) until END is returned.
"""

from typing import Any, Optional


class _End:
    """Marker returned by pull() when the current pass is exhausted"""

    __slots__ = ()

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "END"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo):
        return self

    def __reduce__(self):
        return "END"


END = _End()


class Operator:
    """
    Base class for all pipeline operators

    Operators form a singly linked chain where:
    - The source adapter (Iterate) sits at the far end and has no upstream
    - Internal operators (Select, Where, Take, OrderBy) transform values
    - The sink-most operator is pulled by the Composer to get results

    The pull-based execution model means:
    - Nothing runs until a Composer materializes the chain
    - Values flow through the chain one pull at a time
    - Stateful operators reset their state when restart is True
    """

    def __init__(self, upstream: Optional["Operator"] = None):
        """
        Initialize operator

        Args:
            upstream: Operator to pull values from (None until attached)
        """
        self.upstream = upstream

    def pull(self, restart: bool) -> Any:
        """
        Produce the next value of the current pass

        Args:
            restart: True to begin a fresh pass, False to continue the pass
                started by the most recent restart

        Returns:
            The next value, or END when the pass is exhausted
        """
        raise NotImplementedError(f"{self.__class__.__name__} must implement pull()")

    def set_upstream(self, upstream: Optional["Operator"]) -> None:
        """Attach this operator to the operator it pulls from"""
        self.upstream = upstream

    def get_upstream(self) -> Optional["Operator"]:
        """Return the operator this one pulls from"""
        return self.upstream

    def clone(self) -> "Operator":
        """
        Copy this operator together with its entire upstream chain

        The copy shares no mutable state with the original. Callables
        (transforms, predicates, comparers) are shared since they are
        treated as pure.
        """
        copied = self._copy_node()
        if self.upstream is not None:
            copied.upstream = self.upstream.clone()
        return copied

    def _copy_node(self) -> "Operator":
        """Copy this node's own state, leaving the upstream link unset"""
        raise NotImplementedError(f"{self.__class__.__name__} must implement _copy_node()")

    def describe(self) -> str:
        """One-line description used in execution plans"""
        return repr(self)

    def __repr__(self) -> str:
        """String representation for debugging"""
        return f"{self.__class__.__name__}()"


def callable_name(fn: Any) -> str:
    """Readable name of a transform, predicate or comparer"""
    name = getattr(fn, "__name__", None)
    if name is None:
        return repr(fn)
    return name
