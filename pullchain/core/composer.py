"""
Composer - builds and runs chains of operators

A Composer keeps a chain of operators linked from the sink (head, the
operator that is pulled) to the source end (tail, the operator that pulls
from the data). Operators are appended in source-to-sink order:

    Composer().select(add_one).where(is_positive).take(5)

    head -> Take(5)
              ↓
            Where(is_positive)
              ↓
    tail -> Select(add_one)
              ↓
            Iterate(values)   (attached only while materializing)

Nothing runs until materialize() (or to_list(), or calling the composer)
is given an iterable of input values.
"""

from typing import Any, Callable, Iterable, Iterator, List, Optional

from pullchain.operators.base import END, Operator
from pullchain.operators.iterate import Iterate
from pullchain.operators.orderby import OrderBy
from pullchain.operators.select import Select
from pullchain.operators.take import Take
from pullchain.operators.where import Where


class Composer(Operator):
    """
    Chain builder and executor

    A Composer is itself an Operator, so a built Composer can be appended
    into another chain (or into itself). append() always stores a clone of
    its argument, which means:
    - appending the same operator twice never links one node into a chain
      twice
    - appending a Composer stores a snapshot of it, never a live alias, so
      self-append cannot create a cycle

    Copying a Composer (clone(), copy.copy() or copy.deepcopy()) copies the
    whole chain; the two Composers share no counters or buffers.
    """

    def __init__(self, *operators: Operator):
        """
        Initialize composer

        Args:
            *operators: Operators to append, in source-to-sink order
        """
        self.head: Optional[Operator] = None
        self.tail: Optional[Operator] = None
        super().__init__()

        for operator in operators:
            self.append(operator)

    # ----- Operator protocol -----

    @property
    def upstream(self) -> Optional[Operator]:
        """The upstream of a Composer is the upstream of its tail"""
        if self.tail is None:
            return None
        return self.tail.get_upstream()

    @upstream.setter
    def upstream(self, upstream: Optional[Operator]) -> None:
        if self.tail is None:
            if upstream is not None:
                raise ValueError("Cannot attach an empty Composer to an upstream")
            return
        self.tail.set_upstream(upstream)

    def pull(self, restart: bool) -> Any:
        return self.head.pull(restart)

    def clone(self) -> "Composer":
        """
        Copy the whole chain

        The head is cloned recursively (which clones everything it pulls
        from), then the new tail is found at the same depth as the old one.
        """
        copied = Composer()
        if self.head is None:
            return copied

        depth = len(self) - 1
        copied.head = self.head.clone()
        node = copied.head
        for _ in range(depth):
            node = node.get_upstream()
        copied.tail = node
        return copied

    def __copy__(self) -> "Composer":
        return self.clone()

    def __deepcopy__(self, memo) -> "Composer":
        return self.clone()

    # ----- Building -----

    def append(self, operator: Operator) -> "Composer":
        """
        Append an operator at the sink end of the chain

        The operator is cloned first; later changes to the argument do not
        affect this chain.

        Args:
            operator: Operator (or built Composer) to append

        Returns:
            This composer, for chaining

        Raises:
            ValueError: If operator is an empty Composer or a source adapter
        """
        if isinstance(operator, Iterate):
            raise ValueError("Iterate is attached by materialize(), it cannot be appended")
        if isinstance(operator, Composer) and operator.head is None:
            raise ValueError("Cannot append an empty Composer")

        node = operator.clone()
        node.set_upstream(self.head)
        self.head = node
        if self.tail is None:
            self.tail = node
        return self

    def select(self, transform: Callable[[Any], Any]) -> "Composer":
        """Append a Select operator"""
        return self.append(Select(transform))

    def where(self, predicate: Callable[[Any], bool]) -> "Composer":
        """Append a Where operator"""
        return self.append(Where(predicate))

    def take(self, capacity: int) -> "Composer":
        """Append a Take operator"""
        return self.append(Take(capacity))

    def order_by(
        self,
        comparer: Optional[Callable[[Any, Any], bool]] = None,
        *,
        key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ) -> "Composer":
        """Append an OrderBy operator"""
        return self.append(OrderBy(comparer, key=key, reverse=reverse))

    def clear(self) -> None:
        """Release the whole chain"""
        self.head = None
        self.tail = None

    # ----- Execution -----

    def materialize(self, values: Iterable[Any]) -> List[Any]:
        """
        Run the chain over a finite iterable and collect the results

        A fresh Iterate over values is attached to the tail for the
        duration of the call and detached again afterwards, so the same
        Composer can be run over any number of inputs.

        Args:
            values: Finite iterable of input values

        Returns:
            List of output values in the order the chain produced them

        Example:
            >>> Composer().select(lambda x: x * 2).take(2).materialize([1, 2, 3])
            [2, 4]
        """
        if self.head is None:
            return list(values)

        base = self.tail.get_upstream()
        self.tail.set_upstream(Iterate(values))
        try:
            return self._drain()
        finally:
            self.tail.set_upstream(base)

    def _drain(self) -> List[Any]:
        """Pull the head until END, restarting on the first pull only"""
        results = []
        restart = True
        while True:
            value = self.head.pull(restart)
            if value is END:
                break
            results.append(value)
            restart = False
        return results

    def to_list(self, values: Iterable[Any]) -> List[Any]:
        """Alias of materialize()"""
        return self.materialize(values)

    def __call__(self, values: Iterable[Any]) -> List[Any]:
        return self.materialize(values)

    def to_dataframe(self, values: Iterable[Any], column: str = "value"):
        """
        Run the chain and return the results as a pandas DataFrame

        Args:
            values: Finite iterable of input values
            column: Name of the single result column

        Returns:
            pandas.DataFrame with one row per output value
        """
        try:
            import pandas as pd
        except ImportError as e:
            raise ImportError("Pandas is required for to_dataframe()") from e

        return pd.DataFrame({column: self.materialize(values)})

    # ----- Introspection -----

    def _nodes(self) -> Iterator[Operator]:
        """Yield the top-level nodes from head to tail"""
        node = self.head
        while node is not None:
            yield node
            if node is self.tail:
                return
            node = node.get_upstream()

    def operators(self) -> List[Operator]:
        """Top-level operators in source-to-sink (append) order"""
        return list(reversed(list(self._nodes())))

    def __len__(self) -> int:
        return sum(1 for _ in self._nodes())

    def explain(self) -> str:
        """
        Explain the chain (for debugging)

        Returns:
            Human-readable plan, sink first. Each operator pulls from the
            one printed below it.

        Example output:
            Pipeline Plan:
            ========================================
            Take(5)
              Where(is_positive)
                Select(add_one)
                  Iterate()
        """
        output = ["Pipeline Plan:", "=" * 40]
        lines, depth = self._format_plan(0)
        output.extend(lines)
        output.append("  " * depth + "Iterate()")
        return "\n".join(output)

    def _format_plan(self, depth: int):
        """
        Format the chain as indented lines

        Args:
            depth: Indentation level of the first node

        Returns:
            Tuple of (lines, indentation level after the last node)
        """
        lines = []
        for node in self._nodes():
            prefix = "  " * depth
            if isinstance(node, Composer):
                lines.append(f"{prefix}Composer[{len(node)}]")
                nested, depth = node._format_plan(depth + 1)
                lines.extend(nested)
            else:
                lines.append(f"{prefix}{node.describe()}")
                depth += 1
        return lines, depth

    def __repr__(self) -> str:
        steps = " -> ".join(repr(op) for op in self.operators())
        return f"Composer({steps})"


def compose(*operators: Operator) -> Composer:
    """
    Build a Composer from operators in source-to-sink order

    Example:
        >>> pipeline = compose(Select(lambda x: x + 1), Take(2))
        >>> pipeline([1, 2, 3])
        [2, 3]
    """
    return Composer(*operators)
