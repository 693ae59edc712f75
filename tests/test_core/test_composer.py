"""
Tests for Composer (chain building, materialization, copies)
"""

import copy

import pytest

from pullchain.core.composer import Composer, compose
from pullchain.operators.base import END
from pullchain.operators.iterate import Iterate
from pullchain.operators.orderby import OrderBy
from pullchain.operators.select import Select
from pullchain.operators.take import Take
from pullchain.operators.where import Where


def add_one(x):
    return x + 1


def square(x):
    return x * x


def subtract_ten(x):
    return x - 10


def greater_than_five(x):
    return x > 5


def descending(a, b):
    return a > b


def ascending(a, b):
    return a < b


@pytest.fixture
def reference_pipeline():
    """The reference chain: +1, square, -10, >5, take 5, desc, take 2, asc"""
    return (
        Composer()
        .select(add_one)
        .select(square)
        .select(subtract_ten)
        .where(greater_than_five)
        .take(5)
        .order_by(descending)
        .take(2)
        .order_by(ascending)
    )


class TestReferenceScenario:
    """Test the end-to-end reference pipeline"""

    def test_fluent(self, reference_pipeline, numbers):
        """Test the fluent builder"""
        assert reference_pipeline.materialize(numbers) == [39, 54]

    def test_constructor(self, numbers):
        """Test building the same chain from a fixed operator list"""
        pipeline = compose(
            Select(add_one),
            Select(square),
            Select(subtract_ten),
            Where(greater_than_five),
            Take(5),
            OrderBy(descending),
            Take(2),
            OrderBy(ascending),
        )

        assert pipeline(numbers) == [39, 54]

    def test_intermediate_stages(self, numbers):
        """Test the documented intermediate results"""
        mapped = Composer().select(add_one).select(square).select(subtract_ten)
        assert mapped(numbers) == [-6, -1, 6, 15, 26, 39, 54, 71, 90, 111]

        filtered = mapped.clone().where(greater_than_five)
        assert filtered(numbers) == [6, 15, 26, 39, 54, 71, 90, 111]

        limited = filtered.clone().take(5)
        assert limited(numbers) == [6, 15, 26, 39, 54]

        ordered = limited.clone().order_by(descending)
        assert ordered(numbers) == [54, 39, 26, 15, 6]

        assert ordered.clone().take(2)(numbers) == [54, 39]


class TestComposerBuilding:
    """Test chain construction"""

    def test_empty_composer(self):
        """Test that an empty composer passes values through"""
        pipeline = Composer()

        assert len(pipeline) == 0
        assert not pipeline
        assert pipeline.materialize((1, 2, 3)) == [1, 2, 3]

    def test_head_and_tail(self):
        """Test that the last appended operator is the head"""
        pipeline = Composer().select(add_one).take(3)

        assert isinstance(pipeline.head, Take)
        assert isinstance(pipeline.tail, Select)
        assert pipeline.head.get_upstream() is pipeline.tail
        assert pipeline.tail.get_upstream() is None

    def test_operators_in_append_order(self):
        """Test operators() listing"""
        pipeline = Composer(Select(add_one), Where(greater_than_five), Take(1))

        assert [type(op) for op in pipeline.operators()] == [Select, Where, Take]
        assert len(pipeline) == 3

    def test_append_clones_argument(self):
        """Test that append never stores the caller's object"""
        take = Take(2)
        pipeline = Composer().append(take).append(take)

        first, second = pipeline.operators()
        assert first is not take
        assert second is not take
        assert first is not second
        assert pipeline([1, 2, 3]) == [1, 2]

    def test_append_rejects_empty_composer(self):
        """Test that an empty composer has nothing to append"""
        with pytest.raises(ValueError, match="empty Composer"):
            Composer().append(Composer())

    def test_append_rejects_iterate(self):
        """Test that sources are attached only by materialize"""
        with pytest.raises(ValueError, match="cannot be appended"):
            Composer().append(Iterate([1]))

    def test_clear(self):
        """Test releasing the chain"""
        pipeline = Composer().select(add_one).take(1)

        pipeline.clear()

        assert pipeline.head is None
        assert pipeline.tail is None
        assert pipeline([5, 6]) == [5, 6]

    def test_repr(self):
        """Test string representation"""
        pipeline = Composer().select(add_one).take(2)

        assert repr(pipeline) == "Composer(Select(add_one) -> Take(2))"


class TestMaterialize:
    """Test materialize and its aliases"""

    def test_aliases(self, reference_pipeline, numbers):
        """Test to_list and calling the composer"""
        assert reference_pipeline.to_list(numbers) == [39, 54]
        assert reference_pipeline(numbers) == [39, 54]

    def test_any_iterable(self):
        """Test generators, tuples and ranges as input"""
        pipeline = Composer().select(square)

        assert pipeline(x for x in range(4)) == [0, 1, 4, 9]
        assert pipeline((2, 3)) == [4, 9]
        assert pipeline(range(2)) == [0, 1]

    def test_none_values(self):
        """Test that None values are collected"""
        pipeline = Composer().select(lambda x: None if x % 2 else x)

        assert pipeline([1, 2, 3]) == [None, 2, None]

    def test_reuse_with_different_inputs(self):
        """Test that no state leaks between runs"""
        pipeline = Composer().take(2).order_by(descending)

        assert pipeline([5, 1, 3]) == [5, 1]
        assert pipeline([2, 9, 7]) == [9, 2]
        assert pipeline([]) == []
        assert pipeline([4]) == [4]

    def test_detaches_source(self):
        """Test that the tail has no upstream after a run"""
        pipeline = Composer().select(add_one)

        pipeline([1, 2])

        assert pipeline.get_upstream() is None
        assert pipeline.tail.get_upstream() is None

    def test_detaches_source_on_error(self):
        """Test that a failing callback still detaches the source"""
        pipeline = Composer().select(lambda x: 1 // x)

        with pytest.raises(ZeroDivisionError):
            pipeline([1, 0, 2])

        assert pipeline.get_upstream() is None
        assert pipeline([1, 2]) == [1, 0]

    def test_take_stops_upstream_work(self, events):
        """Test that nothing after the budget is computed"""

        def record(x):
            events.append(x)
            return x

        pipeline = Composer().select(record).take(2)

        assert pipeline(range(100)) == [0, 1]
        assert events == [0, 1]

    def test_take_zero(self, events):
        """Test that take(0) computes nothing"""
        pipeline = Composer().select(events.append).take(0)

        assert pipeline([1, 2, 3]) == []
        assert events == []

    def test_order_by_runs_upstream_first(self, events):
        """Test that all upstream effects happen before any sorted output"""

        def before(x):
            events.append(("in", x))
            return x

        def after(x):
            events.append(("out", x))
            return x

        pipeline = Composer().select(before).order_by().select(after)

        assert pipeline([3, 1, 2]) == [1, 2, 3]
        assert events == [
            ("in", 3),
            ("in", 1),
            ("in", 2),
            ("out", 1),
            ("out", 2),
            ("out", 3),
        ]

    def test_where_without_matches(self):
        """Test a filter that rejects everything"""
        pipeline = Composer().where(lambda x: False).order_by()

        assert pipeline(range(50)) == []

    @pytest.mark.parametrize("data", [[], [7], [3, 8, 1, 9, 4, 4, 0]])
    def test_operator_properties(self, data):
        """Test length and order properties of each operator"""
        assert Composer().select(add_one)(data) == [x + 1 for x in data]
        assert Composer().where(lambda x: x % 2 == 0)(data) == [x for x in data if x % 2 == 0]
        assert Composer().take(3)(data) == data[:3]
        assert Composer().order_by(descending)(data) == sorted(data, reverse=True)


class TestComposerCopies:
    """Test that copies share no mutable state"""

    def test_clone_is_independent(self):
        """Test extending a copy and the original differently"""
        base = Composer().select(add_one)
        other = copy.copy(base)

        base.take(1)
        other.where(lambda x: x % 2 == 0)

        assert base([1, 2, 3]) == [2]
        assert other([1, 2, 3]) == [2, 4]
        assert len(base) == 2
        assert len(other) == 2

    def test_clone_has_no_shared_nodes(self, reference_pipeline):
        """Test that no node object is shared"""
        copied = reference_pipeline.clone()

        originals = {id(op) for op in reference_pipeline.operators()}
        copies = {id(op) for op in copied.operators()}
        assert originals.isdisjoint(copies)

    def test_deepcopy(self, reference_pipeline, numbers):
        """Test copy.deepcopy"""
        copied = copy.deepcopy(reference_pipeline)

        assert isinstance(copied, Composer)
        assert copied(numbers) == [39, 54]

    def test_clone_mid_pass(self):
        """Test cloning a composer while it is attached and half-drained"""
        pipeline = Composer().take(3)
        pipeline.set_upstream(Iterate([1, 2, 3, 4]))
        assert pipeline.pull(True) == 1

        copied = pipeline.clone()

        assert pipeline.pull(False) == 2
        assert pipeline.pull(False) == 3
        assert pipeline.pull(False) is END
        assert copied.pull(False) == 2
        assert copied.pull(False) == 3
        assert copied.pull(False) is END

    def test_clone_empty(self):
        """Test cloning an empty composer"""
        copied = Composer().clone()

        assert len(copied) == 0
        assert copied([1]) == [1]


class TestNestedComposers:
    """Test composers used as operators"""

    def test_nested_equals_spliced(self):
        """Test that nesting gives the same result as splicing"""
        inner = Composer().where(lambda x: x > 2).take(2)
        nested = Composer().select(add_one).append(inner).order_by(descending)
        spliced = Composer().select(add_one).where(lambda x: x > 2).take(2).order_by(descending)

        data = [1, 2, 3, 4, 5, 6]
        assert nested(data) == spliced(data) == [4, 3]

    def test_nested_is_snapshot(self):
        """Test that later changes to the inner composer are not seen"""
        inner = Composer().select(square)
        outer = Composer().append(inner)

        inner.take(1)

        assert outer([1, 2, 3]) == [1, 4, 9]
        assert inner([1, 2, 3]) == [1]
        assert inner.get_upstream() is None

    def test_nested_first(self):
        """Test a nested composer as the first operator"""
        inner = Composer().select(add_one).select(square)
        outer = Composer().append(inner).take(2)

        assert outer([1, 2, 3]) == [4, 9]
        assert len(outer) == 2

    def test_self_append(self):
        """Test appending a composer into itself"""
        pipeline = Composer().select(lambda x: x * 2)

        pipeline.append(pipeline)
        assert len(pipeline) == 2
        assert pipeline([1, 2]) == [4, 8]

        pipeline.append(pipeline)
        assert pipeline([1]) == [16]

    def test_clone_nested(self):
        """Test cloning a chain that contains a composer"""
        inner = Composer().where(lambda x: x % 2 == 1).take(3)
        outer = Composer().select(add_one).append(inner).order_by(descending)

        copied = outer.clone()
        outer.take(1)

        assert copied(range(10)) == [5, 3, 1]
        assert outer(range(10)) == [5]

    def test_empty_composer_upstream(self):
        """Test that an empty composer cannot be attached"""
        with pytest.raises(ValueError, match="empty Composer"):
            Composer().set_upstream(Iterate([1]))


class TestExplain:
    """Test execution plan output"""

    def test_explain(self):
        """Test plan lines sink first"""
        plan = Composer().select(add_one).where(greater_than_five).take(5).explain()

        lines = plan.splitlines()
        assert lines[0] == "Pipeline Plan:"
        assert lines[2] == "Take(5)"
        assert lines[3] == "  Where(greater_than_five)"
        assert lines[4] == "    Select(add_one)"
        assert lines[5] == "      Iterate()"

    def test_explain_nested(self):
        """Test that nested composers are expanded"""
        inner = Composer().select(square).take(2)
        plan = Composer().select(add_one).append(inner).explain()

        lines = plan.splitlines()
        assert lines[2] == "Composer[2]"
        assert lines[3] == "  Take(2)"
        assert lines[4] == "    Select(square)"
        assert lines[5] == "      Select(add_one)"
        assert lines[6] == "        Iterate()"


class TestDataFrame:
    """Test pandas output"""

    def test_to_dataframe(self, numbers):
        """Test materializing into a DataFrame"""
        pytest.importorskip("pandas")

        pipeline = Composer().where(greater_than_five)
        df = pipeline.to_dataframe(numbers, column="n")

        assert list(df.columns) == ["n"]
        assert df["n"].tolist() == [6, 7, 8, 9, 10]
