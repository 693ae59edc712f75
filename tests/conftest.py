"""
Pytest configuration and shared fixtures
"""

import pytest

from pullchain.operators.base import END, Operator


class MockSource(Operator):
    """
    Mock source for testing operators in isolation

    Unlike Iterate it rewinds on restart, and it records the restart flag
    of every pull it receives.
    """

    def __init__(self, data):
        super().__init__()
        self.data = list(data)
        self.position = 0
        self.calls = []

    def pull(self, restart):
        self.calls.append(restart)
        if restart:
            self.position = 0
        if self.position >= len(self.data):
            return END
        value = self.data[self.position]
        self.position += 1
        return value

    def _copy_node(self):
        copied = MockSource(self.data)
        copied.position = self.position
        return copied


def drain(operator):
    """Run one full pass over an operator and collect its values"""
    values = []
    restart = True
    while True:
        value = operator.pull(restart)
        if value is END:
            return values
        values.append(value)
        restart = False


@pytest.fixture
def numbers():
    """The reference input sequence"""
    return [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]


@pytest.fixture
def events():
    """List that callbacks append to, for observing evaluation order"""
    return []
