"""
Counters for oracle query accounting.
"""

from typing import Callable, TypeVar

R = TypeVar("R")


class QueryCounter:
    """
    Tracks the number of oracle calls made by an attack.
    """

    def __init__(self):
        self._count = 0

    def increment(self, amount: int = 1) -> None:
        """Add queries to the counter."""
        self._count += amount

    def reset(self) -> None:
        """Reset counter to zero."""
        self._count = 0

    @property
    def count(self) -> int:
        """Get current query count."""
        return self._count

    def wrap(self, oracle: Callable[[bytes], R]) -> Callable[[bytes], R]:
        """
        Return a callable that behaves like oracle and counts each call.
        """
        def counted(data: bytes) -> R:
            self.increment()
            return oracle(data)

        return counted

    def __repr__(self) -> str:
        return f"QueryCounter(count={self._count})"
