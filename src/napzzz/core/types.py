"""Collaborator protocols shared across napzzz."""

from collections.abc import Sequence
from typing import Protocol, TypeVar, runtime_checkable

T = TypeVar("T")


@runtime_checkable
class RandomSource(Protocol):
    """The subset of :class:`random.Random` the simulation draws from.

    Pass ``random.Random(seed)`` for reproducible runs, or a scripted fake
    in tests.
    """

    def random(self) -> float: ...

    def uniform(self, a: float, b: float) -> float: ...

    def randint(self, a: int, b: int) -> int: ...

    def choice(self, seq: Sequence[T]) -> T: ...
