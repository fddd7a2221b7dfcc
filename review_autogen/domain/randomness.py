"""
Random Source - Injectable Randomness
======================================

ARCHITECTURAL DECISION:
- Every random draw in the scheduler goes through a RandomSource
- Subclasses supply only uniform() and randint(); choice, weighted
  choice and shuffle are built on top of them
- Tests inject a seeded or scripted source for deterministic output

USAGE:
    rng = SystemRandomSource(seed=42)
    rating = rng.weighted_choice([3, 4, 4, 5, 5, 5])
"""

import random
from abc import ABC, abstractmethod
from typing import List, Optional, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(ABC):
    """
    Abstract base class for random draws.
    Implement uniform() and randint() to add a new source.
    """

    @abstractmethod
    def uniform(self) -> float:
        """Uniform real in [0.0, 1.0)."""
        ...

    @abstractmethod
    def randint(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        ...

    def choice(self, seq: Sequence[T]) -> T:
        """Uniform draw from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[self.randint(0, len(seq) - 1)]

    def weighted_choice(self, bag: Sequence[T]) -> T:
        """
        Draw from a weighted bag.

        The bag repeats each outcome in proportion to its weight, so
        [3, 4, 4, 5, 5, 5] gives P(3)=1/6, P(4)=2/6, P(5)=3/6.
        """
        return self.choice(bag)

    def shuffle(self, seq: Sequence[T]) -> List[T]:
        """
        Fisher-Yates shuffle. Returns a new list; the input is untouched.

        Walks i from len-1 down to 1 and swaps with a partner drawn
        uniformly from [0, i].
        """
        items = list(seq)
        for i in range(len(items) - 1, 0, -1):
            j = self.randint(0, i)
            items[i], items[j] = items[j], items[i]
        return items


class SystemRandomSource(RandomSource):
    """RandomSource backed by a private random.Random instance."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def uniform(self) -> float:
        return self._random.random()

    def randint(self, low: int, high: int) -> int:
        return self._random.randint(low, high)
