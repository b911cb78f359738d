import random
import time
from typing import Callable, Optional, Sequence

from remi.config import GENERATED_MATCH_NAMES

Clock = Callable[[], int]


def system_clock() -> int:
    """Current time as epoch milliseconds."""
    return int(time.time() * 1000)


class RandomIdGenerator:
    """
    Random 63-bit match ids.

    Pass a seeded random.Random for reproducible ids.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self._rng = rng or random.Random()

    def __call__(self) -> int:
        return self._rng.getrandbits(63)


class CounterIdGenerator:

    def __init__(self, start: int = 1):
        self._next = start

    def __call__(self) -> int:
        value = self._next
        self._next += 1
        return value


class RandomNameGenerator:

    def __init__(self, rng: Optional[random.Random] = None, names: Sequence[str] = GENERATED_MATCH_NAMES):
        if not names:
            raise ValueError("names must not be empty")

        self._rng = rng or random.Random()
        self._names = tuple(names)

    def __call__(self) -> str:
        return self._rng.choice(self._names)
