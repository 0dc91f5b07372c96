"""Seeded Random for deterministic simulation.

Xorshift32 generator shared by spawning, combat rolls and reward generation.
The same seed always yields the same sequence, on any platform.

Usage:
    rng = SeededRandom("season1_seed")
    r = rng.random()           # float in [0.0, 1.0)
    i = rng.random_int(10)     # 0..9
    pick = rng.choice(items)
"""

from typing import Sequence, TypeVar, Union

T = TypeVar("T")

_MASK_32 = 0xFFFFFFFF
_TWO_32 = float(1 << 32)


class EmptyInputError(ValueError):
    """Raised when a selection is requested from an empty sequence."""


def hash_seed(text: str) -> int:
    """
    Hash a string seed into a non-zero 32-bit integer.

    Polynomial rolling hash (h * 31 + code unit) folded to signed 32 bits
    at every step. Code units are UTF-16, so non-BMP characters hash as
    surrogate pairs.

    Args:
        text: The seed string.

    Returns:
        A positive integer in [1, 2**31].
    """
    data = text.encode("utf-16-le")
    h = 0
    for i in range(0, len(data), 2):
        code_unit = data[i] | (data[i + 1] << 8)
        h = (h * 31 + code_unit) & _MASK_32
        if h >= 0x80000000:
            h -= 1 << 32
    return abs(h) or 1


class SeededRandom:
    """
    Deterministic xorshift32 pseudo-random number generator.

    Attributes:
        state: Current 32-bit generator state (never zero).
    """

    def __init__(self, seed: Union[str, int]):
        """
        Initialize the generator.

        Args:
            seed: String seeds are hashed, integer seeds are folded to 32 bits.
        """
        if isinstance(seed, str):
            state = hash_seed(seed)
        else:
            state = int(seed) & _MASK_32
        self.state = state or 1

    def next_u32(self) -> int:
        """Advance the generator and return the raw 32-bit state."""
        x = self.state
        x ^= (x << 13) & _MASK_32
        x ^= x >> 17
        x ^= (x << 5) & _MASK_32
        self.state = x
        return x

    def next(self) -> float:
        """Return a float in [0.0, 1.0)."""
        return self.next_u32() / _TWO_32

    def random(self) -> float:
        """Alias of next()."""
        return self.next()

    def random_int(self, max_value: int) -> int:
        """Random integer in [0, max_value)."""
        return int(self.next() * max_value)

    def random_int_range(self, min_value: int, max_value: int) -> int:
        """Random integer in [min_value, max_value], inclusive."""
        return min_value + int(self.next() * (max_value - min_value + 1))

    def random_float(self, min_value: float, max_value: float) -> float:
        """Random float in [min_value, max_value)."""
        return min_value + self.next() * (max_value - min_value)

    def chance(self, probability: float) -> bool:
        """Return True with the given probability (<= 0 never, >= 1 always)."""
        if probability <= 0:
            return False
        if probability >= 1:
            return True
        return self.next() < probability

    def choice(self, items: Sequence[T]) -> T:
        """
        Pick one element uniformly.

        Raises:
            EmptyInputError: If items is empty.
        """
        if len(items) == 0:
            raise EmptyInputError("cannot choose from an empty sequence")
        return items[self.random_int(len(items))]

    def shuffle(self, items: Sequence[T]) -> list[T]:
        """
        Fisher-Yates shuffle into a new list.

        The input sequence is left untouched.
        """
        result = list(items)
        for i in range(len(result) - 1, 0, -1):
            j = self.random_int(i + 1)
            result[i], result[j] = result[j], result[i]
        return result

    def weighted_choice(self, weights: Sequence[float]) -> int:
        """
        Pick an index with probability proportional to its weight.

        Cumulative subtraction; floating overrun falls back to the last index.

        Raises:
            EmptyInputError: If weights is empty.
        """
        if len(weights) == 0:
            raise EmptyInputError("cannot choose from empty weights")

        remainder = self.next() * sum(weights)
        for i, weight in enumerate(weights):
            remainder -= weight
            if remainder <= 0:
                return i
        return len(weights) - 1

    def fork(self, tag: str) -> "SeededRandom":
        """
        Derive an independent child generator.

        Consumes one draw from this generator, mixed with the tag hash, so
        sibling forks with different tags get unrelated streams.
        """
        return SeededRandom(self.next_u32() ^ hash_seed(tag))

    def __repr__(self) -> str:
        return f"SeededRandom(state={self.state})"
