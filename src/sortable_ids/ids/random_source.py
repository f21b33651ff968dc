import random

from .types import MAX_SEED


class RandomSource:
    """
    Seeded source of fixed-width unsigned integers.

    Not suitable for secrets: identical seeds replay identical draws, which is
    what deterministic tests rely on.
    """

    def __init__(self, seed: int):
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise TypeError(f"seed must be an int, got {type(seed).__name__}")
        if seed < 0 or seed > MAX_SEED:
            raise ValueError("seed must fit in 64 unsigned bits")
        self.seed = seed
        self._rng = random.Random(seed)

    def next_u64(self) -> int:
        return self._rng.getrandbits(64)

    def next_u16(self) -> int:
        return self._rng.getrandbits(16)

    def random80(self) -> int:
        hi = self.next_u64()
        lo = self.next_u16()
        return (hi << 16) | lo
