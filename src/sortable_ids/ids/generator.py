import logging
import time
from typing import TYPE_CHECKING

from .encoding import encode
from .random_source import RandomSource
from .types import (
    MAX_TIMESTAMP_INPUT,
    RANDOM_BITS,
    RANDOM_MASK,
    TIMESTAMP_MASK,
    MonotonicState,
)

if TYPE_CHECKING:
    from .config import GeneratorConfig

logger = logging.getLogger("sortable_ids.ids.generator")


class Generator:
    """
    Mints ULID-style identifiers that sort in generation order.

    Each identifier is a 48-bit millisecond timestamp followed by an 80-bit
    payload, encoded as 26 Crockford Base32 characters. When the timestamp
    does not advance past the previous one (same millisecond or the clock
    moved backwards) the previous payload is incremented instead of drawing
    fresh randomness, so ids keep sorting in the order they were minted.

    Payload exhaustion: after 2^80 - 1 the payload wraps to 0. The identifier
    minted after the wrap sorts *below* the one before it. No error is raised;
    callers that need strict ordering under that load must advance the
    timestamp themselves.

    Thread safety: a Generator holds mutable state and has no internal lock.
    Use one instance per thread, or guard a shared instance with a lock held
    around every call.
    """

    def __init__(self, seed: int):
        self.random_source = RandomSource(seed)
        self.state = MonotonicState()
        logger.debug(f"Generator initialized with seed {seed}")

    @classmethod
    def from_config(cls, config: "GeneratorConfig") -> "Generator":
        return cls(config.seed)

    def next(self, timestamp_ms: int) -> str:
        """Returns the identifier for ``timestamp_ms`` (milliseconds since the epoch)."""
        return encode(self._next_value(timestamp_ms))

    def next_now(self) -> str:
        """Returns an identifier stamped with the current wall-clock time."""
        return self.next(time.time_ns() // 1_000_000)

    def _next_value(self, timestamp_ms: int) -> int:
        if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, int):
            raise TypeError(
                f"timestamp_ms must be an int, got {type(timestamp_ms).__name__}"
            )
        if timestamp_ms < 0 or timestamp_ms > MAX_TIMESTAMP_INPUT:
            raise ValueError("timestamp_ms must fit in 64 unsigned bits")

        # Bits above 48 are dropped
        ts = timestamp_ms & TIMESTAMP_MASK

        if ts > self.state.last_timestamp:
            payload = self.random_source.random80()
        else:
            payload = self.state.last_random + 1
            if payload > RANDOM_MASK:
                logger.warning(
                    f"Random payload exhausted at timestamp {ts}; wrapping to 0, "
                    "ordering is not preserved for this identifier"
                )
                payload = 0

        self.state.update(ts, payload)
        return (ts << RANDOM_BITS) | payload
