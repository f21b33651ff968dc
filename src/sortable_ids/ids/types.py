from dataclasses import dataclass

TIMESTAMP_BITS = 48
RANDOM_BITS = 80
VALUE_BITS = TIMESTAMP_BITS + RANDOM_BITS

TIMESTAMP_MASK = (1 << TIMESTAMP_BITS) - 1
RANDOM_MASK = (1 << RANDOM_BITS) - 1
VALUE_MASK = (1 << VALUE_BITS) - 1

MAX_SEED = (1 << 64) - 1
MAX_TIMESTAMP_INPUT = (1 << 64) - 1


@dataclass
class MonotonicState:
    """Timestamp and payload of the most recently minted identifier.

    Both fields start at zero, meaning nothing has been generated yet.
    """

    last_timestamp: int = 0
    last_random: int = 0

    def update(self, timestamp: int, payload: int) -> None:
        self.last_timestamp, self.last_random = timestamp, payload
