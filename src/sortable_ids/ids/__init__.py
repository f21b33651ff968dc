from .config import GeneratorConfig
from .encoding import ALPHABET, ENCODED_LENGTH, encode
from .generator import Generator
from .random_source import RandomSource
from .types import MonotonicState


__all__ = [
    "ALPHABET",
    "ENCODED_LENGTH",
    "Generator",
    "GeneratorConfig",
    "MonotonicState",
    "RandomSource",
    "encode",
]
