"""Monotonic, lexicographically sortable identifiers (ULID-style)."""

from .ids import ALPHABET, ENCODED_LENGTH, Generator, GeneratorConfig, encode


__all__ = ["ALPHABET", "ENCODED_LENGTH", "Generator", "GeneratorConfig", "encode"]
