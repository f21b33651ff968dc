from .types import VALUE_MASK

# Crockford's Base32 characters (excluding I, L, O, U to avoid confusion)
ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"

ENCODED_LENGTH = 26


def encode(value: int) -> str:
    """
    Encodes a 128-bit identifier value as 26 Crockford Base32 characters.

    26 groups of 5 bits cover 130 bits, so the top two bits are always zero
    and the first character is always in ``0-7``.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"value must be an int, got {type(value).__name__}")
    if value < 0 or value > VALUE_MASK:
        raise ValueError("value must fit in 128 unsigned bits")

    chars = [""] * ENCODED_LENGTH
    for i in range(ENCODED_LENGTH - 1, -1, -1):
        chars[i] = ALPHABET[value & 0x1F]
        value >>= 5
    return "".join(chars)
