"""Small integer helpers used when sizing bit-level structures."""

_UINT32_MASK = 0xFFFFFFFF


def log2_ceil(x: int) -> int:
    """Return the number of bits needed to index ``x`` distinct items.

    Values follow 32-bit unsigned arithmetic, so ``log2_ceil(0)`` is 32.
    """
    if not 0 <= x <= _UINT32_MASK:
        raise ValueError(f"value out of 32-bit unsigned range: {x}")
    return ((x - 1) & _UINT32_MASK).bit_length()