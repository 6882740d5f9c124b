"""Uniform random integers drawn from a cryptographically secure byte source.

A byte source is any callable taking a length and returning that many random
bytes, e.g. ``os.urandom`` or ``secrets.token_bytes``. Bytes are read
little-endian and are never interpreted as signed.
"""

from typing import Callable

from primetools.error import InvalidArgument

__all__ = ['random_bits', 'random_range']

ByteSource = Callable[[int], bytes]


def _draw(nbytes: int, rng: ByteSource) -> int:
    data = rng(nbytes)
    if len(data) != nbytes:
        raise InvalidArgument(f"Byte source returned {len(data)} bytes, {nbytes} requested")
    return int.from_bytes(data, 'little')


def random_bits(bits: int, rng: ByteSource) -> int:
    """Random non-negative integer with a bit length of exactly `bits`.

    The top bit is forced so candidates have a known size. For bits == 1 the result
    is 0 or 1 with equal probability.
    """
    if bits <= 0:
        raise InvalidArgument(f"Number of required bits must be greater than zero, got {bits}")

    value = _draw((bits + 7) // 8, rng)
    value &= (1 << bits) - 1
    if bits > 1:
        value |= 1 << (bits - 1)
    return value


def random_range(min_value: int, max_value: int, rng: ByteSource) -> int:
    """Uniform random integer in [min_value, max_value) by rejection sampling"""
    if min_value > max_value:
        raise InvalidArgument(f"min_value must be less or equal to max_value, got {min_value} > {max_value}")
    if min_value == max_value:
        return min_value

    upper = max_value - 1 - min_value  # inclusive
    nbits = upper.bit_length()
    nbytes = max(1, (nbits + 7) // 8)
    # only the top byte actually loses bits here
    mask = (1 << nbits) - 1

    while True:
        candidate = _draw(nbytes, rng) & mask
        if candidate <= upper:
            return candidate + min_value
