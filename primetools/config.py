import os

from primetools.error import InvalidArgument

__all__ = ['sieve_limit', 'default_confidence']

SIEVE_LIMIT = 150000
CONFIDENCE = 40


def _read_int(name, default, minimum):
    raw = os.environ.get(name, str(default))
    try:
        value = int(raw)
    except ValueError:
        raise InvalidArgument(f"{name} must be an integer, got {raw!r}") from None
    if value < minimum:
        raise InvalidArgument(f"{name} must be at least {minimum}, got {value}")
    return value


def sieve_limit():
    """Upper bound (exclusive) of the default small prime tables"""
    return _read_int('PRIMETOOLS_SIEVE_LIMIT', SIEVE_LIMIT, 3)


def default_confidence():
    # 40 rounds, same as the usual recommendation for cryptographic safe primes
    return _read_int('PRIMETOOLS_CONFIDENCE', CONFIDENCE, 1)
