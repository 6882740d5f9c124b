import logging
from enum import Enum, unique
from typing import Optional

from primetools.config import default_confidence
from primetools.error import Cancelled, InvalidArgument
from primetools.number_theory_stuff import bit_length
from primetools.randomness import random_bits, random_range
from primetools.sieve import WORD_MAX, default_config

__all__ = ['miller_rabin', 'is_probable_prime', 'random_prime', 'random_safe_prime']

log = logging.getLogger(__name__)


def _confidence(confidence):
    if confidence is None:
        return default_confidence()
    if confidence <= 0:
        raise InvalidArgument(f"Confidence must be a positive number of rounds, got {confidence}")
    return confidence


def _check_cancel(cancel):
    if cancel is not None and cancel.is_set():
        raise Cancelled("Prime generation was cancelled")


def _witness(w, rng, fixed_bits):
    if not fixed_bits:
        return random_range(2, w - 1, rng)
    wlen = bit_length(w)
    while True:
        # drop the forced top bit, otherwise w = 2**k + 1 has no witness of its own length
        b = random_bits(wlen + 1, rng) ^ (1 << wlen)
        if 2 <= b < w - 1:
            return b


def miller_rabin(w: int, confidence: int, rng, fixed_bits: bool = False) -> bool:
    """Miller-Rabin test with `confidence` random witnesses, see FIPS 186-4 C.3.1.

    For odd w with w - 1 = 2**a * m, w is a strong probable prime to base b if
    b**m = 1 (mod w) or b**(2**j * m) = w - 1 (mod w) for some 0 <= j < a.
    A composite survives one round with probability at most 1/4.

    `w` must be odd and at least 3. With fixed_bits=True witnesses are drawn
    uniformly below 2**bit_length(w) and rejected until in range.
    """
    confidence = _confidence(confidence)
    if w < 3 or not w & 1:
        raise InvalidArgument(f"Miller-Rabin needs an odd number greater than 1, got {w}")
    if w == 3:
        return True

    w_minus_one = w - 1
    m, a = w_minus_one, 0
    while not m & 1:
        m >>= 1
        a += 1

    for _ in range(confidence):
        z = pow(_witness(w, rng, fixed_bits), m, w)
        if z == 1 or z == w_minus_one:
            continue
        for _ in range(a - 1):
            z = pow(z, 2, w)
            if z == 1:
                return False
            if z == w_minus_one:
                break
        else:
            return False
    return True


def is_probable_prime(n: int, confidence: int, rng, *, bits: Optional[int] = None, config=None) -> bool:
    """Trial division by small primes followed by Miller-Rabin.

    The sign of `n` is ignored. `bits` can be passed when the bit length of `n` is
    already known. `config` selects the small prime tables, the process wide
    default is used otherwise.
    """
    confidence = _confidence(confidence)
    if config is None:
        config = default_config()
    value = abs(n)
    if value in (0, 1):
        return False

    take = config.depth(bits or bit_length(value))
    if value <= WORD_MAX:
        for p in config.word_small_primes(take):
            if p >= value:
                return True
            if value % p == 0:
                return False
    else:
        for p in config.small_primes(take):
            if value % p == 0:
                return False

    # a shallow policy may not have tried 2 at all
    if not value & 1:
        return value == 2
    return miller_rabin(value, confidence, rng)


def random_prime(bits: int, confidence: int, rng, config=None, cancel=None) -> int:
    """Random probable prime with a bit length of exactly `bits`"""
    if bits < 2:
        raise InvalidArgument(f"Can only generate primes of 2 bits or more, got {bits}")
    confidence = _confidence(confidence)
    if config is None:
        config = default_config()

    tries = 0
    while True:
        _check_cancel(cancel)
        tries += 1
        n = random_bits(bits, rng) | 1
        if is_probable_prime(n, confidence, rng, bits=bits, config=config):
            log.debug("Found %d-bit prime after %d candidates", bits, tries)
            return n


@unique
class SIEVE(Enum):
    REJECTED = 'rejected'    # q or 2q + 1 has a small factor
    PRIME = 'prime'          # every prime below q was tried, q is prime
    UNDECIDED = 'undecided'  # q needs Miller-Rabin


def _combined_sieve(q, primes):
    for r in primes:
        if r >= q:
            return SIEVE.PRIME
        rem = q % r
        # rem == (r - 1) / 2 means r divides 2q + 1
        if rem == 0 or rem == (r - 1) // 2:
            return SIEVE.REJECTED
    return SIEVE.UNDECIDED


def random_safe_prime(bits: int, confidence: int, rng, config=None, cancel=None) -> int:
    """Random safe prime p = 2q + 1 (q prime too) with a bit length of exactly `bits`.

    Candidates q are sieved against q and 2q + 1 at the same time before any
    Miller-Rabin round is spent on them. See M. Wiener, "Safe Prime Generation with a
    Combined Sieve", 2003 (https://eprint.iacr.org/2003/186).
    """
    if bits < 3:
        raise InvalidArgument(f"Can only generate safe primes of 3 bits or more, got {bits}")
    confidence = _confidence(confidence)
    if config is None:
        config = default_config()
    qbits = bits - 1
    take = config.depth(bits)

    tries = 0
    while True:
        _check_cancel(cancel)
        tries += 1
        q = random_bits(qbits, rng) | 1

        if q <= WORD_MAX:
            sieved = _combined_sieve(q, config.word_small_primes(take))
        else:
            sieved = _combined_sieve(q, config.small_primes(take))
        if sieved is SIEVE.REJECTED:
            continue
        if sieved is SIEVE.UNDECIDED and not miller_rabin(q, confidence, rng):
            continue

        # no need to sieve p, both ways it can fail on small primes are ruled out
        p = 2 * q + 1
        if miller_rabin(p, confidence, rng):
            log.debug("Found %d-bit safe prime after %d candidates", bits, tries)
            return p
