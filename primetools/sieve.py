import logging
import threading
from array import array
from itertools import islice
from typing import Callable, Iterable, Iterator

from primetools.config import sieve_limit
from primetools.error import InvalidArgument

__all__ = ['primes_below', 'trial_division_depth', 'SieveConfig', 'default_config', 'PRIMES_BELOW_2000']

log = logging.getLogger(__name__)

WORD_MAX = 0xFFFFFFFFFFFFFFFF
# bit lengths over which a custom depth policy is checked
POLICY_CHECK_BITS = 16384


def primes_below(limit: int) -> Iterator[int]:
    """Sieve of Eratosthenes, yields every prime p < limit in ascending order"""
    if limit < 3:
        return
    sieve = bytearray([1]) * limit
    sieve[0] = sieve[1] = 0
    for i in range(2, int(limit ** 0.5) + 1):
        if sieve[i]:
            sieve[i * i::i] = bytes(len(range(i * i, limit, i)))
    yield from (i for i, is_prime in enumerate(sieve) if is_prime)


PRIMES_BELOW_2000 = tuple(primes_below(2000))


def trial_division_depth(bit_length: int) -> int:
    """How many small primes to trial divide by before paying for Miller-Rabin.

     bit length | test primes less than
     -----------+----------------------
        <= 192  |      1000
        <= 384  |      2000
        <= 1536 |      10000
        <= 3072 |      50000
        <= 6144 |      100000
         else   |      150000

    The crossovers were found by benchmarking candidates of each size.
    """
    if bit_length <= 192:
        return 168
    if bit_length <= 384:
        return 303
    if bit_length <= 1536:
        return 1229
    if bit_length <= 3072:
        return 5133
    if bit_length <= 6144:
        return 9592
    return 13848


def _word_table(values):
    try:
        return array('Q', values)
    except (OverflowError, TypeError) as e:
        raise InvalidArgument(f"Small primes must be unsigned 64-bit words: {e}") from None


def _check_policy(depth):
    previous = 0
    for bits in range(1, POLICY_CHECK_BITS + 1):
        take = depth(bits)
        if take < previous:
            raise InvalidArgument(f"Trial division depth must be non-negative and non-decreasing, got {take} at {bits} bits")
        previous = take


class SieveConfig:
    """Small prime tables plus the policy deciding how much of them to use.

    `word_primes` holds the primes as unsigned 64-bit machine words and is used for
    candidates that fit in one, `primes` holds the same values as Python ints for
    everything larger. Both tables must agree element for element.
    """

    def __init__(self, primes: Iterable[int], depth: Callable[[int], int] = trial_division_depth):
        self.primes = tuple(primes)
        self.word_primes = _word_table(self.primes)
        self.depth = depth
        self._check()

    @classmethod
    def from_tables(cls, word_primes: Iterable[int], primes: Iterable[int], depth=trial_division_depth) -> 'SieveConfig':
        config = cls.__new__(cls)
        config.word_primes = _word_table(word_primes)
        config.primes = tuple(primes)
        config.depth = depth
        config._check()
        return config

    @classmethod
    def from_limit(cls, limit: int, depth=trial_division_depth) -> 'SieveConfig':
        if limit < 3:
            raise InvalidArgument(f"Sieve limit must be at least 3, got {limit}")
        config = cls(primes_below(limit), depth)
        log.debug("Built %d small primes below %d", len(config.primes), limit)
        return config

    def _check(self):
        if not self.primes:
            raise InvalidArgument("Small prime tables must not be empty")
        if len(self.word_primes) != len(self.primes):
            raise InvalidArgument(
                f"Small prime tables differ in length: {len(self.word_primes)} != {len(self.primes)}")
        if self.primes[0] != 2:
            raise InvalidArgument(f"Small prime tables must start at 2, not {self.primes[0]}")
        previous = 1
        for word, prime in zip(self.word_primes, self.primes):
            if word != prime:
                raise InvalidArgument(f"Small prime tables disagree: {word} != {prime}")
            if prime <= previous:
                raise InvalidArgument("Small prime tables must be strictly ascending")
            previous = prime
        _check_policy(self.depth)

    def restricted(self, limit: int) -> 'SieveConfig':
        """Same policy, keeping only the primes below `limit`"""
        kept = [p for p in self.primes if p < limit]
        return SieveConfig(kept, self.depth)

    def small_primes(self, count: int) -> Iterator[int]:
        return islice(self.primes, count)

    def word_small_primes(self, count: int) -> Iterator[int]:
        return islice(self.word_primes, count)

    def __len__(self):
        return len(self.primes)

    def __repr__(self):
        return f"SieveConfig({len(self.primes)} primes, largest {self.primes[-1]})"


_default = None
_default_lock = threading.Lock()


def default_config() -> SieveConfig:
    """Process wide tables, built on first use from PRIMETOOLS_SIEVE_LIMIT"""
    global _default
    if _default is None:
        with _default_lock:
            if _default is None:
                _default = SieveConfig.from_limit(sieve_limit())
    return _default
