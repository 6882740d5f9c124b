"""
Probable prime generation, primality testing and modular inverses for Python integers.
"""

from primetools.error import PrimeToolsError, InvalidArgument, NotInvertible, Cancelled
from primetools.number_theory_stuff import *
from primetools.randomness import *
from primetools.sieve import *
from primetools.primes import *
from primetools import number_theory_stuff, randomness, sieve, primes

__all__ = ['PrimeToolsError', 'InvalidArgument', 'NotInvertible', 'Cancelled']

for _module in (number_theory_stuff, randomness, sieve, primes):
    __all__.extend(_module.__all__)

__version__ = "0.1"
