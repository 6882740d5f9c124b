from primetools.error import InvalidArgument, NotInvertible

__all__ = ['bit_length', 'mulinv']


def bit_length(n: int) -> int:
    """Position of the most significant set bit of |n|, counting from 1. Zero occupies one bit."""
    return abs(n).bit_length() or 1


def mulinv(a: int, m: int) -> int:
    """Modular inverse of a mod m with the extended Euclidean algorithm.

    Only the Bezout coefficient of `a` is tracked, the one for `m` is never needed.
    Returns x in [0, m) with a*x = 1 (mod m) and raises NotInvertible when gcd(a, m) != 1.
    """
    if m <= 0:
        raise InvalidArgument(f"Modulus must be positive, got {m}")

    r0, r1 = m, a % m
    x0, x1 = 0, 1
    while r1 > 0:
        q, r0, r1 = r0 // r1, r1, r0 % r1
        x0, x1 = x1, x0 - q * x1

    if r0 != 1:
        raise NotInvertible(f"{a} has no inverse modulo {m}", a=a, m=m, gcd=r0)
    return x0 % m
