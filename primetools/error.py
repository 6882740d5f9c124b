class PrimeToolsError(Exception):
    pass


class InvalidArgument(PrimeToolsError, ValueError):
    pass


class NotInvertible(PrimeToolsError, ArithmeticError):
    def __init__(self, message, a=None, m=None, gcd=None):
        super().__init__(message)
        self.message = message
        self.a = a
        self.m = m
        self.gcd = gcd


class Cancelled(PrimeToolsError):
    pass
