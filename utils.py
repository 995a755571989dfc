import logging
from math import isqrt
from typing import Tuple

from Crypto.Hash import SHA256
from sympy import isprime

logger = logging.getLogger(__name__)


def egcd(a: int, b: int) -> Tuple[int, int, int]:
    """Extended Euclidean algorithm.

    Returns ``(gcd, x, y)`` such that ``a*x + b*y == gcd``.
    """
    if b == 0:
        return (a, 1, 0)
    d, s, t = egcd(b, a % b)
    return (d, t, s - (a // b) * t)


def hasse_interval(p: int) -> Tuple[int, int]:
    """Integer bounds of [p + 1 - 2*sqrt(p), p + 1 + 2*sqrt(p)]."""
    # 2*sqrt(p) == sqrt(4p)
    spread = isqrt(4 * p)
    return p + 1 - spread, p + 1 + spread


def count_points(curve) -> int:
    """Count the points of a curve over a small prime field, identity included.

    Enumerates every (x, y) pair, so only use it on toy curves.
    """
    p = curve.prime
    if p is None:
        raise ValueError("Point counting needs a curve over a prime field")
    if not isprime(p):
        raise ValueError(f"Modulus {p} is not prime")

    total = 1  # point at infinity
    for x in range(p):
        fx = curve.element(x)
        for y in range(p):
            if curve.check_point(fx, curve.element(y)):
                total += 1

    low, high = hasse_interval(p)
    logger.debug(f"{curve} has {total} points, Hasse interval [{low}, {high}]")
    if not low <= total <= high:
        raise HasseBoundError(total, low, high)
    return total


def generate_private_key(rng, low: int, high: int) -> int:
    """Draw a private scalar in [low, high] from an explicitly supplied source."""
    if low < 0 or low > high:
        raise ValueError(f"Invalid scalar range [{low}, {high}]")
    return rng.randint(low, high)


def derive_key(point) -> bytes:
    """SHA-256 of the x coordinate of an ECDH shared point."""
    if point.is_infinity():
        raise ValueError("Cannot derive a key from the point at infinity")
    if point.curve.prime is None:
        raise ValueError("Key derivation needs a curve over a prime field")
    size = (point.curve.prime.bit_length() + 7) // 8
    digest = SHA256.new(data=point.x.num.to_bytes(size, "big"))
    return digest.digest()


class ECCError(Exception):
    def __init__(self, message):
        self.message = message
        super().__init__(self.message)


class ModulusMismatchError(ECCError, TypeError):
    def __init__(self, left, right):
        super().__init__(f"Cannot operate on two numbers in different fields: {left!r} and {right!r}.")


class DivisionByZeroError(ECCError, ZeroDivisionError):
    def __init__(self, dividend):
        super().__init__(f"Division of {dividend} by zero.")


class NotInvertibleError(ECCError, ValueError):
    def __init__(self, value, modulus, gcd):
        self.gcd = gcd
        super().__init__(f"{value} and {modulus} are not coprime (gcd {gcd}).")


class InvalidPointError(ECCError, ValueError):
    def __init__(self, x, y):
        super().__init__(f"Both coordinates or neither must be given, got x={x}, y={y}.")


class PointNotOnCurveError(ECCError, ValueError):
    def __init__(self, x, y, curve):
        super().__init__(f"Point ({x}, {y}) is not on the curve. {curve}")


class CurveMismatchError(ECCError, TypeError):
    def __init__(self, left, right):
        super().__init__(f"Points are not on the same curve: {left} and {right}.")


class HasseBoundError(ECCError, ValueError):
    def __init__(self, total, low, high):
        super().__init__(f"Point count {total} outside the Hasse interval [{low}, {high}].")
