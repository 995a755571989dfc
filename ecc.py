import logging
import math

from sympy.ntheory.residue_ntheory import sqrt_mod

from utils import (
    egcd,
    hasse_interval,
    ModulusMismatchError,
    DivisionByZeroError,
    NotInvertibleError,
    InvalidPointError,
    PointNotOnCurveError,
    CurveMismatchError,
)

logger = logging.getLogger(__name__)

# Tolerances for comparing approximate coordinates
REL_TOL = 1e-9
ABS_TOL = 1e-9


class FieldElement:
    def __init__(self, num, prime):
        if prime < 2:
            raise ValueError(f"Modulus must be at least 2, got {prime}")
        self.num = num % prime
        self.prime = prime

    def __eq__(self, other):
        if not isinstance(other, FieldElement):
            return NotImplemented
        return self.num == other.num and self.prime == other.prime

    def __hash__(self):
        return hash((self.num, self.prime))

    def __add__(self, other):
        self._check_field(other)
        return FieldElement(self.num + other.num, self.prime)

    def __sub__(self, other):
        self._check_field(other)
        return FieldElement(self.num - other.num, self.prime)

    def __mul__(self, other):
        self._check_field(other)
        return FieldElement(self.num * other.num, self.prime)

    def __pow__(self, exp):
        if exp < 0:
            raise ValueError(f"Exponent must be non-negative, got {exp}")
        # three-argument pow reduces every intermediate product
        return FieldElement(pow(self.num, exp, self.prime), self.prime)

    def __truediv__(self, other):
        self._check_field(other)
        if other.num == 0:
            raise DivisionByZeroError(self)
        gcd, inv, _ = egcd(other.num, self.prime)
        logger.debug(f"egcd({other.num}, {self.prime}): gcd={gcd}, x={inv}")
        if gcd != 1:
            raise NotInvertibleError(other.num, self.prime, gcd)
        return FieldElement(self.num * inv, self.prime)

    def __neg__(self):
        return FieldElement(-self.num, self.prime)

    def is_zero(self):
        return self.num == 0

    def coerce(self, value):
        """Cast an integer into this element's field."""
        return FieldElement(value, self.prime)

    def _check_field(self, other):
        if not isinstance(other, FieldElement) or self.prime != other.prime:
            raise ModulusMismatchError(self, other)

    def __str__(self):
        return str(self.num)

    def __repr__(self):
        return f"FieldElement_{self.prime}({self.num})"


class RealElement:
    """Floating-point stand-in for FieldElement, used to explore curves over the reals."""

    def __init__(self, value):
        self.value = float(value)

    def __eq__(self, other):
        if not isinstance(other, RealElement):
            return NotImplemented
        return math.isclose(self.value, other.value, rel_tol=REL_TOL, abs_tol=ABS_TOL)

    def __add__(self, other):
        self._check_field(other)
        return RealElement(self.value + other.value)

    def __sub__(self, other):
        self._check_field(other)
        return RealElement(self.value - other.value)

    def __mul__(self, other):
        self._check_field(other)
        return RealElement(self.value * other.value)

    def __pow__(self, exp):
        if exp < 0:
            raise ValueError(f"Exponent must be non-negative, got {exp}")
        return RealElement(self.value ** exp)

    def __truediv__(self, other):
        self._check_field(other)
        if other.value == 0.0:
            raise DivisionByZeroError(self)
        return RealElement(self.value / other.value)

    def __neg__(self):
        return RealElement(-self.value)

    def is_zero(self):
        return math.isclose(self.value, 0.0, abs_tol=ABS_TOL)

    def coerce(self, value):
        return RealElement(value)

    def _check_field(self, other):
        if not isinstance(other, RealElement):
            raise ModulusMismatchError(self, other)

    def __str__(self):
        return str(self.value)

    def __repr__(self):
        return f"RealElement({self.value})"


class Curve:
    """Short Weierstrass curve y^2 = x^3 + a*x + b.

    With ``prime`` set the curve lives over the integers modulo ``prime``;
    without it coordinates are approximate reals.
    """

    def __init__(self, a, b, prime=None):
        if prime is not None:
            if prime < 2:
                raise ValueError(f"Modulus must be at least 2, got {prime}")
            if not isinstance(a, int) or not isinstance(b, int):
                raise TypeError(f"Coefficients over F_{prime} must be integers, got a={a!r}, b={b!r}")
            a %= prime
            b %= prime
        self.a = a
        self.b = b
        self.prime = prime

    def __eq__(self, other):
        if not isinstance(other, Curve):
            return NotImplemented
        return self.a == other.a and self.b == other.b and self.prime == other.prime

    def __hash__(self):
        return hash((self.a, self.b, self.prime))

    def element(self, value):
        """Wrap a number into this curve's coordinate representation."""
        if isinstance(value, FieldElement):
            if self.prime != value.prime:
                raise ModulusMismatchError(value, self)
            return value
        if isinstance(value, RealElement):
            if self.prime is not None:
                raise ModulusMismatchError(value, self)
            return value
        if self.prime is None:
            return RealElement(value)
        return FieldElement(value, self.prime)

    def check_point(self, x, y):
        a = x.coerce(self.a)
        b = x.coerce(self.b)
        return y ** 2 == x ** 3 + a * x + b

    def point(self, x, y):
        return Point(x, y, self)

    def infinity(self):
        return Point(None, None, self)

    def lift_x(self, x):
        """All points of the curve with the given x coordinate."""
        x = self.element(x)
        rhs = x ** 3 + x.coerce(self.a) * x + x.coerce(self.b)
        if self.prime is not None:
            roots = sqrt_mod(rhs.num, self.prime, all_roots=True) or []
            return [Point(x, self.element(r), self) for r in sorted(roots)]
        if rhs.is_zero():
            return [Point(x, RealElement(0.0), self)]
        if rhs.value < 0:
            return []
        root = math.sqrt(rhs.value)
        return [Point(x, RealElement(root), self), Point(x, RealElement(-root), self)]

    def _signed(self, coef):
        # show residues above p/2 as negatives
        if self.prime is not None and coef > self.prime // 2:
            coef -= self.prime
        return f"- {abs(coef)}" if coef < 0 else f"+ {coef}"

    def __str__(self):
        field = f" (mod {self.prime})" if self.prime is not None else ""
        return f"Elliptic Curve: y^2 = x^3 {self._signed(self.a)}x {self._signed(self.b)}{field}"

    def __repr__(self):
        return f"Curve(a={self.a}, b={self.b}, prime={self.prime})"


class Point:
    def __init__(self, x, y, curve):
        self.curve = curve

        if x is None and y is None:
            self.x = self.y = None  # Point at infinity
        elif x is None or y is None:
            raise InvalidPointError(x, y)
        else:
            self.x = curve.element(x)
            self.y = curve.element(y)

            if not curve.check_point(self.x, self.y):
                raise PointNotOnCurveError(self.x, self.y, curve)

    def is_infinity(self):
        return self.x is None

    def __eq__(self, other):
        if not isinstance(other, Point):
            return NotImplemented
        return (
            self.curve == other.curve and
            self.x == other.x and
            self.y == other.y
        )

    def __hash__(self):
        # unhashable over the reals, where equality is approximate
        return hash((self.curve, self.x, self.y))

    def __add__(self, other):
        if self.curve != other.curve:
            raise CurveMismatchError(self.curve, other.curve)

        if self.x is None:
            return other
        if other.x is None:
            return self

        # Vertical tangent
        if self == other and self.y.is_zero():
            return self.curve.infinity()

        # Vertical line
        if self.x == other.x and self.y != other.y:
            return self.curve.infinity()

        a = self.x.coerce(self.curve.a)

        # Point doubling
        if self == other:
            s = (self.x ** 2 * self.x.coerce(3) + a) / (self.y * self.x.coerce(2))
            x3 = s ** 2 - self.x * self.x.coerce(2)
        else:
            s = (other.y - self.y) / (other.x - self.x)
            x3 = s ** 2 - (self.x + other.x)

        y3 = s * (self.x - x3) - self.y

        try:
            return self.__class__(x3, y3, self.curve)
        except PointNotOnCurveError as err:
            raise AssertionError(f"Group law produced an off-curve point: {err.message}") from err

    def __neg__(self):
        if self.x is None:
            return self
        return self.__class__(self.x, -self.y, self.curve)

    def negate(self):
        return -self

    def __sub__(self, other):
        return self + (-other)

    def scalar_mul(self, k):
        """k * P by repeated addition, O(k) group operations."""
        if k < 0:
            raise ValueError(f"Scalar must be non-negative, got {k}")
        result = self.curve.infinity()
        for _ in range(k):
            result = result + self
        return result

    def __rmul__(self, coef):
        return self.scalar_mul(coef)

    def _search_limit(self, limit):
        if limit is not None:
            return limit
        if self.curve.prime is None:
            raise ValueError("Searching a curve over the reals needs an explicit bound")
        return hasse_interval(self.curve.prime)[1]

    def naive_factor(self, target, order=None):
        """Brute-force discrete logarithm.

        Returns the least k >= 1 with k * self == target, or None when no
        multiple up to ``order`` (default: the Hasse upper bound of the
        curve's point count) matches.
        """
        if self.curve != target.curve:
            raise CurveMismatchError(self.curve, target.curve)

        limit = self._search_limit(order)
        generator = self
        for k in range(1, limit + 1):
            if generator == target:
                logger.debug(f"{target} = {k} * {self}")
                return k
            generator = generator + self

        logger.debug(f"No multiple of {self} up to {limit} equals {target}")
        return None

    def order(self, limit=None):
        """Least n >= 1 with n * self at infinity."""
        return self.naive_factor(self.curve.infinity(), limit)

    def __repr__(self):
        if self.x is None:
            return "Point(infinity)"
        return f"Point({self.x}, {self.y})"
