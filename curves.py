from dataclasses import dataclass
from typing import Optional

from sympy import isprime

from ecc import Curve, Point

# name: (p, a, b, generator, alternate generator)
_CURVES = {
    'F1021-A': (1021, -3, -3, (379, 1011), None),
    'F1021-B': (1021, 905, 100, (1006, 416), None),
    'F43': (43, 0, 6, (13, 15), (9, 2)),
}


@dataclass
class ECDHSetup:
    curve: str
    """The name of the example curve."""
    p: Optional[int] = None
    """The prime modulus of the field."""
    a: Optional[int] = None
    """Coefficient of x."""
    b: Optional[int] = None
    """Constant coefficient."""
    G: Optional[Point] = None
    """A base point on the curve."""
    H: Optional[Point] = None
    """An alternate base point, where the example ships one."""

    def generate_setup(self):
        supported_curves = self.supported_curves()
        curve = self.curve
        if curve not in supported_curves:
            raise ValueError("{} is not one of the specified curves. "
                             "Please choose one of the following curves: {}".format(curve, supported_curves))
        p, a, b, g, h = _CURVES[curve]
        if not isprime(p):
            raise ValueError(f"Modulus {p} of {curve} is not prime")
        weierstrass = Curve(a, b, p)
        G = weierstrass.point(*g)
        H = weierstrass.point(*h) if h else None
        return ECDHSetup(curve, p, weierstrass.a, weierstrass.b, G, H)

    def weierstrass_curve(self) -> Curve:
        return self.G.curve

    @staticmethod
    def supported_curves():
        return list(_CURVES)

    def print_supported_curves(self):
        supported_curves = self.supported_curves()
        print("Supported Elliptic Curves: ", supported_curves)
