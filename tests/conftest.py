import pytest

from ecc import Curve


@pytest.fixture
def curve_1021():
    """y^2 = x^3 - 3x - 3 over F_1021"""
    return Curve(-3, -3, 1021)


@pytest.fixture
def curve_1021_b():
    """y^2 = x^3 + 905x + 100 over F_1021"""
    return Curve(905, 100, 1021)


@pytest.fixture
def curve_43():
    """y^2 = x^3 + 6 over F_43, 39 points"""
    return Curve(0, 6, 43)


@pytest.fixture
def two_torsion_curve():
    """y^2 = x^3 - x over F_7, three points with y = 0"""
    return Curve(-1, 0, 7)


@pytest.fixture
def real_curve():
    """y^2 = x^3 - 3x - 3 over the reals"""
    return Curve(-3.0, -3.0)
