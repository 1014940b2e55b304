import numpy as np
import numpy.testing as npt
import pytest

from phzpy.dataset import XYDataset
from phzpy.errors import DomainError
from phzpy.function import Polynomial
from phzpy.interpolation import (
    InterpolationType,
    interpolate,
    linear_interpolation,
    spline_interpolation,
)

X = [0.0, 1.0, 2.0]
Y = [0.0, 1.0, 4.0]


def test_linear_reproduces_samples():
    f = linear_interpolation(X, Y)
    npt.assert_allclose(f(np.array(X)), Y, rtol=1e-12, atol=1e-14)
    assert f(0.5) == pytest.approx(0.5)
    assert f(1.5) == pytest.approx(2.5)
    assert all(isinstance(p, Polynomial) for p in f.functions)


def test_linear_outside_range():
    f = linear_interpolation(X, Y)
    assert f(-1.0) == 0.0
    assert f(3.0) == 0.0

    g = linear_interpolation(X, Y, extrapolate=True)
    assert g(-1.0) == pytest.approx(-1.0)
    assert g(3.0) == pytest.approx(7.0)


def test_spline_on_sine():
    x = np.linspace(-10.0, 10.0, 201)
    y = np.sin(x)
    spline = spline_interpolation(x, y)

    npt.assert_allclose(spline(x), y, rtol=1e-9, atol=1e-9)

    between = (x[:-1] + x[1:]) / 2.0
    npt.assert_allclose(spline(between), np.sin(between), rtol=1.2e-2, atol=1e-4)

    assert spline(-10.5) == 0.0
    assert spline(10.5) == 0.0


def test_spline_is_natural_and_smooth():
    x = np.linspace(-10.0, 10.0, 201)
    spline = spline_interpolation(x, np.sin(x))
    first = spline.derivative()
    second = first.derivative()

    assert abs(second(x[0])) <= 1e-5
    assert abs(second(x[-1])) <= 1e-5

    for i in (1, 50, 100, 199):
        left, right = spline.functions[i - 1], spline.functions[i]
        assert left.derivative()(x[i]) == pytest.approx(right.derivative()(x[i]), abs=1e-8)


def test_spline_two_points_is_linear():
    spline = spline_interpolation([1.0, 3.0], [2.0, 6.0])
    assert spline(2.0) == pytest.approx(4.0)


def test_spline_extrapolation():
    x = np.linspace(0.0, 3.0, 7)
    spline = spline_interpolation(x, x**2, extrapolate=True)
    assert np.isfinite(spline(4.0))
    assert spline(4.0) != 0.0


@pytest.mark.parametrize(
    "x, y",
    [
        ([0.0], [1.0]),
        ([0.0, 1.0], [1.0]),
        ([0.0, 2.0, 1.0], [1.0, 1.0, 1.0]),
        ([0.0, 1.0, 1.0], [1.0, 1.0, 1.0]),
    ],
)
def test_invalid_input(x, y):
    with pytest.raises(DomainError):
        linear_interpolation(x, y)
    with pytest.raises(DomainError):
        spline_interpolation(x, y)


def test_interpolate_dataset():
    dataset = XYDataset(X, Y)
    linear = interpolate(dataset, InterpolationType.LINEAR)
    spline = interpolate(dataset, InterpolationType.CUBIC_SPLINE)
    assert linear(1.5) == pytest.approx(2.5)
    npt.assert_allclose(spline(np.array(X)), Y, atol=1e-12)
    assert interpolate(X, Y)(0.5) == pytest.approx(0.5)
