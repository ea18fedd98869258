"""
Unit and regression test for the dual number engine of the dualeos package.
"""

import dualeos.autodiff as ad

import pytest
import numpy as np


def test_first_derivative_power():
    value, df = ad.first_derivative(lambda x: x ** 3, 2.0)
    assert value == pytest.approx(8.0) and df == pytest.approx(12.0)


def test_second_derivative_product():
    x0 = 0.7
    value, df, d2f = ad.second_derivative(lambda x: ad.exp(x) * ad.sin(x), x0)
    exact = [
        np.exp(x0) * np.sin(x0),
        np.exp(x0) * (np.sin(x0) + np.cos(x0)),
        2.0 * np.exp(x0) * np.cos(x0),
    ]
    assert [value, df, d2f] == pytest.approx(exact, rel=1e-12)


def test_third_derivative_log():
    derivatives = ad.third_derivative(lambda x: ad.log(x), 2.0)
    assert list(derivatives) == pytest.approx([np.log(2.0), 0.5, -0.25, 0.25], rel=1e-12)


def test_third_derivative_sqrt():
    x0 = 4.0
    derivatives = ad.third_derivative(lambda x: ad.sqrt(x), x0)
    exact = [2.0, 0.25, -0.25 / (2.0 * x0), 3.0 / 8.0 * x0 ** -2.5]
    assert list(derivatives) == pytest.approx(exact, rel=1e-12)


def test_tanh_and_cos():
    x0 = 0.3
    _, df = ad.first_derivative(lambda x: ad.tanh(x) + ad.cos(x), x0)
    assert df == pytest.approx(1.0 - np.tanh(x0) ** 2 - np.sin(x0), rel=1e-12)


def test_gradient():
    value, grad = ad.gradient(lambda x: x[0] * x[1] ** 2, np.array([2.0, 3.0]))
    assert value == pytest.approx(18.0) and grad == pytest.approx(np.array([9.0, 12.0]))


def test_hessian():
    value, grad, hess = ad.hessian(lambda x: x[0] ** 2 * x[1], np.array([1.0, 2.0]))
    assert value == pytest.approx(2.0)
    assert grad == pytest.approx(np.array([4.0, 1.0]))
    assert hess == pytest.approx(np.array([[4.0, 2.0], [2.0, 0.0]]))


def test_second_partial_derivative():
    output = ad.second_partial_derivative(lambda x, y: x * ad.exp(y), 2.0, 0.0)
    assert list(output) == pytest.approx([2.0, 1.0, 2.0, 1.0])


def test_constant_function_has_zero_derivative():
    assert ad.first_derivative(lambda x: 3.0, 1.0) == (3.0, 0.0)


def test_power_at_zero_is_finite():
    x = ad.Dual(0.0, 1.0)
    result = x ** 3
    assert result.re == 0.0 and result.eps == 0.0


def test_dual_exponent():
    # d/dx x**x = x**x (ln x + 1)
    _, df = ad.first_derivative(lambda x: x ** x, 2.0)
    assert df == pytest.approx(4.0 * (np.log(2.0) + 1.0), rel=1e-12)


def test_float_base_power():
    _, df = ad.first_derivative(lambda x: 2.0 ** x, 3.0)
    assert df == pytest.approx(8.0 * np.log(2.0), rel=1e-12)


def test_abs():
    _, df = ad.first_derivative(lambda x: abs(x), -2.0)
    assert df == -1.0


def test_division():
    _, df, d2f = ad.second_derivative(lambda x: 1.0 / (1.0 + x), 1.0)
    assert df == pytest.approx(-0.25) and d2f == pytest.approx(0.25)


def test_nested_dual3_over_gradient():
    # f = x^3 y, third x derivative is 6y and its gradient in (x, y) is (0, 6)
    x = ad.Dual3(ad.Dual(1.5, np.array([1.0, 0.0])), ad.Dual(1.0, np.zeros(2)), 0.0, 0.0)
    y = ad.Dual(2.0, np.array([0.0, 1.0]))
    result = x * x * x * y
    assert result.v3.re == pytest.approx(12.0)
    assert result.v3.eps == pytest.approx(np.array([0.0, 6.0]))
    assert result.v2.eps == pytest.approx(np.array([12.0, 9.0]))


def test_nested_zeroth_power_keeps_depth():
    x = ad.Dual3(ad.Dual(2.0, 1.0), ad.Dual(1.0, 0.0), 0.0, 0.0)
    one = x ** 0
    assert one.depth == x.depth == 2
    assert isinstance(one.re, ad.Dual)

    # eta**0 terms of a polynomial added to an inner variable
    result = one + ad.Dual(1.0, 1.0)
    assert isinstance(result, ad.Dual3)
    assert ad.real_part(result) == pytest.approx(2.0)
    assert result.re.eps == pytest.approx(1.0)

    poly = 3.0 * x ** 0 + 2.0 * x ** 1 + x ** 2
    assert ad.real_part(poly) == pytest.approx(11.0)
    assert poly.v1.re == pytest.approx(6.0)
    assert poly.v2.re == pytest.approx(2.0)


def test_nested_dual_mixed_derivative():
    # f = exp(x y) with x the outer and y the inner variable
    x = ad.Dual(ad.Dual(0.5, 0.0), ad.Dual(1.0, 0.0))
    y = ad.Dual(2.0, 1.0)
    result = ad.exp(x * y)
    # d2f/dxdy = exp(xy) (1 + xy)
    assert result.eps.eps == pytest.approx(np.exp(1.0) * 2.0, rel=1e-12)
    assert ad.real_part(result) == pytest.approx(np.exp(1.0))


def test_object_array_functions():
    x = np.empty(2, dtype=object)
    x[:] = [ad.Dual(1.0, 1.0), ad.Dual(2.0, 1.0)]
    result = np.sum(ad.log(x))
    assert result.eps == pytest.approx(1.5)
    assert ad.real_part(x) == pytest.approx(np.array([1.0, 2.0]))


def test_comparison_uses_real_part():
    assert ad.Dual(1.0, 100.0) < 2.0
    assert ad.Dual(3.0, -1.0) >= ad.Dual(3.0, 5.0)


def test_no_float_conversion():
    with pytest.raises(TypeError):
        float(ad.Dual(1.0, 1.0))


def test_mismatched_kinds():
    with pytest.raises(TypeError):
        ad.Dual(1.0, 1.0) + ad.HyperDual(1.0, 1.0, 0.0, 0.0)
