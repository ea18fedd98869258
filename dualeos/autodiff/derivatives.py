"""
    Helpers that seed dual numbers, evaluate a function and unpack value and derivatives.

    Each helper accepts a function of plain or dual arguments. When the function does not depend on the seeded argument (returns a non dual value), the derivatives are zero.
"""

import numpy as np

from .dual import DualNumber, Dual, HyperDual, Dual2, Dual3


def _field(result, name, default=0.0):
    if isinstance(result, DualNumber):
        return getattr(result, name)
    return default


def first_derivative(func, x):
    r"""
    Value and first derivative of a scalar function.

    Parameters
    ----------
    func : function
        Function of one variable
    x : float
        Point of evaluation

    Returns
    -------
    value : float
        :math:`f(x)`
    df : float
        :math:`f'(x)`
    """
    result = func(Dual(x, 1.0))
    return _field(result, "re", result), _field(result, "eps")


def second_derivative(func, x):
    r"""
    Value, first and second derivative of a scalar function.
    """
    result = func(Dual2(x, 1.0, 0.0))
    return _field(result, "re", result), _field(result, "v1"), _field(result, "v2")


def third_derivative(func, x):
    r"""
    Value and derivatives up to third order of a scalar function.
    """
    result = func(Dual3(x, 1.0, 0.0, 0.0))
    return (
        _field(result, "re", result),
        _field(result, "v1"),
        _field(result, "v2"),
        _field(result, "v3"),
    )


def gradient(func, x):
    r"""
    Value and gradient of a function of a vector.

    Parameters
    ----------
    func : function
        Function of a one dimensional array
    x : numpy.ndarray
        Point of evaluation

    Returns
    -------
    value : float
        :math:`f(x)`
    grad : numpy.ndarray
        :math:`\nabla f(x)`
    """
    x = np.asarray(x, float)
    n = len(x)
    unit = np.eye(n)
    args = np.empty(n, dtype=object)
    args[:] = [Dual(x[i], unit[i].copy()) for i in range(n)]

    result = func(args)
    if isinstance(result, DualNumber):
        return result.re, np.asarray(result.eps, float) * np.ones(n)
    return result, np.zeros(n)


def hessian(func, x):
    r"""
    Value, gradient and Hessian of a function of a vector.

    The Hessian is assembled from one hyper-dual evaluation per pair of variables.

    Parameters
    ----------
    func : function
        Function of a one dimensional array
    x : numpy.ndarray
        Point of evaluation

    Returns
    -------
    value : float
        :math:`f(x)`
    grad : numpy.ndarray
        Gradient
    hess : numpy.ndarray
        Symmetric matrix of second derivatives
    """
    x = np.asarray(x, float)
    n = len(x)
    grad = np.zeros(n)
    hess = np.zeros((n, n))
    value = None

    for i in range(n):
        for j in range(i, n):
            args = np.empty(n, dtype=object)
            args[:] = [
                HyperDual(x[k], float(k == i), float(k == j), 0.0) for k in range(n)
            ]
            result = func(args)
            if value is None:
                value = _field(result, "re", result)
                grad[i] = _field(result, "eps1")
            elif j == i:
                grad[i] = _field(result, "eps1")
            hess[i, j] = hess[j, i] = _field(result, "eps1eps2")

    return value, grad, hess


def second_partial_derivative(func, x, y):
    r"""
    Value, both first partial derivatives and the mixed second partial derivative of a function of two scalars.

    Returns
    -------
    value : float
        :math:`f(x, y)`
    dfdx : float
        :math:`\partial f / \partial x`
    dfdy : float
        :math:`\partial f / \partial y`
    d2fdxdy : float
        :math:`\partial^2 f / \partial x \partial y`
    """
    result = func(HyperDual(x, 1.0, 0.0, 0.0), HyperDual(y, 0.0, 1.0, 0.0))
    return (
        _field(result, "re", result),
        _field(result, "eps1"),
        _field(result, "eps2"),
        _field(result, "eps1eps2"),
    )
