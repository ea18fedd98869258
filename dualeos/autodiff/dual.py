# -- coding: utf8 --

r"""
    Dual numbers for forward mode automatic differentiation.

    Each class carries a real part together with exact derivative parts. The fields of a dual number may themselves be dual numbers, so nesting two kinds gives higher or mixed derivatives (e.g. a :class:`Dual3` whose fields are :class:`Dual` objects with a gradient part).

    The same expression written with ``+ - * / **`` and ``numpy.exp``, ``numpy.log``, ``numpy.sqrt`` evaluates plain floats, float arrays, dual numbers and numpy object arrays of dual numbers. Numpy object loops call the ``exp``, ``log``, ``sqrt``... methods defined here.

    Domain restrictions: ``1/x`` and ``log(x)`` need a nonzero (positive for log) real part and ``sqrt(x)`` needs a positive real part for finite derivatives. Dual numbers never convert to ``float`` implicitly, so a derivative part can not be dropped by assignment into a float array.

"""

import numpy as np
import logging

logger = logging.getLogger(__name__)


def real_part(x):
    r"""
    Return the innermost real value of a (possibly nested) dual number.

    Parameters
    ----------
    x : float, numpy.ndarray, DualNumber
        Value of any supported numeric kind

    Returns
    -------
    value : float
        Real part stripped of all derivative information
    """

    while isinstance(x, DualNumber):
        x = x.re

    if isinstance(x, np.ndarray) and x.dtype == object:
        return np.array([real_part(y) for y in x.flat], float).reshape(x.shape)

    return x


def _elementwise(x, method, ufunc):
    if isinstance(x, DualNumber):
        return getattr(x, method)()
    if isinstance(x, np.ndarray) and x.dtype == object:
        values = [_elementwise(y, method, ufunc) for y in x.flat]
        out = np.empty(len(values), dtype=object)
        out[:] = values
        return out.reshape(x.shape)
    return ufunc(x)


def exp(x):
    return _elementwise(x, "exp", np.exp)


def log(x):
    return _elementwise(x, "log", np.log)


def sqrt(x):
    return _elementwise(x, "sqrt", np.sqrt)


def sin(x):
    return _elementwise(x, "sin", np.sin)


def cos(x):
    return _elementwise(x, "cos", np.cos)


def tanh(x):
    return _elementwise(x, "tanh", np.tanh)


class DualNumber:
    r"""
    Common arithmetic of all dual number kinds.

    Subclasses define the fields, ``_add``, ``_mul`` (both operands of the same kind and nesting depth), ``_scale`` and ``_shift`` (operations with a constant), and ``_chain`` which applies a function given the derivatives of the function at the real part.

    When two dual numbers of different nesting depth meet, the deeper one is the outer number and the other is handled as a constant of its field type.
    """

    __slots__ = ()

    @property
    def depth(self):
        inner = [
            getattr(self, name).depth
            for name in self.__slots__
            if isinstance(getattr(self, name), DualNumber)
        ]
        return 1 + max(inner, default=0)

    @property
    def value(self):
        """Innermost real value"""
        return real_part(self)

    def _classify(self, other):
        """Return "same", "constant" or "outer" for the relation of other to self."""

        if not isinstance(other, DualNumber):
            return "constant"

        depth_self, depth_other = self.depth, other.depth
        if depth_other > depth_self:
            return "outer"
        elif depth_other < depth_self:
            return "constant"
        elif type(other) is type(self):
            return "same"
        else:
            raise TypeError(
                "Cannot combine dual numbers of kind {} and {} at the same nesting depth".format(
                    type(self).__name__, type(other).__name__
                )
            )

    # ___________ Arithmetic ___________
    def __add__(self, other):
        if isinstance(other, np.ndarray):
            return NotImplemented
        relation = self._classify(other)
        if relation == "same":
            return self._add(other)
        elif relation == "outer":
            return other.__radd__(self)
        return self._shift(other)

    def __radd__(self, other):
        return self._shift(other)

    def __neg__(self):
        return self._scale(-1.0)

    def __pos__(self):
        return self

    def __sub__(self, other):
        if isinstance(other, np.ndarray):
            return NotImplemented
        relation = self._classify(other)
        if relation == "same":
            return self._add(-other)
        elif relation == "outer":
            return other.__rsub__(self)
        return self._shift(-other)

    def __rsub__(self, other):
        return (-self)._shift(other)

    def __mul__(self, other):
        if isinstance(other, np.ndarray):
            return NotImplemented
        relation = self._classify(other)
        if relation == "same":
            return self._mul(other)
        elif relation == "outer":
            return other.__rmul__(self)
        return self._scale(other)

    def __rmul__(self, other):
        return self._scale(other)

    def __truediv__(self, other):
        if isinstance(other, np.ndarray):
            return NotImplemented
        relation = self._classify(other)
        if relation == "same":
            return self._mul(other.recip())
        elif relation == "outer":
            return other.__rtruediv__(self)
        return self._scale(1.0 / other)

    def __rtruediv__(self, other):
        return self.recip()._scale(other)

    def __pow__(self, other):
        if isinstance(other, np.ndarray):
            return NotImplemented
        if isinstance(other, DualNumber):
            return exp(other * self.log())
        return self.powf(other)

    def __rpow__(self, other):
        return (self * log(other)).exp()

    def __abs__(self):
        x = self.re
        sign = 1.0 if real_part(x) >= 0.0 else -1.0
        return self._chain(x * sign, sign, 0.0, 0.0)

    # ___________ Comparisons on the real part ___________
    def __lt__(self, other):
        return real_part(self) < real_part(other)

    def __le__(self, other):
        return real_part(self) <= real_part(other)

    def __gt__(self, other):
        return real_part(self) > real_part(other)

    def __ge__(self, other):
        return real_part(self) >= real_part(other)

    # ___________ Elementary functions ___________
    def recip(self):
        x = self.re
        r = 1.0 / x
        r2 = r * r
        return self._chain(r, -r2, 2.0 * r2 * r, -6.0 * r2 * r2)

    def powf(self, n):
        r"""
        Power with a real exponent, :math:`x^n`.

        Derivative coefficients that vanish for integer exponents are set to zero instead of being evaluated, so that e.g. ``x**2`` at ``x=0`` has finite derivatives.
        """
        if n == 0:
            return self._chain(self.re * 0.0 + 1.0, 0.0, 0.0, 0.0)
        elif n == 1:
            return self
        elif n == 2:
            return self * self

        x = self.re
        coefficients = [1.0, n, n * (n - 1), n * (n - 1) * (n - 2)]
        f = [c * x ** (n - k) if c != 0 else 0.0 for k, c in enumerate(coefficients)]
        return self._chain(*f)

    def exp(self):
        f = exp(self.re)
        return self._chain(f, f, f, f)

    def log(self):
        x = self.re
        r = 1.0 / x
        return self._chain(log(x), r, -r * r, 2.0 * r * r * r)

    def sqrt(self):
        x = self.re
        s = sqrt(x)
        f1 = 0.5 / s
        f2 = -0.5 * f1 / x
        f3 = -1.5 * f2 / x
        return self._chain(s, f1, f2, f3)

    def sin(self):
        s, c = sin(self.re), cos(self.re)
        return self._chain(s, c, -s, -c)

    def cos(self):
        s, c = sin(self.re), cos(self.re)
        return self._chain(c, -s, -c, s)

    def tanh(self):
        t = tanh(self.re)
        f1 = 1.0 - t * t
        return self._chain(t, f1, -2.0 * t * f1, f1 * (6.0 * t * t - 2.0))


class Dual(DualNumber):
    r"""
    First order dual number, :math:`x + \epsilon x'`.

    Parameters
    ----------
    re : float or DualNumber
        Real part
    eps : float, numpy.ndarray or DualNumber, Optional, default=0.0
        Derivative part. An array holds the gradient with respect to several independent variables at once.
    """

    __slots__ = ("re", "eps")

    def __init__(self, re, eps=0.0):
        self.re = re
        self.eps = eps

    def _add(self, other):
        return Dual(self.re + other.re, self.eps + other.eps)

    def _mul(self, other):
        return Dual(self.re * other.re, self.re * other.eps + self.eps * other.re)

    def _scale(self, c):
        return Dual(self.re * c, self.eps * c)

    def _shift(self, c):
        return Dual(self.re + c, self.eps)

    def _chain(self, f0, f1, f2, f3):
        return Dual(f0, f1 * self.eps)

    def __repr__(self):
        return "Dual({}, {})".format(self.re, self.eps)


class HyperDual(DualNumber):
    r"""
    Hyper-dual number for mixed second partial derivatives, :math:`x + \epsilon_1 x_1 + \epsilon_2 x_2 + \epsilon_1\epsilon_2 x_{12}`.

    Parameters
    ----------
    re : float or DualNumber
        Real part
    eps1 : float, Optional, default=0.0
        Derivative with respect to the first variable
    eps2 : float, Optional, default=0.0
        Derivative with respect to the second variable
    eps1eps2 : float, Optional, default=0.0
        Mixed second derivative
    """

    __slots__ = ("re", "eps1", "eps2", "eps1eps2")

    def __init__(self, re, eps1=0.0, eps2=0.0, eps1eps2=0.0):
        self.re = re
        self.eps1 = eps1
        self.eps2 = eps2
        self.eps1eps2 = eps1eps2

    def _add(self, other):
        return HyperDual(
            self.re + other.re,
            self.eps1 + other.eps1,
            self.eps2 + other.eps2,
            self.eps1eps2 + other.eps1eps2,
        )

    def _mul(self, other):
        return HyperDual(
            self.re * other.re,
            self.eps1 * other.re + self.re * other.eps1,
            self.eps2 * other.re + self.re * other.eps2,
            self.eps1eps2 * other.re
            + self.eps1 * other.eps2
            + self.eps2 * other.eps1
            + self.re * other.eps1eps2,
        )

    def _scale(self, c):
        return HyperDual(self.re * c, self.eps1 * c, self.eps2 * c, self.eps1eps2 * c)

    def _shift(self, c):
        return HyperDual(self.re + c, self.eps1, self.eps2, self.eps1eps2)

    def _chain(self, f0, f1, f2, f3):
        return HyperDual(
            f0,
            f1 * self.eps1,
            f1 * self.eps2,
            f1 * self.eps1eps2 + f2 * self.eps1 * self.eps2,
        )

    def __repr__(self):
        return "HyperDual({}, {}, {}, {})".format(
            self.re, self.eps1, self.eps2, self.eps1eps2
        )


class Dual2(DualNumber):
    r"""
    Dual number with first and second derivative with respect to one variable.
    """

    __slots__ = ("re", "v1", "v2")

    def __init__(self, re, v1=0.0, v2=0.0):
        self.re = re
        self.v1 = v1
        self.v2 = v2

    def _add(self, other):
        return Dual2(self.re + other.re, self.v1 + other.v1, self.v2 + other.v2)

    def _mul(self, other):
        return Dual2(
            self.re * other.re,
            self.v1 * other.re + self.re * other.v1,
            self.v2 * other.re + 2.0 * self.v1 * other.v1 + self.re * other.v2,
        )

    def _scale(self, c):
        return Dual2(self.re * c, self.v1 * c, self.v2 * c)

    def _shift(self, c):
        return Dual2(self.re + c, self.v1, self.v2)

    def _chain(self, f0, f1, f2, f3):
        return Dual2(f0, f1 * self.v1, f1 * self.v2 + f2 * self.v1 * self.v1)

    def __repr__(self):
        return "Dual2({}, {}, {})".format(self.re, self.v1, self.v2)


class Dual3(DualNumber):
    r"""
    Dual number with derivatives up to third order with respect to one variable.
    """

    __slots__ = ("re", "v1", "v2", "v3")

    def __init__(self, re, v1=0.0, v2=0.0, v3=0.0):
        self.re = re
        self.v1 = v1
        self.v2 = v2
        self.v3 = v3

    def _add(self, other):
        return Dual3(
            self.re + other.re,
            self.v1 + other.v1,
            self.v2 + other.v2,
            self.v3 + other.v3,
        )

    def _mul(self, other):
        return Dual3(
            self.re * other.re,
            self.v1 * other.re + self.re * other.v1,
            self.v2 * other.re + 2.0 * self.v1 * other.v1 + self.re * other.v2,
            self.v3 * other.re
            + 3.0 * self.v2 * other.v1
            + 3.0 * self.v1 * other.v2
            + self.re * other.v3,
        )

    def _scale(self, c):
        return Dual3(self.re * c, self.v1 * c, self.v2 * c, self.v3 * c)

    def _shift(self, c):
        return Dual3(self.re + c, self.v1, self.v2, self.v3)

    def _chain(self, f0, f1, f2, f3):
        v1, v2 = self.v1, self.v2
        return Dual3(
            f0,
            f1 * v1,
            f1 * v2 + f2 * v1 * v1,
            f1 * self.v3 + 3.0 * f2 * v1 * v2 + f3 * v1 * v1 * v1,
        )

    def __repr__(self):
        return "Dual3({}, {}, {}, {})".format(self.re, self.v1, self.v2, self.v3)
