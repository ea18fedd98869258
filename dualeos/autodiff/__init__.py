"""
Forward mode automatic differentiation with dual numbers.

Model code is written once and evaluated with floats, dual numbers or numpy object arrays of dual numbers. The thermodynamic layer seeds the variables it needs derivatives with respect to and reads the derivative parts from the result.
"""

from .dual import (
    DualNumber,
    Dual,
    HyperDual,
    Dual2,
    Dual3,
    real_part,
    exp,
    log,
    sqrt,
    sin,
    cos,
    tanh,
)
from .derivatives import (
    first_derivative,
    second_derivative,
    third_derivative,
    gradient,
    hessian,
    second_partial_derivative,
)
