r"""
Critical point of a fluid of fixed composition.

The critical conditions :math:`(\partial p/\partial V)_{T,n} = 0` and :math:`(\partial^2 p/\partial V^2)_{T,n} = 0` are written in the reduced form

.. math::

    f_1 = 1 + \frac{V^2}{n} a_{VV} = 0, \qquad f_2 = 2 - \frac{V^3}{n} a_{VVV} = 0

and solved with Newton steps in temperature and volume. The Jacobian comes from a single evaluation with a third order dual volume whose fields carry the gradient in (T, V).
"""

import numpy as np
import logging

from dualeos.autodiff import Dual, Dual3
from dualeos.state import State
from dualeos.exceptions import (
    DomainError,
    LeftDomainError,
    SingularJacobianError,
    IterationLimitError,
    SolverError,
)
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos.thermodynamics.results import CriticalPoint
from dualeos.thermodynamics.density import _check_molefracs
from dualeos.thermodynamics import properties as prop

logger = logging.getLogger(__name__)

temperature_seed_factors = [1.0, 1.3, 0.8, 1.6]


def critical_conditions(eos, T, V, moles):
    r"""
    Reduced critical conditions and their Jacobian in temperature and volume.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    V : float
        Volume of the system [m^3]
    moles : numpy.ndarray
        Mole numbers [mol]

    Returns
    -------
    f : numpy.ndarray
        Values of :math:`f_1` and :math:`f_2`
    jac : numpy.ndarray
        Matrix of derivatives, rows are the conditions and columns are T and V
    """

    n = np.sum(moles)
    T_dual = Dual(T, np.array([1.0, 0.0]))
    V_inner = Dual(V, np.array([0.0, 1.0]))
    V_dual = Dual3(V_inner, Dual(1.0, np.zeros(2)), 0.0, 0.0)

    a = eos.residual_helmholtz_energy(State(T_dual, V_dual, moles))

    f1 = 1.0 + V_inner * V_inner * a.v2 / n
    f2 = 2.0 - V_inner * V_inner * V_inner * a.v3 / n

    f = np.array([f1.re, f2.re], float)
    jac = np.array([f1.eps, f2.eps], float)

    return f, jac


def _newton(eos, moles, T, V, bounds, max_iter, tol, options):

    for i in range(max_iter + 1):
        f, jac = critical_conditions(eos, T, V, moles)
        if not np.all(np.isfinite(f)):
            raise LeftDomainError(
                "Critical conditions are undefined at T={}, V={}".format(T, V)
            )

        residual = np.linalg.norm(f)
        options.log_iteration(
            logger,
            "Critical point iteration {}: T={}, V={}, residual={}".format(
                i, T, V, residual
            ),
        )
        if residual < tol:
            return T, V, i, residual

        if i == max_iter:
            break

        det = np.linalg.det(jac)
        if not np.isfinite(det) or abs(det) < 1e-14 * np.max(np.abs(jac)) ** 2:
            raise SingularJacobianError(
                "Singular Jacobian of the critical conditions at T={}, V={}".format(T, V)
            )
        dT, dV = np.linalg.solve(jac, -f)

        # Limit steps to keep the iterate near the region of the seed
        dT = np.clip(dT, -0.25 * T, 0.25 * T)
        dV = np.clip(dV, -0.5 * V, 0.5 * V)
        T += dT
        V += dV

        if T <= bounds[0] or T >= bounds[1]:
            raise LeftDomainError(
                "Temperature, {}, left the search domain {}".format(T, bounds)
            )
        if V <= 0.0:
            raise LeftDomainError("Volume became negative in the critical point search")

    raise IterationLimitError(
        "Critical point search did not converge in {} iterations, residual {}".format(
            max_iter, residual
        )
    )


def solve_critical_point(
    eos, molefracs=None, initial_temperature=None, temperature_bounds=None, options=None
):
    r"""
    Locate the critical point of a fluid of fixed composition.

    Newton iterations start from a sequence of temperature seeds around the characteristic temperature of the model and a density from its critical packing fraction. The first converged seed is returned.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    molefracs : list[float], Optional, default=None
        Mole fraction of each component, may be omitted for a pure component
    initial_temperature : float, Optional, default=None
        Temperature seed [K], tried before the seeds of the model
    temperature_bounds : tuple, Optional, default=None
        Lower and upper temperature of the search domain [K]. A seed outside of the domain is moved to its center, an iterate leaving it fails.
    options : SolverOptions or dict, Optional, default=None
        Iteration limit (default 50) and tolerance (default 1e-8)

    Returns
    -------
    critical_point : CriticalPoint
        Critical state for one mole of substance, its pressure and convergence information
    """

    options = SolverOptions.from_dict(options)
    max_iter, tol, _ = options.unwrap(50, 1e-8)
    molefracs = _check_molefracs(eos, molefracs)

    if temperature_bounds is None:
        bounds = (0.0, np.inf)
    else:
        bounds = tuple(float(x) for x in temperature_bounds)
        if len(bounds) != 2 or bounds[0] < 0.0 or bounds[1] <= bounds[0]:
            raise DomainError(
                "Temperature bounds should be (low, high) with 0 <= low < high, given {}".format(
                    temperature_bounds
                )
            )

    T_char = eos.characteristic_temperature(molefracs)
    seeds = [T_char * x for x in temperature_seed_factors]
    if initial_temperature is not None:
        seeds.insert(0, initial_temperature)

    rho0 = eos.density_max(molefracs, maxpack=eos.critical_packing_fraction)
    V0 = 1.0 / rho0
    moles = molefracs.copy()

    error = None
    for T0 in seeds:
        if T0 <= bounds[0] or T0 >= bounds[1]:
            if np.isfinite(bounds[1]):
                T0 = 0.5 * (bounds[0] + bounds[1])
            else:
                T0 = 2.0 * bounds[0]
        try:
            T, V, iterations, residual = _newton(
                eos, moles, T0, V0, bounds, max_iter, tol, options
            )
        except (SolverError, np.linalg.LinAlgError) as err:
            logger.debug("Critical point seed T={} failed: {}".format(T0, err))
            error = err
            continue

        state = State(T, V, moles)
        P = prop.pressure(eos, state)
        if P <= 0.0:
            error = LeftDomainError(
                "Critical point search converged to a negative pressure, {} Pa, at T={}".format(
                    P, T
                )
            )
            logger.debug(str(error))
            continue

        logger.info(
            "Critical point: T={} K, P={} Pa, rho={} mol/m^3 in {} iterations".format(
                T, P, 1.0 / V, iterations
            )
        )
        return CriticalPoint(state, P, iterations, residual, True)

    if isinstance(error, SolverError):
        raise error
    raise SolverError("Critical point search failed for all seeds: {}".format(error))
