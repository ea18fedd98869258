r"""
Vapor-liquid equilibrium of a pure component.

At fixed temperature the liquid and vapor densities are found with Newton steps on equal pressure and equal chemical potential. At fixed pressure an outer Newton iteration in :math:`1/T` uses the Clausius-Clapeyron slope computed from the converged phases.

Seeds for the densities are produced by an ordered list of strategies, see ``seed_strategies``. The first strategy whose seed converges wins.
"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.state import State
from dualeos.exceptions import (
    DomainError,
    IterationLimitError,
    LeftDomainError,
    SingularJacobianError,
    SolverError,
    TrivialSolutionError,
)
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos.thermodynamics.results import EquilibriumResult
from dualeos.thermodynamics.density import density_iteration, spinodal, pressure_and_slope
from dualeos.thermodynamics.critical_point import solve_critical_point
from dualeos.thermodynamics import properties as prop

logger = logging.getLogger(__name__)

fixed_variable_types = ["temperature", "pressure"]


def _pure_molefracs(eos, molefracs):

    if molefracs is None:
        if eos.number_of_components != 1:
            raise DomainError(
                "Select a component of the {} component model with molefracs".format(
                    eos.number_of_components
                )
            )
        return np.ones(1)

    molefracs = np.array(molefracs, float)
    if len(molefracs) != eos.number_of_components:
        raise DomainError(
            "Given {} mole fractions for {} components".format(
                len(molefracs), eos.number_of_components
            )
        )
    if np.count_nonzero(molefracs) != 1 or np.any(molefracs < 0.0):
        raise DomainError(
            "A pure component VLE needs a single nonzero mole fraction, given {}".format(
                molefracs
            )
        )

    return molefracs / np.sum(molefracs)


def _phase_terms(eos, T, rho, molefracs):
    r"""
    Pressure, its density derivative and :math:`\mu^{res}/RT` for one mole of a phase.
    """

    state = State.from_density(T, rho, molefracs)
    a, a_V, a_VV = prop._volume_derivatives(eos, state, order=2)
    RT = constants.R * T
    V = state.volume

    P = RT / V - RT * a_V
    dPdrho = V ** 2 * (RT / V ** 2 + RT * a_VV)
    Z = P * V / RT

    return P, dPdrho, a + Z - 1.0


def _solve_fixed_temperature(eos, T, molefracs, rho_l, rho_v, max_iter, tol, options):
    r"""
    Newton iterations in :math:`(\rho_l, \rho_v)` on

    .. math::

        f_1 = p_l - p_v, \qquad f_2 = \mu_l - \mu_v

    Returns
    -------
    rho_l : float
        Liquid density [mol/m^3]
    rho_v : float
        Vapor density [mol/m^3]
    P : float
        Pressure [Pa]
    iterations : int
    residual : float
    """

    RT = constants.R * T
    rho_upper = eos.density_max(molefracs)

    for i in range(max_iter + 1):
        p_l, dp_l, mu_l = _phase_terms(eos, T, rho_l, molefracs)
        p_v, dp_v, mu_v = _phase_terms(eos, T, rho_v, molefracs)

        f1 = p_l - p_v
        f2 = RT * (mu_l - mu_v + np.log(rho_l / rho_v))
        p_ref = max(abs(p_l), abs(p_v))
        residual = np.sqrt((f1 / p_ref) ** 2 + (f2 / RT) ** 2)
        if not np.isfinite(residual):
            raise LeftDomainError(
                "Phase equilibrium residual is undefined at rho_l={}, rho_v={}".format(
                    rho_l, rho_v
                )
            )

        options.log_iteration(
            logger,
            "VLE iteration {}: rho_l={}, rho_v={}, p_l={}, p_v={}, residual={}".format(
                i, rho_l, rho_v, p_l, p_v, residual
            ),
        )

        if abs(rho_l - rho_v) < 1e-5 * max(rho_l, rho_v):
            raise TrivialSolutionError(
                "Both phases approach the density {} at T={}".format(rho_l, T)
            )

        if residual < tol:
            if dp_l <= 0.0 or dp_v <= 0.0:
                raise LeftDomainError(
                    "Converged to a mechanically unstable phase, dp/drho: {}, {}".format(
                        dp_l, dp_v
                    )
                )
            if rho_l < rho_v:
                rho_l, rho_v = rho_v, rho_l
            return rho_l, rho_v, 0.5 * (p_l + p_v), i, residual

        if i == max_iter:
            break

        jac = np.array([[dp_l, -dp_v], [dp_l / rho_l, -dp_v / rho_v]])
        det = jac[0, 0] * jac[1, 1] - jac[0, 1] * jac[1, 0]
        if not np.isfinite(det) or abs(det) <= 1e-14 * abs(dp_l * dp_v) / (
            rho_l * rho_v
        ):
            raise SingularJacobianError(
                "Singular Jacobian of the phase equilibrium at T={}, rho_l={}, rho_v={}".format(
                    T, rho_l, rho_v
                )
            )
        drho_l, drho_v = np.linalg.solve(jac, -np.array([f1, f2]))

        rho_l += drho_l
        rho_v += drho_v
        if rho_l <= 0.0 or rho_v <= 0.0:
            raise LeftDomainError(
                "Negative density in the phase equilibrium at T={}: {}, {}".format(
                    T, rho_l, rho_v
                )
            )
        if rho_l >= rho_upper or rho_v >= rho_upper:
            raise LeftDomainError(
                "Density exceeded the maximum, {}, at T={}".format(rho_upper, T)
            )

    raise IterationLimitError(
        "Phase equilibrium at T={} did not converge in {} iterations, residual {}".format(
            T, max_iter, residual
        )
    )


# ______________ Seed strategies ______________
def ideal_gas_seed(eos, T, molefracs):
    r"""
    Liquid density at a low pressure and the vapor density of an ideal gas with the chemical potential of that liquid.

    :math:`\rho_v = \rho_l \exp(\mu^{res}_l/RT)`
    """

    P_low = 1e3
    rho_l = density_iteration(
        eos, T, P_low, molefracs, phase="liquid", options={"tol": 1e-6}, fallback=False
    )
    _, _, mu_l = _phase_terms(eos, T, rho_l, molefracs)

    return rho_l, rho_l * np.exp(mu_l)


def spinodal_seed(eos, T, molefracs):
    r"""
    Liquid and vapor roots at the pressure halfway between the spinodal pressures, the lower one taken as zero if negative.
    """

    rho_vs, rho_ls = spinodal(eos, T, molefracs)
    p_max, _ = pressure_and_slope(eos, T, rho_vs, molefracs)
    p_min, _ = pressure_and_slope(eos, T, rho_ls, molefracs)
    P = 0.5 * (max(p_min, 0.0) + p_max)

    rho_l = density_iteration(eos, T, P, molefracs, phase="liquid", fallback=False)
    rho_v = density_iteration(eos, T, P, molefracs, phase="vapor", fallback=False)

    return rho_l, rho_v


seed_strategies = [ideal_gas_seed, spinodal_seed]


def _solve_temperature(eos, T, molefracs, seed, max_iter, tol, options):

    if T <= 0.0 or not np.isfinite(T):
        raise DomainError("Temperature must be positive, given {}".format(T))

    seeds = []
    if seed is not None:
        seeds.append(("given", lambda eos, T, x: seed))
    seeds.extend([(func.__name__, func) for func in seed_strategies])

    error = None
    for name, func in seeds:
        try:
            rho_l, rho_v = func(eos, T, molefracs)
            logger.debug(
                "Seed {}: rho_l={}, rho_v={} at T={}".format(name, rho_l, rho_v, T)
            )
            return _solve_fixed_temperature(
                eos, T, molefracs, rho_l, rho_v, max_iter, tol, options
            )
        except (SolverError, np.linalg.LinAlgError) as err:
            logger.debug("Seed {} failed at T={}: {}".format(name, T, err))
            error = err

    if isinstance(error, SolverError):
        raise error
    raise SolverError("No seed converged at T={}: {}".format(T, error))


def _temperature_derivative(eos, T, rho, molefracs):
    state = State.from_density(T, rho, molefracs)
    _, a_T, _ = prop._temperature_derivatives(eos, state)
    return a_T


def _build_result(T, molefracs, rho_l, rho_v, P, iterations, residual):

    phases = [
        State.from_density(T, rho_l, molefracs),
        State.from_density(T, rho_v, molefracs),
    ]
    return EquilibriumResult(phases, T, P, iterations, residual, True)


def solve_pure_vle(
    eos, fixed_variable, value, molefracs=None, initial_state=None, options=None
):
    r"""
    Coexisting liquid and vapor of a pure component at a given temperature or pressure.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    fixed_variable : str
        Either "temperature" or "pressure"
    value : float
        Temperature [K] or pressure [Pa]
    molefracs : list[float], Optional, default=None
        Selects one component of a multicomponent model, exactly one entry should be nonzero
    initial_state : EquilibriumResult, Optional, default=None
        Previous solution whose densities (and temperature at fixed pressure) are used as the first seed
    options : SolverOptions or dict, Optional, default=None
        Iteration limit (default 50) and tolerance (default 1e-10)

    Returns
    -------
    result : EquilibriumResult
        Liquid and vapor state for one mole each
    """

    if fixed_variable not in fixed_variable_types:
        raise ValueError(
            "Fixed variable, {}, should be one of: {}".format(
                fixed_variable, ", ".join(fixed_variable_types)
            )
        )
    if value <= 0.0 or not np.isfinite(value):
        raise DomainError("The {} must be positive, given {}".format(fixed_variable, value))

    options = SolverOptions.from_dict(options)
    max_iter, tol, _ = options.unwrap(50, 1e-10)
    molefracs = _pure_molefracs(eos, molefracs)

    seed = None
    if initial_state is not None:
        seed = (initial_state.liquid.density, initial_state.vapor.density)

    if fixed_variable == "temperature":
        T = value
        rho_l, rho_v, P, iterations, residual = _solve_temperature(
            eos, T, molefracs, seed, max_iter, tol, options
        )
        logger.info(
            "VLE at T={} K: P={} Pa, rho_l={}, rho_v={} mol/m^3 in {} iterations".format(
                T, P, rho_l, rho_v, iterations
            )
        )
        return _build_result(T, molefracs, rho_l, rho_v, P, iterations, residual)

    return _solve_pressure(eos, value, molefracs, initial_state, seed, max_iter, tol, options)


def _solve_pressure(eos, P, molefracs, initial_state, seed, max_iter, tol, options):
    r"""
    Outer Newton iteration in :math:`x = 1/T` on :math:`\ln p^{sat}(T) - \ln p`, with

    .. math::

        \frac{d \ln p^{sat}}{d (1/T)} = -\frac{T^2 \Delta s}{p \Delta v}
    """

    if initial_state is not None:
        T = initial_state.temperature
    else:
        critical = solve_critical_point(eos, molefracs, options={"verbosity": options.verbosity})
        if P >= critical.pressure:
            raise DomainError(
                "Pressure, {} Pa, is not below the critical pressure, {} Pa".format(
                    P, critical.pressure
                )
            )
        T = critical.temperature / (1.0 - np.log(P / critical.pressure) / 5.373)

    for i in range(max_iter + 1):
        rho_l, rho_v, p_sat, iterations, residual = _solve_temperature(
            eos, T, molefracs, seed, max_iter, tol, options
        )
        seed = (rho_l, rho_v)

        f = np.log(p_sat / P)
        options.log_iteration(
            logger, "Saturation temperature iteration {}: T={}, f={}".format(i, T, f)
        )
        if abs(f) < 10.0 * tol:
            logger.info(
                "VLE at P={} Pa: T={} K, rho_l={}, rho_v={} mol/m^3 in {} iterations".format(
                    P, T, rho_l, rho_v, i
                )
            )
            return _build_result(T, molefracs, rho_l, rho_v, p_sat, i, abs(f))

        if i == max_iter:
            break

        RT = constants.R * T
        dv = 1.0 / rho_v - 1.0 / rho_l
        du = -RT * T * (
            _temperature_derivative(eos, T, rho_v, molefracs)
            - _temperature_derivative(eos, T, rho_l, molefracs)
        )
        ds = (du + p_sat * dv) / T
        slope = -T ** 2 * ds / (p_sat * dv)

        T_new = 1.0 / (1.0 / T - f / slope)
        if not np.isfinite(T_new) or T_new <= 0.0:
            raise LeftDomainError(
                "Saturation temperature left the physical domain from T={}".format(T)
            )
        T = np.clip(T_new, 0.9 * T, 1.1 * T)

    raise IterationLimitError(
        "Saturation temperature at P={} did not converge in {} iterations".format(
            P, max_iter
        )
    )
