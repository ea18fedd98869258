r"""
Isothermal-isobaric flash of a multicomponent feed.

The feed is first checked with a tangent plane distance analysis. An unstable feed is split with successive substitution on the K-values, each step solving the Rachford-Rice equation, and the split is refined with Newton steps on the isofugacity conditions in the vapor mole numbers.
"""

import numpy as np
import logging

from dualeos.state import State
from dualeos.exceptions import (
    DomainError,
    IterationLimitError,
    LeftDomainError,
    SingularJacobianError,
    TrivialSolutionError,
)
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos.thermodynamics.results import EquilibriumResult
from dualeos.thermodynamics.density import density_iteration
from dualeos.thermodynamics.stability import (
    stability_analysis,
    ln_fugacity_coefficient_tp,
    _check_feed,
)
from dualeos.thermodynamics import properties as prop
import dualeos.utils.general_toolbox as gtb

logger = logging.getLogger(__name__)


def rachford_rice(zi, Ki):
    r"""
    Vapor fraction from the Rachford-Rice equation

    .. math::

        g(\beta) = \sum_i \frac{z_i (K_i - 1)}{1 + \beta (K_i - 1)} = 0

    The root is found with :func:`scipy.optimize.brentq` inside the window where all phase compositions are positive, :math:`1/(1 - K_{max}) < \beta < 1/(1 - K_{min})`. The result may lie outside of [0, 1] (negative flash).

    Parameters
    ----------
    zi : list[float]
        Feed mole fractions
    Ki : list[float]
        K-values, :math:`y_i/x_i`

    Returns
    -------
    beta : float
        Vapor fraction
    """

    zi = np.array(zi, float)
    Ki = np.array(Ki, float)
    zi = zi / np.sum(zi)

    if np.max(Ki) <= 1.0 or np.min(Ki) >= 1.0:
        raise DomainError(
            "K-values must include values above and below one, given {}".format(Ki)
        )

    def func(beta):
        return np.sum(zi * (Ki - 1.0) / (1.0 + beta * (Ki - 1.0)))

    beta_min = 1.0 / (1.0 - np.max(Ki))
    beta_max = 1.0 / (1.0 - np.min(Ki))
    margin = 1e-10 * (beta_max - beta_min)

    return gtb.solve_root(func, bounds=(beta_min + margin, beta_max - margin))


def _successive_substitution(eos, T, P, z, lnK, max_iter, tol, options):

    for i in range(max_iter):
        beta = rachford_rice(z, np.exp(lnK))
        x = z / (1.0 + beta * (np.exp(lnK) - 1.0))
        y = np.exp(lnK) * x
        x /= np.sum(x)
        y /= np.sum(y)

        lnphi_l, _ = ln_fugacity_coefficient_tp(eos, T, P, x, phase="liquid")
        lnphi_v, _ = ln_fugacity_coefficient_tp(eos, T, P, y, phase="vapor")
        lnK_new = lnphi_l - lnphi_v

        change = np.max(np.abs(lnK_new - lnK))
        options.log_iteration(
            logger,
            "Flash substitution {}: beta={}, K={}, change={}".format(
                i, beta, np.exp(lnK_new), change
            ),
        )
        lnK = lnK_new
        if np.sum(lnK ** 2) < 1e-4:
            raise TrivialSolutionError("no phase split found, K-values approach one")
        if change < tol:
            break

    return lnK, i + 1


def _phase_state(eos, T, P, moles, phase):
    total = np.sum(moles)
    x = moles / total
    rho = density_iteration(eos, T, P, x, phase=phase)
    return State.from_density(T, rho, x, total_moles=total)


def _isofugacity(eos, T, P, v, l):

    vapor = _phase_state(eos, T, P, v, "vapor")
    liquid = _phase_state(eos, T, P, l, "liquid")

    lnphi_v = prop.ln_fugacity_coefficient(eos, vapor)
    lnphi_l = prop.ln_fugacity_coefficient(eos, liquid)
    V = np.sum(v)
    L = np.sum(l)
    F = np.log(v / V) + lnphi_v - np.log(l / L) - lnphi_l

    jac = (
        np.diag(1.0 / v)
        - 1.0 / V
        + prop.dln_phi_dnj(eos, vapor)
        + np.diag(1.0 / l)
        - 1.0 / L
        + prop.dln_phi_dnj(eos, liquid)
    )

    return F, jac, liquid, vapor


def _newton(eos, T, P, n, v, max_iter, tol, options):

    for i in range(max_iter + 1):
        l = n - v
        F, jac, liquid, vapor = _isofugacity(eos, T, P, v, l)
        residual = np.linalg.norm(F)
        options.log_iteration(
            logger, "Flash Newton iteration {}: v={}, residual={}".format(i, v, residual)
        )
        if not np.isfinite(residual):
            raise LeftDomainError("Isofugacity residual is undefined at v={}".format(v))
        if residual < tol:
            return liquid, vapor, i, residual
        if i == max_iter:
            break

        try:
            dv = np.linalg.solve(jac, -F)
        except np.linalg.LinAlgError:
            raise SingularJacobianError(
                "Singular Jacobian of the isofugacity conditions at v={}".format(v)
            )

        # Keep both phases' mole numbers positive
        alpha = 1.0
        for j in range(len(v)):
            if v[j] + dv[j] <= 0.0:
                alpha = min(alpha, 0.9 * v[j] / -dv[j])
            elif v[j] + dv[j] >= n[j]:
                alpha = min(alpha, 0.9 * (n[j] - v[j]) / dv[j])
        v = v + alpha * dv

    raise IterationLimitError(
        "Flash did not converge in {} Newton iterations, residual {}".format(
            max_iter, residual
        )
    )


def solve_flash(eos, T, P, feed, options=None, stability_options=None):
    r"""
    Split a feed at given temperature and pressure into liquid and vapor.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    P : float
        Pressure of the system [Pa]
    feed : list[float]
        Mole numbers of the feed [mol], every component must be present
    options : SolverOptions or dict, Optional, default=None
        Newton iteration limit (default 50) and tolerance (default 1e-10), successive substitution limit (max_iter_ss, default 20)
    stability_options : SolverOptions or dict, Optional, default=None
        Options of the stability analysis of the feed, its own defaults with the verbosity of ``options`` if None

    Returns
    -------
    result : EquilibriumResult
        Liquid and vapor phases with their phase fractions, or the feed alone with ``stable=True``
    """

    options = SolverOptions.from_dict(options)
    max_iter, tol, max_iter_ss = options.unwrap(50, 1e-10, max_iter_ss=20)
    if T <= 0.0 or P <= 0.0:
        raise DomainError("Temperature and pressure must be positive, given {}, {}".format(T, P))

    n = _check_feed(eos, feed)
    ntotal = np.sum(n)
    z = n / ntotal

    if stability_options is None:
        stability_options = SolverOptions(verbosity=options.verbosity)
    stability = stability_analysis(eos, T, P, z, options=stability_options)
    if stability.stable:
        rho = density_iteration(eos, T, P, z)
        state = State.from_density(T, rho, z, total_moles=ntotal)
        logger.info("Feed {} is stable at T={} K, P={} Pa".format(z, T, P))
        return EquilibriumResult([state], T, P, 0, 0.0, True, phase_fractions=[1.0], stable=True)

    # Initial K-values from the incipient phase
    trial = stability.incipient_phase
    w = np.asarray(trial.molefracs, float)
    _, rho_z = ln_fugacity_coefficient_tp(eos, T, P, z)
    if trial.density < rho_z:
        lnK = np.log(w / z)
    else:
        lnK = np.log(z / w)

    try:
        lnK, iterations_ss = _successive_substitution(
            eos, T, P, z, lnK, max_iter_ss, 1e-4, options
        )
        beta = rachford_rice(z, np.exp(lnK))
    except DomainError:
        raise TrivialSolutionError("no phase split found, K-values do not straddle one")
    if beta <= 0.0 or beta >= 1.0:
        raise TrivialSolutionError(
            "no phase split found, vapor fraction {} is outside of (0, 1)".format(beta)
        )

    x = z / (1.0 + beta * (np.exp(lnK) - 1.0))
    v = ntotal * beta * np.exp(lnK) * x
    v = np.minimum(v, 0.999999 * n)

    liquid, vapor, iterations, residual = _newton(
        eos, T, P, n, v, max_iter, tol, options
    )

    xi = np.asarray(liquid.molefracs, float)
    yi = np.asarray(vapor.molefracs, float)
    if np.sum(np.abs(xi - yi)) < 1e-5 and abs(liquid.density - vapor.density) < 1e-5 * liquid.density:
        raise TrivialSolutionError("no phase split found, both phases have the feed composition")

    phases = [liquid, vapor]
    if liquid.density < vapor.density:
        phases = [vapor, liquid]
    fractions = np.array([phase.total_moles for phase in phases]) / ntotal

    logger.info(
        "Flash at T={} K, P={} Pa: x={}, y={}, vapor fraction={} in {} iterations".format(
            T, P, phases[0].molefracs, phases[1].molefracs, fractions[1], iterations_ss + iterations
        )
    )

    return EquilibriumResult(
        phases, T, P, iterations_ss + iterations, residual, True, phase_fractions=fractions
    )
