r"""
Stability of a mixture at given temperature, pressure and composition.

The tangent plane distance of a trial phase with mole numbers :math:`W_i`,

.. math::

    tm(W) = 1 + \sum_i W_i \left(\ln W_i + \ln \phi_i(w) - d_i - 1\right), \qquad d_i = \ln z_i + \ln \phi_i(z)

is minimized by successive substitution, :math:`\ln W_i = d_i - \ln \phi_i(w)`. A negative minimum shows that the feed splits.
"""

import numpy as np
import logging

from dualeos.state import State
from dualeos.exceptions import DomainError, SolverError
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos.thermodynamics.results import StabilityResult
from dualeos.thermodynamics.density import density_iteration, phase_types
from dualeos.thermodynamics import properties as prop

logger = logging.getLogger(__name__)


def ln_fugacity_coefficient_tp(eos, T, P, molefracs, phase=None, fallback=True):
    r"""
    Logarithmic fugacity coefficients at given temperature and pressure.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    P : float
        Pressure of the system [Pa]
    molefracs : numpy.ndarray
        Mole fraction of each component
    phase : str, Optional, default=None
        Density root, see :func:`~dualeos.thermodynamics.density.density_iteration`
    fallback : bool, Optional, default=True
        If False, a missing root of the given phase is raised

    Returns
    -------
    lnphi : numpy.ndarray
        Logarithmic fugacity coefficients
    rho : float
        Molar density of the root [mol/m^3]
    """

    rho = density_iteration(eos, T, P, molefracs, phase=phase, fallback=fallback)
    lnphi = prop.ln_fugacity_coefficient(eos, State.from_density(T, rho, molefracs))

    return lnphi, rho


def _check_feed(eos, feed):

    feed = np.array(feed, float)
    if len(feed) != eos.number_of_components:
        raise DomainError(
            "Given {} feed entries for {} components".format(
                len(feed), eos.number_of_components
            )
        )
    if np.any(feed <= 0.0):
        raise DomainError(
            "Every component must be present in the feed, given {}".format(feed)
        )

    return feed


def trial_compositions(ncomp, dominant=0.9):
    """
    Trial compositions, each rich in one component.

    Parameters
    ----------
    ncomp : int
        Number of components
    dominant : float, Optional, default=0.9
        Mole fraction of the rich component

    Returns
    -------
    trials : list[numpy.ndarray]
        Mole fractions of each trial
    """

    trials = []
    for i in range(ncomp):
        w = np.ones(ncomp) * (1.0 - dominant) / (ncomp - 1)
        w[i] = dominant
        trials.append(w)

    return trials


def _minimize_tangent_plane(eos, T, P, d, w, phase, max_iter, tol, options):

    lnW = np.log(w)
    converged = False
    for i in range(max_iter):
        w = np.exp(lnW) / np.sum(np.exp(lnW))
        lnphi, _ = ln_fugacity_coefficient_tp(eos, T, P, w, phase=phase, fallback=False)
        lnW_new = d - lnphi

        change = np.max(np.abs(lnW_new - lnW))
        options.log_iteration(
            logger,
            "Stability ({}) iteration {}: w={}, change={}".format(phase, i, w, change),
        )
        lnW = lnW_new
        if change < tol:
            converged = True
            break

    # A negative distance at any trial shows instability, converged or not
    W = np.exp(lnW)
    w = W / np.sum(W)
    lnphi, rho = ln_fugacity_coefficient_tp(eos, T, P, w, phase=phase, fallback=False)
    tm = 1.0 + np.sum(W * (lnW + lnphi - d - 1.0))

    return w, rho, tm, converged


def stability_analysis(eos, state_or_temperature, pressure=None, feed=None, options=None):
    r"""
    Tangent plane distance analysis of a feed.

    Each component-rich trial composition is tried at vapor and at liquid density, giving :math:`2N` trials.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    state_or_temperature : State or float
        Feed state, or the temperature [K] in which case pressure and feed are needed
    pressure : float, Optional, default=None
        Pressure [Pa]
    feed : list[float], Optional, default=None
        Mole numbers or fractions of the feed
    options : SolverOptions or dict, Optional, default=None
        Successive substitution limit per trial (max_iter_ss, default 200) and tolerance on the change of :math:`\ln W` (default 1e-8)

    Returns
    -------
    result : StabilityResult
        Stability flag with the nontrivial trial phases and their tangent plane distances
    """

    options = SolverOptions.from_dict(options)
    _, tol, max_iter = options.unwrap(None, 1e-8, max_iter_ss=200)

    if isinstance(state_or_temperature, State):
        state = state_or_temperature.real()
        T = state.temperature
        P = prop.pressure(eos, state)
        z = _check_feed(eos, state.moles)
    else:
        T = state_or_temperature
        if pressure is None or feed is None:
            raise ValueError("Pressure and feed are needed with a temperature")
        P = pressure
        z = _check_feed(eos, feed)
    z = z / np.sum(z)

    if len(z) == 1:
        return StabilityResult(True, [], [])

    lnphi_z, rho_z = ln_fugacity_coefficient_tp(eos, T, P, z)
    d = np.log(z) + lnphi_z

    distances = []
    trial_states = []
    for w0 in trial_compositions(len(z)):
        for phase in phase_types:
            try:
                w, rho, tm, converged = _minimize_tangent_plane(
                    eos, T, P, d, w0, phase, max_iter, tol, options
                )
            except SolverError as error:
                logger.debug("Trial {} ({}) skipped: {}".format(w0, phase, error))
                continue
            trivial = np.sum((w - z) ** 2) < 1e-8 and abs(rho - rho_z) < 1e-4 * rho_z
            if trivial:
                logger.debug("Trial {} ({}) converged to the feed".format(w0, phase))
                continue
            if not converged and tm >= 0.0:
                logger.debug(
                    "Trial {} ({}) did not converge in {} iterations".format(
                        w0, phase, max_iter
                    )
                )
                continue
            distances.append(tm)
            trial_states.append(State.from_density(T, rho, w))

    stable = not any(tm < -1e-10 for tm in distances)
    result = StabilityResult(stable, distances, trial_states)
    logger.info(
        "Feed {} at T={} K, P={} Pa is {}, tangent plane distances: {}".format(
            z, T, P, "stable" if stable else "unstable", distances
        )
    )

    return result
