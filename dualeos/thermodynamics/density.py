r"""
Density from temperature, pressure and composition.

The pressure is solved for the molar density with Newton steps that only accept mechanically stable iterates, :math:`(\partial p/\partial \rho)_T > 0`. A liquid iterate in the unstable region moves toward the maximum density and a vapor iterate moves toward zero, so that each branch converges to its own root. Steps are bounded by a twentieth of the maximum density to keep an iterate from jumping over the unstable region.
"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.state import State
from dualeos.exceptions import DomainError, IterationLimitError, SolverError
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos.thermodynamics import properties as prop
import dualeos.utils.general_toolbox as gtb

logger = logging.getLogger(__name__)

phase_types = ["liquid", "vapor"]


def _check_molefracs(eos, molefracs):

    if molefracs is None:
        if eos.number_of_components != 1:
            raise DomainError(
                "Mole fractions are needed for a mixture of {} components".format(
                    eos.number_of_components
                )
            )
        molefracs = [1.0]

    molefracs = np.array(molefracs, float)
    if len(molefracs) != eos.number_of_components:
        raise DomainError(
            "Given {} mole fractions for {} components".format(
                len(molefracs), eos.number_of_components
            )
        )
    if np.any(molefracs < 0.0) or np.sum(molefracs) <= 0.0:
        raise DomainError("Mole fractions must be non-negative, given {}".format(molefracs))

    return molefracs / np.sum(molefracs)


def pressure_and_slope(eos, T, rho, molefracs):
    r"""
    Pressure and its derivative in the molar density for one mole of substance.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    rho : float
        Molar density [mol/m^3]
    molefracs : numpy.ndarray
        Mole fraction of each component

    Returns
    -------
    P : float
        Pressure [Pa]
    dPdrho : float
        :math:`(\partial p / \partial \rho)_{T,x}` [Pa m^3/mol]
    """

    state = State.from_density(T, rho, molefracs)
    _, a_V, a_VV = prop._volume_derivatives(eos, state, order=2)
    RT = constants.R * T
    V = state.volume

    P = RT / V - RT * a_V
    dPdV = -RT / V ** 2 - RT * a_VV

    return P, -V ** 2 * dPdV


def _newton_branch(eos, T, P, molefracs, phase, rho0, rho_upper, max_iter, tol, options):

    rho = rho0
    for i in range(max_iter):
        p_calc, dpdrho = pressure_and_slope(eos, T, rho, molefracs)

        if not np.isfinite(p_calc) or dpdrho <= 0.0:
            # Unstable or undefined, move toward the branch
            if phase == "liquid":
                rho = 0.5 * (rho + rho_upper)
            else:
                rho = 0.5 * rho
            continue

        residual = p_calc - P
        options.log_iteration(
            logger,
            "Density iteration ({}) {}: rho={}, p={}, residual={}".format(
                phase, i, rho, p_calc, residual
            ),
        )
        if abs(residual) < tol * P:
            return rho, i

        # Bounded step, a branch without a root must not reach the other one
        step = -residual / dpdrho
        max_step = 0.05 * rho_upper
        rho_new = rho + min(max(step, -max_step), max_step)
        if rho_new <= 0.0:
            rho_new = 0.5 * rho
        elif rho_new >= rho_upper:
            rho_new = 0.5 * (rho + rho_upper)
        rho = rho_new

    raise IterationLimitError(
        "Density iteration for the {} branch did not converge in {} iterations at T={}, P={}".format(
            phase, max_iter, T, P
        )
    )


def density_iteration(
    eos, T, P, molefracs=None, phase=None, initial_density=None, options=None, fallback=True
):
    r"""
    Molar density of a mechanically stable root of the pressure equation.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    P : float
        Pressure of the system [Pa]
    molefracs : list[float], Optional, default=None
        Mole fraction of each component, may be omitted for a pure component
    phase : str, Optional, default=None
        "liquid" or "vapor" to start from the respective density seed. If the branch has no root (e.g. above the critical temperature), the other branch is tried and a warning is logged. If None, both are computed and the root with the lower Gibbs energy is returned.
    initial_density : float, Optional, default=None
        Starting density [mol/m^3], replaces the seed of the chosen phase
    options : SolverOptions or dict, Optional, default=None
        Iteration limit (default 50) and relative tolerance on the pressure (default 1e-10)
    fallback : bool, Optional, default=True
        If False, a failure of the requested branch is raised instead of trying the other branch

    Returns
    -------
    rho : float
        Molar density [mol/m^3]
    """

    options = SolverOptions.from_dict(options)
    max_iter, tol, _ = options.unwrap(50, 1e-10)

    if T <= 0.0 or not np.isfinite(T):
        raise DomainError("Temperature must be positive, given {}".format(T))
    if P <= 0.0 or not np.isfinite(P):
        raise DomainError("Pressure must be positive, given {}".format(P))
    if phase is not None and phase not in phase_types:
        raise ValueError(
            "Phase, {}, should be one of: {}".format(phase, ", ".join(phase_types))
        )
    molefracs = _check_molefracs(eos, molefracs)

    rho_upper = eos.density_max(molefracs)
    seeds = {
        "liquid": eos.density_max(molefracs, maxpack=eos.liquid_packing_fraction),
        "vapor": P / (constants.R * T),
    }
    if seeds["vapor"] >= rho_upper:
        seeds["vapor"] = 0.5 * rho_upper

    if phase is None:
        roots = []
        for branch in phase_types:
            try:
                rho, _ = _newton_branch(
                    eos, T, P, molefracs, branch, seeds[branch], rho_upper, max_iter, tol, options
                )
                roots.append(rho)
            except SolverError as error:
                logger.debug("No {} root: {}".format(branch, error))
        if not roots:
            raise IterationLimitError(
                "Neither a liquid nor a vapor density was found at T={}, P={}".format(T, P)
            )
        if len(roots) == 1 or abs(roots[0] - roots[1]) < 1e-8 * roots[0]:
            return roots[0]

        gibbs = [
            prop.molar_gibbs_energy_of_mixing_terms(eos, State.from_density(T, rho, molefracs))
            for rho in roots
        ]
        logger.debug(
            "Roots {} have reduced Gibbs energies {}, choosing the lower".format(roots, gibbs)
        )
        return roots[int(np.argmin(gibbs))]

    rho0 = seeds[phase] if initial_density is None else initial_density
    try:
        rho, iterations = _newton_branch(
            eos, T, P, molefracs, phase, rho0, rho_upper, max_iter, tol, options
        )
    except SolverError as error:
        if not fallback:
            raise
        other = "vapor" if phase == "liquid" else "liquid"
        logger.warning(
            "No {} root at T={}, P={}, returning the {} root: {}".format(
                phase, T, P, other, error
            )
        )
        rho, iterations = _newton_branch(
            eos, T, P, molefracs, other, seeds[other], rho_upper, max_iter, tol, options
        )
    logger.debug("Density {} mol/m^3 in {} iterations".format(rho, iterations))

    return rho


def state_from_pressure(eos, T, P, moles=None, phase=None, options=None, **kwargs):
    r"""
    State at given temperature, pressure and mole numbers.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    P : float
        Pressure of the system [Pa]
    moles : list[float], Optional, default=None
        Mole numbers [mol], one mole of a pure component if None
    phase : str, Optional, default=None
        See :func:`density_iteration`
    options : SolverOptions or dict, Optional, default=None
        See :func:`density_iteration`

    Returns
    -------
    state : State
        State with the volume found from the pressure
    """

    if moles is None:
        moles = np.ones(1)
    moles = np.array(moles, float)
    total = np.sum(moles)
    if total <= 0.0:
        raise DomainError("Total moles must be positive")

    rho = density_iteration(eos, T, P, moles / total, phase=phase, options=options, **kwargs)

    return State(T, total / rho, moles)


def spinodal(eos, T, molefracs=None, npoints=200):
    r"""
    Densities of the vapor and liquid spinodals, where :math:`(\partial p/\partial \rho)_T = 0`.

    The density range up to the maximum density is scanned on a logarithmic grid for sign changes of the slope, each is refined with :func:`scipy.optimize.brentq`.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    T : float
        Temperature of the system [K]
    molefracs : list[float], Optional, default=None
        Mole fraction of each component
    npoints : int, Optional, default=200
        Number of densities in the scan

    Returns
    -------
    rho_vapor : float
        Vapor spinodal density [mol/m^3]
    rho_liquid : float
        Liquid spinodal density [mol/m^3]
    """

    molefracs = _check_molefracs(eos, molefracs)
    rho_upper = eos.density_max(molefracs)

    def slope(rho):
        return pressure_and_slope(eos, T, rho, molefracs)[1]

    rho_array = np.logspace(np.log10(rho_upper) - 6, np.log10(rho_upper), npoints)
    slopes = np.array([slope(rho) for rho in rho_array])
    sign_changes = np.where(np.diff(np.sign(slopes)) != 0)[0]

    if len(sign_changes) < 2:
        raise SolverError(
            "No spinodal found at T={}, the temperature may be supercritical".format(T),
            kind="not_converged",
        )

    i_vap, i_liq = sign_changes[0], sign_changes[-1]
    rho_vapor = gtb.solve_root(slope, bounds=(rho_array[i_vap], rho_array[i_vap + 1]))
    rho_liquid = gtb.solve_root(slope, bounds=(rho_array[i_liq], rho_array[i_liq + 1]))

    return rho_vapor, rho_liquid
