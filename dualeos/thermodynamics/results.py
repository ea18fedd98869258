"""
Results returned by the equilibrium solvers.

Result objects are created by the solvers only and hold real valued states.
"""

import numpy as np


class EquilibriumResult:
    r"""
    Coexisting phases at a common temperature and pressure.

    Parameters
    ----------
    phases : list[State]
        Coexisting phases. Pure component and flash results list the liquid first and the vapor second.
    temperature : float
        Temperature [K]
    pressure : float
        Pressure [Pa]
    iterations : int
        Number of iterations used by the solver
    residual : float
        Norm of the residual at the returned states
    converged : bool
        True if the residual norm is below the tolerance
    phase_fractions : numpy.ndarray, Optional, default=None
        Fraction of the total amount of substance in each phase. Defaults to the amounts of the phases.
    stable : bool, Optional, default=False
        True for a feed that was found to be stable, then only one phase is given
    """

    def __init__(
        self,
        phases,
        temperature,
        pressure,
        iterations,
        residual,
        converged,
        phase_fractions=None,
        stable=False,
    ):

        self.phases = list(phases)
        self.temperature = temperature
        self.pressure = pressure
        self.iterations = iterations
        self.residual = residual
        self.converged = converged
        self.stable = stable

        if phase_fractions is None:
            amounts = np.array([phase.total_moles for phase in self.phases], float)
            phase_fractions = amounts / np.sum(amounts)
        self.phase_fractions = np.array(phase_fractions, float)

    @property
    def liquid(self):
        return self.phases[0]

    @property
    def vapor(self):
        return self.phases[-1]

    def __repr__(self):
        return "EquilibriumResult(T={}, p={}, phases={}, fractions={}, iterations={}, residual={}, converged={}, stable={})".format(
            self.temperature,
            self.pressure,
            len(self.phases),
            self.phase_fractions,
            self.iterations,
            self.residual,
            self.converged,
            self.stable,
        )


class CriticalPoint:
    r"""
    Critical state of a mixture of fixed composition.

    Parameters
    ----------
    state : State
        Critical state
    pressure : float
        Critical pressure [Pa]
    iterations : int
        Number of Newton iterations
    residual : float
        Norm of the critical conditions
    converged : bool
        True if the residual norm is below the tolerance
    """

    def __init__(self, state, pressure, iterations, residual, converged):

        self.state = state
        self.pressure = pressure
        self.iterations = iterations
        self.residual = residual
        self.converged = converged

    @property
    def temperature(self):
        return self.state.temperature

    @property
    def density(self):
        return self.state.density

    def __repr__(self):
        return "CriticalPoint(T={}, p={}, rho={}, iterations={}, residual={}, converged={})".format(
            self.temperature,
            self.pressure,
            self.density,
            self.iterations,
            self.residual,
            self.converged,
        )


class StabilityResult:
    r"""
    Outcome of a tangent plane distance analysis.

    Parameters
    ----------
    stable : bool
        True if no trial phase has a negative tangent plane distance
    tangent_plane_distances : list[float]
        Reduced tangent plane distance of each converged nontrivial trial phase
    trial_states : list[State]
        Converged nontrivial trial phases in the same order
    """

    def __init__(self, stable, tangent_plane_distances, trial_states):

        self.stable = stable
        self.tangent_plane_distances = list(tangent_plane_distances)
        self.trial_states = list(trial_states)

    @property
    def minimum_tangent_plane_distance(self):
        if not self.tangent_plane_distances:
            return None
        return min(self.tangent_plane_distances)

    @property
    def incipient_phase(self):
        """Trial state with the most negative tangent plane distance, None if stable"""
        if self.stable or not self.trial_states:
            return None
        index = int(np.argmin(self.tangent_plane_distances))
        return self.trial_states[index]

    def __repr__(self):
        return "StabilityResult(stable={}, tangent_plane_distances={})".format(
            self.stable, self.tangent_plane_distances
        )
