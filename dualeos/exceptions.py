"""
Exceptions raised by model construction, state validation and the equilibrium solvers.
"""


class ConfigurationError(ValueError):
    """Missing, malformed or inconsistent model parameters or inputs."""


class DomainError(ValueError):
    """A state or operating condition outside the physical domain of a calculation."""


class SolverError(RuntimeError):
    """
    An iterative solver did not produce a valid solution.

    Parameters
    ----------
    message : str
        Description of the failure
    kind : str, Optional, default="not_converged"
        Short category of the failure, one of ``not_converged``, ``left_domain``, ``singular_jacobian`` or ``trivial_solution``
    """

    kind = "not_converged"

    def __init__(self, message, kind=None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class IterationLimitError(SolverError):
    """Iteration limit reached before the tolerance was met."""

    kind = "not_converged"


class LeftDomainError(SolverError):
    """An iterate left the physical domain (negative density, temperature outside bounds)."""

    kind = "left_domain"


class SingularJacobianError(SolverError):
    kind = "singular_jacobian"


class TrivialSolutionError(SolverError):
    """All phases converged to the same state."""

    kind = "trivial_solution"
