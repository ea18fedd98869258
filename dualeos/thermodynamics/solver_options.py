"""
Options shared by the iterative equilibrium solvers.
"""

import logging

logger = logging.getLogger(__name__)


class SolverOptions:
    r"""
    Iteration limits and tolerance of a solver.

    Parameters
    ----------
    max_iter : int, Optional, default=None
        Maximum number of Newton iterations, the default of the solver is used if None
    tol : float, Optional, default=None
        Tolerance on the residual norm, the default of the solver is used if None
    verbosity : int, Optional, default=0
        If larger than zero, each iteration is logged at INFO level instead of DEBUG
    max_iter_ss : int, Optional, default=None
        Maximum number of successive substitution iterations where a solver has such a stage
    """

    def __init__(self, max_iter=None, tol=None, verbosity=0, max_iter_ss=None):

        if max_iter is not None and max_iter < 0:
            raise ValueError("max_iter must be non-negative, given {}".format(max_iter))
        if tol is not None and tol <= 0:
            raise ValueError("tol must be positive, given {}".format(tol))

        self.max_iter = max_iter
        self.tol = tol
        self.verbosity = verbosity
        self.max_iter_ss = max_iter_ss

    @classmethod
    def from_dict(cls, options):
        """
        Build options from a dictionary, unknown keys are ignored.
        """

        if options is None:
            return cls()
        if isinstance(options, SolverOptions):
            return options

        known = ["max_iter", "tol", "verbosity", "max_iter_ss"]
        kwargs = {}
        for key, value in options.items():
            if key in known:
                kwargs[key] = value
            else:
                logger.debug("Solver option, {}, is not recognized and is ignored".format(key))

        return cls(**kwargs)

    def unwrap(self, max_iter, tol, max_iter_ss=None):
        """
        Fill in the defaults of a solver.

        Returns
        -------
        max_iter : int
        tol : float
        max_iter_ss : int
        """

        return (
            max_iter if self.max_iter is None else self.max_iter,
            tol if self.tol is None else self.tol,
            max_iter_ss if self.max_iter_ss is None else self.max_iter_ss,
        )

    def log_iteration(self, log, message):
        if self.verbosity > 0:
            log.info(message)
        else:
            log.debug(message)

    def __repr__(self):
        return "SolverOptions(max_iter={}, tol={}, verbosity={}, max_iter_ss={})".format(
            self.max_iter, self.tol, self.verbosity, self.max_iter_ss
        )
