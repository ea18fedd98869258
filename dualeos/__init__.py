"""
DUALEOS
DUALEOS: Equations of state with dual number derivatives for thermodynamic properties and phase equilibria
"""

import logging
import logging.handlers
import os

from .state import State
from .exceptions import (
    ConfigurationError,
    DomainError,
    SolverError,
    IterationLimitError,
    LeftDomainError,
    SingularJacobianError,
    TrivialSolutionError,
)
from .equations_of_state import initiate_eos
from .thermodynamics import (
    thermo,
    evaluate_property,
    density_iteration,
    solve_pure_vle,
    solve_critical_point,
    stability_analysis,
    solve_flash,
    SolverOptions,
)

__version__ = "0.1.0"

logger = logging.getLogger()
logger.setLevel(30)


def initiate_logger(console=None, log_file=None, verbose=30):
    """
    Initiate a logging handler if more detail on the calculations is desired.

    If a handler of the given type is already present, nothing is done. Subclasses of StreamHandler added by other tools, e.g. log capture of a test runner, are not counted as the console handler. If either handler is given a value of False, the handler of that type is removed.

    Parameters
    ----------
    console : bool, Optional, default=None
        Initiates a stream handler to print to a console. If True, this handler is initiated. If it is False, then any StreamHandler is removed.
    log_file : bool/str, Optional, default=None
        If log output should be recorded in a file, set this keyword to either True or to a name for the log file. If True, the file name 'dualeos.log' is used. Note that if a file with the same name already exists, it will be deleted.
    verbose : int, Optional, default=30
        The verbosity of logging information can be set to any supported representation of the `logging level <https://docs.python.org/3/library/logging.html#logging-levels>`_.
    """

    logger.setLevel(verbose)

    # Check for existing handlers
    handler_console = None
    handler_logfile = None
    for tmp in logger.handlers:
        if isinstance(tmp, logging.handlers.RotatingFileHandler):
            handler_logfile = tmp
        elif type(tmp) is logging.StreamHandler:
            handler_console = tmp

    # Set up logging to console
    if console and handler_console is None:
        console_handler = logging.StreamHandler()  # sys.stderr
        console_handler.setFormatter(
            logging.Formatter("[%(levelname)s](%(name)s): %(message)s")
        )
        console_handler.setLevel(verbose)
        logger.addHandler(console_handler)
    elif console:
        logger.warning("StreamHandler already exists")
    elif console is False and handler_console is not None:
        handler_console.close()
        logger.removeHandler(handler_console)

    # Rotating File Handler
    if log_file and handler_logfile is None:

        if not isinstance(log_file, str):
            log_file = "dualeos.log"

        if os.path.isfile(log_file):
            os.remove(log_file)

        log_file_handler = logging.handlers.RotatingFileHandler(log_file)
        log_file_handler.setFormatter(
            logging.Formatter(
                "%(asctime)s [%(levelname)s](%(name)s:%(funcName)s:%(lineno)d): %(message)s"
            )
        )
        log_file_handler.setLevel(verbose)
        logger.addHandler(log_file_handler)
    elif log_file:
        logger.warning("RotatingFileHandler already exists")
    elif log_file is False and handler_logfile is not None:
        handler_logfile.close()
        logger.removeHandler(handler_logfile)
