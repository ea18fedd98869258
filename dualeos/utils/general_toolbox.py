""" General functions that can be used by multiple modules
"""

import numpy as np
import scipy.optimize as spo
import logging

from dualeos.exceptions import SolverError

logger = logging.getLogger(__name__)


def solve_root(func, args=(), method="brentq", bounds=None, options={}):
    """
    Find the root of a scalar function inside a bracket with a scipy method.

    Parameters
    ----------
    func : function
        Function of a single float
    args : tuple, Optional, default=()
        Additional arguments of func
    method : str, Optional, default="brentq"
        One of the bracketing methods of scipy.optimize: "brentq", "brenth", "bisect", "ridder"
    bounds : tuple
        Bracket with a sign change of func
    options : dict, Optional, default={}
        These options are used in the scipy method, e.g. xtol, maxiter

    Returns
    -------
    root : float
        Root of func
    """

    if method not in ["brentq", "brenth", "bisect", "ridder"]:
        raise ValueError("Root finding method, {}, not supported.".format(method))

    if bounds is None or len(bounds) != 2:
        raise ValueError("A bracket of two values is needed, given {}".format(bounds))

    f0 = func(bounds[0], *args)
    f1 = func(bounds[1], *args)
    if np.sign(f0) == np.sign(f1):
        raise SolverError(
            "Bracket [{}, {}] does not contain a sign change: f={}, {}".format(
                bounds[0], bounds[1], f0, f1
            ),
            kind="not_converged",
        )

    try:
        root, sol = getattr(spo, method)(
            func, bounds[0], bounds[1], args=args, full_output=True, **options
        )
    except RuntimeError as error:
        raise SolverError("Root finding with {} failed: {}".format(method, error))

    if not sol.converged:
        raise SolverError(
            "Root finding with {} did not converge: {}".format(method, sol.flag)
        )
    logger.debug(
        "Root found with {} in {} iterations: {}".format(method, sol.iterations, root)
    )

    return root


def central_difference(x, func, step_size=1e-5, args=()):
    """
    Take the derivative of a dependent variable calculated with a given function using the central difference method.

    Parameters
    ----------
    x : numpy.ndarray
        Independent variable to take derivative with respect too, using the central difference method.
    func : function
        Function used in job to calculate dependent factor. This function should have a single output.
    step_size : float, Optional, default=1E-5
        This function calculates a relative step size for each independent variable. Each step is equal x * step_size.
    args : tuple, Optional, default=()
        Additional arguments of func

    Returns
    -------
    dydx : numpy.ndarray
        Array of derivative of y with respect to x, given an array of independent variables.
    """

    x = np.atleast_1d(np.array(x, float))
    step = x * step_size
    step = np.array(
        [2 * np.finfo(float).eps if xx < np.finfo(float).eps else xx for xx in step]
    )

    y_plus = np.array([func(xx, *args) for xx in x + step])
    y_minus = np.array([func(xx, *args) for xx in x - step])
    dydx = (y_plus - y_minus) / (2.0 * step)

    return dydx


def isiterable(array):
    """
    Check if variable is an iterable type with a length (e.g. np.array or list).

    Note that this could be tested with isinstance(array, Iterable), however array=np.array(1.0) would pass that test and then fail in len(array).

    Parameters
    ----------
    array
        Variable of some type, that should be iterable

    Returns
    -------
    isiterable : bool
        Will be True if indexing is possible and False if not.
    """

    tmp = np.shape(array)
    if tmp:
        isiterable = True
    else:
        isiterable = False

    return isiterable


def check_length_dict(dictionary, keys, lx=None):

    """
    This function compared the entries in the provided dictionary to ensure they're the same length.

    All entries will be made into numpy arrays. If a float or array of length one is provided, it will be expanded to the length of other arrays. Entries holding a composition are lists of lists and count as a single item when they are one dimensional.

    Parameters
    ----------
    dictionary : dict
        Dictionary of what should be arrays of identical size.
    keys : list
        Keys for array entries
    lx : int, Optional, default=None
        The size that arrays should conform to

    Returns
    -------
    new_dictionary : dict
        Dictionary of arrays of identical size.

    """

    if lx is None:
        lx_array = []
        for key in keys:
            if key in dictionary:
                tmp = np.array(dictionary[key], float)
                if tmp.ndim == 0:
                    lx_array.append(1)
                elif key in ["molefracs", "feed"] and tmp.ndim == 1:
                    lx_array.append(1)
                else:
                    lx_array.append(len(tmp))
        if not len(lx_array):
            raise ValueError(
                "None of the provided keys are found in the given dictionary"
            )
        lx = max(lx_array)

    new_dictionary = {}
    for key in keys:
        if key in dictionary:
            tmp = np.array(dictionary[key], float)
            if key in ["molefracs", "feed"] and tmp.ndim == 1:
                tmp = np.array([tmp])
            if tmp.ndim == 0:
                new_dictionary[key] = np.array([tmp for x in range(lx)], float)
            elif len(tmp) == 1:
                new_dictionary[key] = np.array([tmp[0] for x in range(lx)], float)
            elif len(tmp) == lx:
                new_dictionary[key] = tmp
            else:
                raise ValueError(
                    "Entry, {}, should be length {}, not {}".format(key, lx, len(tmp))
                )

    return new_dictionary


def set_defaults(dictionary, keys, values, lx=None):

    """
    This function checks a dictionary for the given keys, and if a given key isn't present, the appropriate value is added to the dictionary.

    Parameters
    ----------
    dictionary : dict
        Dictionary of data
    keys : list
        Keys that should be present (of the same length as `lx`)
    values : list
        Default values for the keys that aren't in dictionary
    lx : int, Optional, default=None
        If not None, and values[i] is a float, the key will be set to an array of length, lx, populated by values[i]

    Returns
    -------
    new_dictionary : dict
        Dictionary of arrays of identical size.

    """

    new_dictionary = dictionary.copy()

    key_iterable = isiterable(keys)
    if not isiterable(values):
        if key_iterable:
            values = np.ones(len(keys)) * values
        else:
            values = np.array([values])
            keys = np.array([keys])
    else:
        if key_iterable and len(keys) != len(values):
            raise ValueError("Length of given keys and values must be equivalent.")
        elif not key_iterable:
            if len(values) != 1:
                raise ValueError(
                    "Multiple default values for given key, {}, is ambiguous".format(
                        keys
                    )
                )
            else:
                keys = [keys]

    for i, key in enumerate(keys):
        if key not in dictionary:
            tmp = values[i]
            if not isiterable(tmp) and lx is not None:
                new_dictionary[key] = np.ones(lx) * tmp
            else:
                new_dictionary[key] = tmp
            logger.info("Entry, {}, set to default: {}".format(key, tmp))

    return new_dictionary
