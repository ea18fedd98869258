""" Combining rules for unlike pair parameters, called from :func:`~dualeos.equations_of_state.eos_toolbox.combining_rules`.
"""

import numpy as np
import logging

logger = logging.getLogger(__name__)


def mean(beadA, beadB, parameter):
    r"""
    Arithmetic mean (Lorentz rule): c = (a+b)/2

    Parameters
    ----------
    beadA : dict
        Dictionary of parameters used to describe a bead
    beadB : dict
        Dictionary of parameters used to describe a bead
    parameter : str
        Name of parameter for which a mixed value is needed

    Returns
    -------
    parameter12 : float
        Mixed interaction parameter

    """

    return (beadA[parameter] + beadB[parameter]) / 2


def geometric_mean(beadA, beadB, parameter):
    r"""
    Geometric mean (Berthelot rule): c = np.sqrt(a*b)

    Parameters
    ----------
    beadA : dict
        Dictionary of parameters used to describe a bead
    beadB : dict
        Dictionary of parameters used to describe a bead
    parameter : str
        Name of parameter for which a mixed value is needed

    Returns
    -------
    parameter12 : float
        Mixed interaction parameter

    """

    return np.sqrt(beadA[parameter] * beadB[parameter])


def volumetric_geometric_mean(beadA, beadB, parameter, weighting_parameters=["sigma"]):
    r"""
    Geometric mean weighted by the ratio of the geometric to the arithmetic mean volume, used for the association volume kappa.

    c = np.sqrt(a[0]*b[0]) * np.sqrt(a[1]**3 * b[1]**3) / ((a[1] + b[1])/2)**3

    Parameters
    ----------
    beadA : dict
        Dictionary of parameters used to describe a bead
    beadB : dict
        Dictionary of parameters used to describe a bead
    parameter : str
        Name of parameter for which a mixed value is needed
    weighting_parameters : list[str], Optional, default=["sigma"]
        Name of the size parameter used in the volume ratio

    Returns
    -------
    parameter12 : float
        Mixed interaction parameter

    """

    tmp1 = np.sqrt(beadA[parameter] * beadB[parameter])
    param2 = weighting_parameters[0]
    tmp2 = (
        np.sqrt((beadA[param2] ** 3) * (beadB[param2] ** 3))
        * 8
        / ((beadA[param2] + beadB[param2]) ** 3)
    )
    return tmp1 * tmp2


def zero(beadA, beadB, parameter):
    """Unlike pair parameter that vanishes unless given explicitly, e.g. binary interaction parameters."""
    return 0.0
