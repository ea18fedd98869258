# -- coding: utf8 --

r"""

Ideal gas contribution to the Helmholtz energy from the thermal de Broglie wavelength.

Translational degrees of freedom only. The functions are written for floats and dual numbers so that temperature, volume and mole number derivatives follow from the same expression.

"""

import numpy as np
import logging

from .. import fundamental_constants as constants
from ..autodiff import log, sqrt, real_part
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def thermal_de_broglie_wavelength(T, massi):
    r"""
    Thermal de Broglie wavelength of each component

    :math:`\Lambda_i = h / \sqrt{2 \pi m_i k_B T}`

    Parameters
    ----------
    T : float or DualNumber
        Temperature of the system [K]
    massi : numpy.ndarray
        Molar mass of each component [kg/mol]

    Returns
    -------
    Lambda : numpy.ndarray
        Wavelength of each component [m]
    """

    mass_molecule = np.asarray(massi, float) / constants.Nav
    return np.array(
        [constants.h / sqrt(2.0 * np.pi * m * constants.kb * T) for m in mass_molecule],
        dtype=object if not isinstance(T, (float, int, np.floating)) else float,
    )


def ideal_gas_contribution(state, massi, method="Abroglie"):
    r"""
    Return the reduced ideal gas Helmholtz energy of a state, :math:`A^{ideal}/(RT)` [mol]

    Parameters
    ----------
    state : State
        Thermodynamic state
    massi : numpy.ndarray
        Molar mass of each component [kg/mol]
    method : str, Optional, default=Abroglie
        The function name of the method to calculate the ideal contribution of the Helmholtz energy.

    Returns
    -------
    Aideal : float or DualNumber
        Reduced ideal gas Helmholtz energy
    """

    functions = {"Abroglie": Abroglie}

    if method in functions:
        function = functions[method]
    else:
        raise ConfigurationError(
            "Method, {}, was not found to calculate Aideal.".format(method)
        )

    if massi is None:
        raise ConfigurationError(
            "Ideal gas properties need the 'mass' parameter of every bead"
        )

    return function(state, massi)


def Abroglie(state, massi):
    r"""
    Ideal gas Helmholtz energy derived from the de Broglie wavelength

    :math:`\frac{A^{ideal}}{RT} = \sum_i n_i \left( \ln(\rho_i \Lambda_i^3) - 1 \right)`

    Components with zero moles do not contribute.

    Parameters
    ----------
    state : State
        Thermodynamic state
    massi : numpy.ndarray
        Molar mass of each component [kg/mol]

    Returns
    -------
    Aideal : float or DualNumber
        Reduced ideal gas Helmholtz energy [mol]
    """

    Lambda = thermal_de_broglie_wavelength(state.temperature, massi)
    moles = state.moles
    moles_real = real_part(moles)

    Aideal = 0.0
    for i in range(len(moles)):
        if moles_real[i] == 0.0:
            continue
        rho_number = moles[i] * constants.Nav / state.volume
        Aideal = Aideal + moles[i] * (log(rho_number * Lambda[i] ** 3) - 1.0)

    return Aideal
