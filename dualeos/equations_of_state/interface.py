"""
    Interface needed to create further equation of state (EOS) objects.

    All folders in this directory refer back to this interface. A model only supplies its reduced residual Helmholtz energy as a function of a :class:`~dualeos.state.State`, written so that it works for floats and dual numbers alike. Every thermodynamic property and phase equilibrium is derived from it in :mod:`dualeos.thermodynamics`.

"""

import numpy as np
import logging
from abc import ABC, abstractmethod

from ..exceptions import ConfigurationError
from . import eos_toolbox as tb

logger = logging.getLogger(__name__)


# __________________ EOS Interface _________________
class EosTemplate(ABC):

    """
    Interface used in all EOS object options.

    By using this template, all EOS objects are then easily exchanged. Objects are not modified after construction and may be shared between threads and processes.

    Parameters
    ----------
    beads : list[str]
        List of unique bead names, one per component
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters. An optional ``mass`` [kg/mol] for every bead enables ideal gas properties.
    cross_library : dict, Optional
        Optional library of bead cross interaction parameters. As many or as few of the desired parameters may be defined for whichever group combinations are desired. The remaining are estimated with combining rules.
    kwargs
        Additional keywords from EOS object type

    Attributes
    ----------
    beads : list[str]
        List of unique bead names used among components
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters
    cross_library : dict
        Library of bead cross interaction parameters
    number_of_components : int
        Number of components in mixture represented by given EOS object.
    massi : numpy.ndarray
        Molar mass of each component [kg/mol], None if not given for all beads
    liquid_packing_fraction : float
        Fraction of the maximum density used as the liquid seed of density iterations
    critical_packing_fraction : float
        Fraction of the maximum density used as the seed of critical point searches

    """

    liquid_packing_fraction = 0.5
    critical_packing_fraction = 0.3
    cross_parameter_types = []

    def __init__(self, beads, bead_library, cross_library=None, **kwargs):
        """ Initiation of EOS object with attributes needed by other modules.
        """

        if isinstance(beads, str):
            beads = [beads]
        self.beads = list(beads)
        self.bead_library = tb.check_bead_parameters(self.beads, bead_library, {})
        self.cross_library = tb.check_cross_library(
            self.beads, cross_library, self.cross_parameter_types
        )
        self.number_of_components = len(self.beads)

        if all("mass" in self.bead_library[bead] for bead in self.beads):
            self.massi = tb.extract_property("mass", self.bead_library, self.beads)
            if np.any(self.massi <= 0):
                raise ConfigurationError(
                    "Bead masses must be positive, given {}".format(self.massi)
                )
        else:
            self.massi = None

        for key in kwargs:
            logger.debug("Keyword, {}, is not used by {}".format(key, type(self).__name__))

    def check_state(self, state):
        """
        Raise a ConfigurationError if the state does not match the number of components of this model.
        """
        if state.number_of_components != self.number_of_components:
            raise ConfigurationError(
                "State has {} components, but the EOS was parametrized for {}: {}".format(
                    state.number_of_components, self.number_of_components, self.beads
                )
            )

    @abstractmethod
    def residual_helmholtz_energy(self, state):
        r"""
        Compute the reduced residual Helmholtz energy, :math:`A^{res}/(RT)` [mol].

        Temperature, volume and moles of the state may be floats or dual numbers, and the result has the same numeric kind.

        Parameters
        ----------
        state : State
            Thermodynamic state

        Returns
        -------
        Ares : float or DualNumber
            Reduced residual Helmholtz energy, extensive in the amount of substance
        """
        pass

    def residual_helmholtz_energy_contributions(self, state):
        """
        Reduced residual Helmholtz energy split into the named contributions of the model.

        Returns
        -------
        contributions : dict
            Contribution names as keys and :math:`A^{res}/(RT)` [mol] as values
        """
        return {"residual": self.residual_helmholtz_energy(state)}

    @abstractmethod
    def density_max(self, xi, maxpack=0.9):
        """
        Estimate the maximum density based on the excluded volume or hard sphere packing fraction.

        Parameters
        ----------
        xi : list[float]
            Mole fraction of each component
        maxpack : float, Optional, default=0.9
            Maximum packing fraction

        Returns
        -------
        max_density : float
            Maximum molar density [mol/m^3]
        """
        pass

    @abstractmethod
    def characteristic_temperature(self, xi):
        """
        Temperature scale of the model for the given composition [K], used to seed critical point searches.
        """
        pass

    def __str__(self):

        string = "{}, Beads: {}".format(type(self).__name__, self.beads)
        return string
