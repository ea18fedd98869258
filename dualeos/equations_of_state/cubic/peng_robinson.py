# -- coding: utf8 --

"""
    EOS object for Peng-Robinson

"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.autodiff import log, sqrt
from dualeos.exceptions import ConfigurationError
from dualeos.equations_of_state.interface import EosTemplate
import dualeos.equations_of_state.eos_toolbox as tb

logger = logging.getLogger(__name__)


class EosType(EosTemplate):
    r"""
    EOS object for the Peng-Robinson EOS.

    The residual Helmholtz energy is written in the extensive variables so that temperature, volume and mole numbers may carry dual numbers.

    Parameters
    ----------
    beads : list[str]
        List of unique component names
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters:

        - Tc: :math:`T_{C}`, Critical temperature [K]
        - Pc: :math:`P_{C}`, Critical pressure [Pa]
        - omega: :math:`\omega`, Acentric factor
        - kappa: Optional, slope of the alpha function, computed from omega if not given
        - mass: Optional, Molar mass [kg/mol]

    cross_library : dict, Optional, default={}
        Optional library of bead cross interaction parameters. As many or as few of the desired parameters may be defined for whichever group combinations are desired.

        - kij: :math:`k_{ij}`, binary interaction parameter

    Attributes
    ----------
    beads : list[str]
        List of component names
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters. See description under *Parameters*
    cross_library : dict
        Library of bead cross interaction parameters. See description under *Parameters*
    number_of_components : int
        Number of components in mixture represented by given EOS object.
    eos_dict : dict
        Arrays of parameters: ai [Pa m^6/mol^2], bi [m^3/mol], kappa, Tc and the matrix kij

    """

    liquid_packing_fraction = 0.9
    critical_packing_fraction = 0.25
    cross_parameter_types = ["kij"]

    def __init__(self, beads, bead_library, cross_library=None, **kwargs):

        super().__init__(beads, bead_library, cross_library=cross_library, **kwargs)

        self.bead_library = tb.check_bead_parameters(
            self.beads,
            self.bead_library,
            {"Tc": None, "Pc": None},
            positive=("Tc", "Pc"),
        )

        for bead in self.beads:
            if "kappa" not in self.bead_library[bead]:
                if "omega" not in self.bead_library[bead]:
                    raise ConfigurationError(
                        "Either 'omega' or 'kappa' should be provided for component: {}".format(
                            bead
                        )
                    )
                omega = self.bead_library[bead]["omega"]
                self.bead_library[bead]["kappa"] = (
                    0.37464 + 1.54226 * omega - 0.26992 * omega ** 2
                )

        Tc = tb.extract_property("Tc", self.bead_library, self.beads)
        Pc = tb.extract_property("Pc", self.bead_library, self.beads)

        output = tb.cross_interaction_from_dict(
            self.beads,
            {bead: {"kij": 0.0} for bead in self.beads},
            {"kij": {"function": "zero"}},
            cross_library=self.cross_library,
        )

        self.eos_dict = {
            "Tc": Tc,
            "Pc": Pc,
            "kappa": tb.extract_property("kappa", self.bead_library, self.beads),
            "ai": 0.45723553 * (constants.R * Tc) ** 2 / Pc,
            "bi": 0.07779607 * constants.R * Tc / Pc,
            "kij": output["kij"],
        }

    def _attraction_parameter(self, T, moles):
        r"""
        Extensive attraction parameter :math:`\sum_i \sum_j n_i n_j \sqrt{a_i \alpha_i a_j \alpha_j} (1 - k_{ij})`
        """

        ncomp = self.number_of_components
        sqrt_a_alpha = []
        for i in range(ncomp):
            alpha_sqrt = 1.0 + self.eos_dict["kappa"][i] * (
                1.0 - sqrt(T / self.eos_dict["Tc"][i])
            )
            sqrt_a_alpha.append(np.sqrt(self.eos_dict["ai"][i]) * alpha_sqrt)

        A = 0.0
        for i in range(ncomp):
            for j in range(ncomp):
                A = A + (
                    moles[i]
                    * moles[j]
                    * sqrt_a_alpha[i]
                    * sqrt_a_alpha[j]
                    * (1.0 - self.eos_dict["kij"][i, j])
                )

        return A

    def residual_helmholtz_energy(self, state):
        r"""
        Reduced residual Helmholtz energy

        :math:`\frac{A^{res}}{RT} = -n \ln\left(1 - \frac{B}{V}\right) - \frac{A}{2\sqrt{2} B R T} \ln\frac{V + (1+\sqrt{2})B}{V + (1-\sqrt{2})B}`

        Parameters
        ----------
        state : State
            Thermodynamic state, fields may be dual numbers

        Returns
        -------
        Ares : float or DualNumber
            Reduced residual Helmholtz energy [mol]
        """

        self.check_state(state)

        T = state.temperature
        V = state.volume
        moles = state.moles
        n = state.total_moles

        B = 0.0
        for i in range(self.number_of_components):
            B = B + moles[i] * self.eos_dict["bi"][i]
        A = self._attraction_parameter(T, moles)

        sqrt2 = np.sqrt(2.0)
        Ares = -n * log(1.0 - B / V) - A / (2.0 * sqrt2 * B * constants.R * T) * log(
            (V + (1.0 + sqrt2) * B) / (V + (1.0 - sqrt2) * B)
        )

        return Ares

    def density_max(self, xi, maxpack=0.99):

        """
        Estimate the maximum density from the covolume.

        Parameters
        ----------
        xi : list[float]
            Mole fraction of each component
        maxpack : float, Optional, default=0.99
            Fraction of the inverse covolume, the pressure diverges at one

        Returns
        -------
        max_density : float
            Maximum molar density [mol/m^3]
        """

        return maxpack / np.sum(np.asarray(xi, float) * self.eos_dict["bi"])

    def characteristic_temperature(self, xi):

        return np.sum(np.asarray(xi, float) * self.eos_dict["Tc"])

    def __str__(self):

        string = "Peng-Robinson, Beads: {}".format(self.beads)
        return string
