# -- coding: utf8 --

r"""

    Parent SAFT EOS class

    An additional class with variant specifics imported from ``<saft_name>.py`` completes the EOS. The parent class adds the association contribution and combines the contributions of the variant into the reduced residual Helmholtz energy.

"""

import numpy as np
import logging

from dualeos.exceptions import ConfigurationError
from dualeos.equations_of_state.interface import EosTemplate
from dualeos.equations_of_state.association import Association
from dualeos.equations_of_state.saft import saft_toolbox as stb

logger = logging.getLogger(__name__)


def saft_type(name):
    r"""
    Initialize EOS object for SAFT variant.

    Parameters
    ----------
    name : str
        Name of supported saft variant, the following are currently supported:

        - pcsaft: :class:`~dualeos.equations_of_state.saft.pcsaft.SaftType`
        - pets: :class:`~dualeos.equations_of_state.saft.pets.SaftType`

    Returns
    -------
    saft_source : obj
        SAFT variant class to be initiated in :class:`~dualeos.equations_of_state.saft.saft.EosType`

    """
    if name == "pcsaft":
        from dualeos.equations_of_state.saft.pcsaft import SaftType as saft_source
    elif name == "pets":
        from dualeos.equations_of_state.saft.pets import SaftType as saft_source
    else:
        raise ConfigurationError(
            "SAFT type, {}, is not supported. Be sure the class is added to the factory function 'saft_type'".format(
                name
            )
        )

    return saft_source


class EosType(EosTemplate):

    r"""
    Initialize EOS object for SAFT variant.

    Parameters
    ----------
    beads : list[str]
        List of unique bead names, one per component
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters:

        - mass: Optional, Molar mass [kg/mol], needed for ideal gas properties
        - Nk-A, Nk-B, Nk-C: Optional, Number of association sites of each type
        - epsilonHB: Optional, Association energy [K]
        - kappaHB: Optional, Dimensionless association volume
        - etc. depending on SAFT variant

    cross_library : dict, Optional, default={}
        Optional library of bead cross interaction parameters, e.g. kij, epsilonHB and kappaHB.
    saft_name : str, Optional, default="pcsaft"
        Define the SAFT variant, options listed in :func:`~dualeos.equations_of_state.saft.saft.saft_type`.
    association_options : dict, Optional, default={}
        Keyword arguments for :class:`~dualeos.equations_of_state.association.Association`, i.e. max_iter and tol.

    Attributes
    ----------
    saft_name : str
        Name of the SAFT variant
    saft_source : obj
        Object representing SAFT variant. This attribute can be used to access intermediate calculations.
    association : Association
        Association sub-contribution, None if no sites are present
    residual_helmholtz_contributions : list[str]
        Methods of saft_source that are added to the reduced residual Helmholtz energy
    """

    cross_parameter_types = ["kij", "epsilon", "sigma", "epsilonHB", "kappaHB"]

    def __init__(
        self, beads, bead_library, cross_library=None, saft_name="pcsaft", association_options={}, **kwargs
    ):

        super().__init__(beads, bead_library, cross_library=cross_library)

        self.saft_name = saft_name
        saft_source = saft_type(saft_name)
        self.saft_source = saft_source(
            self.beads, self.bead_library, self.cross_library, **kwargs
        )

        saft_attributes = [
            "residual_helmholtz_contributions",
            "liquid_packing_fraction",
            "critical_packing_fraction",
        ]
        for key in saft_attributes:
            if not hasattr(self.saft_source, key):
                raise ConfigurationError(
                    "SAFT type, {}, is missing the variable {}.".format(saft_name, key)
                )
            setattr(self, key, getattr(self.saft_source, key))

        self.association = Association(
            self.beads,
            self.bead_library,
            self.cross_library,
            self.saft_source.eos_dict["sigma_ij"],
            **association_options
        )
        if self.association.number_of_sites == 0:
            self.association = None
        elif not self.saft_source.supports_association:
            raise ConfigurationError(
                "SAFT type, {}, does not support association sites".format(saft_name)
            )

    def _reduced_contributions(self, state):

        self.check_state(state)

        T = state.temperature
        xi = state.molefracs
        rhoi = stb.number_densities(state)
        diameter = self.saft_source.hard_sphere_diameter(T)
        zeta = stb.calc_zeta(rhoi, self.saft_source.eos_dict["segments"], diameter)

        output = {}
        for res in self.residual_helmholtz_contributions:
            output[res] = getattr(self.saft_source, res)(T, xi, rhoi, diameter, zeta)

        if self.association is not None:
            output["Aassoc"] = self.association.helmholtz_energy(
                T, xi, rhoi, diameter, zeta[2], zeta[3]
            )

        return output

    def residual_helmholtz_energy(self, state):
        r"""
        Reduced residual Helmholtz energy, :math:`A^{res}/(RT)` [mol]

        Parameters
        ----------
        state : State
            Thermodynamic state, fields may be dual numbers

        Returns
        -------
        Ares : float or DualNumber
            Sum of the contributions of the SAFT variant and association, times the total amount of substance
        """

        Ares = 0.0
        for value in self._reduced_contributions(state).values():
            Ares = Ares + value

        return Ares * state.total_moles

    def residual_helmholtz_energy_contributions(self, state):

        n = state.total_moles
        return {key: value * n for key, value in self._reduced_contributions(state).items()}

    def density_max(self, xi, maxpack=0.65):
        """
        Estimate the maximum density based on the hard sphere packing fraction.

        Parameters
        ----------
        xi : list[float]
            Mole fraction of each component
        maxpack : float, Optional, default=0.65
            Maximum packing fraction

        Returns
        -------
        max_density : float
            Maximum molar density [mol/m^3]
        """

        return self.saft_source.density_max(xi, maxpack=maxpack)

    def characteristic_temperature(self, xi):

        return self.saft_source.characteristic_temperature(xi)

    def __str__(self):

        string = "SAFT variant: {}, Beads: {}, association: {}".format(
            self.saft_name, self.beads, self.association is not None
        )
        return string
