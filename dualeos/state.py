"""
    Thermodynamic state in the canonical variables of a Helmholtz energy model: temperature, volume and mole numbers.

    Any of the three fields may hold dual numbers so that a single evaluation of a model returns the value together with derivatives with respect to that field.
"""

import numpy as np
import logging

from .autodiff import real_part
from .exceptions import DomainError

logger = logging.getLogger(__name__)


class State:
    r"""
    Immutable state defined by temperature, volume and mole numbers.

    Derived quantities are computed from the canonical fields on access.

    Parameters
    ----------
    temperature : float or DualNumber
        Temperature of the system [K]
    volume : float or DualNumber
        Volume of the system [m^3]
    moles : numpy.ndarray or dict
        Mole numbers [mol], either as an array or as a dictionary of ``{component_index: moles}``. A dictionary requires ``number_of_components``, missing indices are zero.
    number_of_components : int, Optional, default=None
        Length of the mole number vector when ``moles`` is a dictionary

    Attributes
    ----------
    temperature : float or DualNumber
        Temperature of the system [K]
    volume : float or DualNumber
        Volume of the system [m^3]
    moles : numpy.ndarray
        Mole numbers [mol], float or object array
    """

    __slots__ = ("_temperature", "_volume", "_moles")

    def __init__(self, temperature, volume, moles, number_of_components=None):

        if isinstance(moles, dict):
            if number_of_components is None:
                number_of_components = max(moles.keys()) + 1 if moles else 0
            tmp = np.zeros(number_of_components)
            for key, value in moles.items():
                if key < 0 or key >= number_of_components:
                    raise DomainError(
                        "Component index {} is outside of the {} components".format(
                            key, number_of_components
                        )
                    )
                tmp[key] = value
            moles = tmp
        else:
            moles = np.atleast_1d(moles)
            if moles.dtype != object:
                moles = np.array(moles, float)

        if real_part(temperature) <= 0 or not np.isfinite(real_part(temperature)):
            raise DomainError(
                "Temperature must be positive, given {}".format(real_part(temperature))
            )
        if real_part(volume) <= 0 or not np.isfinite(real_part(volume)):
            raise DomainError(
                "Volume must be positive, given {}".format(real_part(volume))
            )
        moles_real = real_part(moles)
        if len(moles_real) == 0:
            raise DomainError("At least one component is needed to define a state")
        if np.any(moles_real < 0) or not np.all(np.isfinite(moles_real)):
            raise DomainError(
                "Mole numbers must be non-negative, given {}".format(moles_real)
            )
        if np.sum(moles_real) <= 0:
            raise DomainError("Total moles must be positive")

        object.__setattr__(self, "_temperature", temperature)
        object.__setattr__(self, "_volume", volume)
        object.__setattr__(self, "_moles", moles)

    def __setattr__(self, name, value):
        raise AttributeError("State objects are immutable, use State.derive")

    @classmethod
    def from_density(cls, temperature, density, molefracs=None, total_moles=1.0):
        """
        Create a state from temperature, molar density and composition.

        Parameters
        ----------
        temperature : float
            Temperature of the system [K]
        density : float
            Molar density [mol/m^3]
        molefracs : list[float], Optional, default=None
            Mole fractions, a pure component is assumed if None
        total_moles : float, Optional, default=1.0
            Amount of substance [mol]

        Returns
        -------
        state : State
            New state object
        """

        if molefracs is None:
            molefracs = np.array([1.0])
        molefracs = np.atleast_1d(molefracs)
        if real_part(density) <= 0:
            raise DomainError(
                "Density must be positive, given {}".format(real_part(density))
            )
        if np.abs(np.sum(real_part(molefracs)) - 1.0) > 1e-8:
            raise DomainError(
                "Mole fractions must sum to one, given {}".format(real_part(molefracs))
            )

        return cls(temperature, total_moles / density, molefracs * total_moles)

    def derive(self, temperature=None, volume=None, moles=None):
        """
        Return a copy of this state with the given fields replaced, typically by dual numbers.
        """

        return State(
            self._temperature if temperature is None else temperature,
            self._volume if volume is None else volume,
            self._moles if moles is None else moles,
        )

    @property
    def temperature(self):
        return self._temperature

    @property
    def volume(self):
        return self._volume

    @property
    def moles(self):
        return self._moles

    @property
    def number_of_components(self):
        return len(self._moles)

    @property
    def total_moles(self):
        return np.sum(self._moles)

    @property
    def molefracs(self):
        return self._moles / self.total_moles

    @property
    def molar_volume(self):
        return self._volume / self.total_moles

    @property
    def density(self):
        """Molar density [mol/m^3]"""
        return self.total_moles / self._volume

    @property
    def partial_density(self):
        return self._moles / self._volume

    def real(self):
        """Copy of this state with all derivative information removed."""
        return State(
            real_part(self._temperature),
            real_part(self._volume),
            real_part(self._moles),
        )

    def __repr__(self):
        return "State(temperature={}, volume={}, moles={})".format(
            real_part(self._temperature),
            real_part(self._volume),
            real_part(self._moles),
        )
