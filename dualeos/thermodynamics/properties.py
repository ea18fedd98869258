r"""
Thermodynamic properties from the reduced Helmholtz energy of an EOS object.

Residual contributions are derivatives of :meth:`~dualeos.equations_of_state.interface.EosTemplate.residual_helmholtz_energy` obtained with dual numbers. Ideal gas contributions are closed form expressions of the translational ideal gas: the pressure related properties do not need molar masses, those containing :math:`\ln \Lambda_i^3` do.

Most functions accept ``contributions`` which is one of "total", "residual" or "ideal_gas". Residual quantities are taken relative to an ideal gas at the same temperature, volume and moles.

Notation: :math:`a = A^{res}/(RT)` [mol], subscripts denote partial derivatives.
"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.autodiff import Dual, HyperDual, real_part
from dualeos.autodiff import (
    first_derivative,
    second_derivative,
    third_derivative,
    second_partial_derivative,
)
from dualeos.equations_of_state.ideal_gas import (
    ideal_gas_contribution,
    thermal_de_broglie_wavelength,
)
from dualeos.exceptions import ConfigurationError, DomainError

logger = logging.getLogger(__name__)

contribution_types = ["total", "residual", "ideal_gas"]


def _check_contributions(contributions):
    if contributions not in contribution_types:
        raise ValueError(
            "Contributions, {}, should be one of: {}".format(
                contributions, ", ".join(contribution_types)
            )
        )


def _prepare(eos, state):
    eos.check_state(state)
    return state


def _add(contributions, ideal, residual):
    """Combine lazily evaluated ideal gas and residual parts"""
    _check_contributions(contributions)
    if contributions == "residual":
        return residual()
    elif contributions == "ideal_gas":
        return ideal()
    return ideal() + residual()


# ______________ Derivatives of the reduced residual Helmholtz energy ______________
def _residual(eos, state):
    return eos.residual_helmholtz_energy(state)


def _volume_derivatives(eos, state, order=1):
    """a and its volume derivatives up to order (1 to 3)"""

    func = lambda V: eos.residual_helmholtz_energy(state.derive(volume=V))
    if order == 1:
        return first_derivative(func, state.volume)
    elif order == 2:
        return second_derivative(func, state.volume)
    return third_derivative(func, state.volume)


def _temperature_derivatives(eos, state):
    """a, a_T and a_TT"""

    func = lambda T: eos.residual_helmholtz_energy(state.derive(temperature=T))
    return second_derivative(func, state.temperature)


def _temperature_volume_derivative(eos, state):
    """a, a_T, a_V and a_TV"""

    func = lambda T, V: eos.residual_helmholtz_energy(
        state.derive(temperature=T, volume=V)
    )
    return second_partial_derivative(func, state.temperature, state.volume)


def _moles_gradient(eos, state):
    """a and the gradient in the mole numbers"""

    ncomp = state.number_of_components
    unit = np.eye(ncomp)
    moles = np.empty(ncomp, dtype=object)
    moles[:] = [Dual(state.moles[i], unit[i].copy()) for i in range(ncomp)]

    result = eos.residual_helmholtz_energy(state.derive(moles=moles))
    if isinstance(result, Dual):
        return result.re, np.asarray(result.eps, float) * np.ones(ncomp)
    return result, np.zeros(ncomp)


def _moles_volume_derivatives(eos, state):
    r"""
    a_V, the gradient of a in moles and the mixed derivatives :math:`a_{Vn_i}` from one evaluation with a dual volume nested over dual mole numbers.
    """

    ncomp = state.number_of_components
    unit = np.eye(ncomp)
    zeros = np.zeros(ncomp)
    moles = np.empty(ncomp, dtype=object)
    moles[:] = [Dual(state.moles[i], unit[i].copy()) for i in range(ncomp)]
    volume = Dual(Dual(state.volume, zeros.copy()), Dual(1.0, zeros.copy()))

    result = eos.residual_helmholtz_energy(state.derive(volume=volume, moles=moles))

    a_n = np.asarray(result.re.eps, float) * np.ones(ncomp)
    a_V = result.eps.re
    a_Vn = np.asarray(result.eps.eps, float) * np.ones(ncomp)

    return a_V, a_n, a_Vn


def _moles_hessian(eos, state):
    """Matrix of second derivatives of a in the mole numbers"""

    ncomp = state.number_of_components
    hess = np.zeros((ncomp, ncomp))
    for i in range(ncomp):
        for j in range(i, ncomp):
            moles = np.empty(ncomp, dtype=object)
            moles[:] = [
                HyperDual(state.moles[k], float(k == i), float(k == j), 0.0)
                for k in range(ncomp)
            ]
            result = eos.residual_helmholtz_energy(state.derive(moles=moles))
            value = result.eps1eps2 if isinstance(result, HyperDual) else 0.0
            hess[i, j] = hess[j, i] = value

    return hess


def _ideal_log_terms(eos, state, skip_absent=False):
    r""":math:`\ln(\rho_i \Lambda_i^3)` of each component, zero for absent components if ``skip_absent``"""

    if eos.massi is None:
        raise ConfigurationError(
            "Ideal gas properties need the 'mass' parameter of every bead"
        )
    moles = np.asarray(real_part(state.moles), float)
    present = moles > 0.0
    if not skip_absent and not np.all(present):
        raise DomainError(
            "The ideal gas chemical potential is not defined for components with zero moles"
        )
    Lambda = np.asarray(thermal_de_broglie_wavelength(state.temperature, eos.massi), float)
    terms = np.zeros(len(moles))
    terms[present] = np.log(
        moles[present] * constants.Nav / state.volume * Lambda[present] ** 3
    )
    return terms


# ______________ Properties ______________
def helmholtz_energy(eos, state, contributions="total"):
    r"""
    Helmholtz energy, :math:`A` [J]

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    state : State
        Thermodynamic state
    contributions : str, Optional, default="total"
        One of "total", "residual" or "ideal_gas"

    Returns
    -------
    A : float
        Helmholtz energy [J]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    return _add(
        contributions,
        lambda: RT * ideal_gas_contribution(state, eos.massi),
        lambda: RT * _residual(eos, state),
    )


def pressure(eos, state, contributions="total"):
    r"""
    Pressure, :math:`p = -(\partial A / \partial V)_{T,n} = nRT/V - RT a_V` [Pa]

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    state : State
        Thermodynamic state
    contributions : str, Optional, default="total"
        One of "total", "residual" or "ideal_gas"

    Returns
    -------
    P : float
        Pressure [Pa]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    return _add(
        contributions,
        lambda: state.total_moles * RT / state.volume,
        lambda: -RT * _volume_derivatives(eos, state)[1],
    )


def compressibility(eos, state, contributions="total"):
    r"""
    Compressibility factor, :math:`Z = pV/(nRT)`. The residual part is :math:`Z - 1`.
    """

    state = _prepare(eos, state)
    p = pressure(eos, state, contributions=contributions)

    return p * state.volume / (state.total_moles * constants.R * state.temperature)


def dp_dv(eos, state, contributions="total"):
    r"""
    :math:`(\partial p / \partial V)_{T,n}` [Pa/m^3]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    return _add(
        contributions,
        lambda: -state.total_moles * RT / state.volume ** 2,
        lambda: -RT * _volume_derivatives(eos, state, order=2)[2],
    )


def dp_drho(eos, state, contributions="total"):
    r"""
    :math:`(\partial p / \partial \rho)_{T,n}` with the molar density :math:`\rho = n/V` [Pa m^3/mol]
    """

    state = _prepare(eos, state)
    return -state.volume ** 2 / state.total_moles * dp_dv(
        eos, state, contributions=contributions
    )


def d2p_dv2(eos, state, contributions="total"):
    r"""
    :math:`(\partial^2 p / \partial V^2)_{T,n}` [Pa/m^6]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    return _add(
        contributions,
        lambda: 2.0 * state.total_moles * RT / state.volume ** 3,
        lambda: -RT * _volume_derivatives(eos, state, order=3)[3],
    )


def dp_dt(eos, state, contributions="total"):
    r"""
    :math:`(\partial p / \partial T)_{V,n} = nR/V - R a_V - RT a_{TV}` [Pa/K]
    """

    state = _prepare(eos, state)
    T = state.temperature

    def residual():
        _, _, a_V, a_TV = _temperature_volume_derivative(eos, state)
        return -constants.R * a_V - constants.R * T * a_TV

    return _add(
        contributions,
        lambda: state.total_moles * constants.R / state.volume,
        residual,
    )


def dp_dni(eos, state, contributions="total"):
    r"""
    :math:`(\partial p / \partial n_i)_{T,V,n_j}` [Pa/mol]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature
    ncomp = state.number_of_components

    return _add(
        contributions,
        lambda: RT / state.volume * np.ones(ncomp),
        lambda: -RT * _moles_volume_derivatives(eos, state)[2],
    )


def chemical_potential(eos, state, contributions="total"):
    r"""
    Chemical potential of each component, :math:`\mu_i = (\partial A / \partial n_i)_{T,V,n_j}` [J/mol]

    The residual part is :math:`RT (\partial a / \partial n_i)`, the ideal gas part :math:`RT \ln(\rho_i \Lambda_i^3)`.
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    return _add(
        contributions,
        lambda: RT * _ideal_log_terms(eos, state),
        lambda: RT * _moles_gradient(eos, state)[1],
    )


def dmu_dni(eos, state, contributions="total"):
    r"""
    Matrix :math:`(\partial \mu_i / \partial n_j)_{T,V}` [J/mol^2]
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    def ideal():
        moles = np.asarray(state.moles, float)
        if np.any(moles <= 0.0):
            raise DomainError(
                "The ideal gas chemical potential is not defined for components with zero moles"
            )
        return RT * np.diag(1.0 / moles)

    return _add(
        contributions,
        ideal,
        lambda: RT * _moles_hessian(eos, state),
    )


def ln_fugacity_coefficient(eos, state):
    r"""
    Natural logarithm of the fugacity coefficients, :math:`\ln \phi_i = \mu^{res}_i/(RT) - \ln Z`
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    a_V, a_n, _ = _moles_volume_derivatives(eos, state)
    p = state.total_moles * RT / state.volume - RT * a_V
    Z = p * state.volume / (state.total_moles * RT)
    if Z <= 0.0:
        raise DomainError(
            "Fugacity coefficients need a positive pressure, given {} Pa".format(p)
        )

    return a_n - np.log(Z)


def fugacity_coefficient(eos, state):
    r"""
    Fugacity coefficient of each component, :math:`\phi_i`
    """

    return np.exp(ln_fugacity_coefficient(eos, state))


def dln_phi_dnj(eos, state):
    r"""
    Derivatives of the logarithmic fugacity coefficients in the mole numbers at constant temperature and pressure

    :math:`\left(\frac{\partial \ln \phi_i}{\partial n_j}\right)_{T,p} = a_{ij} + \frac{1}{n} + \frac{p_i p_j}{RT p_V}`

    with :math:`p_i = (\partial p/\partial n_i)_{T,V}` and :math:`p_V = (\partial p/\partial V)_{T,n}`.

    Returns
    -------
    dlnphi : numpy.ndarray
        Matrix, row i holds the derivatives of :math:`\ln \phi_i`
    """

    state = _prepare(eos, state)
    RT = constants.R * state.temperature

    p_n = dp_dni(eos, state)
    p_V = dp_dv(eos, state)
    if p_V >= 0.0:
        raise DomainError(
            "Composition derivatives at constant pressure need a mechanically stable state, dp/dV = {}".format(
                p_V
            )
        )

    hess = _moles_hessian(eos, state)

    return hess + 1.0 / state.total_moles + np.outer(p_n, p_n) / (RT * p_V)


def entropy(eos, state, contributions="total"):
    r"""
    Entropy, :math:`S = -(\partial A / \partial T)_{V,n}` [J/K]

    The residual part is :math:`-R a - RT a_T`, the ideal gas part :math:`-R \sum_i n_i (\ln(\rho_i \Lambda_i^3) - 1) + \frac{3}{2} nR`.
    """

    state = _prepare(eos, state)
    T = state.temperature

    def ideal():
        moles = np.asarray(state.moles, float)
        # n ln n vanishes for absent components
        return -constants.R * np.sum(
            moles * (_ideal_log_terms(eos, state, skip_absent=True) - 1.0)
        ) + 1.5 * state.total_moles * constants.R

    def residual():
        a, a_T, _ = _temperature_derivatives(eos, state)
        return -constants.R * a - constants.R * T * a_T

    return _add(contributions, ideal, residual)


def internal_energy(eos, state, contributions="total"):
    r"""
    Internal energy, :math:`U = A + TS` [J]. The residual part is :math:`-RT^2 a_T`.
    """

    state = _prepare(eos, state)
    T = state.temperature

    def residual():
        _, a_T, _ = _temperature_derivatives(eos, state)
        return -constants.R * T ** 2 * a_T

    return _add(
        contributions,
        lambda: 1.5 * state.total_moles * constants.R * T,
        residual,
    )


def enthalpy(eos, state, contributions="total"):
    r"""
    Enthalpy, :math:`H = U + pV` [J]
    """

    state = _prepare(eos, state)
    return internal_energy(eos, state, contributions) + pressure(
        eos, state, contributions
    ) * state.volume


def gibbs_energy(eos, state, contributions="total"):
    r"""
    Gibbs energy, :math:`G = A + pV` [J]
    """

    state = _prepare(eos, state)
    return helmholtz_energy(eos, state, contributions) + pressure(
        eos, state, contributions
    ) * state.volume


def isochoric_heat_capacity(eos, state, contributions="total"):
    r"""
    Isochoric heat capacity, :math:`C_V = -T (\partial^2 A / \partial T^2)_{V,n}` [J/K]

    The residual part is :math:`-RT (2 a_T + T a_{TT})`, the ideal gas part :math:`\frac{3}{2} nR`.
    """

    state = _prepare(eos, state)
    T = state.temperature

    def residual():
        _, a_T, a_TT = _temperature_derivatives(eos, state)
        return -constants.R * T * (2.0 * a_T + T * a_TT)

    return _add(
        contributions,
        lambda: 1.5 * state.total_moles * constants.R,
        residual,
    )


def isobaric_heat_capacity(eos, state, contributions="total"):
    r"""
    Isobaric heat capacity, :math:`C_p = C_V - T (\partial p/\partial T)^2 / (\partial p / \partial V)` [J/K]

    The ideal gas part is :math:`\frac{5}{2} nR`, the residual part is the difference to the total.
    """

    state = _prepare(eos, state)
    T = state.temperature
    nR = state.total_moles * constants.R

    def total():
        cv = isochoric_heat_capacity(eos, state, "total")
        return cv - T * dp_dt(eos, state) ** 2 / dp_dv(eos, state)

    _check_contributions(contributions)
    if contributions == "ideal_gas":
        return 2.5 * nR
    elif contributions == "residual":
        return total() - 2.5 * nR
    return total()


def isothermal_compressibility(eos, state):
    r"""
    Isothermal compressibility, :math:`\kappa_T = -\frac{1}{V} (\partial V / \partial p)_{T,n}` [1/Pa]
    """

    state = _prepare(eos, state)
    return -1.0 / (state.volume * dp_dv(eos, state))


def molar_gibbs_energy_of_mixing_terms(eos, state):
    r"""
    :math:`\sum_i x_i (\ln x_i + \ln \phi_i)`, the reduced molar Gibbs energy relative to the pure ideal gases at the same temperature and pressure. Used to pick between density roots.
    """

    xi = np.asarray(state.molefracs, float)
    lnphi = ln_fugacity_coefficient(eos, state)
    mask = xi > 0.0
    return np.sum(xi[mask] * (np.log(xi[mask]) + lnphi[mask]))


property_functions = {
    "helmholtz_energy": helmholtz_energy,
    "pressure": pressure,
    "compressibility": compressibility,
    "chemical_potential": chemical_potential,
    "ln_fugacity_coefficient": ln_fugacity_coefficient,
    "fugacity_coefficient": fugacity_coefficient,
    "entropy": entropy,
    "internal_energy": internal_energy,
    "enthalpy": enthalpy,
    "gibbs_energy": gibbs_energy,
    "isochoric_heat_capacity": isochoric_heat_capacity,
    "isobaric_heat_capacity": isobaric_heat_capacity,
    "dp_dv": dp_dv,
    "dp_drho": dp_drho,
    "d2p_dv2": d2p_dv2,
    "dp_dt": dp_dt,
    "dp_dni": dp_dni,
    "dmu_dni": dmu_dni,
    "dln_phi_dnj": dln_phi_dnj,
    "isothermal_compressibility": isothermal_compressibility,
}


def evaluate_property(eos, state, property_kind, **kwargs):
    r"""
    Evaluate a property by name.

    Parameters
    ----------
    eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    state : State
        Thermodynamic state
    property_kind : str
        Name of the property, one of the keys of ``property_functions``
    kwargs
        Keyword arguments of the property function, e.g. contributions

    Returns
    -------
    value : float or numpy.ndarray
        Property value in SI units
    """

    if property_kind not in property_functions:
        raise ValueError(
            "The property, '{}', was not found\nThe following properties are supported: {}".format(
                property_kind, ", ".join(sorted(property_functions))
            )
        )

    return property_functions[property_kind](eos, state, **kwargs)
