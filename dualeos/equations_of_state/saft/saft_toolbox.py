"""
General functions that are applicable to multiple SAFT variants

Densities are number densities in 1/Å^3 and lengths are in Å. All functions accept floats and dual numbers.
"""
import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.autodiff import log

logger = logging.getLogger(__name__)


def number_densities(state):
    r"""
    Number density of each component in a state

    Parameters
    ----------
    state : State
        Thermodynamic state

    Returns
    -------
    rhoi : numpy.ndarray
        Number density of each component [1/Å^3]
    """

    return state.moles * (constants.Nav * constants.Atometer ** 3) / state.volume


def calc_zeta(rhoi, segments, diameter):
    r"""
    Moments of the segment density, :math:`\zeta_k = \frac{\pi}{6} \sum_i \rho_i m_i d_i^k`

    Parameters
    ----------
    rhoi : numpy.ndarray
        Number density of each component [1/Å^3]
    segments : numpy.ndarray
        Number of segments of each component
    diameter : numpy.ndarray
        Hard sphere diameter of each component [Å]

    Returns
    -------
    zeta : list
        :math:`\zeta_0` to :math:`\zeta_3`
    """

    zeta = []
    for k in range(4):
        tmp = 0.0
        for i in range(len(rhoi)):
            tmp = tmp + rhoi[i] * segments[i] * diameter[i] ** k
        zeta.append(np.pi / 6.0 * tmp)

    return zeta


def hard_sphere_density(zeta):
    r"""
    Boublík-Mansoori-Carnahan-Starling-Leland hard sphere Helmholtz energy density

    :math:`\frac{A^{HS}}{V k_B T} = \frac{6}{\pi} \left( \frac{3 \zeta_1 \zeta_2}{1-\zeta_3} + \frac{\zeta_2^3}{\zeta_3 (1-\zeta_3)^2} + \left(\frac{\zeta_2^3}{\zeta_3^2} - \zeta_0\right) \ln(1-\zeta_3) \right)`

    Returns
    -------
    Ahs : float or DualNumber
        Helmholtz energy per volume [1/Å^3]
    """

    zeta0, zeta1, zeta2, zeta3 = zeta
    frac = 1.0 - zeta3
    return (
        6.0
        / np.pi
        * (
            3.0 * zeta1 * zeta2 / frac
            + zeta2 ** 3 / (zeta3 * frac ** 2)
            + (zeta2 ** 3 / zeta3 ** 2 - zeta0) * log(frac)
        )
    )


def pair_correlation_contact(zeta2, zeta3, dij):
    r"""
    Hard sphere pair correlation function at contact

    Parameters
    ----------
    zeta2 : float or DualNumber
        Second moment of the segment density [1/Å]
    zeta3 : float or DualNumber
        Packing fraction
    dij : float or DualNumber
        :math:`d_i d_j / (d_i + d_j)` [Å]

    Returns
    -------
    ghs : float or DualNumber
        Pair correlation function at contact
    """

    frac = 1.0 - zeta3
    return (
        1.0 / frac
        + dij * 3.0 * zeta2 / frac ** 2
        + dij ** 2 * 2.0 * zeta2 ** 2 / frac ** 3
    )


def polynomial(coefficients, eta):
    """Evaluate sum_k c_k eta**k"""
    result = 0.0
    for k, c in enumerate(coefficients):
        result = result + c * eta ** k
    return result


def mixture_averages(xi, segments, epsilon_ij, sigma_ij, T):
    r"""
    Van der Waals one fluid mixing rules used in the dispersion terms

    :math:`\overline{m^2 \epsilon \sigma^3} = \sum_i \sum_j x_i x_j m_i m_j \frac{\epsilon_{ij}}{k_B T} \sigma_{ij}^3`

    Parameters
    ----------
    xi : numpy.ndarray
        Mole fraction of each component
    segments : numpy.ndarray
        Number of segments of each component
    epsilon_ij : numpy.ndarray
        Matrix of energy parameters [K]
    sigma_ij : numpy.ndarray
        Matrix of size parameters [Å]
    T : float or DualNumber
        Temperature of the system [K]

    Returns
    -------
    m2es3 : float or DualNumber
        First order average [Å^3]
    m2e2s3 : float or DualNumber
        Second order average [Å^3]
    """

    m2es3 = 0.0
    m2e2s3 = 0.0
    ncomp = len(xi)
    for i in range(ncomp):
        for j in range(ncomp):
            tmp = xi[i] * xi[j] * segments[i] * segments[j] * sigma_ij[i, j] ** 3
            eps_T = epsilon_ij[i, j] / T
            m2es3 = m2es3 + tmp * eps_T
            m2e2s3 = m2e2s3 + tmp * eps_T * eps_T

    return m2es3, m2e2s3
