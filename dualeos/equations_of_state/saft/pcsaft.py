# -- coding: utf8 --

r"""
    PC-SAFT variant of the SAFT EOS, hard chain and dispersion contributions.

    Gross, J., & Sadowski, G. (2001). Perturbed-Chain SAFT: An Equation of State Based on a Perturbation Theory for Chain Molecules. Industrial and Engineering Chemistry Research, 40, 1244-1260.

"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.autodiff import exp, log
import dualeos.equations_of_state.eos_toolbox as tb
from dualeos.equations_of_state.saft import saft_toolbox as stb

logger = logging.getLogger(__name__)

# Universal model constants, columns are a0/a1/a2 (b0/b1/b2)
A0 = np.array(
    [
        0.9105631445,
        0.6361281449,
        2.6861347891,
        -26.547362491,
        97.759208784,
        -159.59154087,
        91.297774084,
    ]
)
A1 = np.array(
    [
        -0.3084016918,
        0.1860531159,
        -2.5030047259,
        21.419793629,
        -65.255885330,
        83.318680481,
        -33.746922930,
    ]
)
A2 = np.array(
    [
        -0.0906148351,
        0.4527842806,
        0.5962700728,
        -1.7241829131,
        -4.1302112531,
        13.776631870,
        -8.6728470368,
    ]
)
B0 = np.array(
    [
        0.7240946941,
        2.2382791861,
        -4.0025849485,
        -21.003576815,
        26.855641363,
        206.55133841,
        -355.60235612,
    ]
)
B1 = np.array(
    [
        -0.5755498075,
        0.6995095521,
        3.8925673390,
        -17.215471648,
        192.67226447,
        -161.82646165,
        -165.20769346,
    ]
)
B2 = np.array(
    [
        0.0976883116,
        -0.2557574982,
        -9.1558561530,
        20.642075974,
        -38.804430052,
        93.626774077,
        -29.666905585,
    ]
)


class SaftType:

    r"""
    Object of PC-SAFT contributions for the parent SAFT EOS object.

    Parameters
    ----------
    beads : list[str]
        List of unique bead names, one per component
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters:

        - m: Number of segments
        - sigma: :math:`\sigma_{i}`, Segment diameter [Å]
        - epsilon: :math:`\epsilon_{i}/k_B`, Dispersion energy [K]

    cross_library : dict
        Optional library of cross interaction parameters:

        - kij: Binary interaction parameter of the dispersion energy
        - sigma: :math:`\sigma_{ij}` [Å], mean by default
        - epsilon: :math:`\epsilon_{ij}/k_B` [K], geometric mean by default

    Attributes
    ----------
    eos_dict : dict
        Arrays of parameters: segments, sigma, epsilon and the matrices sigma_ij, epsilon_ij (kij included) and kij
    residual_helmholtz_contributions : list[str]
        Names of the methods that return contributions to the reduced residual Helmholtz energy per molecule
    """

    residual_helmholtz_contributions = ["Ahard_chain", "Adispersion"]
    liquid_packing_fraction = 0.5
    critical_packing_fraction = 0.13
    supports_association = True

    def __init__(self, beads, bead_library, cross_library, combining_rules=None):

        self.beads = beads
        bead_library = tb.check_bead_parameters(
            beads,
            bead_library,
            {"m": None, "sigma": None, "epsilon": None},
            positive=("m", "sigma", "epsilon"),
        )

        self.combining_rules = {
            "sigma": {"function": "mean"},
            "epsilon": {"function": "geometric_mean"},
            "kij": {"function": "zero"},
        }
        if combining_rules is not None:
            logger.info("Accepted new combining rule definitions")
            self.combining_rules.update(combining_rules)

        output = tb.cross_interaction_from_dict(
            beads, bead_library, self.combining_rules, cross_library=cross_library
        )

        self.eos_dict = {
            "segments": tb.extract_property("m", bead_library, beads),
            "sigma": tb.extract_property("sigma", bead_library, beads),
            "epsilon": tb.extract_property("epsilon", bead_library, beads),
            "sigma_ij": output["sigma"],
            "kij": output["kij"],
            "epsilon_ij": output["epsilon"] * (1.0 - output["kij"]),
        }

    def hard_sphere_diameter(self, T):
        r"""
        Temperature dependent segment diameter, :math:`d_i = \sigma_i (1 - 0.12 \exp(-3\epsilon_i / T))`

        Parameters
        ----------
        T : float or DualNumber
            Temperature of the system [K]

        Returns
        -------
        diameter : numpy.ndarray
            Segment diameter of each component [Å]
        """
        return np.array(
            [
                sigma * (1.0 - 0.12 * exp(-3.0 * epsilon / T))
                for sigma, epsilon in zip(self.eos_dict["sigma"], self.eos_dict["epsilon"])
            ],
            dtype=object,
        )

    def Ahard_chain(self, T, xi, rhoi, diameter, zeta):
        r"""
        Hard chain contribution per molecule

        :math:`\frac{A^{HC}}{N k_B T} = \bar{m} a^{HS} - \sum_i x_i (m_i - 1) \ln g^{HS}_{ii}`

        Parameters
        ----------
        T : float or DualNumber
            Temperature of the system [K]
        xi : numpy.ndarray
            Mole fraction of each component
        rhoi : numpy.ndarray
            Number density of each component [1/Å^3]
        diameter : numpy.ndarray
            Segment diameter of each component [Å]
        zeta : list
            Moments of the segment density

        Returns
        -------
        Ahc : float or DualNumber
            Hard chain contribution
        """

        rho = np.sum(rhoi)
        Ahc = stb.hard_sphere_density(zeta) / rho

        segments = self.eos_dict["segments"]
        for i in range(len(xi)):
            if segments[i] == 1.0:
                continue
            ghs = stb.pair_correlation_contact(zeta[2], zeta[3], diameter[i] / 2.0)
            Ahc = Ahc - xi[i] * (segments[i] - 1.0) * log(ghs)

        return Ahc

    def Adispersion(self, T, xi, rhoi, diameter, zeta):
        r"""
        Dispersion contribution per molecule

        :math:`\frac{A^{disp}}{N k_B T} = -2 \pi \rho I_1 \overline{m^2 \epsilon \sigma^3} - \pi \rho \bar{m} C_1 I_2 \overline{m^2 \epsilon^2 \sigma^3}`

        Parameters are those of :meth:`Ahard_chain`.
        """

        segments = self.eos_dict["segments"]
        rho = np.sum(rhoi)
        eta = zeta[3]

        mbar = 0.0
        for i in range(len(xi)):
            mbar = mbar + xi[i] * segments[i]

        m1 = (mbar - 1.0) / mbar
        m2 = m1 * (mbar - 2.0) / mbar
        I1 = 0.0
        I2 = 0.0
        for k in range(7):
            eta_k = eta ** k
            I1 = I1 + (A0[k] + m1 * A1[k] + m2 * A2[k]) * eta_k
            I2 = I2 + (B0[k] + m1 * B1[k] + m2 * B2[k]) * eta_k

        frac = 1.0 - eta
        C1 = 1.0 / (
            1.0
            + mbar * (8.0 * eta - 2.0 * eta ** 2) / frac ** 4
            + (1.0 - mbar)
            * (20.0 * eta - 27.0 * eta ** 2 + 12.0 * eta ** 3 - 2.0 * eta ** 4)
            / (frac * (2.0 - eta)) ** 2
        )

        m2es3, m2e2s3 = stb.mixture_averages(
            xi, segments, self.eos_dict["epsilon_ij"], self.eos_dict["sigma_ij"], T
        )

        return -2.0 * np.pi * rho * I1 * m2es3 - np.pi * rho * mbar * C1 * I2 * m2e2s3

    def density_max(self, xi, maxpack=0.65):
        """
        Maximum molar density [mol/m^3] from the packing fraction of segments of diameter sigma
        """

        tmp = np.sum(
            np.asarray(xi, float) * self.eos_dict["segments"] * self.eos_dict["sigma"] ** 3
        )
        rho_number = maxpack * 6.0 / (np.pi * tmp)

        return rho_number / (constants.Nav * constants.Atometer ** 3)

    def characteristic_temperature(self, xi):
        """
        Temperature scale from the segment averaged dispersion energy, near the critical temperature of chain fluids [K]
        """

        xi = np.asarray(xi, float)
        mbar = np.sum(xi * self.eos_dict["segments"])
        epsilon = np.sum(xi * self.eos_dict["segments"] * self.eos_dict["epsilon"]) / mbar

        return 1.3 * mbar ** 0.4 * epsilon

    def __str__(self):

        string = "PC-SAFT, Beads: {}".format(self.beads)
        return string
