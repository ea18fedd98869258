# -- coding: utf8 --

r"""
    PeTS, perturbation theory for the Lennard-Jones truncated and shifted fluid (cut-off 2.5 sigma).

    Heier, M., Stephan, S., Liu, J., Chapman, W. G., Hasse, H., & Langenbach, K. (2018). Equation of state for the Lennard-Jones truncated and shifted fluid with a cut-off radius of 2.5 sigma based on perturbation theory and its applications to interfacial thermodynamics. Molecular Physics, 116, 2083-2094.

"""

import numpy as np
import logging

from dualeos import fundamental_constants as constants
from dualeos.autodiff import exp
import dualeos.equations_of_state.eos_toolbox as tb
from dualeos.equations_of_state.saft import saft_toolbox as stb

logger = logging.getLogger(__name__)

PETS_A = np.array(
    [
        0.690603404,
        1.189317012,
        1.265604153,
        -24.34554201,
        93.67300357,
        -157.8773415,
        96.93736697,
    ]
)
PETS_B = np.array(
    [
        0.664852128,
        2.10733079,
        -9.597951213,
        -17.37871193,
        30.17506222,
        209.3942909,
        -353.2743581,
    ]
)


class SaftType:

    r"""
    Object of PeTS contributions for the parent SAFT EOS object.

    Parameters
    ----------
    beads : list[str]
        List of unique bead names, one per component
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters:

        - sigma: :math:`\sigma_{i}`, Lennard-Jones diameter [Å]
        - epsilon: :math:`\epsilon_{i}/k_B`, Lennard-Jones energy [K]

    cross_library : dict
        Optional library of cross interaction parameters (kij, sigma, epsilon)

    Attributes
    ----------
    eos_dict : dict
        Arrays of parameters: segments (all one), sigma, epsilon and the matrices sigma_ij, epsilon_ij and kij
    """

    residual_helmholtz_contributions = ["Ahard_sphere", "Adispersion"]
    liquid_packing_fraction = 0.5
    critical_packing_fraction = 0.13
    supports_association = False

    def __init__(self, beads, bead_library, cross_library, combining_rules=None):

        self.beads = beads
        bead_library = tb.check_bead_parameters(
            beads,
            bead_library,
            {"sigma": None, "epsilon": None},
            positive=("sigma", "epsilon"),
        )

        self.combining_rules = {
            "sigma": {"function": "mean"},
            "epsilon": {"function": "geometric_mean"},
            "kij": {"function": "zero"},
        }
        if combining_rules is not None:
            self.combining_rules.update(combining_rules)

        output = tb.cross_interaction_from_dict(
            beads, bead_library, self.combining_rules, cross_library=cross_library
        )

        self.eos_dict = {
            "segments": np.ones(len(beads)),
            "sigma": tb.extract_property("sigma", bead_library, beads),
            "epsilon": tb.extract_property("epsilon", bead_library, beads),
            "sigma_ij": output["sigma"],
            "kij": output["kij"],
            "epsilon_ij": output["epsilon"] * (1.0 - output["kij"]),
        }

    def hard_sphere_diameter(self, T):
        r"""
        :math:`d_i = \sigma_i (1 - 0.127112544 \exp(-3.052785558 \epsilon_i / T))` [Å]
        """
        return np.array(
            [
                sigma * (1.0 - 0.127112544 * exp(-3.052785558 * epsilon / T))
                for sigma, epsilon in zip(self.eos_dict["sigma"], self.eos_dict["epsilon"])
            ],
            dtype=object,
        )

    def Ahard_sphere(self, T, xi, rhoi, diameter, zeta):

        return stb.hard_sphere_density(zeta) / np.sum(rhoi)

    def Adispersion(self, T, xi, rhoi, diameter, zeta):
        r"""
        Dispersion contribution per molecule

        :math:`\frac{A^{disp}}{N k_B T} = -2 \pi \rho I_1 \overline{\epsilon \sigma^3} - \pi \rho C_1 I_2 \overline{\epsilon^2 \sigma^3}`
        """

        rho = np.sum(rhoi)
        eta = zeta[3]

        I1 = stb.polynomial(PETS_A, eta)
        I2 = stb.polynomial(PETS_B, eta)
        C1 = 1.0 / (1.0 + (8.0 * eta - 2.0 * eta ** 2) / (1.0 - eta) ** 4)

        es3, e2s3 = stb.mixture_averages(
            xi, self.eos_dict["segments"], self.eos_dict["epsilon_ij"], self.eos_dict["sigma_ij"], T
        )

        return -2.0 * np.pi * rho * I1 * es3 - np.pi * rho * C1 * I2 * e2s3

    def density_max(self, xi, maxpack=0.65):

        tmp = np.sum(np.asarray(xi, float) * self.eos_dict["sigma"] ** 3)
        rho_number = maxpack * 6.0 / (np.pi * tmp)

        return rho_number / (constants.Nav * constants.Atometer ** 3)

    def characteristic_temperature(self, xi):
        """
        Critical temperature of the truncated and shifted Lennard-Jones fluid is about 1.09 epsilon
        """

        return 1.09 * np.sum(np.asarray(xi, float) * self.eos_dict["epsilon"])

    def __str__(self):

        string = "PeTS, Beads: {}".format(self.beads)
        return string
