# -- coding: utf8 --

r"""

Wertheim first order thermodynamic perturbation theory (TPT1) contribution of association sites to the Helmholtz energy.

Three site types are supported: A sites bond to B sites, and C sites bond to C sites. The fractions of unbonded sites are solved with real valued iterations first. When the state carries dual numbers, the converged fractions are refined with Newton steps in the dual arithmetic so that their derivatives are exact.

"""

import numpy as np
import logging

from ..autodiff import DualNumber, exp, log, real_part
from ..exceptions import ConfigurationError, IterationLimitError
from . import eos_toolbox as tb

logger = logging.getLogger(__name__)

site_types = ["A", "B", "C"]


def _bonds(type1, type2):
    return (type1, type2) in [("A", "B"), ("B", "A"), ("C", "C")]


def _is_generic(*args):
    for arg in args:
        if isinstance(arg, DualNumber):
            return True
        if isinstance(arg, np.ndarray) and arg.dtype == object:
            if any(isinstance(x, DualNumber) for x in arg.flat):
                return True
    return False


def solve_linear_system(matrix, vector):
    r"""
    Gaussian elimination with partial pivoting that accepts object arrays of dual numbers.

    Pivots are chosen from the real parts.

    Parameters
    ----------
    matrix : numpy.ndarray
        Square matrix, float or object array
    vector : numpy.ndarray
        Right hand side

    Returns
    -------
    solution : numpy.ndarray
        Object array with the solution of the linear system
    """

    n = len(vector)
    A = np.array(matrix, dtype=object)
    b = np.array(vector, dtype=object)

    for k in range(n):
        pivot = k + int(np.argmax([abs(real_part(A[i, k])) for i in range(k, n)]))
        if real_part(A[pivot, k]) == 0.0:
            raise np.linalg.LinAlgError("Singular matrix in association site solver")
        if pivot != k:
            A[[k, pivot]] = A[[pivot, k]]
            b[[k, pivot]] = b[[pivot, k]]
        for i in range(k + 1, n):
            factor = A[i, k] / A[k, k]
            for j in range(k, n):
                A[i, j] = A[i, j] - factor * A[k, j]
            b[i] = b[i] - factor * b[k]

    x = np.empty(n, dtype=object)
    for i in range(n - 1, -1, -1):
        tmp = b[i]
        for j in range(i + 1, n):
            tmp = tmp - A[i, j] * x[j]
        x[i] = tmp / A[i, i]

    return x


class Association:
    r"""
    Association sub-contribution shared by the SAFT models.

    Parameters
    ----------
    beads : list[str]
        List of bead names, one per component
    bead_library : dict
        Self interaction parameters. Used keys:

        - Nk-A, Nk-B, Nk-C: Number of association sites of each type on the molecule
        - epsilonHB: :math:`\epsilon^{HB}/k_B`, Association energy [K]
        - kappaHB: :math:`\kappa^{HB}`, Dimensionless association volume

    cross_library : dict
        Cross interaction parameters, epsilonHB and kappaHB may be given for pairs
    sigma : numpy.ndarray
        Matrix of cross segment diameters [Å]
    max_iter : int, Optional, default=50
        Maximum number of iterations for the fraction of unbonded sites
    tol : float, Optional, default=1e-12
        Tolerance on the fraction of unbonded sites

    Attributes
    ----------
    sites : list[tuple]
        (component index, site type, multiplicity) of each site with nonzero multiplicity
    epsilon_hb : numpy.ndarray
        Matrix of association energies [K]
    association_volume : numpy.ndarray
        Matrix of :math:`\kappa^{HB}_{ij}\sigma_{ij}^3` [Å^3]
    """

    def __init__(self, beads, bead_library, cross_library, sigma, max_iter=50, tol=1e-12):

        self.max_iter = max_iter
        self.tol = tol

        self.sites = []
        for i, bead in enumerate(beads):
            for site in site_types:
                nk = bead_library[bead].get("Nk-" + site, 0)
                if nk < 0:
                    raise ConfigurationError(
                        "Number of sites, Nk-{}, of group {} must be non-negative".format(
                            site, bead
                        )
                    )
                if nk > 0:
                    self.sites.append((i, site, float(nk)))

        mixing_dict = {
            "epsilonHB": {"function": "mean"},
            "kappaHB": {
                "function": "volumetric_geometric_mean",
                "weighting_parameters": ["sigma"],
            },
        }
        tmp_library = {}
        for bead in beads:
            tmp_library[bead] = {
                "epsilonHB": bead_library[bead].get("epsilonHB", 0.0),
                "kappaHB": bead_library[bead].get("kappaHB", 0.0),
                "sigma": bead_library[bead]["sigma"],
            }
            if tmp_library[bead]["epsilonHB"] < 0 or tmp_library[bead]["kappaHB"] < 0:
                raise ConfigurationError(
                    "Association parameters of group {} must be non-negative".format(bead)
                )
        output = tb.cross_interaction_from_dict(beads, tmp_library, mixing_dict, cross_library)

        self.epsilon_hb = output["epsilonHB"]
        self.association_volume = output["kappaHB"] * sigma ** 3

        logger.debug("Association sites: {}".format(self.sites))

    @property
    def number_of_sites(self):
        return len(self.sites)

    def _site_matrix(self, T, rhoi, diameter, zeta2, zeta3):
        """
        Matrix K such that the unbonded fractions satisfy X = 1/(1 + K X).
        """

        nsites = len(self.sites)
        K = np.zeros((nsites, nsites), dtype=object)
        one_minus_zeta3 = 1.0 - zeta3
        for s, (i, type_s, _) in enumerate(self.sites):
            for r, (j, type_r, n_r) in enumerate(self.sites):
                if not _bonds(type_s, type_r) or self.association_volume[i, j] == 0.0:
                    K[s, r] = 0.0
                    continue
                dij = diameter[i] * diameter[j] / (diameter[i] + diameter[j])
                ghs = (
                    1.0 / one_minus_zeta3
                    + dij * 3.0 * zeta2 / one_minus_zeta3 ** 2
                    + dij ** 2 * 2.0 * zeta2 ** 2 / one_minus_zeta3 ** 3
                )
                delta = (
                    self.association_volume[i, j]
                    * ghs
                    * (exp(self.epsilon_hb[i, j] / T) - 1.0)
                )
                K[s, r] = rhoi[j] * n_r * delta

        return K

    def _solve_real(self, K):

        nsites = len(K)
        X = np.ones(nsites)
        for _ in range(5):
            X = 0.5 * X + 0.5 / (1.0 + K.dot(X))

        for i in range(self.max_iter):
            KX = K.dot(X)
            F = X * (1.0 + KX) - 1.0
            if np.max(np.abs(F)) < self.tol:
                return X
            J = np.diag(1.0 + KX) + X[:, None] * K
            dX = np.linalg.solve(J, F)
            X_new = X - dX
            # Keep fractions inside (0, 1]
            X = np.where(X_new <= 0.0, 0.2 * X, np.minimum(X_new, 1.0))

        raise IterationLimitError(
            "Fraction of unbonded sites did not converge in {} iterations".format(
                self.max_iter
            )
        )

    def fraction_nonbonded_sites(self, T, rhoi, diameter, zeta2, zeta3):
        r"""
        Fraction of sites of each kind that are not bonded, :math:`X_A`.

        Parameters
        ----------
        T : float or DualNumber
            Temperature of the system [K]
        rhoi : numpy.ndarray
            Number density of each component [1/Å^3]
        diameter : numpy.ndarray
            Temperature dependent segment diameter of each component [Å]
        zeta2 : float or DualNumber
            Second moment of the packing fraction [1/Å]
        zeta3 : float or DualNumber
            Packing fraction

        Returns
        -------
        X : numpy.ndarray
            Fraction of nonbonded sites in the order of :attr:`sites`
        """

        K = self._site_matrix(T, rhoi, diameter, zeta2, zeta3)
        X = self._solve_real(real_part(K))

        if not _is_generic(T, rhoi, zeta3):
            return X

        X = np.array(X, dtype=object)
        for _ in range(3):
            KX = K.dot(X)
            F = X * (1.0 + KX) - 1.0
            J = np.empty_like(K)
            for s in range(len(X)):
                for r in range(len(X)):
                    J[s, r] = X[s] * K[s, r]
                J[s, s] = J[s, s] + 1.0 + KX[s]
            X = X - solve_linear_system(J, F)

        return X

    def helmholtz_energy(self, T, xi, rhoi, diameter, zeta2, zeta3):
        r"""
        Association contribution to the Helmholtz energy per molecule

        :math:`\frac{A^{assoc}}{N k_B T} = \sum_i x_i \sum_a n_{a,i} \left( \ln X_{a,i} - \frac{X_{a,i}}{2} + \frac{1}{2} \right)`

        Parameters are those of :meth:`fraction_nonbonded_sites` plus the mole fractions, xi.
        """

        if not self.sites:
            return 0.0

        X = self.fraction_nonbonded_sites(T, rhoi, diameter, zeta2, zeta3)
        Aassoc = 0.0
        for s, (i, _, n_s) in enumerate(self.sites):
            Aassoc = Aassoc + xi[i] * n_s * (log(X[s]) - 0.5 * X[s] + 0.5)

        return Aassoc
