"""
Unit and regression test for the PC-SAFT EOS of the dualeos package.
"""

# Import package, test suite, and other packages as needed
import dualeos.equations_of_state
from dualeos.exceptions import ConfigurationError
from dualeos.state import State
import dualeos.thermodynamics.properties as prop
import dualeos.utils.general_toolbox as gtb

import pytest
import sys
import numpy as np

bead_library = {
    "methane": {"m": 1.0, "sigma": 3.7039, "epsilon": 150.03, "mass": 0.016043},
    "water": {
        "m": 1.0656,
        "sigma": 3.0007,
        "epsilon": 366.51,
        "epsilonHB": 2500.7,
        "kappaHB": 0.034868,
        "Nk-A": 1,
        "Nk-B": 1,
        "mass": 0.018015,
    },
}
cross_library = {"methane": {"water": {"kij": 0.05}}}

Eos_methane = dualeos.equations_of_state.initiate_eos(
    eos="saft.pcsaft", beads=["methane"], bead_library=bead_library
)
Eos_water = dualeos.equations_of_state.initiate_eos(
    eos="saft.pcsaft", beads=["water"], bead_library=bead_library
)
Eos_mix = dualeos.equations_of_state.initiate_eos(
    eos="saft.pcsaft",
    beads=["methane", "water"],
    bead_library=bead_library,
    cross_library=cross_library,
)


def test_pcsaft_imported():
    #    """Sample test, will always pass so long as import statement worked"""
    assert "dualeos.equations_of_state.saft.pcsaft" in sys.modules


def test_pcsaft_parameters(Eos=Eos_mix):
    assert Eos.massi == pytest.approx(np.array([0.016043, 0.018015]))
    assert Eos.saft_source.eos_dict["sigma_ij"][0, 1] == pytest.approx(
        0.5 * (3.7039 + 3.0007)
    )
    assert Eos.saft_source.eos_dict["epsilon_ij"][0, 1] == pytest.approx(
        np.sqrt(150.03 * 366.51) * 0.95
    )
    assert Eos_methane.association is None
    assert Eos.association.number_of_sites == 2


def test_pcsaft_ideal_gas_limit(Eos=Eos_methane):
    state = State.from_density(300.0, 1e-3, [1.0])
    assert prop.compressibility(Eos, state) == pytest.approx(1.0, abs=1e-6)


def test_pcsaft_pressure_from_helmholtz(Eos=Eos_mix):
    #   """Pressure with association sites agrees with the volume derivative of A"""
    T = 350.0
    moles = np.array([0.3, 0.7])
    state = State(T, 1.0 / 30000.0, moles)

    def func(V):
        return prop.helmholtz_energy(Eos, State(T, V, moles), contributions="residual")

    dAdV = gtb.central_difference(state.volume, func, step_size=1e-6)[0]
    P_res = prop.pressure(Eos, state, contributions="residual")
    assert P_res == pytest.approx(-dAdV, rel=1e-5)


def test_pcsaft_chemical_potential_from_helmholtz(Eos=Eos_mix):
    T = 350.0
    V = 1.0 / 30000.0
    moles = np.array([0.3, 0.7])
    mu_res = prop.chemical_potential(Eos, State(T, V, moles), contributions="residual")

    for i in range(2):

        def func(ni):
            tmp = moles.copy()
            tmp[i] = ni
            return prop.helmholtz_energy(Eos, State(T, V, tmp), contributions="residual")

        dAdn = gtb.central_difference(moles[i], func, step_size=1e-6)[0]
        assert mu_res[i] == pytest.approx(dAdn, rel=1e-5)


def test_pcsaft_association_lowers_helmholtz_energy(Eos=Eos_water):
    state = State.from_density(300.0, 50000.0, [1.0])
    contributions = Eos.residual_helmholtz_energy_contributions(state)
    assert contributions["Aassoc"] < 0.0

    library = {"water": {key: value for key, value in bead_library["water"].items()}}
    for key in ["Nk-A", "Nk-B"]:
        del library["water"][key]
    Eos_no_assoc = dualeos.equations_of_state.initiate_eos(
        eos="saft.pcsaft", beads=["water"], bead_library=library
    )
    assert Eos.residual_helmholtz_energy(state) < Eos_no_assoc.residual_helmholtz_energy(
        state
    )


def test_pcsaft_fraction_nonbonded_sites(Eos=Eos_water):
    state = State.from_density(300.0, 50000.0, [1.0])
    T = state.temperature
    rhoi = dualeos.equations_of_state.saft.saft_toolbox.number_densities(state)
    diameter = Eos.saft_source.hard_sphere_diameter(T)
    zeta = dualeos.equations_of_state.saft.saft_toolbox.calc_zeta(
        rhoi, Eos.saft_source.eos_dict["segments"], diameter
    )
    Xi = Eos.association.fraction_nonbonded_sites(T, rhoi, diameter, zeta[2], zeta[3])
    # Symmetric 2B molecule, both sites are equally bonded
    assert np.all(np.asarray(Xi, float) > 0.0) and np.all(np.asarray(Xi, float) < 1.0)
    assert Xi[0] == pytest.approx(Xi[1], rel=1e-10)


def test_pcsaft_helmholtz_identity(Eos=Eos_methane):
    #   """A = -pV + sum n mu with ideal gas contributions"""
    # Gas-like density, the pressure is positive without the ideal gas mass
    state = State.from_density(150.0, 100.0, [1.0])
    A = prop.helmholtz_energy(Eos, state)
    P = prop.pressure(Eos, state)
    mu = prop.chemical_potential(Eos, state)
    assert A == pytest.approx(-P * state.volume + np.sum(state.moles * mu), rel=1e-10)


def test_pcsaft_heat_capacity(Eos=Eos_methane):
    state = State.from_density(150.0, 20000.0, [1.0])
    cv = prop.isochoric_heat_capacity(Eos, state)
    cp = prop.isobaric_heat_capacity(Eos, state)
    assert cv > 1.5 * dualeos.fundamental_constants.R
    assert cp > cv


def test_pcsaft_missing_mass():
    Eos = dualeos.equations_of_state.initiate_eos(
        eos="saft.pcsaft",
        beads=["methane"],
        bead_library={"methane": {"m": 1.0, "sigma": 3.7039, "epsilon": 150.03}},
    )
    # Vapor density, below the two-phase region at 150 K
    state = State.from_density(150.0, 100.0, [1.0])
    assert prop.pressure(Eos, state) > 0.0
    with pytest.raises(ConfigurationError):
        prop.entropy(Eos, state)


def test_pcsaft_unknown_bead():
    with pytest.raises(ConfigurationError):
        dualeos.equations_of_state.initiate_eos(
            eos="saft.pcsaft", beads=["ethane"], bead_library=bead_library
        )
