"""
Unit and regression test for the Peng-Robinson EOS of the dualeos package.
"""

# Import package, test suite, and other packages as needed
import dualeos.equations_of_state.cubic.peng_robinson
from dualeos.equations_of_state import initiate_eos
from dualeos.exceptions import ConfigurationError
from dualeos.state import State
import dualeos.thermodynamics.properties as prop
import dualeos.utils.general_toolbox as gtb

import pytest
import sys
import numpy as np

xi = np.array([0.827, 0.173])
beads = ["acetone", "chloroform"]
bead_library = {
    "acetone": {"Tc": 508.1, "Pc": 4690000.0, "omega": 0.304},
    "chloroform": {"Tc": 536.4, "Pc": 5471550.0, "omega": 0.221902},
}
cross_library = {"acetone": {"chloroform": {"kij": -0.0605}}}

Eos = initiate_eos(
    eos="cubic.peng_robinson",
    beads=beads,
    bead_library=bead_library,
    cross_library=cross_library,
)
T = 332.15
rho = 12546.22


def test_peng_robinson_imported():
    #    """Sample test, will always pass so long as import statement worked"""
    assert "dualeos.equations_of_state.cubic.peng_robinson" in sys.modules


def test_PR_coefficients(beads=beads, bead_library=bead_library):
    #   """Test ability to create EOS object"""
    Eos_class = initiate_eos(
        eos="cubic.peng_robinson", beads=beads, bead_library=bead_library
    )
    tmp = [
        Eos_class.bead_library[beads[0]]["kappa"],
        Eos_class.bead_library[beads[1]]["kappa"],
    ]
    assert Eos_class.eos_dict["ai"] == pytest.approx(
        np.array([1.73993846, 1.66217026]), abs=1e-4
    )
    assert Eos_class.eos_dict["bi"] == pytest.approx(
        np.array([7.00758212e-05, 6.34118233e-05]), abs=1e-9
    )
    assert tmp == pytest.approx(np.array([0.81854211, 0.70357958]), abs=1e-4)


def test_PR_cross_parameter(Eos=Eos):
    assert Eos.eos_dict["kij"] == pytest.approx(np.array([[0.0, -0.0605], [-0.0605, 0.0]]))


def test_peng_robinson_pressure(xi=xi, T=T, Eos=Eos, rho=rho):
    #   """Test ability to predict P"""
    state = State.from_density(T, rho, xi)
    P = prop.pressure(Eos, state)
    assert P == pytest.approx(69904905.698, rel=1e-6)


def test_peng_robinson_pressure_from_helmholtz(xi=xi, T=T, Eos=Eos, rho=rho):
    #   """Pressure is the negative volume derivative of the Helmholtz energy"""
    state = State.from_density(T, rho, xi)

    def func(V):
        return prop.helmholtz_energy(Eos, State(T, V, xi), contributions="residual")

    dAdV = gtb.central_difference(state.volume, func, step_size=1e-6)[0]
    P_res = prop.pressure(Eos, state, contributions="residual")
    assert P_res == pytest.approx(-dAdV, rel=1e-5)


def test_PR_missing_parameter(beads=beads):
    with pytest.raises(ConfigurationError):
        initiate_eos(
            eos="cubic.peng_robinson",
            beads=beads,
            bead_library={"acetone": {"Tc": 508.1, "Pc": 4690000.0, "omega": 0.304}},
        )


def test_PR_negative_parameter():
    with pytest.raises(ConfigurationError):
        initiate_eos(
            eos="cubic.peng_robinson",
            beads=["acetone"],
            bead_library={"acetone": {"Tc": -508.1, "Pc": 4690000.0, "omega": 0.304}},
        )


def test_PR_wrong_number_of_components(Eos=Eos):
    with pytest.raises(ConfigurationError):
        Eos.residual_helmholtz_energy(State(300.0, 1.0, [1.0]))


def test_unknown_eos():
    with pytest.raises(ConfigurationError):
        initiate_eos(eos="cubic.van_der_waals", beads=beads, bead_library=bead_library)
