"""
Unit and regression test for the PeTS EOS of the dualeos package.
"""

import dualeos.equations_of_state
from dualeos.exceptions import ConfigurationError
from dualeos.state import State
import dualeos.thermodynamics.properties as prop
import dualeos.utils.general_toolbox as gtb

import pytest
import numpy as np

bead_library = {
    "argon": {"sigma": 3.4050, "epsilon": 119.8, "mass": 0.039948},
    "krypton": {"sigma": 3.6300, "epsilon": 163.1, "mass": 0.083798},
}

Eos = dualeos.equations_of_state.initiate_eos(
    eos="saft.pets", beads=["argon", "krypton"], bead_library=bead_library
)


def test_pets_contributions(Eos=Eos):
    state = State.from_density(100.0, 30000.0, [0.5, 0.5])
    contributions = Eos.residual_helmholtz_energy_contributions(state)
    assert set(contributions) == {"Ahard_sphere", "Adispersion"}
    assert contributions["Ahard_sphere"] > 0.0 and contributions["Adispersion"] < 0.0
    assert Eos.residual_helmholtz_energy(state) == pytest.approx(
        sum(contributions.values()), rel=1e-12
    )


def test_pets_pressure_from_helmholtz(Eos=Eos):
    T = 120.0
    moles = np.array([0.4, 0.6])
    state = State(T, 1.0 / 25000.0, moles)

    def func(V):
        return prop.helmholtz_energy(Eos, State(T, V, moles), contributions="residual")

    dAdV = gtb.central_difference(state.volume, func, step_size=1e-6)[0]
    assert prop.pressure(Eos, state, contributions="residual") == pytest.approx(
        -dAdV, rel=1e-5
    )


def test_pets_hessian_symmetric(Eos=Eos):
    state = State(120.0, 1.0 / 25000.0, [0.4, 0.6])
    dmu = prop.dmu_dni(Eos, state, contributions="residual")
    assert dmu[0, 1] == pytest.approx(dmu[1, 0], rel=1e-12)


def test_pets_no_association():
    library = {"argon": dict(bead_library["argon"], **{"Nk-A": 1, "epsilonHB": 100.0, "kappaHB": 0.01})}
    with pytest.raises(ConfigurationError):
        dualeos.equations_of_state.initiate_eos(
            eos="saft.pets", beads=["argon"], bead_library=library
        )
