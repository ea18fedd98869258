"""
Unit and regression test for the critical point solver of the dualeos package.
"""

import dualeos
from dualeos.exceptions import DomainError, SolverError
from dualeos.thermodynamics.critical_point import critical_conditions
from dualeos import fundamental_constants as constants

import pytest
import numpy as np

bead_library = {
    "methane": {"Tc": 190.56, "Pc": 4.599e6, "omega": 0.011},
    "decane": {"Tc": 617.7, "Pc": 2.11e6, "omega": 0.49},
}
Eos = dualeos.initiate_eos(eos="cubic.peng_robinson", beads=["methane"], bead_library=bead_library)
Eos_mix = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["methane", "decane"], bead_library=bead_library
)


def test_critical_point_peng_robinson(Eos=Eos):
    #   """The cubic parameters reproduce the given critical point"""
    critical = dualeos.solve_critical_point(Eos)
    assert critical.converged
    assert critical.temperature == pytest.approx(190.56, rel=1e-6)
    assert critical.pressure == pytest.approx(4.599e6, rel=1e-5)
    # Zc of Peng-Robinson
    Z = critical.pressure / (critical.density * constants.R * critical.temperature)
    assert Z == pytest.approx(0.3074, abs=1e-3)


def test_critical_conditions_vanish(Eos=Eos):
    critical = dualeos.solve_critical_point(Eos)
    f, jac = critical_conditions(
        Eos, critical.temperature, critical.state.volume, critical.state.moles
    )
    assert f == pytest.approx(np.zeros(2), abs=1e-7)
    assert jac.shape == (2, 2)


def test_critical_point_initial_temperature(Eos=Eos):
    critical = dualeos.solve_critical_point(Eos, initial_temperature=180.0)
    assert critical.temperature == pytest.approx(190.56, rel=1e-6)


def test_critical_point_mixture(Eos=Eos_mix):
    critical = dualeos.solve_critical_point(Eos, molefracs=[0.9, 0.1])
    assert 190.56 < critical.temperature < 617.7
    assert critical.pressure > 0.0


def test_critical_point_outside_bounds(Eos=Eos):
    with pytest.raises(SolverError):
        dualeos.solve_critical_point(Eos, temperature_bounds=(10.0, 100.0))


def test_critical_point_invalid_bounds(Eos=Eos):
    with pytest.raises(DomainError):
        dualeos.solve_critical_point(Eos, temperature_bounds=(300.0, 100.0))


Eos_pcsaft = dualeos.initiate_eos(
    eos="saft.pcsaft",
    beads=["methane"],
    bead_library={"methane": {"m": 1.0, "sigma": 3.7039, "epsilon": 150.03}},
)
Eos_pets = dualeos.initiate_eos(
    eos="saft.pets",
    beads=["argon"],
    bead_library={"argon": {"sigma": 3.4050, "epsilon": 119.8}},
)


def test_critical_point_pcsaft(Eos=Eos_pcsaft):
    critical = dualeos.solve_critical_point(Eos)
    assert critical.converged
    assert 185.0 < critical.temperature < 205.0
    assert 4.0e6 < critical.pressure < 5.6e6
    f, _ = critical_conditions(
        Eos, critical.temperature, critical.state.volume, critical.state.moles
    )
    assert f == pytest.approx(np.zeros(2), abs=1e-7)


def test_critical_point_pets(Eos=Eos_pets):
    critical = dualeos.solve_critical_point(Eos)
    assert critical.converged
    assert 1.0 < critical.temperature / 119.8 < 1.2
    assert critical.pressure > 0.0
