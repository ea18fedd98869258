"""
Unit and regression test for the pure component phase equilibrium of the dualeos package.
"""

import dualeos
from dualeos.exceptions import DomainError, TrivialSolutionError
from dualeos.thermodynamics.pure_vle import _solve_fixed_temperature
from dualeos.thermodynamics.solver_options import SolverOptions
from dualeos import fundamental_constants as constants
import dualeos.thermodynamics.properties as prop

import pytest
import numpy as np

bead_library = {
    "methane": {"Tc": 190.56, "Pc": 4.599e6, "omega": 0.011, "mass": 0.016043},
    "decane": {"Tc": 617.7, "Pc": 2.11e6, "omega": 0.49, "mass": 0.14228},
}
Eos_PR = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["methane"], bead_library=bead_library
)
Eos_mix = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["methane", "decane"], bead_library=bead_library
)
Eos_decane = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["decane"], bead_library=bead_library
)
Eos_saft = dualeos.initiate_eos(
    eos="saft.pcsaft",
    beads=["methane"],
    bead_library={"methane": {"m": 1.0, "sigma": 3.7039, "epsilon": 150.03}},
)


def test_pure_vle_temperature(Eos=Eos_PR):
    result = dualeos.solve_pure_vle(Eos, "temperature", 150.0)
    liquid, vapor = result.liquid, result.vapor
    assert result.converged
    assert vapor.density < liquid.density
    assert prop.pressure(Eos, liquid) == pytest.approx(prop.pressure(Eos, vapor), rel=1e-8)
    RT = constants.R * 150.0
    mu_l = prop.chemical_potential(Eos, liquid, contributions="residual")
    mu_v = prop.chemical_potential(Eos, vapor, contributions="residual")
    assert mu_l + RT * np.log(liquid.density) == pytest.approx(
        mu_v + RT * np.log(vapor.density), abs=1e-6 * RT
    )
    assert result.pressure == pytest.approx(1.04e6, rel=5e-2)


def test_pure_vle_restart(Eos=Eos_PR):
    result = dualeos.solve_pure_vle(Eos, "temperature", 150.0)
    again = dualeos.solve_pure_vle(Eos, "temperature", 150.0, initial_state=result)
    assert again.iterations == 0
    assert again.pressure == pytest.approx(result.pressure, rel=1e-10)


def test_pure_vle_pressure(Eos=Eos_PR):
    reference = dualeos.solve_pure_vle(Eos, "temperature", 150.0)
    result = dualeos.solve_pure_vle(Eos, "pressure", reference.pressure)
    assert result.temperature == pytest.approx(150.0, rel=1e-6)
    assert result.liquid.density == pytest.approx(reference.liquid.density, rel=1e-5)


def test_pure_vle_component_of_mixture(Eos=Eos_mix):
    result = dualeos.solve_pure_vle(Eos, "temperature", 150.0, molefracs=[1.0, 0.0])
    pure = dualeos.solve_pure_vle(Eos_PR, "temperature", 150.0)
    assert result.pressure == pytest.approx(pure.pressure, rel=1e-8)
    with pytest.raises(DomainError):
        dualeos.solve_pure_vle(Eos, "temperature", 150.0, molefracs=[0.5, 0.5])


def test_pure_vle_supercritical(Eos=Eos_PR):
    with pytest.raises(dualeos.SolverError):
        dualeos.solve_pure_vle(Eos, "temperature", 250.0)
    with pytest.raises(DomainError):
        dualeos.solve_pure_vle(Eos, "pressure", 1e7)


def test_pure_vle_invalid_input(Eos=Eos_PR):
    with pytest.raises(ValueError):
        dualeos.solve_pure_vle(Eos, "volume", 1.0)
    with pytest.raises(DomainError):
        dualeos.solve_pure_vle(Eos, "temperature", -150.0)


def test_pcsaft_vapor_pressure(Eos=Eos_saft):
    result = dualeos.solve_pure_vle(Eos, "temperature", 150.0)
    assert result.pressure == pytest.approx(1.04e6, rel=5e-2)


def test_pcsaft_pure_vle_pressure(Eos=Eos_saft):
    reference = dualeos.solve_pure_vle(Eos, "temperature", 150.0)
    result = dualeos.solve_pure_vle(Eos, "pressure", reference.pressure)
    assert result.converged
    assert result.temperature == pytest.approx(150.0, rel=1e-6)


def test_pure_vle_dense_liquid(Eos=Eos_decane):
    # The liquid root lies above 0.9 of the inverse covolume
    result = dualeos.solve_pure_vle(Eos, "temperature", 250.0)
    liquid, vapor = result.liquid, result.vapor
    assert result.converged
    assert liquid.density * Eos.eos_dict["bi"][0] > 0.9
    assert prop.pressure(Eos, liquid) == pytest.approx(prop.pressure(Eos, vapor), rel=1e-8)
    assert 0.0 < result.pressure < 1e4


def test_pure_vle_component_of_mixture_entropy(Eos=Eos_mix):
    result = dualeos.solve_pure_vle(Eos, "temperature", 150.0, molefracs=[1.0, 0.0])
    pure = dualeos.solve_pure_vle(Eos_PR, "temperature", 150.0)
    for phase, reference in zip(result.phases, pure.phases):
        assert np.isfinite(prop.entropy(Eos, phase))
        assert prop.entropy(Eos, phase) == pytest.approx(
            prop.entropy(Eos_PR, reference), rel=1e-6
        )
        assert prop.enthalpy(Eos, phase) == pytest.approx(
            prop.enthalpy(Eos_PR, reference), rel=1e-6
        )


def test_pure_vle_equal_densities(Eos=Eos_PR):
    with pytest.raises(TrivialSolutionError):
        _solve_fixed_temperature(
            Eos, 150.0, np.ones(1), 5000.0, 5000.0, 50, 1e-10, SolverOptions()
        )
