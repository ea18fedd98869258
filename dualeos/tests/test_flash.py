"""
Unit and regression test for the stability analysis and the flash of the dualeos package.
"""

import dualeos
from dualeos.exceptions import DomainError, TrivialSolutionError
from dualeos.state import State
from dualeos.thermodynamics.solver_options import SolverOptions
import dualeos.thermodynamics.flash as flash
from dualeos.thermodynamics.flash import rachford_rice
from dualeos.thermodynamics.stability import (
    trial_compositions,
    ln_fugacity_coefficient_tp,
    _minimize_tangent_plane,
)
import dualeos.thermodynamics.properties as prop

import pytest
import numpy as np

bead_library = {
    "methane": {"Tc": 190.56, "Pc": 4.599e6, "omega": 0.011},
    "decane": {"Tc": 617.7, "Pc": 2.11e6, "omega": 0.49},
}
Eos = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["methane", "decane"], bead_library=bead_library
)
Eos_ternary = dualeos.initiate_eos(
    eos="cubic.peng_robinson",
    beads=["methane", "ethane", "decane"],
    bead_library=dict(
        bead_library, ethane={"Tc": 305.32, "Pc": 4.872e6, "omega": 0.0995}
    ),
)


def test_rachford_rice():
    beta = rachford_rice(np.array([0.5, 0.5]), np.array([2.0, 0.5]))
    assert beta == pytest.approx(0.5, abs=1e-8)


def test_rachford_rice_no_split():
    with pytest.raises(DomainError):
        rachford_rice(np.array([0.5, 0.5]), np.array([2.0, 1.5]))


def test_trial_compositions():
    trials = trial_compositions(3)
    assert len(trials) == 3
    for w in trials:
        assert np.sum(w) == pytest.approx(1.0)


def test_stability_unstable_feed(Eos=Eos):
    result = dualeos.stability_analysis(Eos, 300.0, 5e6, [0.5, 0.5])
    assert not result.stable
    assert result.minimum_tangent_plane_distance < 0.0
    assert result.incipient_phase is not None


def test_stability_stable_feed(Eos=Eos):
    result = dualeos.stability_analysis(Eos, 600.0, 1e5, [0.5, 0.5])
    assert result.stable


def test_flash_split(Eos=Eos):
    feed = np.array([0.5, 0.5])
    result = dualeos.solve_flash(Eos, 300.0, 5e6, feed)
    liquid, vapor = result.liquid, result.vapor
    assert not result.stable
    assert len(result.phases) == 2
    assert liquid.density > vapor.density
    assert vapor.molefracs[0] > liquid.molefracs[0]

    # Mole balance
    assert liquid.moles + vapor.moles == pytest.approx(feed, rel=1e-10)
    assert np.sum(result.phase_fractions) == pytest.approx(1.0)

    # Equal fugacities and pressures
    lnf_l = np.log(liquid.molefracs) + prop.ln_fugacity_coefficient(Eos, liquid)
    lnf_v = np.log(vapor.molefracs) + prop.ln_fugacity_coefficient(Eos, vapor)
    assert lnf_l == pytest.approx(lnf_v, abs=1e-7)
    assert prop.pressure(Eos, liquid) == pytest.approx(5e6, rel=1e-7)
    assert prop.pressure(Eos, vapor) == pytest.approx(5e6, rel=1e-7)


@pytest.mark.parametrize(
    "T, P, feed", [(600.0, 1e5, [0.5, 0.5]), (300.0, 5e6, [0.01, 0.99])]
)
def test_flash_stable(T, P, feed, Eos=Eos):
    result = dualeos.solve_flash(Eos, T, P, feed)
    assert result.stable
    assert len(result.phases) == 1
    assert result.phases[0].moles == pytest.approx(np.array(feed))


def test_flash_invalid_feed(Eos=Eos):
    with pytest.raises(DomainError):
        dualeos.solve_flash(Eos, 300.0, 5e6, [0.0, 1.0])
    with pytest.raises(DomainError):
        dualeos.solve_flash(Eos, 300.0, 5e6, [1.0])


def test_tangent_plane_distance_of_trial(Eos=Eos):
    T, P = 300.0, 5e6
    z = np.array([0.5, 0.5])
    lnphi_z, _ = ln_fugacity_coefficient_tp(Eos, T, P, z)
    d = np.log(z) + lnphi_z
    w, rho, tm, converged = _minimize_tangent_plane(
        Eos, T, P, d, np.array([0.9, 0.1]), "vapor", 200, 1e-10, SolverOptions()
    )
    assert converged
    # At the stationary point tm = 1 - sum(W)
    lnphi_w = prop.ln_fugacity_coefficient(Eos, State.from_density(T, rho, w))
    assert tm == pytest.approx(1.0 - np.sum(np.exp(d - lnphi_w)), abs=1e-8)
    assert tm < 0.0


def test_stability_unconverged_trials(Eos=Eos):
    # Trials stopped early are only counted with a negative distance
    result = dualeos.stability_analysis(
        Eos, 600.0, 1e5, [0.5, 0.5], options={"max_iter_ss": 2}
    )
    assert result.stable
    assert all(tm >= -1e-10 for tm in result.tangent_plane_distances)

    result = dualeos.stability_analysis(
        Eos, 300.0, 5e6, [0.5, 0.5], options={"max_iter_ss": 5}
    )
    assert not result.stable


def test_flash_dense_liquid(Eos=Eos_ternary):
    feed = np.array([0.4, 0.3, 0.3])
    result = dualeos.solve_flash(Eos, 250.0, 3e6, feed)
    liquid, vapor = result.liquid, result.vapor
    assert not result.stable
    assert len(result.phases) == 2
    assert vapor.molefracs[2] < 0.01
    assert liquid.molefracs[2] > 0.3
    assert liquid.moles + vapor.moles == pytest.approx(feed, rel=1e-10)
    lnf_l = np.log(liquid.molefracs) + prop.ln_fugacity_coefficient(Eos, liquid)
    lnf_v = np.log(vapor.molefracs) + prop.ln_fugacity_coefficient(Eos, vapor)
    assert lnf_l == pytest.approx(lnf_v, abs=1e-7)


def test_flash_substitution_trivial(Eos=Eos):
    # A single phase region, both density roots coincide
    with pytest.raises(TrivialSolutionError):
        flash._successive_substitution(
            Eos,
            600.0,
            1e5,
            np.array([0.5, 0.5]),
            np.array([0.01, -0.01]),
            20,
            1e-4,
            SolverOptions(),
        )


def test_flash_stability_options(monkeypatch, Eos=Eos):
    given = []
    stability_analysis = flash.stability_analysis

    def record(*args, **kwargs):
        given.append(kwargs["options"])
        return stability_analysis(*args, **kwargs)

    monkeypatch.setattr(flash, "stability_analysis", record)
    result = dualeos.solve_flash(
        Eos, 300.0, 5e6, [0.5, 0.5], options={"max_iter_ss": 5, "verbosity": 1}
    )
    assert len(result.phases) == 2
    assert given[0].max_iter_ss is None
    assert given[0].verbosity == 1

    dualeos.solve_flash(Eos, 300.0, 5e6, [0.5, 0.5], stability_options={"max_iter_ss": 50})
    assert given[1] == {"max_iter_ss": 50}
