"""
Unit and regression test for the State object of the dualeos package.
"""

from dualeos.state import State
from dualeos.exceptions import DomainError
from dualeos.autodiff import Dual

import pytest
import numpy as np


def test_derived_values():
    state = State(300.0, 2.0e-3, [1.0, 3.0])
    assert state.total_moles == pytest.approx(4.0)
    assert state.molefracs == pytest.approx(np.array([0.25, 0.75]))
    assert state.molar_volume == pytest.approx(5.0e-4)
    assert state.density == pytest.approx(2000.0)
    assert state.partial_density == pytest.approx(np.array([500.0, 1500.0]))


def test_moles_mapping():
    state = State(300.0, 1.0, {1: 2.0}, number_of_components=3)
    assert state.moles == pytest.approx(np.array([0.0, 2.0, 0.0]))


def test_from_density():
    state = State.from_density(250.0, 100.0, [0.4, 0.6], total_moles=2.0)
    assert state.volume == pytest.approx(0.02)
    assert state.moles == pytest.approx(np.array([0.8, 1.2]))


def test_from_density_molefracs_sum():
    with pytest.raises(DomainError):
        State.from_density(250.0, 100.0, [0.4, 0.4])


@pytest.mark.parametrize(
    "temperature, volume, moles",
    [(-1.0, 1.0, [1.0]), (300.0, 0.0, [1.0]), (300.0, 1.0, [-1.0, 2.0]), (300.0, 1.0, [0.0])],
)
def test_invalid_state(temperature, volume, moles):
    with pytest.raises(DomainError):
        State(temperature, volume, moles)


def test_immutable():
    state = State(300.0, 1.0, [1.0])
    with pytest.raises(AttributeError):
        state.temperature = 200.0


def test_derive_with_dual():
    state = State(300.0, 1.0, [1.0])
    dual_state = state.derive(volume=Dual(1.0, 1.0))
    assert isinstance(dual_state.volume, Dual)
    assert dual_state.temperature == 300.0
    assert dual_state.real().volume == 1.0
