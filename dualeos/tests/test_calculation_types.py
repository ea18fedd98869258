"""
Unit and regression test for the batch calculations of the dualeos package.
"""

import dualeos
from dualeos.utils.parallelization import MultiprocessingJob

import pytest
import logging
import numpy as np

bead_library = {
    "methane": {"Tc": 190.56, "Pc": 4.599e6, "omega": 0.011, "mass": 0.016043},
    "decane": {"Tc": 617.7, "Pc": 2.11e6, "omega": 0.49, "mass": 0.14228},
}
Eos = dualeos.initiate_eos(eos="cubic.peng_robinson", beads=["methane"], bead_library=bead_library)
Eos_mix = dualeos.initiate_eos(
    eos="cubic.peng_robinson", beads=["methane", "decane"], bead_library=bead_library
)


def test_thermo_properties(Eos=Eos_mix):
    output = dualeos.thermo(
        Eos,
        calculation_type="properties",
        Tlist=[300.0, 350.0],
        Plist=[1e5, 1e5],
        molefracs=[0.5, 0.5],
        property_kinds=["compressibility", "pressure"],
    )
    assert np.all(output["converged"])
    assert output["pressure"] == pytest.approx([1e5, 1e5], rel=1e-8)
    assert output["error"] == [None, None]


def test_thermo_properties_invalid_kind(Eos=Eos):
    with pytest.raises(ValueError):
        dualeos.thermo(Eos, calculation_type="properties", property_kinds=["speed_of_sound"])


def test_thermo_pure_vle_flags_failures(Eos=Eos):
    #   """A supercritical temperature is flagged, the other items still converge"""
    MultiprocessingObject = MultiprocessingJob(ncores=2, backend="thread")
    output = dualeos.thermo(
        Eos,
        calculation_type="pure_vle",
        Tlist=[120.0, 250.0, 150.0],
        MultiprocessingObject=MultiprocessingObject,
    )
    MultiprocessingObject.end_pool()
    assert list(output["converged"]) == [True, False, True]
    assert output["error"][0] is None and output["error"][2] is None
    assert isinstance(output["error"][1], str)
    assert np.isnan(output["P"][1])
    assert output["P"][2] == pytest.approx(1.04e6, rel=5e-2)
    assert np.all(output["rhol"][[0, 2]] > output["rhov"][[0, 2]])


def test_thermo_pure_vle_serial_matches_pool(Eos=Eos):
    Tlist = [120.0, 150.0]
    serial = dualeos.thermo(Eos, calculation_type="pure_vle", Tlist=Tlist)
    MultiprocessingObject = MultiprocessingJob(ncores=2, backend="thread")
    pooled = dualeos.thermo(
        Eos, calculation_type="pure_vle", Tlist=Tlist, MultiprocessingObject=MultiprocessingObject
    )
    MultiprocessingObject.end_pool()
    assert pooled["P"] == pytest.approx(serial["P"], rel=1e-12)


def test_thermo_critical_point(Eos=Eos):
    output = dualeos.thermo(Eos, calculation_type="critical_point")
    assert output["converged"][0]
    assert output["Tc"][0] == pytest.approx(190.56, rel=1e-6)


def test_thermo_flash(Eos=Eos_mix):
    output = dualeos.thermo(
        Eos,
        calculation_type="flash",
        Tlist=[300.0, 600.0],
        Plist=[5e6, 1e5],
        feed=[0.5, 0.5],
    )
    assert list(output["converged"]) == [True, True]
    assert list(output["stable"]) == [False, True]
    assert 0.0 < output["beta"][0] < 1.0
    assert np.all(np.isnan(output["yi"][1]))


def test_thermo_phase_diagram(Eos=Eos):
    output = dualeos.thermo(
        Eos, calculation_type="phase_diagram_pure", npoints=5, Tmax_fraction=0.98
    )
    assert len(output["T"]) == 6
    assert np.all(output["converged"])
    assert np.all(np.diff(output["P"]) > 0.0)
    assert output["T"][-1] == pytest.approx(190.56, rel=1e-6)


def test_thermo_unknown_calculation(Eos=Eos):
    with pytest.raises(ValueError):
        dualeos.thermo(Eos, calculation_type="bubble_pressure")
    with pytest.raises(ValueError):
        dualeos.thermo(Eos)


def test_multiprocessing_job_invalid():
    with pytest.raises(ValueError):
        MultiprocessingJob(ncores=2, backend="mpi")
    with pytest.raises(ValueError):
        MultiprocessingJob(ncores=0)


def test_worker_logs_forwarded(tmp_path, caplog):
    job = MultiprocessingJob(ncores=1)
    filenames = [str(tmp_path / "mp-handler-1.log"), str(tmp_path / "mp-handler-2.log")]
    with open(filenames[0], "w") as f:
        f.write("[INFO](dualeos.thermodynamics.flash): worker record\n")
    job.logfiles = filenames + [str(tmp_path / "mp-handler-3.log")]

    with caplog.at_level(logging.INFO, logger="dualeos.utils.parallelization"):
        job._collect_worker_logs()
    assert "worker record" in caplog.text
    assert caplog.text.count("Records of worker log") == 1
    with open(filenames[0]) as f:
        assert f.read() == ""

    job._collect_worker_logs(remove=True)
    assert not (tmp_path / "mp-handler-1.log").exists()
