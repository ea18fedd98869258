"""
Thermodynamics

This package takes in an equation of state object and evaluates properties and phase equilibria. Batch calculations are looked up by name among the calculation types in :mod:`~dualeos.thermodynamics.calculation_types`.

"""

from inspect import getmembers, isfunction

from . import calculation_types
from .properties import evaluate_property
from .density import density_iteration, state_from_pressure, spinodal
from .pure_vle import solve_pure_vle
from .critical_point import solve_critical_point
from .stability import stability_analysis
from .flash import rachford_rice, solve_flash
from .solver_options import SolverOptions
from .results import EquilibriumResult, CriticalPoint, StabilityResult


def thermo(Eos, calculation_type=None, **thermo_dict):
    """
    Use factory design pattern to search for matching calculation_type with those supported in this module.

    To add a new calculation type, add a new wrapper function to calculation_types.py.

    Parameters
    ----------
    Eos : obj
        Equation of state object, see :class:`~dualeos.equations_of_state.interface.EosTemplate`
    calculation_type : str
        Calculation type supported in :mod:`~dualeos.thermodynamics.calculation_types`
    thermo_dict : dict
        Other keywords passed to the function, depends on calculation type

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values
    """

    if calculation_type is None:
        raise ValueError("No calculation type specified")

    calc_list = [
        o[0]
        for o in getmembers(calculation_types)
        if isfunction(o[1])
        and not o[0].startswith("_")
        and o[1].__module__ == calculation_types.__name__
    ]

    if calculation_type not in calc_list:
        raise ValueError(
            "The calculation type, '{}', was not found\nThe following calculation types are supported: {}".format(
                calculation_type, ", ".join(calc_list)
            )
        )

    func = getattr(calculation_types, calculation_type)

    return func(Eos, **thermo_dict)
