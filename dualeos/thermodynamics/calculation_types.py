"""
    This thermo module contains a series of wrappers to handle the inputs and outputs of batch calculations.

    Each wrapper evaluates one calculation per item of its input lists. A failed item does not stop the batch, it is flagged with ``converged=False`` and the error message is recorded. None of the functions in this module need to be called directly, as a function factory is included in our __init__.py file. Use ``thermo(Eos, "calculation_type", **input_dict)`` to get started.

"""

import numpy as np
import logging

from dualeos.utils.parallelization import MultiprocessingJob
from dualeos import fundamental_constants as constants
from dualeos.exceptions import SolverError
from dualeos.state import State
from dualeos.thermodynamics import properties as prop
from dualeos.thermodynamics.density import density_iteration
from dualeos.thermodynamics.pure_vle import solve_pure_vle
from dualeos.thermodynamics.critical_point import solve_critical_point
from dualeos.thermodynamics.flash import solve_flash
import dualeos.utils.general_toolbox as gtb

logger = logging.getLogger(__name__)

batch_errors = (SolverError, ValueError, np.linalg.LinAlgError)

default_property_kinds = [
    "compressibility",
    "ln_fugacity_coefficient",
    "dp_drho",
    "isothermal_compressibility",
]


def _error_message(error):
    return "{}: {}".format(type(error).__name__, error)


def _run_jobs(func, inputs, sys_dict):
    """Dispatch to the MultiprocessingObject if one is given, otherwise serially"""

    if "MultiprocessingObject" in sys_dict:
        MultiprocessingObject = sys_dict.pop("MultiprocessingObject")
        return MultiprocessingObject.pool_job(func, inputs)

    return MultiprocessingJob.serial_job(func, inputs)


def _default_molefracs(Eos, sys_dict, npoints):

    if "molefracs" in sys_dict:
        return sys_dict["molefracs"]
    if Eos.number_of_components != 1:
        raise ValueError("Mole fractions, molefracs, are not specified")

    return np.ones((npoints, 1))


def properties(Eos, **sys_dict):
    r"""
    Evaluate properties at given temperatures, pressures and compositions.

    Parameters
    ----------
    Eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    Tlist : list, Optional, default=298.15
        [K] Temperature of each state. If one value is given, it is used for all states.
    Plist : list, Optional, default=101325.0
        [Pa] Pressure of each state. If one value is given, it is used for all states.
    molefracs : list, Optional
        Mole fractions of each state, or one set used for all states. May be omitted for a pure component.
    phase : str, Optional, default=None
        Density root, "liquid", "vapor" or None for the root of lower Gibbs energy
    property_kinds : list[str], Optional
        Names of properties supported by :func:`~dualeos.thermodynamics.properties.evaluate_property`. By default: compressibility, ln_fugacity_coefficient, dp_drho, isothermal_compressibility
    property_options : dict, Optional, default={}
        Keyword arguments passed to each property, e.g. contributions
    MultiprocessingObject : obj, Optional
        Multiprocessing object, :class:`~dualeos.utils.parallelization.MultiprocessingJob`

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values

        - T: Temperature array
        - P: Pressure array
        - molefracs: Composition array
        - rho: Molar density [mol/m^3]
        - One entry per property kind
        - converged: True where the state was found
        - error: Error message of each failed state, None otherwise

    """

    thermo_keys = ["Tlist", "Plist", "molefracs"]
    thermo_dict = gtb.check_length_dict(sys_dict, thermo_keys)
    npoints = len(thermo_dict[list(thermo_dict.keys())[0]])
    thermo_defaults = [constants.standard_temperature, constants.standard_pressure]
    thermo_dict.update(
        gtb.set_defaults(thermo_dict, ["Tlist", "Plist"], thermo_defaults, lx=npoints)
    )
    thermo_dict["molefracs"] = _default_molefracs(Eos, thermo_dict, npoints)

    for key in thermo_keys:
        if key in sys_dict:
            del sys_dict[key]

    property_kinds = sys_dict.pop("property_kinds", default_property_kinds)
    for kind in property_kinds:
        if kind not in prop.property_functions:
            raise ValueError(
                "The property, '{}', was not found\nThe following properties are supported: {}".format(
                    kind, ", ".join(sorted(prop.property_functions))
                )
            )
    opts = {
        "phase": sys_dict.pop("phase", None),
        "property_kinds": property_kinds,
        "property_options": sys_dict.pop("property_options", {}),
    }

    inputs = [
        (
            thermo_dict["Tlist"][i],
            thermo_dict["Plist"][i],
            thermo_dict["molefracs"][i],
            Eos,
            opts,
        )
        for i in range(npoints)
    ]
    rho_list, values_list, converged_list, error_list = _run_jobs(
        _properties_wrapper, inputs, sys_dict
    )
    if sys_dict:
        logger.info("Unused options: {}".format(", ".join(sys_dict.keys())))

    logger.info("--- Calculation properties Complete ---")

    output = {
        "T": thermo_dict["Tlist"],
        "P": thermo_dict["Plist"],
        "molefracs": thermo_dict["molefracs"],
        "rho": np.array(rho_list, float),
        "converged": np.array(converged_list, bool),
        "error": list(error_list),
    }
    for kind in property_kinds:
        output[kind] = [values[kind] for values in values_list]

    return output


def _properties_wrapper(args):
    r""" Wrapper for parallelized use of 'properties' calculation type.
    """

    T, P, xi, Eos, opts = args
    logger.info("T (K), P (Pa), xi: {} {} {}, Let's Begin!".format(T, P, xi))

    try:
        rho = density_iteration(Eos, T, P, xi, phase=opts["phase"])
        state = State.from_density(T, rho, xi)
        values = {}
        for kind in opts["property_kinds"]:
            values[kind] = prop.evaluate_property(
                Eos, state, kind, **opts["property_options"]
            )
        converged, error = True, None
    except batch_errors as err:
        logger.warning(
            "T (K), P (Pa), xi: {} {} {}, calculation did not produce a valid result: {}".format(
                T, P, xi, err
            )
        )
        logger.debug("Calculation Failed:", exc_info=True)
        rho = np.nan
        values = {kind: np.nan for kind in opts["property_kinds"]}
        converged, error = False, _error_message(err)

    return rho, values, converged, error


def pure_vle(Eos, **sys_dict):
    r"""
    Coexisting densities of a pure component at given temperatures or pressures.

    Parameters
    ----------
    Eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    Tlist : list, Optional
        [K] Temperatures of the phase equilibria. Either Tlist or Plist must be given.
    Plist : list, Optional
        [Pa] Pressures of the phase equilibria
    molefracs : list, Optional
        Selects a component of a multicomponent model, see :func:`~dualeos.thermodynamics.pure_vle.solve_pure_vle`
    options : dict, Optional, default=None
        Solver options, see :class:`~dualeos.thermodynamics.solver_options.SolverOptions`
    MultiprocessingObject : obj, Optional
        Multiprocessing object, :class:`~dualeos.utils.parallelization.MultiprocessingJob`

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values

        - T: Temperature array
        - P: Pressure array
        - rhol: Liquid saturation density
        - rhov: Vapor saturation density
        - iterations: Number of iterations
        - converged: True where the equilibrium was found
        - error: Error message of each failed item, None otherwise

    """

    if ("Tlist" in sys_dict) == ("Plist" in sys_dict):
        raise ValueError("Either Tlist or Plist should be given")
    if "Tlist" in sys_dict:
        key, fixed_variable = "Tlist", "temperature"
    else:
        key, fixed_variable = "Plist", "pressure"

    values = gtb.check_length_dict(sys_dict, [key])[key]
    del sys_dict[key]
    opts = {
        "fixed_variable": fixed_variable,
        "molefracs": sys_dict.pop("molefracs", None),
        "options": sys_dict.pop("options", None),
    }

    inputs = [(value, Eos, opts) for value in values]
    T_list, P_list, rhol_list, rhov_list, iterations_list, converged_list, error_list = _run_jobs(
        _pure_vle_wrapper, inputs, sys_dict
    )

    logger.info("--- Calculation pure_vle Complete ---")

    return {
        "T": np.array(T_list, float),
        "P": np.array(P_list, float),
        "rhol": np.array(rhol_list, float),
        "rhov": np.array(rhov_list, float),
        "iterations": list(iterations_list),
        "converged": np.array(converged_list, bool),
        "error": list(error_list),
    }


def _pure_vle_wrapper(args):
    r""" Wrapper for parallelized use of 'pure_vle' calculation type.
    """

    value, Eos, opts = args
    logger.info("{}: {}, Let's Begin!".format(opts["fixed_variable"], value))

    try:
        result = solve_pure_vle(
            Eos,
            opts["fixed_variable"],
            value,
            molefracs=opts["molefracs"],
            options=opts["options"],
        )
        output = (
            result.temperature,
            result.pressure,
            result.liquid.density,
            result.vapor.density,
            result.iterations,
            True,
            None,
        )
    except batch_errors as err:
        logger.warning(
            "{}: {}, calculation did not produce a valid result: {}".format(
                opts["fixed_variable"], value, err
            )
        )
        logger.debug("Calculation Failed:", exc_info=True)
        if opts["fixed_variable"] == "temperature":
            T, P = value, np.nan
        else:
            T, P = np.nan, value
        output = (T, P, np.nan, np.nan, None, False, _error_message(err))

    return output


def critical_point(Eos, **sys_dict):
    r"""
    Critical points of mixtures of given compositions.

    Parameters
    ----------
    Eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    molefracs : list, Optional
        Compositions, may be omitted for a pure component
    temperature_bounds : tuple, Optional, default=None
        [K] Search domain of the temperature
    options : dict, Optional, default=None
        Solver options, see :class:`~dualeos.thermodynamics.solver_options.SolverOptions`
    MultiprocessingObject : obj, Optional
        Multiprocessing object, :class:`~dualeos.utils.parallelization.MultiprocessingJob`

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values

        - molefracs: Composition array
        - Tc: Critical temperature
        - Pc: Critical pressure
        - rhoc: Critical molar density
        - converged: True where the critical point was found
        - error: Error message of each failed item, None otherwise

    """

    if "molefracs" in sys_dict:
        molefracs = gtb.check_length_dict(sys_dict, ["molefracs"])["molefracs"]
        del sys_dict["molefracs"]
    else:
        molefracs = _default_molefracs(Eos, {}, 1)

    opts = {
        "temperature_bounds": sys_dict.pop("temperature_bounds", None),
        "options": sys_dict.pop("options", None),
    }

    inputs = [(xi, Eos, opts) for xi in molefracs]
    Tc_list, Pc_list, rhoc_list, converged_list, error_list = _run_jobs(
        _critical_point_wrapper, inputs, sys_dict
    )

    logger.info("--- Calculation critical_point Complete ---")

    return {
        "molefracs": molefracs,
        "Tc": np.array(Tc_list, float),
        "Pc": np.array(Pc_list, float),
        "rhoc": np.array(rhoc_list, float),
        "converged": np.array(converged_list, bool),
        "error": list(error_list),
    }


def _critical_point_wrapper(args):
    r""" Wrapper for parallelized use of 'critical_point' calculation type.
    """

    xi, Eos, opts = args
    logger.info("xi: {}, Let's Begin!".format(xi))

    try:
        result = solve_critical_point(
            Eos,
            molefracs=xi,
            temperature_bounds=opts["temperature_bounds"],
            options=opts["options"],
        )
        output = (result.temperature, result.pressure, result.density, True, None)
    except batch_errors as err:
        logger.warning(
            "xi: {}, calculation did not produce a valid result: {}".format(xi, err)
        )
        logger.debug("Calculation Failed:", exc_info=True)
        output = (np.nan, np.nan, np.nan, False, _error_message(err))

    return output


def flash(Eos, **sys_dict):
    r"""
    Flash calculation of vapor and liquid mole fractions.

    Parameters
    ----------
    Eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    Tlist : list, Optional, default=298.15
        [K] Temperature of the system corresponding Plist. If one value is given, this temperature will be used for all items.
    Plist : list, Optional, default=101325.0
        [Pa] Pressure of the system corresponding to Tlist. If one value is given, this pressure will be used for all items.
    feed : list
        Feed mole numbers of each item, or one feed used for all items
    options : dict, Optional, default=None
        Solver options, see :class:`~dualeos.thermodynamics.solver_options.SolverOptions`
    MultiprocessingObject : obj, Optional
        Multiprocessing object, :class:`~dualeos.utils.parallelization.MultiprocessingJob`

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values

        - T: Temperature array
        - P: Pressure array
        - xi: Liquid mole fractions, the feed composition for a stable feed
        - yi: Vapor mole fractions, NaN for a stable feed
        - beta: Vapor phase fraction
        - stable: True for a stable feed
        - converged: True where the flash succeeded
        - error: Error message of each failed item, None otherwise

    """

    if "feed" not in sys_dict:
        raise ValueError("Feed, feed, is not specified")

    thermo_keys = ["Tlist", "Plist", "feed"]
    thermo_dict = gtb.check_length_dict(sys_dict, thermo_keys)
    npoints = len(thermo_dict[list(thermo_dict.keys())[0]])
    thermo_defaults = [constants.standard_temperature, constants.standard_pressure]
    thermo_dict.update(
        gtb.set_defaults(thermo_dict, ["Tlist", "Plist"], thermo_defaults, lx=npoints)
    )

    for key in thermo_keys:
        if key in sys_dict:
            del sys_dict[key]

    opts = {"options": sys_dict.pop("options", None)}

    inputs = [
        (thermo_dict["Tlist"][i], thermo_dict["Plist"][i], thermo_dict["feed"][i], Eos, opts)
        for i in range(npoints)
    ]
    xi_list, yi_list, beta_list, stable_list, converged_list, error_list = _run_jobs(
        _flash_wrapper, inputs, sys_dict
    )

    logger.info("--- Calculation flash Complete ---")

    return {
        "T": thermo_dict["Tlist"],
        "P": thermo_dict["Plist"],
        "xi": np.array(xi_list, float),
        "yi": np.array(yi_list, float),
        "beta": np.array(beta_list, float),
        "stable": np.array(stable_list, bool),
        "converged": np.array(converged_list, bool),
        "error": list(error_list),
    }


def _flash_wrapper(args):
    r""" Wrapper for parallelized use of 'flash' calculation type.
    """

    T, P, feed, Eos, opts = args
    logger.info("T (K), P (Pa), feed: {} {} {}, Let's Begin!".format(T, P, feed))

    nan = np.nan * np.ones(Eos.number_of_components)
    try:
        result = solve_flash(Eos, T, P, feed, options=opts["options"])
        if result.stable:
            output = (result.phases[0].molefracs, nan, 0.0, True, True, None)
        else:
            output = (
                result.liquid.molefracs,
                result.vapor.molefracs,
                result.phase_fractions[-1],
                False,
                True,
                None,
            )
        logger.info("xi: {}, yi: {}".format(output[0], output[1]))
    except batch_errors as err:
        logger.warning(
            "T (K), P (Pa): {} {}, calculation did not produce a valid result: {}".format(
                T, P, err
            )
        )
        logger.debug("Calculation Failed:", exc_info=True)
        output = (nan, nan, np.nan, False, False, _error_message(err))

    return output


def phase_diagram_pure(Eos, **sys_dict):
    r"""
    Vapor-liquid envelope of a pure component from a low temperature up to the critical point.

    Each point is seeded with the previous one, so the points are computed serially.

    Parameters
    ----------
    Eos : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    npoints : int, Optional, default=50
        Number of temperatures, the critical point is added at the end
    Tmin : float, Optional
        [K] Lowest temperature, by default half of the critical temperature
    Tmax_fraction : float, Optional, default=0.999
        Highest temperature as fraction of the critical temperature
    molefracs : list, Optional
        Selects a component of a multicomponent model
    options : dict, Optional, default=None
        Solver options, see :class:`~dualeos.thermodynamics.solver_options.SolverOptions`

    Returns
    -------
    output_dict : dict
        Output of dictionary containing given and calculated values

        - T: Temperature array, ending with the critical temperature
        - P: Saturation pressure
        - rhol: Liquid saturation density
        - rhov: Vapor saturation density
        - converged: True where the equilibrium was found
        - error: Error message of each failed item, None otherwise

    """

    npoints = sys_dict.pop("npoints", 50)
    molefracs = sys_dict.pop("molefracs", None)
    options = sys_dict.pop("options", None)
    Tmax_fraction = sys_dict.pop("Tmax_fraction", 0.999)

    if molefracs is None and Eos.number_of_components == 1:
        molefracs = [1.0]
    critical = solve_critical_point(Eos, molefracs=molefracs, options=options)
    Tc = critical.temperature
    Tmin = sys_dict.pop("Tmin", 0.5 * Tc)
    if Tmin >= Tc:
        raise ValueError(
            "Tmin, {}, should be below the critical temperature, {}".format(Tmin, Tc)
        )
    if sys_dict:
        logger.info("Unused options: {}".format(", ".join(sys_dict.keys())))

    output = {"T": [], "P": [], "rhol": [], "rhov": [], "converged": [], "error": []}
    previous = None
    for T in np.linspace(Tmin, Tmax_fraction * Tc, npoints):
        try:
            result = solve_pure_vle(
                Eos,
                "temperature",
                T,
                molefracs=molefracs,
                initial_state=previous,
                options=options,
            )
            previous = result
            values = (result.pressure, result.liquid.density, result.vapor.density, True, None)
        except batch_errors as err:
            logger.warning(
                "T (K): {}, calculation did not produce a valid result: {}".format(T, err)
            )
            logger.debug("Calculation Failed:", exc_info=True)
            values = (np.nan, np.nan, np.nan, False, _error_message(err))

        output["T"].append(T)
        for key, value in zip(["P", "rhol", "rhov", "converged", "error"], values):
            output[key].append(value)

    output["T"].append(Tc)
    for key, value in zip(
        ["P", "rhol", "rhov", "converged", "error"],
        [critical.pressure, critical.density, critical.density, True, None],
    ):
        output[key].append(value)

    logger.info("--- Calculation phase_diagram_pure Complete ---")

    for key in ["T", "P", "rhol", "rhov"]:
        output[key] = np.array(output[key], float)
    output["converged"] = np.array(output["converged"], bool)

    return output
