import copy
import numpy as np
import logging
from inspect import getmembers, isfunction

from . import combining_rule_types
from ..exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def extract_property(prop, bead_library, beads, default=None):
    r"""
    Extract single property or key from a dictionary within a dictionary (e.g. bead parameters) and into a single array of the same length and order as a list of bead names.

    The expected structure is a dictionary of dictionaries, such as a parameter library.

    Parameters
    ----------
    prop : str
        Name of property in bead_library
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters
    beads : list[str]
        List of unique bead names used among components
    default : any, Optional, default=None
        If property is not present, set to this value. Although if the default is None, an error will result.

    Returns
    -------
    prop_array : numpy.ndarray
        array of desired property
    """

    prop_array = np.zeros(len(beads))
    for i, bead in enumerate(beads):
        if prop in bead_library[bead]:
            prop_array[i] = bead_library[bead][prop]
        else:
            if default is None:
                raise ConfigurationError(
                    "The property {} for bead, {}, was not provided.".format(prop, bead)
                )
            else:
                prop_array[i] = default

    return prop_array


def check_bead_parameters(beads, bead_library0, parameter_defaults, positive=()):
    r"""
    Be sure all needed parameters are available for each bead.

    If a parameter is absent and a default value is given, this value will be added to the parameter set. If the default is None, then an error is raised.

    Parameters
    ----------
    beads : list[str]
        List of bead names, one per component
    bead_library0 : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters
    parameter_defaults : dict
        A dictionary of default values for the required parameters.
    positive : tuple[str], Optional, default=()
        Parameters that must be strictly positive

    Returns
    -------
    new_bead_library : dict
        New dictionary with defaults added where relevant, restricted to the given beads

    """

    if len(beads) == 0:
        raise ConfigurationError("At least one bead must be given")
    if len(set(beads)) != len(beads):
        raise ConfigurationError("Bead names must be unique, given {}".format(beads))

    bead_library = {}
    for bead in beads:
        if bead not in bead_library0:
            raise ConfigurationError(
                "The group, '{}', was not found in parameter library".format(bead)
            )
        if not isinstance(bead_library0[bead], dict):
            raise ConfigurationError(
                "Parameters of group, '{}', should be a dictionary".format(bead)
            )
        bead_library[bead] = copy.deepcopy(bead_library0[bead])

    for bead, bead_dict in bead_library.items():
        for parameter, default in parameter_defaults.items():
            if parameter not in bead_dict:
                if default is not None:
                    bead_library[bead][parameter] = default
                    logger.debug(
                        "Parameter, {}, is missing for parametrized group, {}. Set to default, {}".format(
                            parameter, bead, default
                        )
                    )
                else:
                    raise ConfigurationError(
                        "Parameter, {}, should have been defined for parametrized group, {}.".format(
                            parameter, bead
                        )
                    )
        for parameter in positive:
            value = bead_dict.get(parameter)
            if value is None:
                continue
            if not np.isfinite(value) or value <= 0:
                raise ConfigurationError(
                    "Parameter, {}, of group, {}, must be positive, given {}".format(
                        parameter, bead, value
                    )
                )

    return bead_library


def check_cross_library(beads, cross_library, allowed_parameters):
    r"""
    Validate the structure of a library of cross interaction parameters.

    Parameters
    ----------
    beads : list[str]
        List of bead names, one per component
    cross_library : dict
        Dictionary of the form ``{beadA: {beadB: {parameter: value}}}``
    allowed_parameters : list[str]
        Parameter names that may be given for a pair

    Returns
    -------
    cross_library : dict
        Deep copy of the validated library
    """

    if cross_library is None:
        return {}
    if not isinstance(cross_library, dict):
        raise ConfigurationError("Cross library should be a dictionary of dictionaries")

    for beadA, pairs in cross_library.items():
        if not isinstance(pairs, dict):
            raise ConfigurationError(
                "Cross interactions of group, '{}', should be a dictionary".format(beadA)
            )
        for beadB, parameters in pairs.items():
            if beadA not in beads or beadB not in beads:
                logger.debug(
                    "Cross interaction {}-{} does not involve the given beads, ignored".format(
                        beadA, beadB
                    )
                )
                continue
            if beadA == beadB:
                raise ConfigurationError(
                    "Cross library entry {}-{} is a self interaction".format(beadA, beadB)
                )
            if not isinstance(parameters, dict):
                raise ConfigurationError(
                    "Cross interaction {}-{} should be a dictionary".format(beadA, beadB)
                )
            for key, value in parameters.items():
                if key not in allowed_parameters:
                    raise ConfigurationError(
                        "Cross parameter, {}, for {}-{} is not one of: {}".format(
                            key, beadA, beadB, ", ".join(allowed_parameters)
                        )
                    )
                if not np.isfinite(value):
                    raise ConfigurationError(
                        "Cross parameter, {}, for {}-{} is not finite".format(
                            key, beadA, beadB
                        )
                    )

    return copy.deepcopy(cross_library)


def cross_interaction_from_dict(beads, bead_library, mixing_dict, cross_library={}):
    r"""
    Computes matrices of cross interaction parameters defined as the keys in the mixing dict parameter are extracted from the bead_library and then the cross library.

    Parameters
    ----------
    beads : list[str]
        List of unique bead names used among components
    bead_library : dict
        A dictionary where bead names are the keys to access EOS self interaction parameters. Those to be calculated are defined by the keys of mixing_dict
    mixing_dict : dict
        This dictionary contains those bead parameters that should be placed in a matrix and the combining rules for the cross parameters, e.g. ``{"sigma": {"function": "mean"}}``
    cross_library : dict, Optional, default={}
        Optional library of bead cross interaction parameters. Pairs that are not given are estimated with the combining rules.

    Returns
    -------
    output : dict
        Dictionary of outputs, with the same keys used in mixing dict for the respective interaction matrix

    """

    nbeads = len(beads)

    output = {}
    for key in mixing_dict:
        output[key] = np.zeros((nbeads, nbeads))
        for k in range(nbeads):
            output[key][k, k] = bead_library[beads[k]].get(key, 0.0)

    for (i, beadname) in enumerate(beads):
        for (j, beadname2) in enumerate(beads):
            if j > i:
                for key in mixing_dict:
                    if (
                        cross_library.get(beadname, {})
                        .get(beadname2, {})
                        .get(key, None)
                        is not None
                    ):
                        output[key][i, j] = cross_library[beadname][beadname2][key]
                    elif (
                        cross_library.get(beadname2, {})
                        .get(beadname, {})
                        .get(key, None)
                        is not None
                    ):
                        output[key][i, j] = cross_library[beadname2][beadname][key]
                    else:
                        try:
                            tmp = combining_rules(
                                bead_library[beadname],
                                bead_library[beadname2],
                                key,
                                **mixing_dict[key]
                            )
                        except (KeyError, IndexError, TypeError) as error:
                            raise ConfigurationError(
                                "Unable to calculate '{}' with '{}' method, for beads: '{}' '{}': {}".format(
                                    key,
                                    mixing_dict[key].get("function", "mean"),
                                    beadname,
                                    beadname2,
                                    error,
                                )
                            )
                        for k2, v2 in tmp.items():
                            output[k2][i, j] = v2
                    output[key][j, i] = output[key][i, j]

    return output


def combining_rules(beadA, beadB, parameter, function="mean", **kwargs):
    r"""
    Calculates cross interaction parameter according to the calculation method defined.

    Parameters
    ----------
    beadA : dict
        Dictionary of parameters used to describe a bead
    beadB : dict
        Dictionary of parameters used to describe a bead
    parameter : str
        Name of parameter for which a mixed value is needed
    function : str, Optional, default=mean
        Combining rule function found in `dualeos.equations_of_state.combining_rule_types.py`
    kwargs : dict, Optional, default={}
        Keyword arguments used in other averaging function

    Returns
    -------
    output_dict : dict
        Dictionary with keyword of parameter and mixed interaction parameter
    """

    calc_list = [o[0] for o in getmembers(combining_rule_types) if isfunction(o[1])]
    if function not in calc_list:
        raise ConfigurationError(
            "The combining rule type, '{}', was not found\nThe following calculation types are supported: {}".format(
                function, ", ".join(calc_list)
            )
        )

    func = getattr(combining_rule_types, function)
    output = func(beadA, beadB, parameter, **kwargs)
    if not isinstance(output, dict):
        output = {parameter: output}

    return output
