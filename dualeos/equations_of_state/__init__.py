"""

Create an EOS class from options taken from factory design pattern.

"""

# Add imports here
from importlib import import_module
import logging

from dualeos.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


def initiate_eos(eos="saft.pcsaft", **kwargs):
    """
    Interface between the user and our library of equations of state (EOS).

    Input the name of a desired EOS and available classes are automatically searched
    to allow easy implementation of new EOS.

    Parameters
    ----------
    eos : str, Optional, default="saft.pcsaft"
        Name of EOS in the form EOSfamily.EOSname (e.g. saft.pcsaft, saft.pets, cubic.peng_robinson).
    kwargs
        Other keyword argument inputs for the desired EOS, at least ``beads`` and ``bead_library``. See specific EOS
        documentation for required inputs.

    Returns
    -------
    instance : obj
        An instance of the defined EOS class to be used in thermodynamic computations.
    """

    factory_families = ["saft"]  # Eos families in this list have a general object with a factory to import
    # relevant modules

    logger.info("Using EOS: {}".format(eos))

    try:
        eos_fam, eos_type = eos.split(".")
    except ValueError:
        raise ConfigurationError(
            "Input should be in the form EOSfamily.EOSname (e.g. saft.pcsaft)."
        )

    class_name = "EosType"
    try:
        if eos_fam in factory_families:
            eos_module = import_module(
                "." + eos_fam, package="dualeos.equations_of_state." + eos_fam
            )
            kwargs["saft_name"] = eos_type
        else:
            eos_module = import_module(
                "." + eos_type, package="dualeos.equations_of_state." + eos_fam
            )
        eos_class = getattr(eos_module, class_name)
    except (ImportError, AttributeError):
        raise ConfigurationError(
            "Based on your input, '{}', we expect the class, {}, in a module, {},"
            " found in the package, {}, which indicates the EOS family.".format(
                eos, class_name, eos_type, eos_fam
            )
        )
    instance = eos_class(**kwargs)

    logger.info("Created {} Eos object".format(eos))

    return instance
