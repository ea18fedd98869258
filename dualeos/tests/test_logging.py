"""
Unit and regression test for the logging setup of the dualeos package.
"""

# Import package, test suite, and other packages as needed
import dualeos
import pytest
import logging
import random
import os

logger = logging.getLogger(__name__)


def test_dualeos_log_file():
    """Test enabling of logging"""

    fname = "dualeos_{}.log".format(random.randint(1, 10))
    dualeos.initiate_logger(log_file=fname, verbose=10)
    logger.info("test")

    if os.path.isfile(fname):
        flag = True
        dualeos.initiate_logger(log_file=False)
        try:
            os.remove(fname)
        except OSError:
            print("Error removing log file")
    else:
        flag = False

    assert flag


def test_dualeos_log_console(capsys):
    """Test enabling of logging"""

    dualeos.initiate_logger(console=True, verbose=10)
    logger.info("test")

    _, err = capsys.readouterr()

    dualeos.initiate_logger(console=False)

    assert "[INFO](dualeos.tests.test_logging): test" in err


class CaptureHandler(logging.StreamHandler):
    pass


def test_dualeos_log_console_beside_other_stream_handler(capsys):
    """A StreamHandler subclass of another tool is not the console handler"""

    root = logging.getLogger()
    other = CaptureHandler()
    root.addHandler(other)
    try:
        dualeos.initiate_logger(console=True, verbose=10)
        logger.info("beside")
        _, err = capsys.readouterr()
        dualeos.initiate_logger(console=False)
        assert "[INFO](dualeos.tests.test_logging): beside" in err
        assert other in root.handlers
    finally:
        root.removeHandler(other)
