"""

Parallelization class to handle worker pools and logging.

"""

import multiprocessing
import multiprocessing.pool
import logging
import logging.handlers
import os

logger = logging.getLogger(__name__)

backend_types = ["process", "thread"]


class MultiprocessingJob:

    """
    This object initiates the pool for batches of independent jobs.

    Models and states are immutable, so each job only reads the shared model and returns its own output.

    Parameters
    ----------
    ncores : int, Optional, default=-1
        Number of workers used. If the default value of -1, the system cpu count is used.
    backend : str, Optional, default="process"
        Either "process" for a spawned process pool with per-worker log files, or "thread" for a pool of threads in this process

    Attributes
    ----------
    ncores : int
        Number of workers
    backend : str
        Type of pool
    logfiles : list[str]
        Log files of the worker processes, forwarded to the main log after each job and deleted when the pool ends
    """

    def __init__(self, ncores=-1, backend="process"):

        if backend not in backend_types:
            raise ValueError(
                "Backend, {}, should be one of: {}".format(backend, ", ".join(backend_types))
            )
        self.backend = backend

        self.flag_use_mp = True
        if ncores == -1:
            ncores = multiprocessing.cpu_count()  # includes logical cores!
            logger.info("Detected {} cores".format(ncores))
        elif ncores > 1:
            logger.info("Number of cores set to {}".format(ncores))
        elif ncores == 1:
            self.flag_use_mp = False
            logger.info(
                "Number of cores set to 1, bypassing the pool and using serial methods"
            )
        else:
            raise ValueError("Number of cores cannot be zero or negative.")

        self.ncores = ncores
        self.logfiles = []

        if not self.flag_use_mp:
            return

        if self.backend == "thread":
            self._pool = multiprocessing.pool.ThreadPool(ncores)
            return

        self._extract_root_logging()

        ctx = multiprocessing.get_context("spawn")
        self._pool = ctx.Pool(
            ncores,
            initializer=self._initialize_mp_handler,
            initargs=(self._level, self._logformat),
        )

        for worker in self._pool._pool:
            filename = "mp-handler-{0}.log".format(worker.pid)
            self.logfiles.append(filename)
        logger.info("MP log files: {}".format(", ".join(self.logfiles)))

    def _extract_root_logging(self):
        """ Find the format and level of the root file handler set up with :func:`dualeos.initiate_logger`
        """

        self._logformat = None
        self._level = None
        for handler in logging.root.handlers:
            if "baseFilename" in handler.__dict__:
                self._logformat = handler.formatter._fmt
                self._level = handler.level

    @staticmethod
    def _initialize_mp_handler(level, logformat):
        """Add a file handler for this worker process to the root logger.

        Parameters
        ----------
        level : int
            The verbosity level of logging information can be set to any supported representation of the `logging level <https://docs.python.org/3/library/logging.html#logging-levels>`_.
        logformat : str
            Formating of logging information can be set to any supported representation of the `formatting class <https://docs.python.org/3/library/logging.html#logging.Formatter>`_.
        """

        logger = logging.getLogger()

        pid = os.getpid()
        filename = "mp-handler-{0}.log".format(pid)
        handler = logging.handlers.RotatingFileHandler(filename)
        if level is not None:
            logger.setLevel(level)
            handler.setLevel(level)
        if logformat is not None:
            handler.setFormatter(logging.Formatter(logformat))

        logger.addHandler(handler)

    def pool_job(self, func, inputs):
        """
        This function will dispatch a batch of jobs to the pool.

        Parameters
        ----------
        func : function
            Function used in job, must be importable at module level for the process backend
        inputs : list
            Each entry of this list contains the input arguments for each job

        Returns
        -------
        output : tuple
            One tuple per output of func, each holding the values of all jobs in order of the inputs

        """

        if self.flag_use_mp:
            output = tuple(zip(*self._pool.map(func, inputs)))
            self._collect_worker_logs()
        else:
            logger.info("Performing task serially")
            output = self.serial_job(func, inputs)

        return output

    @staticmethod
    def serial_job(func, inputs):
        """
        This function will serially perform a batch of jobs.

        Parameters
        ----------
        func : function
            Function used in job
        inputs : list
            Each entry of this list contains the input arguments for each job

        Returns
        -------
        output : tuple
            One tuple per output of func, each holding the values of all jobs in order of the inputs

        """

        output = []
        for finput in inputs:
            output.append(func(finput))

        return tuple(zip(*output))

    def _collect_worker_logs(self, remove=False):
        """Forward the records in the worker log files to this module's logger.

        Each file is emptied afterwards, or deleted if ``remove`` is True.
        """

        for filename in self.logfiles:
            if not os.path.isfile(filename):
                continue
            with open(filename) as f:
                records = f.read().rstrip()
            if records:
                logger.info("Records of worker log {}:\n{}".format(filename, records))
            if remove:
                os.remove(filename)
            else:
                with open(filename, "w"):
                    pass

    def end_pool(self):
        """ Close the pool
        """
        if self.flag_use_mp:
            self._pool.close()
            self._pool.join()
            self._collect_worker_logs(remove=True)
