# logger_setup.py

import logging
import os

from constants import LOGGER_NAME


def setup_logging(config: dict, log_root='runs'):
    """
    Routes the spark field's log output for one run.

    Every module logs through the "spark_field" logger. This attaches a console
    handler and a file handler writing runs/<run_id>/simulation.log, where the
    engine's construction, seeding and resize notices and the host loop's
    periodic population/energy lines end up. The logger does not propagate,
    so pygame and Numba messages sent to the root logger stay out of the run log.

    Data Contract:
    - Inputs:
        - config (dict): Parsed config.json; needs 'run_id' and a 'logging'
          section with 'level' and 'format'.
        - log_root (str): Parent folder for per-run log folders.
    - Outputs: The "spark_field" logger.
    - Side Effects: Creates the run folder; replaces (and closes) any handlers
      left from a previous call.
    """
    run_id = config['run_id']
    log_config = config['logging']

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(log_config['level'])
    logger.propagate = False

    log_dir = os.path.join(log_root, run_id)
    os.makedirs(log_dir, exist_ok=True)
    log_file = os.path.join(log_dir, 'simulation.log')

    formatter = logging.Formatter(log_config['format'])
    handlers = [logging.FileHandler(log_file), logging.StreamHandler()]
    for handler in handlers:
        handler.setFormatter(formatter)

    # A second call (e.g. a restarted run in the same process) must not double every line.
    for old_handler in list(logger.handlers):
        old_handler.close()
        logger.removeHandler(old_handler)
    for handler in handlers:
        logger.addHandler(handler)

    logger.info(f"Spark field run '{run_id}' logging to {log_file}")
    return logger
