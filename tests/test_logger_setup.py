import logging

import logger_setup
from constants import LOGGER_NAME

CONFIG = {
    "run_id": "unit",
    "logging": {"level": "DEBUG", "format": "%(levelname)s %(message)s"},
}


def test_setup_logging_writes_run_log(tmp_path) -> None:
    logger = logger_setup.setup_logging(CONFIG, log_root=str(tmp_path))
    try:
        assert logger is logging.getLogger(LOGGER_NAME)
        assert not logger.propagate
        logger.info("hello sparks")
        for handler in logger.handlers:
            handler.flush()
        log_file = tmp_path / "unit" / "simulation.log"
        text = log_file.read_text()
        assert "hello sparks" in text
        assert "Spark field run 'unit'" in text
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()


def test_setup_logging_does_not_duplicate_handlers(tmp_path) -> None:
    logger_setup.setup_logging(CONFIG, log_root=str(tmp_path))
    logger = logger_setup.setup_logging(CONFIG, log_root=str(tmp_path))
    try:
        assert len(logger.handlers) == 2
    finally:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()
