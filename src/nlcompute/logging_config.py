"""Logging configuration for the nlcompute service and CLI."""

import logging
import sys
from pathlib import Path

LOG_LEVEL = logging.INFO

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def setup_logging(log_file: str | None = None, debug: bool = False, stream=None):
    """
    Configure logging for the application.

    Replaces any handlers already on the root logger, so calling it twice
    (app factory plus CLI) does not duplicate output.

    Args:
        log_file: Optional path to log file. If None, logs to the console only.
        debug: If True, enable DEBUG level logging (includes full prompts/responses)
        stream: Console stream (default: stdout)
    """
    level = logging.DEBUG if debug else LOG_LEVEL
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
    root_logger.setLevel(level)

    console_handler = logging.StreamHandler(stream or sys.stdout)
    console_handler.setLevel(level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)

        file_handler = logging.FileHandler(log_path)
        file_handler.setLevel(level)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

        logging.info(f"Logging to file: {log_file}")

    logging.debug(f"Log Level: {logging.getLevelName(level)}, Debug Mode: {debug}")
