# utils/logger.py
import os
import logging
from typing import Optional, Union

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logger(
    logger_name: str,
    log_file: Optional[str] = None,
    level: Union[int, str] = logging.INFO,
    log_dir: Optional[str] = "logs"
) -> logging.Logger:
    """
    Set up and return a logger with file and console handlers.

    Child loggers (``<logger_name>.<module>``) inherit these handlers, so
    configuring the package logger once covers every module.

    Args:
        logger_name: Name of the logger
        log_file: Optional specific log filename (default: {logger_name}.log)
        level: Logging level, as a number or a level name (default: INFO)
        log_dir: Directory for log files; None disables the file handler

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(logger_name)
    logger.setLevel(level)

    # Clear existing handlers to avoid duplicates if logger already exists
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir is not None:
        os.makedirs(log_dir, exist_ok=True)
        if log_file is None:
            log_file = f"{logger_name.lower().replace(' ', '_')}.log"
        log_path = os.path.join(log_dir, log_file)

        file_handler = logging.FileHandler(log_path)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

        logger.debug(f"Log file is being saved to: {os.path.abspath(log_path)}")

    return logger
