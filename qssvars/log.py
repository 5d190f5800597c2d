"""Logging setup shared by the engine, the Qt loader and the scripts.

Handlers live only on the ``qssvars`` root logger; child loggers propagate to it.
Library modules call :func:`get_logger`; entry points call :func:`configure_logging`.
"""

import logging

ROOT_LOGGER_NAME = "qssvars"
LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)-20s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_root_configured = False


def configure_logging(level="INFO", log_file=None):
    """Attach console (and optional file) handlers to the root logger, once."""
    global _root_configured
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(level)
    if _root_configured:
        return root_logger

    root_logger.propagate = False
    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_file:
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    _root_configured = True
    return root_logger


def get_logger(name: str) -> logging.Logger:
    """Return ``qssvars.<name>``; handlers are inherited from the root logger."""
    if name == ROOT_LOGGER_NAME or name.startswith(ROOT_LOGGER_NAME + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
