"""
Logging setup shared by the app, the repository and the server lifecycle.

``setup_logging`` is called once by the process entry point; every module
obtains its logger through ``get_logger(__name__)``.
"""
import logging
import sys

_logging_configured = False


# PUBLIC_INTERFACE
def setup_logging(log_level: str = "INFO") -> logging.Logger:
    """
    Configure the root logger with a single console handler.

    Repeated calls are no-ops so the app factory and the tests can both call it.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).

    Returns:
        The root logger.
    """
    global _logging_configured

    root_logger = logging.getLogger()
    if _logging_configured:
        return root_logger

    formatter = logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)

    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))
    root_logger.addHandler(console_handler)

    # pymongo logs every heartbeat at DEBUG
    logging.getLogger("pymongo").setLevel(logging.WARNING)

    _logging_configured = True
    root_logger.debug("Logging configured: level=%s", log_level)
    return root_logger


# PUBLIC_INTERFACE
def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module, typically called with ``__name__``."""
    return logging.getLogger(name)
