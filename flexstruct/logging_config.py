# flexstruct/logging_config.py
"""
Logging Configuration
Sets up the package logger for the benchmark demos.

Solver warnings raised through the warnings module (scipy's
SparseEfficiencyWarning, ARPACK accuracy notes, numpy overflow in the
extrapolation of badly converging data) are routed into the same handlers,
so a demo transcript shows them next to the step that produced them.
"""
import logging
import sys
from typing import Iterable, Optional

# Third-party loggers kept at WARNING so that DEBUG runs show flexstruct only
QUIET_LOGGERS = ("scipy", "numpy", "tqdm")


def setup_logging(
    level: int = logging.INFO,
    log_file: Optional[str] = None,
    quiet: Iterable[str] = QUIET_LOGGERS
) -> logging.Logger:
    """
    Configures the logger for the 'flexstruct' namespace.

    Args:
        level: Logging level (e.g. logging.DEBUG, logging.INFO)
        log_file: Optional path to save logs to a file.
        quiet: Names of third-party loggers raised to WARNING.

    Returns:
        The configured 'flexstruct' logger
    """
    logger = logging.getLogger("flexstruct")
    logger.setLevel(level)
    logger.propagate = False

    # Repeated calls (several benchmarks in one session) replace the handlers
    if logger.hasHandlers():
        logger.handlers.clear()

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%H:%M:%S'
    )
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    logging.captureWarnings(True)
    py_warnings = logging.getLogger("py.warnings")
    py_warnings.handlers.clear()
    for handler in handlers:
        py_warnings.addHandler(handler)
    py_warnings.propagate = False

    for name in quiet:
        logging.getLogger(name).setLevel(logging.WARNING)

    logger.debug("Logging initialized (level %s).", logging.getLevelName(level))
    return logger
