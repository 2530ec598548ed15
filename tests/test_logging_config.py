# tests/test_logging_config.py
import logging
import warnings

import pytest

from flexstruct.logging_config import QUIET_LOGGERS, setup_logging


@pytest.fixture
def restore_logging():
    names = ("flexstruct", "py.warnings") + QUIET_LOGGERS
    saved = {n: (logging.getLogger(n).level, list(logging.getLogger(n).handlers),
                 logging.getLogger(n).propagate) for n in names}
    yield
    logging.captureWarnings(False)
    for n, (level, handlers, propagate) in saved.items():
        lg = logging.getLogger(n)
        for h in lg.handlers:
            if h not in handlers:
                h.close()
        lg.setLevel(level)
        lg.handlers[:] = handlers
        lg.propagate = propagate


def test_handlers_are_replaced_on_repeated_calls(restore_logging, tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.DEBUG, log_file=str(log_file))
    logger = setup_logging(logging.DEBUG, log_file=str(log_file))
    assert logger.name == "flexstruct"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2


def test_third_party_loggers_are_quiet(restore_logging):
    setup_logging(logging.DEBUG)
    for name in QUIET_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING
    assert not logging.getLogger("scipy").isEnabledFor(logging.INFO)


def test_messages_and_warnings_reach_the_log_file(restore_logging, tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.INFO, log_file=str(log_file))
    logging.getLogger("flexstruct.kernel.modal").info("modal solve done")
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.warn("matrix format is inefficient", UserWarning)
    for h in logging.getLogger("flexstruct").handlers:
        h.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "flexstruct.kernel.modal - INFO - modal solve done" in text
    assert "matrix format is inefficient" in text
