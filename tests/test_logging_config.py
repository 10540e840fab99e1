# File: tests/test_logging_config.py
"""
Test that setup_logging wires the package logger without duplicating handlers.
"""

import logging

import numpy as np

from arap_core import arap_rhs
from arap_core.logging_config import setup_logging


def teardown_function():
    logger = logging.getLogger("arap_core")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


def test_repeated_setup_keeps_one_console_handler():
    setup_logging()
    setup_logging()
    assert len(logging.getLogger("arap_core").handlers) == 1


def test_log_file_receives_assembly_messages(tmp_path):
    log_file = tmp_path / "arap.log"
    setup_logging(logging.DEBUG, log_file=str(log_file))

    arap_rhs(np.array([[0.0, 0.0], [1.0, 0.0], [0.0, 1.0]]), [[0, 1, 2]])

    logger = logging.getLogger("arap_core")
    assert len(logger.handlers) == 2
    for handler in logger.handlers:
        handler.flush()
    text = log_file.read_text(encoding="utf-8")
    assert "arap_core.rhs - DEBUG - ARAP operator" in text
