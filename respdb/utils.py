"""Utility wrappers and functions

Description:
    This module provides utility functions and decorators for the respdb parsers.
    It sets up the package logger, provides a decorator for timing functions and
    the tolerant numeric decoders used when slicing fixed-column PDB records.

Usage Example:
    >>> from respdb.utils import timeit, to_int, to_float, logger
    >>>
    >>> @timeit
    ... def my_function():
    ...     pass
    >>>
    >>> to_int("  12 ")
    12
    >>> to_float("abc")
    0.0

Requirements:
    - Python 3.x
    - Standard libraries: logging, os, time, functools

Author: DY
Date: YYYY-MM-DD
"""

import logging
import os
import time
from functools import wraps

# Use an environment variable (DEBUG=1) to toggle debug logging
DEBUG = os.environ.get("DEBUG", "0") == "1"
LOG_LEVEL = logging.DEBUG if DEBUG else logging.INFO
logger = logging.getLogger(__name__)
logging.basicConfig(level=LOG_LEVEL, format="[%(levelname)s] %(message)s")


def timeit(func):
    """Decorator to measure and log the execution time of a function."""
    @wraps(func)
    def wrapper(*args, **kwargs):
        start_time = time.perf_counter()
        result = func(*args, **kwargs)
        end_time = time.perf_counter()
        execution_time = end_time - start_time
        logger.debug(
            "Function '%s.%s' executed in %.6f seconds.",
            func.__module__,
            func.__name__,
            execution_time,
        )
        return result
    return wrapper


def to_int(field):
    """Decode an integer column, falling back to 0 on malformed input.

    Parameters:
        field (str): Raw column text, surrounding blanks allowed.

    Returns:
        int: The decoded value, or 0 if the text is blank or not an integer.
    """
    try:
        return int(field.strip())
    except ValueError:
        if field.strip():
            logger.debug("Could not decode integer field %r, using 0", field)
        return 0


def to_float(field):
    """Decode a decimal column, falling back to 0.0 on malformed input."""
    try:
        return float(field.strip())
    except ValueError:
        if field.strip():
            logger.debug("Could not decode decimal field %r, using 0.0", field)
        return 0.0


def to_text(raw):
    """Return raw file contents as text. Accepts bytes or str."""
    if isinstance(raw, (bytes, bytearray)):
        return raw.decode("utf-8", errors="replace")
    return raw
