# This code is part of Qiskit.
#
# (C) Copyright IBM 2019.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""General utility functions."""

import os
import copy
import logging
from datetime import datetime
from typing import List, Optional, Any, Dict

from ..apiconstants import (DEFAULT_NAME_FMT, QASM_VERSION_HEADERS, BACKOFF_MAX)


def setup_logger(logger: logging.Logger) -> None:
    """Setup the logger for the qxapi modules with the appropriate level.

    It involves:
        * Use the `QXAPI_LOG_LEVEL` environment variable to determine the log
          level to use for the qxapi modules. If an invalid level is set, the
          log level defaults to ``WARNING``. The valid log levels are ``DEBUG``,
          ``INFO``, ``WARNING``, ``ERROR``, and ``CRITICAL`` (case-insensitive).
          If the environment variable is not set, then the parent logger's level
          is used, which also defaults to `WARNING`.
        * Use the `QXAPI_LOG_FILE` environment variable to specify the
          filename to use when logging messages. If a log file is specified, the log
          messages will not be logged to the screen. If a log file is not specified,
          the log messages will only be logged to the screen and not to a file.
    """
    log_level = os.getenv('QXAPI_LOG_LEVEL', '')
    log_file = os.getenv('QXAPI_LOG_FILE', '')

    # Setup the formatter for the log messages.
    log_fmt = '%(module)s.%(funcName)s:%(levelname)s:%(asctime)s: %(message)s'
    formatter = logging.Formatter(log_fmt)

    # Set propagate to `False` since handlers are to be attached.
    logger.propagate = False

    # Log messages to a file (if specified), otherwise log to the screen (default).
    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)
    else:
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    # Set the logging level after formatting, if specified.
    if log_level:
        # Default to `WARNING` if the specified level is not valid.
        level = logging.getLevelName(log_level.upper())
        if not isinstance(level, int):
            logger.warning('"%s" is not a valid log level. The valid log levels are: '
                           '`DEBUG`, `INFO`, `WARNING`, `ERROR`, and `CRITICAL`.', log_level)
            level = logging.WARNING
        logger.debug('The logger is being set to level "%s"', level)
        logger.setLevel(level)


def filter_data(data: Dict[str, Any]) -> Dict[str, Any]:
    """Return the data with certain fields filtered.

    Data to be filtered out includes login material and access tokens.

    Args:
        data: Original data to be filtered.

    Returns:
        Filtered data.
    """
    if not isinstance(data, dict):
        return data

    data_to_filter = copy.deepcopy(data)
    keys_to_filter = ['apiToken', 'password', 'access_token']
    _filter_value(data_to_filter, keys_to_filter)
    return data_to_filter


def _filter_value(data: Dict[str, Any], filter_keys: List[str]) -> None:
    """Recursive function to filter out the values of the input keys.

    Args:
        data: Data to be filtered
        filter_keys: A list of keys whose values are to be filtered out.
    """
    for key, value in data.items():
        if key in filter_keys:
            data[key] = '...'
        elif isinstance(value, dict):
            _filter_value(value, filter_keys)


def strip_qasm_header(qasm: str) -> str:
    """Remove the QASM version header lines from a payload.

    Every occurrence of the header statements is removed, not only a leading
    one. Surrounding whitespace and the rest of the program are kept untouched.

    Args:
        qasm: QASM program.

    Returns:
        The program without ``IBMQASM 2.0;`` and ``OPENQASM 2.0;``.
    """
    for header in QASM_VERSION_HEADERS:
        qasm = qasm.replace(header, '')
    return qasm


def default_experiment_name(now: Optional[datetime] = None) -> str:
    """Return a timestamp derived experiment name."""
    return DEFAULT_NAME_FMT.format(now or datetime.now())


def backoff_time(backoff_factor: float, current_retry_attempt: int) -> float:
    """Calculate the backoff time to wait for.

    Exponential backoff time formula::
        {backoff_factor} * (2 ** (current_retry_attempt - 1))

    Args:
        backoff_factor: Backoff factor, in seconds.
        current_retry_attempt: Current number of retry attempts.

    Returns:
        The number of seconds to wait for, before making the next retry attempt.
    """
    if backoff_factor <= 0 or current_retry_attempt < 1:
        return 0
    return min(BACKOFF_MAX, backoff_factor * (2 ** (current_retry_attempt - 1)))
