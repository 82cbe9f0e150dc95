# This code is part of Qiskit.
#
# (C) Copyright IBM 2018, 2019.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""General utility functions for testing."""

import os
import json
import logging
from typing import Any, Dict, List, Optional

from qxapi.api.session import RetrySession

LOGIN_RESPONSE = {'id': 'access-token-1', 'userId': 'user-1', 'ttl': 1209600}
"""Body of a successful login response."""


def setup_test_logging(logger: logging.Logger, filename: str):
    """Set logging to file and stdout for a logger.

    Args:
        logger: Logger object to be updated.
        filename: Name of the output file, if log to file is enabled.
    """
    # Set up formatter.
    log_fmt = ('{}.%(funcName)s:%(levelname)s:%(asctime)s:'
               ' %(message)s'.format(logger.name))
    formatter = logging.Formatter(log_fmt)

    if os.getenv('STREAM_LOG', 'true').lower() == 'true':
        # Set up the stream handler.
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(formatter)
        logger.addHandler(stream_handler)

    if os.getenv('FILE_LOG', 'false').lower() == 'true':
        file_handler = logging.FileHandler(filename)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    logger.setLevel(os.getenv('LOG_LEVEL', 'DEBUG'))


def backend_entry(name: str, status: str = 'on', simulator: bool = False,
                  **kwargs: Any) -> Dict[str, Any]:
    """Return a backend as listed by the ``Backends`` endpoint."""
    entry = {
        'name': name,
        'id': '{}-id'.format(name),
        'status': status,
        'simulator': simulator,
        'nQubits': 32 if simulator else 5,
        'couplingMap': 'all-to-all' if simulator else [[0, 1], [1, 2]],
        'onlineDate': '2017-01-10T05:00:00.000Z',
        'description': 'Backend {}'.format(name)
    }
    entry.update(kwargs)
    return entry


def make_session(url: str, retries: int = 3, **kwargs: Any) -> RetrySession:
    """Return a session for the test server, already holding an access token."""
    kwargs.setdefault('access_token', 'access-token-1')
    kwargs.setdefault('user_id', 'user-1')
    kwargs.setdefault('backoff_factor', 0)
    return RetrySession(url, retries=retries, **kwargs)


def json_body(request: Any) -> Optional[Any]:
    """Return the decoded JSON body of a request received by the test server."""
    if not request.body:
        return None
    return json.loads(request.body.decode('utf-8'))


def query_values(request: Any, key: str) -> List[str]:
    """Return the values of a query parameter of a received request."""
    return request.query.get(key, [])
