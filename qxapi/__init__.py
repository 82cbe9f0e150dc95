# This code is part of Qiskit.
#
# (C) Copyright IBM 2017, 2019.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""
=====================================================
Quantum Experience API client (:mod:`qxapi`)
=====================================================

.. currentmodule:: qxapi

Modules for accessing the Quantum Experience API: authentication, backend
discovery, and the execution of experiments and jobs.

A session is obtained with :func:`dial`, and wrapped by a :class:`Client`::

    import qxapi

    session = qxapi.dial(api_token='MY_API_TOKEN')
    client = qxapi.Client(session, shots=1024)
    client.available_backends()
    client.run_experiment(qasm, backend='ibmqx2')

Logging
=====================

The Quantum Experience API client uses the ``qxapi`` logger.

Two environment variables can be used to control the logging:

    * ``QXAPI_LOG_LEVEL``: Specifies the log level to use, for the qxapi
      modules. If an invalid level is set, the log level defaults to ``WARNING``.
      The valid log levels are ``DEBUG``, ``INFO``, ``WARNING``, ``ERROR``, and ``CRITICAL``
      (case-insensitive). If the environment variable is not set, then the parent logger's level
      is used, which also defaults to ``WARNING``.
    * ``QXAPI_LOG_FILE``: Specifies the name of the log file to use. If specified,
      messages will be logged to the file only. Otherwise messages will be logged to the standard
      error (usually the screen).

For more advanced use, you can modify the logger itself. For example, to manually set the level
to ``WARNING``::

    import logging
    logging.getLogger('qxapi').setLevel(logging.WARNING)

Functions
=========
.. autosummary::
    :toctree: ../stubs/

    dial
    connect

Classes
=======
.. autosummary::
    :toctree: ../stubs/

    Client
    DialOptions
    ClientOptions
    Job
    RetrySession

Exceptions
==========
.. autosummary::
    :toctree: ../stubs/

    QXApiError
    QXInputValueError
    ApiError
    ApiServerError
    BadBackendError
    CredentialsError
    RegisterSizeError
    RequestCancelledError
"""

import logging
from typing import Optional, Any

from .api.session import RetrySession, dial
from .client import Client
from .job import Job
from .options import DialOptions, ClientOptions
from .exceptions import *
from .models import (BackendInfo, Backends, BackendStatus, Calibration, Parameters,
                     Credits, Code, LastCodes)
from .utils.utils import setup_logger

from .version import __version__

# Setup the logger for the qxapi package.
logger = logging.getLogger(__name__)
setup_logger(logger)

# Constants used by the qxapi logger.
QXAPI_LOGGER_NAME = 'qxapi'
"""The name of the qxapi logger."""
QXAPI_LOG_LEVEL = 'QXAPI_LOG_LEVEL'
"""The environment variable name that is used to set the level for the qxapi logger."""
QXAPI_LOG_FILE = 'QXAPI_LOG_FILE'
"""The environment variable name that is used to set the file for the qxapi logger."""


def connect(
        options: Optional[DialOptions] = None,
        client_options: Optional[ClientOptions] = None,
        **kwargs: Any
) -> Client:
    """Authenticate and return a client.

    Args:
        options: Connection options. If ``None``, they are read from the
            ``QX_*`` environment variables.
        client_options: Initial execution options of the client.
        **kwargs: Connection options, overriding the ones in `options`.

    Returns:
        A client using a new authenticated session.
    """
    if options is None:
        options = DialOptions.from_env(**kwargs)
        kwargs = {}
    return Client(dial(options, **kwargs), client_options)
