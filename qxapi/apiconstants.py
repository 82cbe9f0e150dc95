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

"""Values used by the API and defaults used by the client."""

import enum

DEFAULT_URL = 'https://quantumexperience.ng.bluemix.net/api'
"""Default Quantum Experience API endpoint."""
DEFAULT_RETRIES = 5
"""Default number of attempts for every request."""
DEFAULT_TIMEOUT = 30.0
"""Default timeout for each request, in seconds."""
DEFAULT_BACKOFF_FACTOR = 0.5
"""Default backoff factor between failed attempts, in seconds."""
BACKOFF_MAX = 8
"""Maximum time to wait between retries, in seconds."""

DEFAULT_BACKEND = 'simulator'
"""Backend used by experiments and jobs unless specified otherwise."""
DEFAULT_SHOTS = 1
"""Number of shots used unless specified otherwise."""
DEFAULT_NAME_FMT = 'Experiment #{:%Y%m%d%H%M%S}'
"""Format of the experiment name used unless specified otherwise."""
MAX_SHOTS = 8192
"""Maximum number of shots a job can be run for."""
MAX_SEED = 9999999999
"""Maximum seed value, i.e. 10 digits."""
MAX_TIMEOUT = 300.0
"""Maximum timeout allowed for waiting on a result, in seconds."""

QASM_CODE_TYPE = 'QASM2'
"""Code type marker sent along with experiments."""
QASM_VERSION_HEADERS = ('IBMQASM 2.0;', 'OPENQASM 2.0;')
"""Version header lines the server expects to be removed from the payload."""

SIMULATOR_BACKEND = 'sim_trivial_2'
"""Canonical name of the legacy simulator, which has no calibration."""

LEGACY_BACKEND_NAMES = {
    'ibmqx5qv2': 'real',
    'ibmqx2': 'real',
    'qx5qv2': 'real',
    'qx5q': 'real',
    'real': 'real',
    'ibmqx3': 'ibmqx3',
    'simulator': SIMULATOR_BACKEND,
    'sim_trivial_2': SIMULATOR_BACKEND,
    'ibmqx_qasm_simulator': SIMULATOR_BACKEND,
}
"""Historical device and simulator aliases, mapped to their canonical names."""


class BackendOperation(str, enum.Enum):
    """Kind of operation a backend name is resolved for.

    Legacy aliases are only honored for experiments.
    """

    EXPERIMENT = 'experiment'
    JOB = 'job'
    STATUS = 'status'
    CALIBRATION = 'calibration'


class ApiBackendStatus(str, enum.Enum):
    """Possible values used by the API for a backend status."""

    ON = 'on'
    OFF = 'off'
