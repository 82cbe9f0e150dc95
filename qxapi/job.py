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

"""Job of several QASM circuits submitted to the Quantum Experience API."""

import logging
import threading
from typing import List, Optional, Iterable

from .apiconstants import MAX_SHOTS, MAX_TIMEOUT
from .exceptions import QXInputValueError

logger = logging.getLogger(__name__)


def clamp_shots(shots: int) -> int:
    """Return `shots`, limited to the maximum the API accepts.

    A warning is logged when the value is reduced.
    """
    if shots > MAX_SHOTS:
        logger.warning('The number of shots (%s) exceeds the maximum allowed. '
                       'Using %s shots instead.', shots, MAX_SHOTS)
        return MAX_SHOTS
    return shots


class Job:
    """A set of QASM circuits executed as a single job.

    The job ID is assigned by the server when the job is submitted with
    :meth:`Client.run_job()<qxapi.client.Client.run_job>`, and is set only once.

    Attributes:
        name: Name of the job.
        timeout: Time the server may spend running the job, in seconds.
        shots: Number of repetitions of each circuit.
        max_credits: Maximum number of credits to spend.
        qasms: QASM source of the circuits.
    """

    def __init__(
            self,
            qasms: Optional[Iterable[str]] = None,
            shots: Optional[int] = None,
            max_credits: Optional[int] = None,
            name: Optional[str] = None,
            timeout: Optional[float] = None
    ) -> None:
        """Job constructor.

        Args:
            qasms: QASM source of the circuits. A job can have no circuits.
            shots: Number of repetitions of each circuit. Values above the
                maximum are reduced to it. ``None`` uses the execution options.
            max_credits: Maximum number of credits to spend. ``None`` uses the
                execution options.
            name: Name of the job.
            timeout: Time the server may spend running the job, in seconds.

        Raises:
            QXInputValueError: If the timeout is not between 0 and 300 seconds.
        """
        if timeout is not None and not 0 < timeout <= MAX_TIMEOUT:
            raise QXInputValueError(
                '"timeout" must be between 0 and {} seconds.'.format(MAX_TIMEOUT))

        self._lock = threading.Lock()
        self._job_id = None  # type: Optional[str]
        self.name = name
        self.timeout = timeout
        self.shots = None if shots is None else clamp_shots(shots)
        self.max_credits = max_credits
        self.qasms = list(qasms or [])  # type: List[str]

    @property
    def job_id(self) -> Optional[str]:
        """Return the job ID, or ``None`` if the job was not submitted."""
        with self._lock:
            return self._job_id

    def _set_job_id(self, job_id: str) -> None:
        """Set the ID assigned by the server.

        Raises:
            QXInputValueError: If the job already has a different ID.
        """
        with self._lock:
            if self._job_id is not None and self._job_id != job_id:
                raise QXInputValueError('Job {} was already submitted.'.format(self._job_id))
            self._job_id = job_id

    def __repr__(self) -> str:
        return "<{}(job_id={}, name={}, shots={}, circuits={})>".format(
            self.__class__.__name__, self.job_id, self.name, self.shots, len(self.qasms))
