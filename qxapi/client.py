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

"""Client for the Quantum Experience API."""

import logging
import threading
from typing import Dict, List, Optional, Set, Union, Any

from .api.session import RetrySession
from .api.rest import Api
from .apiconstants import (BackendOperation, LEGACY_BACKEND_NAMES, QASM_CODE_TYPE,
                           SIMULATOR_BACKEND)
from .exceptions import ApiError, BadBackendError, QXInputValueError
from .job import Job, clamp_shots
from .models import (BackendInfo, Backends, BackendStatus, Calibration, Parameters,
                     Credits, Code, LastCodes)
from .options import ClientOptions
from .utils.utils import strip_qasm_header

logger = logging.getLogger(__name__)


class Client:
    """High level access to the Quantum Experience API.

    A client wraps an authenticated :class:`~qxapi.api.session.RetrySession`,
    which it shares but never modifies, and keeps:

        * the execution options. Options passed to an operation are stored and
          used by later operations as well.
        * the registry of online backends, filled by :meth:`available_backends`.
        * the registry of the jobs submitted with :meth:`run_job`.

    A single lock guards the registries and the options, so a client can be
    used by several threads at once.
    """

    def __init__(
            self,
            session: RetrySession,
            options: Optional[ClientOptions] = None,
            **overrides: Any
    ) -> None:
        """Client constructor.

        Args:
            session: Authenticated session, as returned by :func:`~qxapi.dial`.
            options: Initial execution options.
            **overrides: Execution options that take precedence over `options`.

        Raises:
            QXInputValueError: If an option is unknown or invalid.
            ApiError: If the seed is invalid.
        """
        options = (options or ClientOptions()).merge(**overrides)
        options.validate()

        self._session = session
        self._api = Api(session)
        self._lock = threading.Lock()
        self._options = options
        self._backends = Backends()
        self._jobs = {}  # type: Dict[str, Job]
        self._submitting = set()  # type: Set[Job]

    @property
    def session(self) -> RetrySession:
        """Return the session used by the client."""
        return self._session

    @property
    def options(self) -> ClientOptions:
        """Return the current execution options."""
        with self._lock:
            return self._options

    def _merge_options(self, **overrides: Any) -> ClientOptions:
        """Store the given options and return a snapshot for a single call.

        The merged options are validated before being stored.

        Args:
            **overrides: Option values that take precedence.

        Returns:
            The merged options, without defaults applied.
        """
        with self._lock:
            merged = self._options.merge(**overrides)
            merged.validate()
            self._options = merged
        return merged

    def resolve_backend(
            self,
            name: str,
            operation: Union[BackendOperation, str] = BackendOperation.EXPERIMENT
    ) -> Optional[str]:
        """Return the canonical name of a backend.

        Legacy aliases, such as ``simulator`` or ``ibmqx2``, are only honored
        for experiments. Other names must have been reported online by a
        previous call to :meth:`available_backends`.

        Args:
            name: Name of the backend.
            operation: Operation the backend is needed for.

        Returns:
            The lower-cased canonical name, or ``None`` if it is unknown.

        Raises:
            QXInputValueError: If the operation is unknown.
        """
        try:
            operation = BackendOperation(operation)
        except ValueError as ex:
            raise QXInputValueError('Unknown backend operation: {}'.format(operation)) from ex

        if not name:
            return None

        if operation is BackendOperation.EXPERIMENT:
            legacy_name = LEGACY_BACKEND_NAMES.get(name.lower())
            if legacy_name:
                return legacy_name

        with self._lock:
            if name in self._backends:
                return name.lower()
        return None

    def available_backends(
            self,
            hub: Optional[str] = None,
            group: Optional[str] = None,
            project: Optional[str] = None,
            cancel: Optional[threading.Event] = None
    ) -> Backends:
        """Return the backends known to be online.

        The backends reported online are added to the registry, replacing
        previous entries with the same name. Backends are never removed.

        Args:
            hub: Hub of the project whose backends are listed.
            group: Group of the project whose backends are listed.
            project: Project whose backends are listed.
            cancel: Event that aborts the request once set.

        Returns:
            A copy of all the backends registered so far.
        """
        options = self._merge_options(hub=hub, group=group, project=project)
        if options.has_project():
            response = self._api.backends(options.hub, options.group, options.project,
                                          cancel=cancel)
        else:
            response = self._api.backends(cancel=cancel)

        online = [BackendInfo.from_dict(entry) for entry in response
                  if isinstance(entry, dict)]
        online = [backend for backend in online if backend.online and backend.name]
        logger.debug('%d of %d backends are online.', len(online), len(response))

        with self._lock:
            for backend in online:
                self._backends[backend.name] = backend
            return Backends(self._backends)

    def backend_status(
            self,
            name: str,
            cancel: Optional[threading.Event] = None
    ) -> BackendStatus:
        """Return the queue status of a backend.

        Args:
            name: Name of the backend.
            cancel: Event that aborts the request once set.

        Returns:
            The status of the backend.

        Raises:
            BadBackendError: If the backend is unknown.
        """
        backend_type = self._resolve_or_raise(name, BackendOperation.STATUS)
        return BackendStatus(**self._api.backend(backend_type).status(cancel=cancel))

    def backend_calibration(
            self,
            name: str,
            hub: Optional[str] = None,
            cancel: Optional[threading.Event] = None
    ) -> Calibration:
        """Return the calibration of a backend.

        Args:
            name: Name of the backend.
            hub: Hub whose device endpoints are used.
            cancel: Event that aborts the request once set.

        Returns:
            The calibration of the backend. Empty for the legacy simulator.

        Raises:
            BadBackendError: If the backend is unknown.
        """
        options = self._merge_options(hub=hub)
        backend_type = self._resolve_or_raise(name, BackendOperation.CALIBRATION)
        if backend_type == SIMULATOR_BACKEND:
            return Calibration(backend=backend_type)

        response = self._api.backend(backend_type, options.hub).calibration(cancel=cancel)
        return Calibration.from_dict(response)

    def backend_parameters(
            self,
            name: str,
            hub: Optional[str] = None,
            cancel: Optional[threading.Event] = None
    ) -> Parameters:
        """Return the parameters of a backend.

        Args:
            name: Name of the backend.
            hub: Hub whose device endpoints are used.
            cancel: Event that aborts the request once set.

        Returns:
            The parameters of the backend. Empty for the legacy simulator.

        Raises:
            BadBackendError: If the backend is unknown.
        """
        options = self._merge_options(hub=hub)
        backend_type = self._resolve_or_raise(name, BackendOperation.CALIBRATION)
        if backend_type == SIMULATOR_BACKEND:
            return Parameters(backend=backend_type)

        response = self._api.backend(backend_type, options.hub).parameters(cancel=cancel)
        return Parameters.from_dict(response)

    def run_experiment(
            self,
            qasm: str,
            cancel: Optional[threading.Event] = None,
            **overrides: Any
    ) -> None:
        """Run a QASM circuit as an experiment.

        Args:
            qasm: QASM source of the circuit. The version header is removed.
            cancel: Event that aborts the request once set.
            **overrides: Execution options, stored for later calls as well.

        Raises:
            ApiError: If the seed is invalid.
            BadBackendError: If the backend is unknown.
            RegisterSizeError: If the circuit is larger than the device.
            ApiServerError: If the server reported an error.
        """
        options = self._merge_options(**overrides).resolved()
        backend_type = self._resolve_or_raise(options.backend, BackendOperation.EXPERIMENT)

        params = {
            'shots': clamp_shots(options.shots),
            'deviceRunType': backend_type
        }  # type: Dict[str, Any]
        if options.seed:
            params['seed'] = options.seed

        payload = {
            'name': options.name,
            'qasm': strip_qasm_header(qasm),
            'codeType': QASM_CODE_TYPE
        }
        self._api.execute_code(payload, params, cancel=cancel)

    def run_job(
            self,
            job: Job,
            cancel: Optional[threading.Event] = None,
            **overrides: Any
    ) -> Job:
        """Submit a job.

        Only the canonical backend names reported by :meth:`available_backends`
        are accepted, legacy aliases are not.

        The shots, maximum credits, name and timeout set on `job` take
        precedence over the execution options. A name or timeout is only sent
        when one of them sets it.

        Args:
            job: The job to submit. Its ID is set once submitted.
            cancel: Event that aborts the request once set.
            **overrides: Execution options, stored for later calls as well.

        Returns:
            The submitted job.

        Raises:
            ApiError: If the seed is invalid, or no job ID was returned.
            BadBackendError: If the backend is unknown.
            QXInputValueError: If the job was already submitted, or is being
                submitted.
            RegisterSizeError: If a circuit is larger than the device.
            ApiServerError: If the server reported an error.
        """
        merged = self._merge_options(**overrides)
        options = merged.resolved()
        backend_type = self._resolve_or_raise(options.backend, BackendOperation.JOB)

        payload = {
            'qasms': [{'qasm': strip_qasm_header(qasm)} for qasm in job.qasms],
            'shots': clamp_shots(job.shots or options.shots),
            'maxCredits': (options.max_credits if job.max_credits is None
                           else job.max_credits),
            'backend': {'name': backend_type}
        }  # type: Dict[str, Any]
        name = job.name or merged.name
        if name:
            payload['name'] = name
        timeout = job.timeout or options.timeout
        if timeout:
            payload['timeout'] = timeout
        if options.seed:
            payload['seed'] = options.seed
        hpc = options.hpc()
        if hpc:
            payload['hpc'] = hpc

        self._claim_job(job)
        try:
            if options.has_project():
                response = self._api.submit_job(payload, options.hub, options.group,
                                                options.project, cancel=cancel)
            else:
                response = self._api.submit_job(payload, cancel=cancel)

            job_id = response.get('id')
            if not job_id:
                raise ApiError(usr_msg='The server did not return a job ID.',
                               dev_msg=str(response))

            with self._lock:
                job._set_job_id(job_id)  # pylint: disable=protected-access
                self._jobs[job_id] = job
        finally:
            with self._lock:
                self._submitting.discard(job)

        logger.debug('Job %s submitted to %s.', job_id, backend_type)
        return job

    def _claim_job(self, job: Job) -> None:
        """Mark `job` as being submitted.

        Raises:
            QXInputValueError: If the job was already submitted, or is being
                submitted.
        """
        with self._lock:
            if job.job_id is not None:
                raise QXInputValueError('Job {} was already submitted.'.format(job.job_id))
            if job in self._submitting:
                raise QXInputValueError('The job is already being submitted.')
            self._submitting.add(job)

    def version(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return the version information of the API.

        Returns:
            The version information. ``new_api`` tells whether the API
            returned structured version information.
        """
        return self._api.version(cancel=cancel)

    def get_my_credits(self, cancel: Optional[threading.Event] = None) -> Credits:
        """Return the credits of the account."""
        return Credits.from_dict(self._api.user(cancel=cancel))

    def get_last_codes(self, cancel: Optional[threading.Event] = None) -> LastCodes:
        """Return the latest codes of the account, with their executions."""
        return LastCodes.from_dict(self._api.last_codes(cancel=cancel))

    def get_code(self, code_id: str, cancel: Optional[threading.Event] = None) -> Code:
        """Return a code of the account.

        Args:
            code_id: ID of the code.
            cancel: Event that aborts the request once set.

        Returns:
            The code.
        """
        return Code.from_dict(self._api.code(code_id, cancel=cancel))

    def job(self, job_id: str) -> Job:
        """Return a job submitted by this client.

        Args:
            job_id: ID of the job.

        Returns:
            The job.

        Raises:
            QXInputValueError: If no job with the ID was submitted by this client.
        """
        with self._lock:
            try:
                return self._jobs[job_id]
            except KeyError:
                raise QXInputValueError('Job {} was not submitted by this client.'
                                        .format(job_id)) from None

    def jobs(self) -> List[Job]:
        """Return the jobs submitted by this client."""
        with self._lock:
            return list(self._jobs.values())

    def _resolve_or_raise(self, name: str, operation: BackendOperation) -> str:
        """Return the canonical name of a backend, raising if it is unknown."""
        backend_type = self.resolve_backend(name, operation)
        if backend_type is None:
            raise BadBackendError(name)
        return backend_type

    def __repr__(self) -> str:
        return "<{}(url='{}')>".format(self.__class__.__name__, self._session.base_url)
