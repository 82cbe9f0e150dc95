# This code is part of Qiskit.
#
# (C) Copyright IBM 2021.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""Connection and execution options."""

import os
import dataclasses
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, Optional, Any

from requests_ntlm import HttpNtlmAuth

from .apiconstants import (DEFAULT_URL, DEFAULT_RETRIES, DEFAULT_TIMEOUT,
                           DEFAULT_BACKOFF_FACTOR, DEFAULT_BACKEND, DEFAULT_SHOTS,
                           MAX_SEED, MAX_TIMEOUT)
from .exceptions import ApiError, CredentialsError, QXInputValueError
from .utils.utils import default_experiment_name

ENV_VARIABLES_MAP = {
    'QX_API_TOKEN': 'api_token',
    'QX_URL': 'url',
    'QX_EMAIL': 'email',
    'QX_PASSWORD': 'password',
    'QX_ACCESS_TOKEN': 'access_token',
    'QX_USER_ID': 'user_id',
}
"""Dictionary that maps `ENV_VARIABLE_NAME` to dial option."""


@dataclass(frozen=True)
class DialOptions:
    """Class for representing connection options.

    Args:
        api_token: API token, exchanged for an access token at login.
        email: Account email, used together with ``password`` to login.
        password: Account password.
        access_token: Pre-obtained access token. Skips the login exchange.
        user_id: User ID belonging to ``access_token``.
        url: Base URL of the API.
        proxies: Proxy URLs mapped by protocol (``http``, ``https``).
        ntlm_username: Username for NTLM proxy authentication.
        ntlm_password: Password for NTLM proxy authentication.
        retries: Number of attempts for every request. ``0`` means the default.
        timeout: Timeout for every request, in seconds. ``0`` means the default.
        backoff_factor: Backoff factor between failed attempts, in seconds.
        verify: If ``False``, ignores SSL certificates errors.
        client_application: Suffix appended to the client application header.
    """

    api_token: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None
    access_token: Optional[str] = None
    user_id: Optional[str] = None
    url: str = DEFAULT_URL
    proxies: Optional[Dict[str, str]] = None
    ntlm_username: Optional[str] = None
    ntlm_password: Optional[str] = None
    retries: int = DEFAULT_RETRIES
    timeout: float = DEFAULT_TIMEOUT
    backoff_factor: float = DEFAULT_BACKOFF_FACTOR
    verify: bool = True
    client_application: Optional[str] = None

    @classmethod
    def from_env(cls, **kwargs: Any) -> 'DialOptions':
        """Build the options from the environment variables.

        Explicit keyword arguments take precedence over the environment.

        Args:
            **kwargs: Additional options.

        Returns:
            The options.
        """
        env_options = {}
        for envar_name, option_name in ENV_VARIABLES_MAP.items():
            if os.getenv(envar_name):
                env_options[option_name] = os.getenv(envar_name)
        env_options.update(kwargs)
        return cls(**env_options)

    def resolved(self) -> 'DialOptions':
        """Return a copy with defaults applied to unset values."""
        return dataclasses.replace(
            self,
            url=(self.url or DEFAULT_URL).rstrip('/'),
            retries=self.retries or DEFAULT_RETRIES,
            timeout=self.timeout or DEFAULT_TIMEOUT,
            backoff_factor=(DEFAULT_BACKOFF_FACTOR if self.backoff_factor is None
                            else self.backoff_factor))

    def validate(self) -> None:
        """Validate options.

        Raises:
            CredentialsError: If no credential source was supplied.
            QXInputValueError: If one or more option is invalid.
        """
        if not (self.api_token or self.email or self.access_token):
            raise CredentialsError(
                'Missing credentials to obtain an access token. Please provide '
                'either an API token, an email and password, or an access token '
                'and user ID.')
        if self.email and not self.password and not (self.api_token or self.access_token):
            raise CredentialsError('A password is required when logging in with an email.')
        if self.retries is not None and self.retries < 0:
            raise QXInputValueError('"retries" must be a positive integer.')
        if self.timeout is not None and self.timeout < 0:
            raise QXInputValueError('"timeout" must be a positive number of seconds.')
        if self.backoff_factor is not None and self.backoff_factor < 0:
            raise QXInputValueError('"backoff_factor" must not be negative.')
        if bool(self.ntlm_username) != bool(self.ntlm_password):
            raise QXInputValueError('NTLM proxy authentication needs both a username '
                                    'and a password.')

    def login_payload(self) -> Optional[Dict[str, str]]:
        """Return the login request body for the configured credential source.

        The API token takes precedence over email and password.

        Returns:
            The JSON body, or ``None`` if there is nothing to login with.
        """
        if self.api_token:
            return {'apiToken': self.api_token}
        if self.email and self.password:
            return {'email': self.email, 'password': self.password}
        return None

    def connection_parameters(self) -> Dict[str, Any]:
        """Construct connection related parameters.

        Returns:
            A dictionary with connection-related parameters in the format
            expected by ``requests``. The following keys can be present:
            ``proxies``, ``verify``, and ``auth``.
        """
        request_kwargs = {
            'verify': self.verify
        }  # type: Dict[str, Any]

        if self.proxies:
            request_kwargs['proxies'] = dict(self.proxies)
        if self.ntlm_username and self.ntlm_password:
            request_kwargs['auth'] = HttpNtlmAuth(self.ntlm_username, self.ntlm_password)

        return request_kwargs


@dataclass(frozen=True)
class ClientOptions:
    """Class for representing execution options.

    Values left as ``None`` fall back to the client level value first
    and then to the documented defaults.

    Args:
        backend: Name of the backend to run on.
        shots: Number of repetitions of each circuit.
        name: Name of the experiment.
        timeout: Time the server may spend running a job, in seconds.
        seed: Seed for the simulator. At most 10 digits.
        max_credits: Maximum number of credits to spend on a job.
        multi_shot_optimization: HPC simulator multi-shot optimization flag.
        omp_num_threads: HPC simulator number of OpenMP threads.
        hub: Hub of the project to use.
        group: Group of the project to use.
        project: Project to use.
    """

    backend: Optional[str] = None
    shots: Optional[int] = None
    name: Optional[str] = None
    timeout: Optional[float] = None
    seed: Optional[int] = None
    max_credits: Optional[int] = None
    multi_shot_optimization: Optional[bool] = None
    omp_num_threads: Optional[int] = None
    hub: Optional[str] = None
    group: Optional[str] = None
    project: Optional[str] = None

    def merge(self, **overrides: Any) -> 'ClientOptions':
        """Return a copy with the given non-``None`` values replaced.

        Args:
            **overrides: Option values that take precedence.

        Returns:
            The merged options.

        Raises:
            QXInputValueError: If an option name is unknown.
        """
        field_names = {field.name for field in dataclasses.fields(self)}
        unknown = set(overrides) - field_names
        if unknown:
            raise QXInputValueError(
                'Unknown option(s): {}.'.format(', '.join(sorted(unknown))))
        changes = {key: value for key, value in overrides.items() if value is not None}
        if not changes:
            return self
        return dataclasses.replace(self, **changes)

    def resolved(self, now: Optional[datetime] = None) -> 'ClientOptions':
        """Return a copy with defaults applied to unset values.

        Args:
            now: Timestamp used to derive the default name.

        Returns:
            The fully resolved options.
        """
        return dataclasses.replace(
            self,
            backend=self.backend or DEFAULT_BACKEND,
            shots=self.shots or DEFAULT_SHOTS,
            name=self.name or default_experiment_name(now),
            max_credits=self.max_credits or 0)

    def validate(self) -> None:
        """Validate options.

        Raises:
            ApiError: If the seed is longer than 10 digits.
            QXInputValueError: If one or more option is invalid.
        """
        if self.seed is not None:
            if self.seed > MAX_SEED:
                raise ApiError(
                    usr_msg='Invalid seed ({}), seeds can have a maximum length '
                            'of 10 digits.'.format(self.seed))
            if self.seed < 0:
                raise QXInputValueError('"seed" must not be negative.')
        if self.shots is not None and self.shots < 1:
            raise QXInputValueError('"shots" must be a positive integer.')
        if self.timeout is not None and not 0 < self.timeout <= MAX_TIMEOUT:
            raise QXInputValueError(
                '"timeout" must be between 0 and {} seconds.'.format(MAX_TIMEOUT))
        if self.max_credits is not None and self.max_credits < 0:
            raise QXInputValueError('"max_credits" must not be negative.')

    def has_project(self) -> bool:
        """Return whether the hub, group and project are all set."""
        return all([self.hub, self.group, self.project])

    def hpc(self) -> Optional[Dict[str, Any]]:
        """Return the HPC simulator parameters, if any were set."""
        hpc = {}
        if self.multi_shot_optimization is not None:
            hpc['multi_shot_optimization'] = self.multi_shot_optimization
        if self.omp_num_threads is not None:
            hpc['omp_num_threads'] = self.omp_num_threads
        return hpc or None
