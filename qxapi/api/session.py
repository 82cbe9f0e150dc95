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

"""Session customized for Quantum Experience access."""

import os
import re
import time
import logging
import threading
import dataclasses
from typing import Dict, Optional, Any
from urllib import parse

import requests
import urllib3
from requests import Session, RequestException, Response
from requests.auth import AuthBase

from ..apiconstants import DEFAULT_RETRIES, DEFAULT_TIMEOUT, DEFAULT_BACKOFF_FACTOR
from ..exceptions import (ApiError, CredentialsError, RegisterSizeError,
                          RequestCancelledError)
from ..options import DialOptions
from ..utils.utils import filter_data, backoff_time
from ..version import __version__ as qxapi_version

CLIENT_APPLICATION = 'qxapi/' + qxapi_version
CUSTOM_HEADER_ENV_VAR = 'QX_CUSTOM_CLIENT_APP_HEADER'
LOGIN_URL = '/users/login'
LOGIN_WITH_TOKEN_URL = '/users/loginWithToken'
logger = logging.getLogger(__name__)

# Matches the legacy server message for circuits larger than the device,
# capturing the maximum register size as group(1).
RE_MAX_QUBITS = re.compile(
    r"registers? exceed the number of qubits, it can'?t be greater than (\d+)",
    re.IGNORECASE)


class RetrySession(Session):
    """Custom session with authentication, retry and handling of specific parameters.

    This is a child class of ``requests.Session``. It owns the access token and
    user ID, appends the token to every request as the ``access_token`` query
    parameter, and wraps every call in a bounded retry loop:

        * the loop ends on the first ``200`` response.
        * a ``401`` response triggers one re-authentication per call, using the
          original login material, and the request is re-issued without
          consuming an attempt.
        * a response reporting a register larger than the device raises
          :class:`~qxapi.exceptions.RegisterSizeError` immediately.
        * any other response consumes an attempt; exhausting the attempts
          raises :class:`~qxapi.exceptions.ApiError`.

    Network errors are not retried and are raised with their original type.
    """

    def __init__(
            self,
            base_url: str,
            access_token: Optional[str] = None,
            user_id: Optional[str] = None,
            login_payload: Optional[Dict[str, str]] = None,
            retries: int = DEFAULT_RETRIES,
            timeout: float = DEFAULT_TIMEOUT,
            backoff_factor: float = DEFAULT_BACKOFF_FACTOR,
            verify: bool = True,
            proxies: Optional[Dict[str, str]] = None,
            auth: Optional[AuthBase] = None,
            client_application: Optional[str] = None
    ) -> None:
        """RetrySession constructor.

        Args:
            base_url: Base URL for the session's requests.
            access_token: Access token.
            user_id: User ID that owns the access token.
            login_payload: Body of the login request, used to obtain new
                access tokens. ``None`` disables re-authentication.
            retries: Number of attempts for every request.
            timeout: Timeout for every request, in seconds.
            backoff_factor: Backoff factor between failed attempts.
            verify: Whether to enable SSL verification.
            proxies: Proxy URLs mapped by protocol.
            auth: Authentication handler.
            client_application: Suffix for the client application header.
        """
        super().__init__()

        self.base_url = base_url.rstrip('/')
        self.user_id = user_id
        self.retries = retries
        self.timeout = timeout
        self.backoff_factor = backoff_factor
        self._login_payload = login_payload
        self._auth_lock = threading.Lock()
        self._access_token = None  # type: Optional[str]
        self.access_token = access_token

        self._initialize_session_parameters(verify, proxies or {}, auth, client_application)

    def __del__(self) -> None:
        """RetrySession destructor. Closes the session."""
        self.close()

    @property
    def access_token(self) -> Optional[str]:
        """Return the session access token."""
        return self._access_token

    @access_token.setter
    def access_token(self, value: Optional[str]) -> None:
        """Set the session access token."""
        self._access_token = value
        if value:
            self.params.update({'access_token': value})  # type: ignore[union-attr]
        else:
            self.params.pop('access_token', None)  # type: ignore[union-attr]

    @property
    def can_reauthenticate(self) -> bool:
        """Return whether the session holds login material for new tokens."""
        return bool(self._login_payload)

    def _initialize_session_parameters(
            self,
            verify: bool,
            proxies: Dict[str, str],
            auth: Optional[AuthBase] = None,
            client_application: Optional[str] = None
    ) -> None:
        """Set the session parameters and attributes.

        Args:
            verify: Whether to enable SSL verification.
            proxies: Proxy URLs mapped by protocol.
            auth: Authentication handler.
            client_application: Suffix for the client application header.
        """
        client_app_header = CLIENT_APPLICATION
        if client_application:
            client_app_header += '/' + client_application

        # Append custom header to the end if specified
        custom_header = os.getenv(CUSTOM_HEADER_ENV_VAR)
        if custom_header:
            client_app_header += '/' + custom_header

        self.headers.update({'X-Qx-Client-Application': client_app_header})

        self.auth = auth
        self.proxies = proxies or {}
        self.verify = verify
        if not verify:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.warning('Ignoring SSL errors. This is not recommended.')

    def authenticate(self) -> None:
        """Obtain a new access token and user ID from the login endpoint.

        The login is a single attempt: it is neither retried nor
        re-authenticated.

        Raises:
            CredentialsError: If there is no login material, or the server
                rejected it.
            ApiError: If the server response could not be used.
        """
        payload = self._login_payload
        if not payload:
            raise CredentialsError(
                'Invalid credentials, please provide either an API token or '
                'user email and password.')

        url = LOGIN_WITH_TOKEN_URL if 'apiToken' in payload else LOGIN_URL
        self._log_request_info(url, 'POST', {'json': payload})
        response = self._send('POST', self.base_url + url,
                              json=payload,
                              params={'access_token': None},
                              timeout=self.timeout)

        if response.status_code == 401:
            error_message = _error_payload(response).get('message')
            if error_message:
                raise CredentialsError(
                    'Error during login: {}'.format(error_message), status_code=401)
            raise CredentialsError('Invalid credentials.', status_code=401)
        if response.status_code != requests.codes.ok:  # pylint: disable=no-member
            raise ApiError(usr_msg='Error during login.',
                           dev_msg='Got a {} code response: {}'.format(
                               response.status_code, response.text),
                           status_code=response.status_code)
        try:
            data = response.json()
        except ValueError as ex:
            raise ApiError(usr_msg='Error during login.',
                           dev_msg='Unexpected login response: {}'.format(response.text),
                           status_code=response.status_code) from ex

        access_token = data.get('id') if isinstance(data, dict) else None
        if not access_token:
            raise CredentialsError('Invalid credentials, no access token was returned.')

        self.access_token = access_token
        self.user_id = data.get('userId', self.user_id)
        logger.debug('Obtained a new access token for user %s.', self.user_id)

    def _reauthenticate(self, stale_token: Optional[str]) -> None:
        """Obtain a new access token, unless another caller already did.

        Args:
            stale_token: The access token that was rejected.
        """
        with self._auth_lock:
            if self.access_token != stale_token:
                return
            self.authenticate()

    def request(  # type: ignore[override]
            self,
            method: str,
            url: str,
            bare: bool = False,
            with_token: bool = True,
            cancel: Optional[threading.Event] = None,
            **kwargs: Any
    ) -> Response:
        """Construct, prepare, and send a ``Request``, retrying on failure.

        If `bare` is not specified, prepend the base URL to the input `url`.

        Args:
            method: Method for the new request (e.g. ``POST``).
            url: URL for the new request.
            bare: If ``True``, do not send Quantum Experience specific information
                (such as access token) in the request or modify the input `url`.
            with_token: If ``False``, do not send the access token.
            cancel: Event that, once set, aborts the retry loop.
            **kwargs: Additional arguments for the request.

        Returns:
            Response object.

        Raises:
            RegisterSizeError: If the server reported a register larger than
                the device.
            RequestCancelledError: If `cancel` was set.
            ApiError: If no proper response was obtained.
        """
        # pylint: disable=arguments-differ
        if bare:
            final_url = url
        else:
            final_url = self.base_url + url

        if bare or not with_token:
            # Explicitly pass `None` as the `access_token` param, disabling it.
            params = dict(kwargs.get('params') or {})
            params.update({'access_token': None})
            kwargs.update({'params': params})

        if method.upper() in ('POST', 'PUT'):
            headers = dict(kwargs.get('headers') or {})
            headers.setdefault('Content-Type', 'application/json')
            kwargs.update({'headers': headers})

        kwargs.setdefault('timeout', self.timeout)
        self._log_request_info(url, method, kwargs)

        can_reauthenticate = with_token and not bare and self.can_reauthenticate
        reauthenticated = False
        response = None
        attempt = 0
        while attempt < self.retries:
            _check_cancelled(cancel)
            token_used = self.access_token
            response = self._send(method, final_url, **kwargs)

            if response.status_code == requests.codes.ok:  # pylint: disable=no-member
                return response

            if response.status_code == 401 and can_reauthenticate and not reauthenticated:
                reauthenticated = True
                logger.info('Got a 401 code response to %s, requesting a new access token.',
                            _sanitize_url(final_url))
                try:
                    self._reauthenticate(token_used)
                except ApiError as ex:
                    raise ApiError(
                        usr_msg='Got a 401 code response to {}.'.format(
                            _sanitize_url(final_url)),
                        dev_msg=self._scrub(response.text),
                        status_code=401) from ex
                continue

            logger.warning('Got a %s code response to %s: %s',
                           response.status_code, _sanitize_url(final_url),
                           self._scrub(response.text))
            _raise_for_known_error(response)

            attempt += 1
            if attempt < self.retries:
                self._wait(backoff_time(self.backoff_factor, attempt), cancel)

        dev_msg = None
        status_code = -1
        if response is not None:
            status_code = response.status_code
            dev_msg = 'Last response: {} {}'.format(status_code, self._scrub(response.text))
        raise ApiError(usr_msg='Failed to get proper response from backend.',
                       dev_msg=dev_msg, status_code=status_code)

    def _send(self, method: str, url: str, **kwargs: Any) -> Response:
        """Send a single request, without retries.

        Raises:
            RequestException: If the request could not be sent. The access
                token is removed from the exception messages.
        """
        try:
            return super().request(method, url, **kwargs)
        except RequestException as ex:
            if self.access_token:
                self._modify_chained_exception_messages(ex)
            raise

    def _wait(self, seconds: float, cancel: Optional[threading.Event]) -> None:
        """Sleep between attempts, waking up early if `cancel` is set."""
        if seconds <= 0:
            return
        logger.debug('Retrying after %s seconds.', seconds)
        if cancel is None:
            time.sleep(seconds)
        else:
            cancel.wait(seconds)

    def _scrub(self, text: str) -> str:
        """Replace the access token in `text`."""
        if self.access_token and text:
            return text.replace(self.access_token, '...')
        return text

    def _modify_chained_exception_messages(self, exc: BaseException) -> None:
        """Modify the chained exception messages.

        Args:
            exc: Exception whose parent messages are to be modified.
        """
        if exc.__cause__:
            self._modify_chained_exception_messages(exc.__cause__)
        elif exc.__context__:
            self._modify_chained_exception_messages(exc.__context__)

        # Loop through args, attempt to replace access token if string.
        modified_args = []
        for arg in exc.args:
            exc_message = arg
            if isinstance(exc_message, str):
                exc_message = self._scrub(exc_message)
            modified_args.append(exc_message)
        exc.args = tuple(modified_args)

    def _log_request_info(
            self,
            url: str,
            method: str,
            request_data: Dict[str, Any]
    ) -> None:
        """Log the request data, filtering out login material and tokens.

        Args:
            url: URL for the new request.
            method: Method for the new request (e.g. ``POST``)
            request_data: Additional arguments for the request.
        """
        if not logger.isEnabledFor(logging.DEBUG) or not self._is_worth_logging(url):
            return
        try:
            request_data_to_log = ''
            if 'json' in request_data:
                request_data_to_log = 'Request Data: {}.'.format(
                    filter_data(request_data['json']))
            logger.debug('Endpoint: %s. Method: %s. %s',
                         url, method.upper(), request_data_to_log)
        except Exception as ex:  # pylint: disable=broad-except
            # Catch general exception so as not to disturb the program if filtering fails.
            logger.info('Filtering failed when logging request information: %s', str(ex))

    def _is_worth_logging(self, endpoint_url: str) -> bool:
        """Returns whether the endpoint URL should be logged.

        Args:
            endpoint_url: The endpoint URL that will be logged.

        Returns:
            Whether the endpoint URL should be logged.
        """
        if endpoint_url.endswith('/queue/status'):
            return False
        if endpoint_url.startswith('/version'):
            return False
        return True


def dial(options: Optional[DialOptions] = None, **kwargs: Any) -> RetrySession:
    """Return an authenticated session to the Quantum Experience API.

    Args:
        options: Connection options. If ``None``, they are built from `kwargs`.
        **kwargs: Connection options, overriding the ones in `options`.

    Returns:
        A session holding a valid access token.

    Raises:
        CredentialsError: If no credentials were supplied or the login failed.
        ApiError: If the login response could not be used.
    """
    if options is None:
        options = DialOptions(**kwargs)
    elif kwargs:
        options = dataclasses.replace(options, **kwargs)

    options.validate()
    options = options.resolved()

    session = RetrySession(
        options.url,
        access_token=options.access_token,
        user_id=options.user_id,
        login_payload=options.login_payload(),
        retries=options.retries,
        timeout=options.timeout,
        backoff_factor=options.backoff_factor,
        client_application=options.client_application,
        **options.connection_parameters())

    if not session.access_token:
        try:
            session.authenticate()
        except Exception:
            session.close()
            raise
    return session


def _check_cancelled(cancel: Optional[threading.Event]) -> None:
    """Raise if `cancel` is set."""
    if cancel is not None and cancel.is_set():
        raise RequestCancelledError('The request was cancelled.')


def _sanitize_url(url: str) -> str:
    """Strip any tokens from the url."""
    return parse.urlparse(url).path


def _error_payload(response: Response) -> Dict[str, Any]:
    """Return the structured ``error`` object of a response, or an empty dict."""
    try:
        error = response.json()['error']
    except (ValueError, KeyError, TypeError):
        # the response did not contain the expected json.
        return {}
    if isinstance(error, dict):
        return error
    return {'message': str(error)}


def _raise_for_known_error(response: Response) -> None:
    """Raise for server errors that must not be retried.

    The structured ``error`` object is checked first. Unstructured bodies are
    matched as a whole, for compatibility with older servers.

    Raises:
        RegisterSizeError: If the register exceeds the device size.
    """
    error = _error_payload(response)
    text = error.get('message') if error else response.text
    match = RE_MAX_QUBITS.search(text or '')
    if match:
        raise RegisterSizeError(int(match.group(1)), dev_msg=text)
