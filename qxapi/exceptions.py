# This code is part of Qiskit.
#
# (C) Copyright IBM 2017, 2018.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""Exceptions related to the Quantum Experience API."""

from typing import Optional, Dict, Any


class QXApiError(Exception):
    """Base class for errors raised by the qxapi modules."""
    pass


class QXInputValueError(QXApiError, ValueError):
    """Error raised due to an invalid option or input value."""
    pass


class ApiError(QXApiError):
    """Generic Quantum Experience API error.

    Attributes:
        usr_msg: Message meant for the end user.
        dev_msg: Message with further details, meant for developers.
        status_code: Status code of the last response, or ``-1`` if unknown.
    """

    def __init__(
            self,
            usr_msg: Optional[str] = None,
            dev_msg: Optional[str] = None,
            status_code: int = -1
    ) -> None:
        """ApiError constructor.

        Args:
            usr_msg: Message meant for the end user.
            dev_msg: Message with further details, meant for developers.
            status_code: Response status code. -1 for unknown status code.
        """
        super().__init__(usr_msg)
        self.usr_msg = usr_msg
        self.dev_msg = dev_msg
        self.status_code = status_code

    def __str__(self) -> str:
        if self.dev_msg:
            return '{} ({})'.format(self.usr_msg, self.dev_msg)
        return str(self.usr_msg)


class CredentialsError(ApiError):
    """Missing or invalid login material."""
    pass


class BadBackendError(ApiError):
    """A backend name could not be resolved."""

    def __init__(self, backend: str) -> None:
        """BadBackendError constructor.

        Args:
            backend: The backend name that was requested.
        """
        usr_msg = 'Could not find backend "{}" available.'.format(backend)
        dev_msg = ('Backend "{}" does not exist. Please use '
                   'available_backends() to see the options.'.format(backend))
        super().__init__(usr_msg=usr_msg, dev_msg=dev_msg)
        self.backend = backend


class RegisterSizeError(ApiError):
    """The circuit register is larger than the number of qubits of the device."""

    def __init__(self, max_qubits: int, dev_msg: Optional[str] = None) -> None:
        """RegisterSizeError constructor.

        Args:
            max_qubits: Maximum register size allowed by the device.
            dev_msg: Raw server message, if any.
        """
        super().__init__(
            usr_msg='Device register size must be <= {}.'.format(max_qubits),
            dev_msg=dev_msg, status_code=400)
        self.max_qubits = max_qubits


class ApiServerError(ApiError):
    """Error object embedded by the server in an otherwise decoded response."""

    def __init__(
            self,
            name: Optional[str] = None,
            status: Optional[int] = None,
            message: Optional[str] = None,
            status_code: Optional[int] = None,
            code: Optional[str] = None
    ) -> None:
        """ApiServerError constructor.

        Args:
            name: Error name.
            status: Error status.
            message: Error message.
            status_code: HTTP-like status code reported by the server.
            code: Error code.
        """
        usr_msg = message or name or 'The server returned an error.'
        dev_msg = 'name: {} status: {} message: {} statusCode: {} code: {}'.format(
            name, status, message, status_code, code)
        super().__init__(usr_msg=usr_msg, dev_msg=dev_msg,
                         status_code=status_code if status_code is not None else -1)
        self.name = name
        self.status = status
        self.message = message
        self.code = code

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ApiServerError':
        """Build an ``ApiServerError`` from the ``error`` object of a response.

        Args:
            data: The decoded ``error`` object.

        Returns:
            The corresponding exception.
        """
        if not isinstance(data, dict):
            return cls(message=str(data))
        return cls(name=data.get('name'),
                   status=data.get('status'),
                   message=data.get('message'),
                   status_code=data.get('statusCode'),
                   code=data.get('code'))


class RequestCancelledError(ApiError):
    """The caller cancelled an in-flight request."""
    pass
