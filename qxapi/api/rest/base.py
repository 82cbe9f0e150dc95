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

"""Base REST adapter."""

from typing import Any, Optional

from requests import Response

from ..session import RetrySession
from ...exceptions import ApiError, ApiServerError


class RestAdapterBase:
    """Base class for REST adapters."""

    URL_MAP = {}  # type: ignore[var-annotated]
    """Mapping between the internal name of an endpoint and the actual URL."""

    def __init__(self, session: RetrySession, prefix_url: str = '') -> None:
        """RestAdapterBase constructor.

        Args:
            session: Session to be used in the adapter.
            prefix_url: String to be prepend to all URLs.
        """
        self.session = session
        self.prefix_url = prefix_url

    def get_url(self, identifier: str, **kwargs: Any) -> str:
        """Return the resolved URL for the specified identifier.

        Args:
            identifier: Internal identifier of the endpoint.
            **kwargs: Values for the placeholders in the endpoint URL.

        Returns:
            The resolved URL of the endpoint (relative to the session base URL).
        """
        return '{}{}'.format(self.prefix_url, self.URL_MAP[identifier].format(**kwargs))


def decode_json(response: Response, expected_type: Optional[type] = None) -> Any:
    """Return the decoded JSON body of a response.

    Args:
        response: Response with a JSON body.
        expected_type: Type the decoded body must have, if any.

    Returns:
        The decoded body.

    Raises:
        ApiServerError: If the body carries an ``error`` object.
        ApiError: If the body is not valid JSON, or not of `expected_type`.
    """
    try:
        data = response.json()
    except ValueError as ex:
        raise ApiError(usr_msg='Unable to decode the server response.',
                       dev_msg=response.text,
                       status_code=response.status_code) from ex

    if isinstance(data, dict) and data.get('error'):
        raise ApiServerError.from_dict(data['error'])
    if expected_type is not None and not isinstance(data, expected_type):
        raise ApiError(usr_msg='Unexpected response from the server.',
                       dev_msg=response.text,
                       status_code=response.status_code)
    return data
