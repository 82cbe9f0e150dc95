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

"""Root REST adapter."""

import logging
import threading
from typing import Dict, List, Any, Union, Optional

from .base import RestAdapterBase, decode_json
from .backend import BackendAdapter
from ...exceptions import ApiServerError, CredentialsError

logger = logging.getLogger(__name__)


class Api(RestAdapterBase):
    """Rest adapter for general endpoints."""

    URL_MAP = {
        'version': '/version',
        'user': '/users/{user_id}',
        'last_codes': '/users/{user_id}/codes/latest',
        'code': '/Codes/{code_id}',
        'backends': '/Backends',
        'project_backends': '/Network/{hub}/Groups/{group}/Projects/{project}/backends',
        'execute': '/codes/execute',
        'jobs': '/Jobs',
        'project_jobs': '/Network/{hub}/Groups/{group}/Projects/{project}/jobs'
    }

# Function-specific rest adapters.

    def backend(self, backend_type: str, hub: Optional[str] = None) -> BackendAdapter:
        """Return an adapter for the backend.

        Args:
            backend_type: canonical name of the backend.
            hub: hub whose device endpoints are used, if any.

        Returns:
            The backend adapter.
        """
        return BackendAdapter(self.session, backend_type, hub)

# Client functions.

    def version(self, cancel: Optional[threading.Event] = None) -> Dict[str, Union[str, bool]]:
        """Return the version information.

        Returns:
            A dictionary with information about the API version,
            with the following keys:

                * ``new_api`` (bool): Whether the new API is being used

            And the following optional keys:

                * ``api`` (str): The version string returned by older APIs
                * ``api-*`` (str): The versions of each individual API component
        """
        url = self.get_url('version')
        response = self.session.get(url, cancel=cancel)

        try:
            version_info = response.json()
        except ValueError:
            return {
                'new_api': False,
                'api': response.text
            }
        if not isinstance(version_info, dict):
            return {
                'new_api': False,
                'api': str(version_info)
            }
        if version_info.get('error'):
            raise ApiServerError.from_dict(version_info['error'])

        version_info['new_api'] = True
        return version_info

    def user(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return the user information, including the credits.

        Returns:
            JSON response of user information.
        """
        url = self.get_url('user', user_id=self._user_id())
        return decode_json(self.session.get(url, cancel=cancel), dict)

    def last_codes(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return the latest codes of the user, with their executions.

        Returns:
            JSON response.
        """
        url = self.get_url('last_codes', user_id=self._user_id())
        params = {'includeExecutions': 'true'}
        return decode_json(self.session.get(url, params=params, cancel=cancel), dict)

    def code(self, code_id: str, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return a code.

        Args:
            code_id: ID of the code.

        Returns:
            JSON response.
        """
        url = self.get_url('code', code_id=code_id)
        return decode_json(self.session.get(url, cancel=cancel), dict)

    def backends(
            self,
            hub: Optional[str] = None,
            group: Optional[str] = None,
            project: Optional[str] = None,
            cancel: Optional[threading.Event] = None
    ) -> List[Dict[str, Any]]:
        """Return the list of backends.

        Args:
            hub: hub of the project whose backends are listed.
            group: group of the project whose backends are listed.
            project: project whose backends are listed.
            cancel: event that aborts the request once set.

        Returns:
            JSON response.
        """
        if hub and group and project:
            url = self.get_url('project_backends', hub=hub, group=group, project=project)
        else:
            url = self.get_url('backends')
        return decode_json(self.session.get(url, cancel=cancel), list)

    def execute_code(
            self,
            payload: Dict[str, Any],
            params: Dict[str, Any],
            cancel: Optional[threading.Event] = None
    ) -> Dict[str, Any]:
        """Execute a QASM experiment.

        Args:
            payload: body of the request: name, qasm and code type.
            params: query parameters: shots, seed and device run type.
            cancel: event that aborts the request once set.

        Returns:
            JSON response.

        Raises:
            ApiServerError: If the server reported an error in the response.
        """
        url = self.get_url('execute')
        return decode_json(self.session.post(url, json=payload, params=params, cancel=cancel),
                           dict)

    def submit_job(
            self,
            payload: Dict[str, Any],
            hub: Optional[str] = None,
            group: Optional[str] = None,
            project: Optional[str] = None,
            cancel: Optional[threading.Event] = None
    ) -> Dict[str, Any]:
        """Submit a job.

        Args:
            payload: body of the request.
            hub: hub of the project to submit to.
            group: group of the project to submit to.
            project: project to submit to.
            cancel: event that aborts the request once set.

        Returns:
            JSON response.

        Raises:
            ApiServerError: If the server reported an error in the response.
        """
        if hub and group and project:
            url = self.get_url('project_jobs', hub=hub, group=group, project=project)
        else:
            url = self.get_url('jobs')
        return decode_json(self.session.post(url, json=payload, cancel=cancel), dict)

    def _user_id(self) -> str:
        """Return the user ID of the session."""
        if not self.session.user_id:
            raise CredentialsError('The session has no user ID. Please provide one '
                                   'together with the access token.')
        return self.session.user_id
