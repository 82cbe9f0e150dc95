# This code is part of Qiskit.
#
# (C) Copyright IBM 2019.
#
# This code is licensed under the Apache License, Version 2.0. You may
# obtain a copy of this license in the LICENSE.txt file in the root directory
# of this source tree or at http://www.apache.org/licenses/LICENSE-2.0.
#
# Any modifications or derivative works of this code must retain this
# copyright notice, and modified files need to carry a notice indicating
# that they have been altered from the originals.

"""Backend REST adapter for the Quantum Experience API."""

import threading
from typing import Dict, Optional, Any

from .base import RestAdapterBase, decode_json
from ..session import RetrySession


class BackendAdapter(RestAdapterBase):
    """Rest adapter for backend related endpoints."""

    URL_MAP = {
        'status': '/queue/status',
        'calibration': '/calibration',
        'parameters': '/parameters'
    }

    def __init__(
            self,
            session: RetrySession,
            backend_type: str,
            hub: Optional[str] = None
    ) -> None:
        """BackendAdapter constructor.

        Args:
            session: session to be used in the adaptor.
            backend_type: canonical name of the backend.
            hub: hub whose device endpoints are used, if any.
        """
        self.backend_type = backend_type
        if hub:
            prefix_url = '/Networks/{}/devices/{}'.format(hub, backend_type)
        else:
            prefix_url = '/Backends/{}'.format(backend_type)
        super().__init__(session, prefix_url)

    def status(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return backend status.

        The status endpoint is public, the access token is not sent.
        """
        url = self.get_url('status')
        response = decode_json(self.session.get(url, with_token=False, cancel=cancel), dict)

        # Adjust fields to the client shape.
        ret = {
            'backend': self.backend_type,
            'available': bool(response.get('state', False)),
            'busy': bool(response.get('busy', False))
        }

        # 'pending_jobs' should be >= 0.
        if 'lengthQueue' in response:
            ret['pending_jobs'] = max(response['lengthQueue'], 0)
        else:
            ret['pending_jobs'] = 0

        return ret

    def calibration(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return backend calibration."""
        url = self.get_url('calibration')
        response = decode_json(self.session.get(url, cancel=cancel), dict)

        # Adjust name of the backend.
        response['backend'] = self.backend_type
        return response

    def parameters(self, cancel: Optional[threading.Event] = None) -> Dict[str, Any]:
        """Return backend parameters."""
        url = self.get_url('parameters')
        response = decode_json(self.session.get(url, cancel=cancel), dict)

        response['backend'] = self.backend_type
        return response
