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

"""Backend information returned by the Quantum Experience API."""

from datetime import datetime
from types import SimpleNamespace
from typing import Dict, List, Optional, Union, Any

from ..apiconstants import ApiBackendStatus
from ..utils.converters import str_to_utc


class BackendInfo:
    """Metadata of a backend device or simulator.

    Attributes:
        name: Name of the backend, as used for resolution.
        id: Backend ID.
        serial_number: Serial number of the device.
        topology_id: Topology ID of the device.
        coupling_map: Either ``'all-to-all'`` or a list of qubit pairs.
        status: Online status reported by the API (``on`` or ``off``).
        description: Description of the backend.
        simulator: Whether the backend is a simulator.
        n_qubits: Number of qubits.
        version: Version of the backend.
        online_date: Date the backend went online, in UTC.
        url: URL of the backend documentation.
        chip_name: Name of the chip.
        basis_gates: Basis gates supported by the backend.
    """

    def __init__(
            self,
            name: str,
            id: Optional[str] = None,  # pylint: disable=redefined-builtin
            serial_number: Optional[str] = None,
            topology_id: Optional[str] = None,
            coupling_map: Union[str, List[List[int]], None] = None,
            status: Optional[str] = None,
            description: Optional[str] = None,
            simulator: bool = False,
            n_qubits: int = 0,
            version: Optional[Union[str, float]] = None,
            online_date: Optional[datetime] = None,
            url: Optional[str] = None,
            chip_name: Optional[str] = None,
            basis_gates: Optional[str] = None
    ) -> None:
        self.name = name
        self.id = id  # pylint: disable=invalid-name
        self.serial_number = serial_number
        self.topology_id = topology_id
        self.coupling_map = coupling_map
        self.status = status
        self.description = description
        self.simulator = simulator
        self.n_qubits = n_qubits
        self.version = version
        self.online_date = online_date
        self.url = url
        self.chip_name = chip_name
        self.basis_gates = basis_gates

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'BackendInfo':
        """Return a ``BackendInfo`` from its API representation.

        Args:
            data: A backend entry, as returned by the ``Backends`` endpoint.

        Returns:
            The backend information.
        """
        return cls(name=data.get('name', ''),
                   id=data.get('id'),
                   serial_number=data.get('serialNumber'),
                   topology_id=data.get('topologyId'),
                   coupling_map=data.get('couplingMap'),
                   status=data.get('status'),
                   description=data.get('description'),
                   simulator=bool(data.get('simulator', False)),
                   n_qubits=data.get('nQubits', 0),
                   version=data.get('version'),
                   online_date=str_to_utc(data.get('onlineDate')),
                   url=data.get('url'),
                   chip_name=data.get('chipName'),
                   basis_gates=data.get('basisGates'))

    @property
    def online(self) -> bool:
        """Return whether the API reported the backend as online."""
        return self.status == ApiBackendStatus.ON.value

    def __repr__(self) -> str:
        return "<{}(name={}, status={}, n_qubits={}, simulator={})>".format(
            self.__class__.__name__, self.name, self.status, self.n_qubits, self.simulator)

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, BackendInfo):
            return False
        return vars(self) == vars(other)


class Backends(Dict[str, BackendInfo]):
    """Mapping of backend name to its metadata."""

    def sims(self) -> 'Backends':
        """Return the simulators in the mapping."""
        return Backends({name: backend for name, backend in self.items()
                         if backend.simulator})


class BackendStatus(SimpleNamespace):
    """Queue status of a backend.

    Attributes:
        backend: Canonical name of the backend.
        available: Whether the backend accepts jobs.
        busy: Whether the backend is busy.
        pending_jobs: Number of jobs waiting in the queue.
    """

    def __init__(
            self,
            backend: str,
            available: bool = False,
            busy: bool = False,
            pending_jobs: int = 0,
            **kwargs: Any
    ) -> None:
        """BackendStatus constructor.

        Args:
            backend: Canonical name of the backend.
            available: Whether the backend accepts jobs.
            busy: Whether the backend is busy.
            pending_jobs: Number of jobs waiting in the queue.
            kwargs: Additional attributes that will be added as instance members.
        """
        self.backend = backend
        self.available = available
        self.busy = busy
        self.pending_jobs = pending_jobs

        super().__init__(**kwargs)


class Calibration(SimpleNamespace):
    """Gate and readout errors of a backend.

    Attributes:
        backend: Canonical name of the backend.
        last_update_date: Date of the last calibration, in UTC.
        qubits: Per qubit readout and gate errors.
        multi_qubit_gates: Errors of the gates acting on several qubits.
    """

    def __init__(
            self,
            backend: str,
            last_update_date: Optional[datetime] = None,
            qubits: Optional[List[Dict[str, Any]]] = None,
            multi_qubit_gates: Optional[List[Dict[str, Any]]] = None,
            **kwargs: Any
    ) -> None:
        self.backend = backend
        self.last_update_date = last_update_date
        self.qubits = qubits or []
        self.multi_qubit_gates = multi_qubit_gates or []

        super().__init__(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Calibration':
        """Return a ``Calibration`` from its API representation.

        Fields not modelled by the class are kept as attributes.
        """
        in_data = dict(data)
        backend = in_data.pop('backend', '')
        last_update_date = str_to_utc(in_data.pop('lastUpdateDate', None))
        qubits = in_data.pop('qubits', None)
        multi_qubit_gates = in_data.pop('multiQubitGates', None)
        return cls(backend=backend, last_update_date=last_update_date, qubits=qubits,
                   multi_qubit_gates=multi_qubit_gates, **in_data)


class Parameters(SimpleNamespace):
    """Physical parameters of a backend.

    Attributes:
        backend: Canonical name of the backend.
        last_update_date: Date of the last update, in UTC.
        fridge_parameters: Cooldown date and temperature of the fridge.
        qubits: Per qubit gate time, frequency, T1, T2 and buffer.
    """

    def __init__(
            self,
            backend: str,
            last_update_date: Optional[datetime] = None,
            fridge_parameters: Optional[Dict[str, Any]] = None,
            qubits: Optional[List[Dict[str, Any]]] = None,
            **kwargs: Any
    ) -> None:
        self.backend = backend
        self.last_update_date = last_update_date
        self.fridge_parameters = fridge_parameters or {}
        self.qubits = qubits or []

        super().__init__(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Parameters':
        """Return a ``Parameters`` from its API representation.

        Fields not modelled by the class are kept as attributes.
        """
        in_data = dict(data)
        backend = in_data.pop('backend', '')
        last_update_date = str_to_utc(in_data.pop('lastUpdateDate', None))
        fridge_parameters = in_data.pop('fridgeParameters', None)
        qubits = in_data.pop('qubits', None)
        return cls(backend=backend, last_update_date=last_update_date,
                   fridge_parameters=fridge_parameters, qubits=qubits, **in_data)
