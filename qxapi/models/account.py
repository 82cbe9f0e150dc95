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

"""Account information returned by the Quantum Experience API."""

from datetime import datetime
from types import SimpleNamespace
from typing import Dict, List, Optional, Any

from ..utils.converters import str_to_utc


class Credits(SimpleNamespace):
    """Credits of the account.

    Attributes:
        remaining: Credits left to spend.
        promotional: Promotional credits.
        max_user_type: Maximum credits for the account type.
        last_refill: Date of the last refill, in UTC.
    """

    def __init__(
            self,
            remaining: int = 0,
            promotional: int = 0,
            max_user_type: int = 0,
            last_refill: Optional[datetime] = None,
            **kwargs: Any
    ) -> None:
        self.remaining = remaining
        self.promotional = promotional
        self.max_user_type = max_user_type
        self.last_refill = last_refill

        super().__init__(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Credits':
        """Return the ``Credits`` of a user, as returned by the ``users`` endpoint.

        Args:
            data: The user information, or its ``credit`` entry.

        Returns:
            The account credits.
        """
        credit = data.get('credit') or data
        return cls(remaining=credit.get('remaining', 0),
                   promotional=credit.get('promotional', 0),
                   max_user_type=credit.get('maxUserType', 0),
                   last_refill=str_to_utc(credit.get('lastRefill')))


class Code(SimpleNamespace):
    """A QASM code stored by the API, with its executions.

    Attributes:
        id: Code ID.
        name: Name of the code.
        code_type: Type of the code, such as ``QASM2``.
        qasm: Source of the code.
        creation_date: Date the code was created, in UTC.
        executions: Executions of the code.
    """

    def __init__(
            self,
            id: Optional[str] = None,  # pylint: disable=redefined-builtin
            name: Optional[str] = None,
            code_type: Optional[str] = None,
            qasm: Optional[str] = None,
            creation_date: Optional[datetime] = None,
            executions: Optional[List[Dict[str, Any]]] = None,
            **kwargs: Any
    ) -> None:
        self.id = id  # pylint: disable=invalid-name
        self.name = name
        self.code_type = code_type
        self.qasm = qasm
        self.creation_date = creation_date
        self.executions = executions or []

        super().__init__(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Code':
        """Return a ``Code`` from its API representation."""
        return cls(id=data.get('id'),
                   name=data.get('name'),
                   code_type=data.get('codeType'),
                   qasm=data.get('qasm'),
                   creation_date=str_to_utc(data.get('creationDate')),
                   executions=data.get('executions'))


class LastCodes(SimpleNamespace):
    """Latest codes of the account.

    Attributes:
        total: Total number of codes of the account.
        count: Number of codes returned.
        codes: The codes.
    """

    def __init__(
            self,
            codes: List[Code],
            total: int = 0,
            count: int = 0,
            **kwargs: Any
    ) -> None:
        self.codes = codes
        self.total = total
        self.count = count

        super().__init__(**kwargs)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'LastCodes':
        """Return the ``LastCodes`` from the ``codes/latest`` response."""
        codes = [Code.from_dict(code) for code in data.get('codes') or []]
        return cls(codes=codes,
                   total=data.get('total', len(codes)),
                   count=data.get('count', len(codes)))
