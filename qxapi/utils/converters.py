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

"""Utilities related to conversion."""

from typing import Optional
from datetime import datetime, timezone

import dateutil.parser


def str_to_utc(utc_dt: Optional[str]) -> Optional[datetime]:
    """Convert a UTC string to a ``datetime`` object with UTC timezone.

    Args:
        utc_dt: Input UTC string, usually in ISO format.

    Returns:
        A ``datetime`` with the UTC timezone, or ``None`` if the input is
        empty or cannot be parsed.
    """
    if not utc_dt or not isinstance(utc_dt, str):
        return None
    try:
        parsed_dt = dateutil.parser.isoparse(utc_dt)
    except ValueError:
        try:
            parsed_dt = dateutil.parser.parse(utc_dt)
        except (ValueError, OverflowError):
            return None
    if parsed_dt.tzinfo is None:
        return parsed_dt.replace(tzinfo=timezone.utc)
    return parsed_dt.astimezone(timezone.utc)
