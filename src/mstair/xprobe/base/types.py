# File: src/mstair/xprobe/base/types.py
"""
Runtime type tuples shared by the value parser.
"""

from __future__ import annotations

import datetime
from decimal import Decimal
from fractions import Fraction
from pathlib import PurePath
from typing import Final


__all__ = [
    "PRIMITIVE_TYPES",
    "SCALAR_TYPES",
]


PRIMITIVE_TYPES: Final[tuple[type, ...]] = (
    int,
    float,
    complex,
    bool,
    Decimal,
    Fraction,
    str,
    type(None),
)

SCALAR_TYPES: Final[tuple[type, ...]] = (
    *PRIMITIVE_TYPES,
    bytes,
    bytearray,
    datetime.date,
    datetime.time,
    datetime.timedelta,
    PurePath,
)
"""Values rendered inline as a single leaf node."""


# End of file: src/mstair/xprobe/base/types.py
