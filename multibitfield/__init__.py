from .bit_range import BitRange
from .errors import (
    AmbiguousField,
    BitFieldError,
    FieldOverflow,
    UnknownColumn,
    UnknownField,
)
from .record import BitFieldColumn, Record
from .schema import ColumnSpec, Schema
from .store import Store, UpdateOp

__version__ = "0.1.0"


__all__ = [
    "AmbiguousField",
    "BitFieldColumn",
    "BitFieldError",
    "BitRange",
    "ColumnSpec",
    "FieldOverflow",
    "Record",
    "Schema",
    "Store",
    "UnknownColumn",
    "UnknownField",
    "UpdateOp",
]
