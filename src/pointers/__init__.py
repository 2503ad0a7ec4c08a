"""Global polymorphic foreign keys for SQLAlchemy and Alembic.

A single pointer store references rows of any participating table. Database
triggers keep exactly one pointer per participating row, tagged with the
table it lives in.
"""

from pointers.errors import (
    InvalidIdentifier,
    PointersError,
    UnknownPointer,
    UnknownTable,
    UnregisteredTableInsert,
    UnsupportedDialect,
)
from pointers.references import (
    PointerStrength,
    pointer,
    strong_pointer,
    unbreakable_pointer,
    weak_pointer,
)

__version__ = "0.1.0"

__all__ = [
    "InvalidIdentifier",
    "PointerStrength",
    "PointersError",
    "UnknownPointer",
    "UnknownTable",
    "UnregisteredTableInsert",
    "UnsupportedDialect",
    "pointer",
    "strong_pointer",
    "unbreakable_pointer",
    "weak_pointer",
]
