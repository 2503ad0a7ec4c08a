"""SQLAlchemy models for the pointers abstraction."""

from .mixins import Pointable, PointerMixin
from .pointer import Pointer
from .table import TABLE_TABLE_ID, Table

__all__ = [
    "Pointable", "PointerMixin",
    "Pointer",
    "TABLE_TABLE_ID", "Table",
]
