"""Exceptions raised by the pointers abstraction."""

from __future__ import annotations

import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import DBAPIError

# Message raised by the insert trigger; shared by every supported dialect.
UNREGISTERED_MESSAGE = "Table {table} does not participate in the pointers abstraction"
_UNREGISTERED_PATTERN = re.compile(
    r"Table (?P<table>\S+) does not participate in the pointers abstraction"
)


class PointersError(RuntimeError):
    """Base exception for all pointers failures."""


class InvalidIdentifier(PointersError, ValueError):
    """Raised when a value is not a well-formed identifier."""

    def __init__(self, value: Any) -> None:
        super().__init__(f"Invalid identifier: {value!r}")
        self.value = value


class UnknownTable(PointersError, LookupError):
    """Raised when a table has no entry in the table registry."""

    def __init__(self, table: str) -> None:
        super().__init__(f"Table {table} is not registered with the pointers abstraction")
        self.table = table


class UnknownPointer(PointersError, LookupError):
    """Raised when no pointer exists for an id."""

    def __init__(self, pointer_id: str) -> None:
        super().__init__(f"No pointer with id {pointer_id}")
        self.pointer_id = pointer_id


class UnregisteredTableInsert(PointersError):
    """Raised when a row was inserted into a table missing from the registry.

    The database aborts the statement from inside the insert trigger; this
    exception only gives the failure a name on the Python side.
    """

    def __init__(self, table: str | None) -> None:
        super().__init__(UNREGISTERED_MESSAGE.format(table=table or "<unknown>"))
        self.table = table


class UnsupportedDialect(PointersError):
    """Raised when the storage engine has no trigger support in this package."""

    def __init__(self, dialect: str) -> None:
        super().__init__(f"Database dialect {dialect!r} is not supported by pointers")
        self.dialect = dialect


def unregistered_table(exc: BaseException) -> str | None:
    """Return the table named by an unregistered-insert failure, if `exc` is one."""
    match = _UNREGISTERED_PATTERN.search(str(exc))
    return match.group("table") if match else None


@contextmanager
def translate_trigger_errors() -> Iterator[None]:
    """Re-raise trigger aborts as `UnregisteredTableInsert`.

    Other database errors propagate unchanged.
    """
    try:
        yield
    except DBAPIError as exc:
        table = unregistered_table(exc.orig if exc.orig is not None else exc)
        if table is None:
            raise
        raise UnregisteredTableInsert(table) from exc
