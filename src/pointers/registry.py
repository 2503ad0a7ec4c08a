"""Table registry.

Maps the name of every participating table to the stable id that pointers
use to say which table they belong to. A name is registered once; later
registrations of the same name keep the first id.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import delete, exists, select
from sqlalchemy.engine import Connection

from pointers import identifiers
from pointers.db.dialects import insert_ignoring_conflicts
from pointers.errors import UnknownTable
from pointers.models.pointer import Pointer
from pointers.models.table import Table
from pointers.utils.names import table_name

logger = logging.getLogger(__name__)

_registry = Table.__table__
_pointers = Pointer.__table__


def lookup(conn: Connection, table: Any) -> str | None:
    """Return the registry id of `table`, or None if it is not registered."""
    name = table_name(table)
    return conn.execute(
        select(_registry.c.id).where(_registry.c.table == name)
    ).scalar_one_or_none()


def resolve(conn: Connection, table: Any) -> str:
    """Return the registry id of `table`.

    Args:
        conn: Connection to the database holding the registry.
        table: Table name, SQLAlchemy table or declarative model.

    Raises:
        UnknownTable: If the table is not registered.
    """
    found = lookup(conn, table)
    if found is None:
        raise UnknownTable(table_name(table))
    return found


def register(conn: Connection, table_id: Any, table: Any) -> str:
    """Register `table` under `table_id` unless the name is already registered.

    Returns:
        The id the name is registered under, which is the existing one when
        the name was registered before.

    Raises:
        InvalidIdentifier: If `table_id` is malformed.
    """
    candidate = identifiers.cast(table_id)
    name = table_name(table)

    # Checked first: the registry's own insert trigger fires even for a
    # conflicting insert and would leave a pointer for the unused candidate.
    existing = lookup(conn, name)
    if existing is None:
        result = conn.execute(
            insert_ignoring_conflicts(conn, _registry, {"id": candidate, "table": name}, ["table"])
        )
        if result.rowcount == 0:
            # Lost a race with another registration of the same name.
            _discard_pointer(conn, candidate)
        existing = resolve(conn, name)

    if existing == candidate:
        logger.info("Registered table %s as %s", name, existing)
    else:
        logger.debug("Table %s already registered as %s; kept over %s", name, existing, candidate)
    return existing


def _discard_pointer(conn: Connection, candidate: str) -> None:
    """Delete the pointer left for `candidate` unless it is a registry id."""
    conn.execute(
        delete(_pointers).where(
            _pointers.c.id == candidate,
            ~exists().where(_registry.c.id == candidate),
        )
    )


def deregister(conn: Connection, table_id: Any) -> int:
    """Delete the registry row for `table_id`.

    The table's trigger should already be gone. Pointers tagged with this
    table are removed by the registry foreign key cascade.

    Returns:
        The number of registry rows deleted.
    """
    table_id = identifiers.cast(table_id)
    result = conn.execute(delete(_registry).where(_registry.c.id == table_id))
    logger.info("Deregistered table id %s (%d row(s))", table_id, result.rowcount)
    return result.rowcount


def registered_tables(conn: Connection) -> list[tuple[str, str]]:
    """Return `(name, id)` for every registered table, ordered by name."""
    rows = conn.execute(select(_registry.c.table, _registry.c.id).order_by(_registry.c.table))
    return [(row.table, row.id) for row in rows]
