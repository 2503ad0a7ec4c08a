"""Pointer store operations.

Pointers are written by the insert trigger inside the same transaction as
the row they represent. The helpers here exist for maintenance work and for
following a pointer back to its row; nothing deletes pointers directly.
"""

from __future__ import annotations

import logging
from typing import Any

from sqlalchemy import Column, MetaData, Row, select, update
from sqlalchemy import Table as SATable
from sqlalchemy.engine import Connection, RowMapping

from pointers import identifiers
from pointers.db.dialects import insert_ignoring_conflicts
from pointers.db.types import ULIDType
from pointers.errors import UnknownPointer
from pointers.models.pointer import Pointer
from pointers.models.table import Table

logger = logging.getLogger(__name__)

_pointers = Pointer.__table__
_registry = Table.__table__


def create(conn: Connection, pointer_id: Any, table_id: Any) -> None:
    """Insert a pointer, doing nothing if one with this id already exists."""
    conn.execute(
        insert_ignoring_conflicts(
            conn,
            _pointers,
            {"id": identifiers.cast(pointer_id), "table_id": identifiers.cast(table_id)},
            ["id"],
        )
    )


def get(conn: Connection, pointer_id: Any) -> Row | None:
    """Return the `(id, table_id, table)` row of a pointer, or None."""
    stmt = (
        select(_pointers.c.id, _pointers.c.table_id, _registry.c.table)
        .join(_registry, _registry.c.id == _pointers.c.table_id)
        .where(_pointers.c.id == identifiers.cast(pointer_id))
    )
    return conn.execute(stmt).one_or_none()


def repoint(conn: Connection, pointer_id: Any, table_id: Any) -> None:
    """Reassign a pointer to another registered table.

    Raises:
        UnknownPointer: If no pointer has id `pointer_id`.
    """
    pointer_id = identifiers.cast(pointer_id)
    table_id = identifiers.cast(table_id)
    result = conn.execute(
        update(_pointers).where(_pointers.c.id == pointer_id).values(table_id=table_id)
    )
    if result.rowcount == 0:
        raise UnknownPointer(pointer_id)
    logger.info("Repointed %s to table id %s", pointer_id, table_id)


def follow(conn: Connection, pointer_id: Any) -> tuple[str, RowMapping | None]:
    """Dereference a pointer to the row it represents.

    Returns:
        The home table name and the row there, which is None if the row has
        gone while the pointer stayed.

    Raises:
        UnknownPointer: If no pointer has id `pointer_id`.
    """
    found = get(conn, pointer_id)
    if found is None:
        raise UnknownPointer(identifiers.cast(pointer_id))

    home = SATable(
        found.table,
        MetaData(),
        Column("id", ULIDType(), primary_key=True),
        autoload_with=conn,
    )
    row = conn.execute(select(home).where(home.c.id == found.id)).mappings().one_or_none()
    return found.table, row
