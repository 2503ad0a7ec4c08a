"""Dialect-specific statement builders."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Table
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.engine import Connection

from pointers.errors import UnsupportedDialect

SUPPORTED_DIALECTS = ("postgresql", "sqlite")

_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def dialect_name(conn: Connection) -> str:
    """Return the dialect name of `conn`, failing for unsupported engines."""
    name = conn.dialect.name
    if name not in SUPPORTED_DIALECTS:
        raise UnsupportedDialect(name)
    return name


def insert_ignoring_conflicts(
    conn: Connection,
    target: Table,
    values: dict[str, Any],
    index_elements: list[str],
):
    """Build an INSERT of one row that does nothing on a unique conflict.

    `values` maps column names to values.
    """
    insert = _INSERTS[dialect_name(conn)]
    return insert(target).values(values).on_conflict_do_nothing(index_elements=index_elements)


def literal(value: str) -> str:
    """Render `value` as a SQL string literal."""
    return "'" + value.replace("'", "''") + "'"
