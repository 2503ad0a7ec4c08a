"""Table name normalisation."""

from __future__ import annotations

from typing import Any

from sqlalchemy.sql.expression import TableClause


def table_name(table: Any) -> str:
    """Return the physical table name for a name, table or declarative model.

    Raises:
        TypeError: If `table` does not name a table.
    """
    if isinstance(table, str):
        return table
    if isinstance(table, TableClause):
        return table.name
    mapped = getattr(table, "__table__", None)
    if isinstance(mapped, TableClause):
        return mapped.name
    tablename = getattr(table, "__tablename__", None)
    if isinstance(tablename, str):
        return tablename
    raise TypeError(f"Cannot determine a table name from {table!r}")
