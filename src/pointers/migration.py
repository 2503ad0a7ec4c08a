"""Helpers for writing pointer-aware Alembic migrations.

Inside a migration script the helpers act on `alembic.op`::

    from pointers.migration import create_pointable_table, strong_pointer

    def upgrade() -> None:
        create_pointable_table(
            "widgets",
            "01HB4R8B2YBQZ0F6J3M1WD6N1A",
            sa.Column("name", sa.Text(), nullable=False),
        )

Outside of one, pass `ops=operations_for(connection)`.
"""

from __future__ import annotations

import logging
from typing import Any, Literal

import sqlalchemy as sa
from alembic import op
from alembic.migration import MigrationContext
from alembic.operations import Operations
from sqlalchemy.engine import Connection

from pointers import identifiers, registry, store, triggers
from pointers.core.settings import settings
from pointers.db.types import ULIDType
from pointers.models.table import TABLE_TABLE_ID
from pointers.references import (
    PointerStrength,
    pointer,
    strong_pointer,
    unbreakable_pointer,
    weak_pointer,
)
from pointers.utils.names import table_name

logger = logging.getLogger(__name__)

Direction = Literal["up", "down"]

__all__ = [
    "PointerStrength",
    "add_pointer_pk",
    "add_pointer_ref_pk",
    "create_mixin_table",
    "create_pointable_table",
    "create_pointer_trigger",
    "create_pointer_trigger_function",
    "delete_table_record",
    "drop_mixin_table",
    "drop_pointable_table",
    "drop_pointer_trigger",
    "drop_pointer_trigger_function",
    "drop_table",
    "init_pointers",
    "insert_table_record",
    "operations_for",
    "pointer",
    "strong_pointer",
    "unbreakable_pointer",
    "weak_pointer",
]


def operations_for(connection: Connection) -> Operations:
    """Return Alembic operations bound to `connection`."""
    return Operations(MigrationContext.configure(connection))


def _ops(ops: Operations | None) -> Operations:
    return op if ops is None else ops


def _bind(ops: Operations | None) -> Connection:
    return _ops(ops).get_bind()


def add_pointer_pk() -> sa.Column:
    """Return a ULID primary key column.

    Not needed with `create_pointable_table`, which adds it.
    """
    return sa.Column("id", ULIDType(), primary_key=True)


def add_pointer_ref_pk() -> sa.Column:
    """Return a primary key column that is also a strong pointer."""
    return sa.Column("id", ULIDType(), strong_pointer(), primary_key=True)


def insert_table_record(table_id: Any, name: Any, ops: Operations | None = None) -> str:
    """Register a table. Not needed with `create_pointable_table`."""
    return registry.register(_bind(ops), table_id, name)


def delete_table_record(table_id: Any, ops: Operations | None = None) -> int:
    """Deregister a table. Not needed with `drop_pointable_table`."""
    return registry.deregister(_bind(ops), table_id)


def create_pointer_trigger_function(ops: Operations | None = None) -> None:
    """Install the shared trigger functions."""
    triggers.create_pointer_trigger_function(_bind(ops))


def drop_pointer_trigger_function(ops: Operations | None = None) -> None:
    """Drop the shared trigger functions and every trigger using them."""
    triggers.drop_pointer_trigger_function(_bind(ops))


def create_pointer_trigger(table: Any, ops: Operations | None = None) -> None:
    """Install the pointer triggers on `table`, replacing existing ones."""
    triggers.create_pointer_trigger(_bind(ops), table)


def drop_pointer_trigger(table: Any, ops: Operations | None = None) -> None:
    """Remove the pointer triggers from `table`, if present."""
    triggers.drop_pointer_trigger(_bind(ops), table)


def drop_table(name: Any, ops: Operations | None = None) -> None:
    """Drop a table if it exists, cascading where the database allows it."""
    ops = _ops(ops)
    name = table_name(name)
    if ops.get_bind().dialect.name == "postgresql":
        ops.execute(f'drop table if exists "{name}" cascade')
    else:
        ops.drop_table(name, if_exists=True)
    logger.info("Dropped table %s", name)


def create_pointable_table(
    name: Any,
    table_id: Any,
    *columns: sa.Column,
    ops: Operations | None = None,
    **table_kw: Any,
) -> None:
    """Create a participating table, register it and install its triggers.

    Args:
        name: Table name.
        table_id: Registry id for the table; validated before anything runs.
        *columns: Columns besides the `id` primary key, which is added.
        ops: Alembic operations; defaults to `alembic.op`.
        **table_kw: Passed on to `create_table`.

    Raises:
        InvalidIdentifier: If `table_id` is malformed.
    """
    table_id = identifiers.cast(table_id)
    name = table_name(name)
    ops = _ops(ops)

    insert_table_record(table_id, name, ops=ops)
    ops.create_table(name, add_pointer_pk(), *columns, if_not_exists=True, **table_kw)
    create_pointer_trigger(name, ops=ops)
    logger.info("Created pointable table %s", name)


def drop_pointable_table(name: Any, table_id: Any, ops: Operations | None = None) -> None:
    """Drop a participating table along with its triggers and registry row."""
    ops = _ops(ops)
    drop_pointer_trigger(name, ops=ops)
    delete_table_record(table_id, ops=ops)
    drop_table(name, ops=ops)


def create_mixin_table(
    name: Any,
    *columns: sa.Column,
    ops: Operations | None = None,
    **table_kw: Any,
) -> None:
    """Create a mixin table: keyed by a strong pointer, with no trigger."""
    name = table_name(name)
    _ops(ops).create_table(name, add_pointer_ref_pk(), *columns, if_not_exists=True, **table_kw)
    logger.info("Created mixin table %s", name)


def drop_mixin_table(name: Any, ops: Operations | None = None) -> None:
    """Drop a mixin table. Just a plain drop."""
    drop_table(name, ops=ops)


def init_pointers(direction: Direction = "up", ops: Operations | None = None) -> None:
    """Install (`up`) or remove (`down`) the pointers abstraction.

    Both directions may be re-run safely after a partial failure.

    Raises:
        ValueError: If `direction` is neither `up` nor `down`.
    """
    if direction == "up":
        _init_up(_ops(ops))
    elif direction == "down":
        _init_down(_ops(ops))
    else:
        raise ValueError(f"Unknown migration direction: {direction!r}")


def _init_up(ops: Operations) -> None:
    tables = settings.table_table
    pointers = settings.pointer_table

    ops.create_table(
        tables,
        add_pointer_pk(),
        sa.Column("table", sa.Text(), nullable=False),
        if_not_exists=True,
    )
    ops.create_table(
        pointers,
        add_pointer_pk(),
        sa.Column(
            "table_id",
            ULIDType(),
            sa.ForeignKey(f"{tables}.id", ondelete="CASCADE", onupdate="CASCADE"),
            nullable=False,
        ),
        if_not_exists=True,
    )
    ops.create_index(f"{tables}_table_index", tables, ["table"], unique=True, if_not_exists=True)
    ops.create_index(f"{pointers}_table_id_index", pointers, ["table_id"], if_not_exists=True)

    insert_table_record(TABLE_TABLE_ID, tables, ops=ops)
    create_pointer_trigger_function(ops=ops)
    create_pointer_trigger(tables, ops=ops)
    # The registry row for the registry itself predates its trigger.
    store.create(ops.get_bind(), TABLE_TABLE_ID, TABLE_TABLE_ID)
    logger.info("Initialised pointers abstraction")


def _init_down(ops: Operations) -> None:
    tables = settings.table_table
    pointers = settings.pointer_table
    bind = ops.get_bind()

    # Triggers can only be dropped from a table that is still there.
    if sa.inspect(bind).has_table(tables):
        drop_pointer_trigger(tables, ops=ops)
    drop_pointer_trigger_function(ops=ops)
    ops.drop_index(f"{pointers}_table_id_index", table_name=pointers, if_exists=True)
    ops.drop_index(f"{tables}_table_index", table_name=tables, if_exists=True)
    drop_table(pointers, ops=ops)
    drop_table(tables, ops=ops)
    logger.info("Removed pointers abstraction")
