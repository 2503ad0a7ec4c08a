"""Trigger protocol.

Every participating table carries a BEFORE INSERT trigger that looks its own
name up in the table registry and writes the matching pointer in the same
transaction. A table missing from the registry cannot accept rows: the
trigger aborts the insert. A companion AFTER DELETE trigger removes the
pointer when its row goes, which lets the reference strengths take effect.

On PostgreSQL both triggers call shared plpgsql functions. SQLite has no
stored functions, so each SQLite trigger carries the same body inline.
"""

from __future__ import annotations

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection

from pointers.core.settings import Settings, settings
from pointers.db.dialects import dialect_name, literal
from pointers.errors import UNREGISTERED_MESSAGE
from pointers.utils.names import table_name

logger = logging.getLogger(__name__)


class PostgresTriggerSQL:
    """DDL for PostgreSQL."""

    def __init__(self, config: Settings) -> None:
        self.config = config

    def create_functions(self) -> list[str]:
        c = self.config
        message = UNREGISTERED_MESSAGE.format(table="' || TG_TABLE_NAME || '")
        return [
            f"""
            create or replace function {c.trigger_function}() returns trigger as $$
            declare registered_id uuid;
            begin
              select id into registered_id from "{c.table_table}"
                where "{c.table_table}"."table" = TG_TABLE_NAME;
              if registered_id is null then
                raise exception using message = '{message}';
              end if;
              insert into "{c.pointer_table}" (id, table_id) values (NEW.id, registered_id)
              on conflict do nothing;
              return NEW;
            end;
            $$ language plpgsql
            """,
            f"""
            create or replace function {c.delete_trigger_function}() returns trigger as $$
            begin
              delete from "{c.pointer_table}" where id = OLD.id;
              return OLD;
            end;
            $$ language plpgsql
            """,
        ]

    def drop_functions(self) -> list[str]:
        c = self.config
        return [
            f"drop function if exists {c.trigger_function}() cascade",
            f"drop function if exists {c.delete_trigger_function}() cascade",
        ]

    def create_triggers(self, table: str) -> list[str]:
        c = self.config
        return [
            f"""
            create trigger "{c.trigger_name(table)}"
            before insert on "{table}"
            for each row
            execute procedure {c.trigger_function}()
            """,
            f"""
            create trigger "{c.delete_trigger_name(table)}"
            after delete on "{table}"
            for each row
            execute procedure {c.delete_trigger_function}()
            """,
        ]

    def drop_triggers(self, table: str) -> list[str]:
        c = self.config
        return [
            f'drop trigger if exists "{c.trigger_name(table)}" on "{table}"',
            f'drop trigger if exists "{c.delete_trigger_name(table)}" on "{table}"',
        ]

    def list_triggers(self) -> str:
        return (
            "select t.tgname from pg_trigger t"
            " join pg_class c on c.oid = t.tgrelid"
            " where c.relname = :table and not t.tgisinternal"
            " order by t.tgname"
        )


class SQLiteTriggerSQL:
    """DDL for SQLite."""

    def __init__(self, config: Settings) -> None:
        self.config = config

    def create_functions(self) -> list[str]:
        return []

    def drop_functions(self) -> list[str]:
        return []

    def create_triggers(self, table: str) -> list[str]:
        c = self.config
        name = literal(table)
        message = literal(UNREGISTERED_MESSAGE.format(table=table))
        return [
            f"""
            create trigger "{c.trigger_name(table)}"
            before insert on "{table}"
            for each row
            begin
              select raise(abort, {message})
                where not exists (select 1 from "{c.table_table}" where "table" = {name});
              insert or ignore into "{c.pointer_table}" (id, table_id)
                select NEW.id, id from "{c.table_table}" where "table" = {name};
            end
            """,
            f"""
            create trigger "{c.delete_trigger_name(table)}"
            after delete on "{table}"
            for each row
            begin
              delete from "{c.pointer_table}" where id = OLD.id;
            end
            """,
        ]

    def drop_triggers(self, table: str) -> list[str]:
        c = self.config
        return [
            f'drop trigger if exists "{c.trigger_name(table)}"',
            f'drop trigger if exists "{c.delete_trigger_name(table)}"',
        ]

    def list_triggers(self) -> str:
        return (
            "select name from sqlite_master"
            " where type = 'trigger' and tbl_name = :table"
            " order by name"
        )


_DIALECTS = {
    "postgresql": PostgresTriggerSQL,
    "sqlite": SQLiteTriggerSQL,
}


def trigger_sql(conn: Connection, config: Settings | None = None):
    """Return the DDL builder for the dialect of `conn`.

    Raises:
        UnsupportedDialect: If the dialect has no trigger support.
    """
    return _DIALECTS[dialect_name(conn)](config or settings)


def _run(conn: Connection, statements: list[str]) -> None:
    for statement in statements:
        conn.execute(text(statement))


def create_pointer_trigger_function(conn: Connection, config: Settings | None = None) -> None:
    """Install the shared trigger functions, replacing any existing ones."""
    statements = trigger_sql(conn, config).create_functions()
    if not statements:
        logger.debug("No trigger functions needed on %s", conn.dialect.name)
        return
    _run(conn, statements)
    logger.info("Installed pointer trigger functions")


def drop_pointer_trigger_function(conn: Connection, config: Settings | None = None) -> None:
    """Drop the shared trigger functions, along with triggers still using them."""
    _run(conn, trigger_sql(conn, config).drop_functions())
    logger.info("Dropped pointer trigger functions")


def drop_pointer_trigger(conn: Connection, table, config: Settings | None = None) -> None:
    """Remove the pointer triggers from `table`, if present."""
    name = table_name(table)
    _run(conn, trigger_sql(conn, config).drop_triggers(name))
    logger.info("Dropped pointer triggers on %s", name)


def create_pointer_trigger(conn: Connection, table, config: Settings | None = None) -> None:
    """Install the pointer triggers on `table`.

    Existing pointer triggers are dropped first; there is no
    `create trigger if not exists` on PostgreSQL.
    """
    name = table_name(table)
    sql = trigger_sql(conn, config)
    _run(conn, sql.drop_triggers(name))
    _run(conn, sql.create_triggers(name))
    logger.info("Installed pointer triggers on %s", name)


def pointer_triggers(conn: Connection, table, config: Settings | None = None) -> list[str]:
    """Return the names of the pointer triggers installed on `table`."""
    config = config or settings
    name = table_name(table)
    rows = conn.execute(text(trigger_sql(conn, config).list_triggers()), {"table": name})
    ours = {config.trigger_name(name), config.delete_trigger_name(name)}
    return [trigger for (trigger,) in rows if trigger in ours]
