"""Tests for the table registry."""

import pytest
import sqlalchemy as sa

from pointers import identifiers, registry, store
from pointers.errors import InvalidIdentifier, UnknownTable
from pointers.models import TABLE_TABLE_ID, Table

FIRST_ID = "01HB5A0000000000000000000A"
SECOND_ID = "01HB5B0000000000000000000B"


def test_registry_table_registers_itself(pointers_engine):
    with pointers_engine.connect() as conn:
        assert registry.resolve(conn, "pointers_table") == TABLE_TABLE_ID
        assert registry.resolve(conn, Table) == TABLE_TABLE_ID


def test_register_keeps_the_first_id(pointers_engine):
    """Registering a name again never changes its id."""
    with pointers_engine.begin() as conn:
        assert registry.register(conn, FIRST_ID, "gizmos") == FIRST_ID
        assert registry.register(conn, SECOND_ID, "gizmos") == FIRST_ID

    with pointers_engine.connect() as conn:
        assert registry.resolve(conn, "gizmos") == FIRST_ID
        names = [name for name, _ in registry.registered_tables(conn)]
    assert names.count("gizmos") == 1


def test_registry_rows_get_pointers(pointers_engine):
    with pointers_engine.begin() as conn:
        registry.register(conn, FIRST_ID, "gizmos")
        registry.register(conn, SECOND_ID, "gizmos")

        found = store.get(conn, FIRST_ID)
        assert found.table_id == TABLE_TABLE_ID
        assert found.table == "pointers_table"
        # The rejected candidate leaves nothing behind.
        assert store.get(conn, SECOND_ID) is None


def test_register_rejects_malformed_ids(pointers_engine):
    with pointers_engine.begin() as conn:
        with pytest.raises(InvalidIdentifier):
            registry.register(conn, "gizmos-id", "gizmos")
        assert registry.lookup(conn, "gizmos") is None


def test_resolve_unknown_table(pointers_engine):
    with pointers_engine.connect() as conn:
        assert registry.lookup(conn, "nowhere") is None
        with pytest.raises(UnknownTable, match="nowhere"):
            registry.resolve(conn, "nowhere")


def test_resolve_accepts_table_objects(pointers_engine):
    with pointers_engine.begin() as conn:
        registry.register(conn, FIRST_ID, "gizmos")
        assert registry.resolve(conn, sa.table("gizmos")) == FIRST_ID


def test_deregister(pointers_engine):
    with pointers_engine.begin() as conn:
        registry.register(conn, FIRST_ID, "gizmos")

        assert registry.deregister(conn, FIRST_ID) == 1
        assert registry.deregister(conn, FIRST_ID) == 0
        assert registry.lookup(conn, "gizmos") is None
        assert store.get(conn, FIRST_ID) is None


def test_registered_tables_lists_every_table(pointers_engine):
    generated = identifiers.generate()
    with pointers_engine.begin() as conn:
        registry.register(conn, generated, "gizmos")
        assert registry.registered_tables(conn) == [
            ("gizmos", generated),
            ("pointers_table", TABLE_TABLE_ID),
        ]


def test_register_on_a_bare_registry(engine):
    """Registration needs nothing but the registry table."""
    with engine.begin() as conn:
        Table.__table__.create(conn)

        assert registry.register(conn, FIRST_ID, "gizmos") == FIRST_ID
        assert registry.register(conn, SECOND_ID, "gizmos") == FIRST_ID
        assert registry.resolve(conn, "gizmos") == FIRST_ID


def test_losing_a_registration_race_leaves_no_pointer(pointers_engine, monkeypatch):
    """A registration that loses to a concurrent one cleans up after its trigger."""
    with pointers_engine.begin() as conn:
        registry.register(conn, FIRST_ID, "gizmos")

    real_lookup = registry.lookup
    calls = []

    def stale_lookup(conn, table):
        # The first read misses the concurrent registration.
        calls.append(table)
        return None if len(calls) == 1 else real_lookup(conn, table)

    monkeypatch.setattr(registry, "lookup", stale_lookup)

    with pointers_engine.begin() as conn:
        assert registry.register(conn, SECOND_ID, "gizmos") == FIRST_ID
        assert store.get(conn, SECOND_ID) is None
        assert store.get(conn, FIRST_ID).table == "pointers_table"
