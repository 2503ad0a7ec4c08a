"""Tests for pointers settings."""

import pytest
from pydantic import ValidationError

from pointers.core.settings import Settings, settings


def test_defaults():
    assert settings.table_table == "pointers_table"
    assert settings.pointer_table == "pointers_pointer"
    assert settings.trigger_function == "insert_pointer"
    assert settings.trigger_prefix == "insert_pointer_"


def test_trigger_names():
    assert settings.trigger_name("widgets") == "insert_pointer_widgets"
    assert settings.delete_trigger_name("widgets") == "delete_pointer_widgets"


def test_names_read_from_environment(monkeypatch):
    monkeypatch.setenv("POINTERS_TRIGGER_FUNCTION", "track_row")
    assert Settings().trigger_function == "track_row"


def test_names_must_be_plain_identifiers():
    with pytest.raises(ValidationError):
        Settings(POINTERS_TRIGGER_FUNCTION="insert_pointer(); drop table users")
