"""Tests for the reference strengths and their cascade behaviour."""

import pytest
import sqlalchemy as sa
from sqlalchemy.exc import IntegrityError

from conftest import WIDGETS_ID, insert_widget, migrate
from pointers import store
from pointers.db.types import ULIDType
from pointers.models import Pointer
from pointers.references import (
    PointerStrength,
    pointer,
    strong_pointer,
    unbreakable_pointer,
    weak_pointer,
)


@pytest.mark.parametrize(
    ("factory", "on_delete"),
    [
        (strong_pointer, "CASCADE"),
        (weak_pointer, "SET NULL"),
        (unbreakable_pointer, "RESTRICT"),
    ],
)
def test_policies(factory, on_delete):
    fk = factory()

    assert fk.target_fullname == "pointers_pointer.id"
    assert fk.ondelete == on_delete
    assert fk.onupdate == "CASCADE"


def test_pointer_accepts_strength_names():
    assert pointer("weak").ondelete == PointerStrength.WEAK.on_delete
    assert pointer(PointerStrength.UNBREAKABLE).ondelete == "RESTRICT"


def test_pointer_rejects_unknown_strength():
    with pytest.raises(ValueError):
        pointer("brittle")


def test_pointer_targets_other_tables():
    assert strong_pointer("widgets").target_fullname == "widgets.id"
    assert weak_pointer(Pointer).target_fullname == "pointers_pointer.id"


def _referencing_table(engine, strength):
    with migrate(engine) as ops:
        ops.create_table(
            "attachments",
            sa.Column("id", sa.Integer(), primary_key=True),
            sa.Column("target_id", ULIDType(), pointer(strength), nullable=True),
        )
    return sa.table(
        "attachments",
        sa.column("id", sa.Integer()),
        sa.column("target_id", ULIDType()),
    )


def _attach(engine, widgets, attachments):
    with engine.begin() as conn:
        widget_id = insert_widget(conn, widgets)
        conn.execute(sa.insert(attachments).values(id=1, target_id=widget_id))
    return widget_id


def _delete_widget(engine, widgets, widget_id):
    with engine.begin() as conn:
        conn.execute(sa.delete(widgets).where(widgets.c.id == widget_id))


def test_strong_reference_is_deleted_with_its_target(pointers_engine, widgets):
    attachments = _referencing_table(pointers_engine, "strong")
    widget_id = _attach(pointers_engine, widgets, attachments)

    _delete_widget(pointers_engine, widgets, widget_id)

    with pointers_engine.connect() as conn:
        assert store.get(conn, widget_id) is None
        assert conn.execute(sa.select(sa.func.count()).select_from(attachments)).scalar() == 0


def test_weak_reference_is_nulled(pointers_engine, widgets):
    attachments = _referencing_table(pointers_engine, "weak")
    widget_id = _attach(pointers_engine, widgets, attachments)

    _delete_widget(pointers_engine, widgets, widget_id)

    with pointers_engine.connect() as conn:
        assert store.get(conn, widget_id) is None
        rows = conn.execute(sa.select(attachments.c.id, attachments.c.target_id)).all()
    assert [(row.id, row.target_id) for row in rows] == [(1, None)]


def test_unbreakable_reference_blocks_the_delete(pointers_engine, widgets):
    attachments = _referencing_table(pointers_engine, "unbreakable")
    widget_id = _attach(pointers_engine, widgets, attachments)

    with pytest.raises(IntegrityError):
        _delete_widget(pointers_engine, widgets, widget_id)

    with pointers_engine.connect() as conn:
        assert conn.execute(
            sa.select(widgets.c.id).where(widgets.c.id == widget_id)
        ).scalar_one() == widget_id
        assert store.get(conn, widget_id).table_id == WIDGETS_ID
        assert conn.execute(sa.select(attachments.c.target_id)).scalar_one() == widget_id


def test_unbreakable_reference_releases_once_removed(pointers_engine, widgets):
    attachments = _referencing_table(pointers_engine, "unbreakable")
    widget_id = _attach(pointers_engine, widgets, attachments)

    with pointers_engine.begin() as conn:
        conn.execute(sa.delete(attachments))
    _delete_widget(pointers_engine, widgets, widget_id)

    with pointers_engine.connect() as conn:
        assert store.get(conn, widget_id) is None
