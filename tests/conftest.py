from __future__ import annotations

from collections.abc import Generator, Iterator
from contextlib import contextmanager

import pytest
import sqlalchemy as sa
from alembic.operations import Operations
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.pool import StaticPool

from pointers import identifiers
from pointers.db.session import make_engine
from pointers.db.types import ULIDType
from pointers.migration import create_pointable_table, init_pointers, operations_for

TEST_DB_URL = "sqlite://"

WIDGETS_ID = "01HB4R8B2YBQZ0F6J3M1WD6N1A"
GADGETS_ID = "01HB4R9Q7M3X5T2V8K6J4N0P9C"


@pytest.fixture()
def engine() -> Generator[Engine, None, None]:
    engine = make_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    try:
        yield engine
    finally:
        engine.dispose()


@contextmanager
def migrate(engine: Engine) -> Iterator[Operations]:
    """Run Alembic operations in one committed transaction."""
    with engine.begin() as connection:
        yield operations_for(connection)


@pytest.fixture()
def pointers_engine(engine: Engine) -> Engine:
    """Engine with the pointers abstraction installed."""
    with migrate(engine) as ops:
        init_pointers("up", ops=ops)
    return engine


@pytest.fixture()
def widgets(pointers_engine: Engine) -> sa.TableClause:
    """A registered participating table called `widgets`."""
    with migrate(pointers_engine) as ops:
        create_pointable_table(
            "widgets",
            WIDGETS_ID,
            sa.Column("name", sa.Text(), nullable=False),
            ops=ops,
        )
    return sa.table("widgets", sa.column("id", ULIDType()), sa.column("name", sa.Text()))


def insert_widget(conn: Connection, widgets: sa.TableClause, name: str = "sprocket") -> str:
    widget_id = identifiers.generate()
    conn.execute(sa.insert(widgets).values(id=widget_id, name=name))
    return widget_id
