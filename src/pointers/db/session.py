"""Database session configuration."""

from __future__ import annotations

from collections.abc import Generator
from typing import Any

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, ExceptionContext
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker

from pointers.core.settings import settings
from pointers.errors import UnregisteredTableInsert, unregistered_table


class Base(DeclarativeBase):
    """Declarative base shared by all ORM models."""


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    try:
        cursor.execute("PRAGMA foreign_keys=ON")
    finally:
        cursor.close()


def _translate_unregistered_insert(context: ExceptionContext) -> None:
    table = unregistered_table(context.original_exception)
    if table is not None:
        raise UnregisteredTableInsert(table) from context.sqlalchemy_exception


def make_engine(url: str, **kwargs: Any) -> Engine:
    """Create an engine, enforcing foreign keys on SQLite connections.

    Pointer cascades are plain foreign-key actions, which SQLite ignores
    unless the pragma is set on every connection. Inserts refused by the
    pointer trigger raise `UnregisteredTableInsert`.
    """
    kwargs.setdefault("echo", settings.sql_debug)
    engine = create_engine(url, **kwargs)
    event.listen(engine, "handle_error", _translate_unregistered_insert)
    if engine.dialect.name == "sqlite":
        event.listen(engine, "connect", _enable_sqlite_foreign_keys)
    return engine


# Ensure model modules are imported so that metadata is populated when create_all runs.
import pointers.models  # noqa: E402,F401

engine = make_engine(settings.database_url, pool_pre_ping=True)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Yield a database session, closing it afterwards."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
