"""Column types shared by pointer-aware tables."""

from __future__ import annotations

import uuid
from typing import Any

from sqlalchemy import Uuid
from sqlalchemy.engine import Dialect
from sqlalchemy.types import TypeDecorator

from pointers import identifiers


class ULIDType(TypeDecorator):
    """ULID stored as a native UUID where the database has one.

    Python code sees canonical ULID text; PostgreSQL stores `uuid` and other
    databases store the 32-character hex form.
    """

    impl = Uuid
    cache_ok = True

    def __init__(self) -> None:
        super().__init__(as_uuid=True)

    def process_bind_param(self, value: Any, dialect: Dialect) -> uuid.UUID | None:
        if value is None:
            return None
        return identifiers.dump(value)

    def process_result_value(self, value: Any, dialect: Dialect) -> str | None:
        if value is None:
            return None
        return identifiers.load(value)
