"""Declarative mixins for models of pointer-aware tables."""

from __future__ import annotations

from sqlalchemy.orm import Mapped, declared_attr, mapped_column

from pointers import identifiers
from pointers.db.types import ULIDType
from pointers.references import strong_pointer


class Pointable:
    """Model of a participating table.

    The table itself must be created with `create_pointable_table` so that it
    is registered and carries the insert trigger.
    """

    id: Mapped[str] = mapped_column(ULIDType(), primary_key=True, default=identifiers.generate)


class PointerMixin:
    """Model of a mixin table, keyed by a strong pointer and without a trigger."""

    @declared_attr
    def id(cls) -> Mapped[str]:  # noqa: N805
        return mapped_column(ULIDType(), strong_pointer(), primary_key=True)
