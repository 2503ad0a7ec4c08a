"""SQLAlchemy model for the pointer store."""

from __future__ import annotations

from sqlalchemy import ForeignKey, Index
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pointers.core.settings import settings
from pointers.db.session import Base
from pointers.db.types import ULIDType
from pointers.models.table import Table


class Pointer(Base):
    """A global foreign key: one row for each row of any participating table.

    Rows are written by the insert trigger only. The id equals the id of the
    row in its home table and `table_id` names that table in the registry.
    """

    __tablename__ = settings.pointer_table
    __table_args__ = (
        Index(f"{settings.pointer_table}_table_id_index", "table_id"),
    )

    id: Mapped[str] = mapped_column(ULIDType(), primary_key=True)
    table_id: Mapped[str] = mapped_column(
        ULIDType(),
        ForeignKey(
            f"{settings.table_table}.id",
            ondelete="CASCADE",
            onupdate="CASCADE",
        ),
        nullable=False,
    )

    table: Mapped[Table] = relationship(Table, back_populates="pointers")

    def __repr__(self) -> str:
        return f"Pointer(id={self.id!r}, table_id={self.table_id!r})"
