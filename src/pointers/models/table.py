"""SQLAlchemy model for the table registry."""

from __future__ import annotations

from typing import TYPE_CHECKING

from sqlalchemy import Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from pointers.core.settings import settings
from pointers.db.session import Base
from pointers.db.types import ULIDType

if TYPE_CHECKING:
    from pointers.models.pointer import Pointer

# Registry id of the registry table itself; fixed so it is the same everywhere.
TABLE_TABLE_ID = "601NTERS0TAB1ES0ARE0P0NTAB"


class Table(Base):
    """A table participating in the pointers abstraction.

    The id is chosen once, when the table is first registered, and never
    changes while the table participates.
    """

    __tablename__ = settings.table_table
    __table_args__ = (
        Index(f"{settings.table_table}_table_index", "table", unique=True),
    )

    id: Mapped[str] = mapped_column(ULIDType(), primary_key=True)
    table: Mapped[str] = mapped_column(Text, nullable=False)

    pointers: Mapped[list["Pointer"]] = relationship(
        "Pointer",
        back_populates="table",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"Table(id={self.id!r}, table={self.table!r})"
