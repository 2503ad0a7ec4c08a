"""Foreign keys targeting the pointer store.

A referencing column picks one of three strengths, which only decides what
happens to the referencing row when the pointer it targets goes away:

* strong: the referencing row is deleted with it.
* weak: the reference is set to NULL.
* unbreakable: the delete is refused while the reference exists.
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from sqlalchemy import ForeignKey

from pointers.core.settings import settings
from pointers.utils.names import table_name


class PointerStrength(str, Enum):
    """Delete policy of a reference to the pointer store."""

    STRONG = "strong"
    WEAK = "weak"
    UNBREAKABLE = "unbreakable"

    @property
    def on_delete(self) -> str:
        return _POLICIES[self][0]

    @property
    def on_update(self) -> str:
        return _POLICIES[self][1]


# (on delete, on update)
_POLICIES: dict[PointerStrength, tuple[str, str]] = {
    PointerStrength.STRONG: ("CASCADE", "CASCADE"),
    PointerStrength.WEAK: ("SET NULL", "CASCADE"),
    PointerStrength.UNBREAKABLE: ("RESTRICT", "CASCADE"),
}


def pointer(strength: PointerStrength | str, table: Any = None) -> ForeignKey:
    """Return a foreign key to `table.id` with the policy of `strength`.

    Args:
        strength: One of `strong`, `weak` or `unbreakable`.
        table: Target table; defaults to the pointer store.

    Raises:
        ValueError: If `strength` is not a known strength.
    """
    strength = PointerStrength(strength)
    target = settings.pointer_table if table is None else table_name(table)
    return ForeignKey(
        f"{target}.id",
        ondelete=strength.on_delete,
        onupdate=strength.on_update,
    )


def strong_pointer(table: Any = None) -> ForeignKey:
    """Reference deleted along with the thing it points to."""
    return pointer(PointerStrength.STRONG, table)


def weak_pointer(table: Any = None) -> ForeignKey:
    """Reference set to NULL when the thing it points to is deleted."""
    return pointer(PointerStrength.WEAK, table)


def unbreakable_pointer(table: Any = None) -> ForeignKey:
    """Reference preventing the thing it points to from being deleted."""
    return pointer(PointerStrength.UNBREAKABLE, table)
