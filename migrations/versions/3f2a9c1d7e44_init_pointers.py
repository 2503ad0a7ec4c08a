"""init pointers

Revision ID: 3f2a9c1d7e44
Revises:
Create Date: 2026-10-16 09:12:40.518230

"""
from __future__ import annotations

from typing import Sequence, Union

from pointers.migration import init_pointers

# revision identifiers, used by Alembic.
revision: str = "3f2a9c1d7e44"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the table registry, pointer store and trigger functions."""
    init_pointers("up")


def downgrade() -> None:
    """Remove the pointers abstraction."""
    init_pointers("down")
