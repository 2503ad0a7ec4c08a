"""Identifier codec.

Every row taking part in the pointers abstraction is keyed by a ULID: 48 bits
of millisecond timestamp followed by 80 random bits. In Python an identifier
is its 26-character Crockford base32 text, which sorts in creation order. The
database only ever sees the 128-bit UUID form produced by `dump`.
"""

from __future__ import annotations

import uuid
from datetime import UTC, datetime
from typing import Any

import ulid

from pointers.errors import InvalidIdentifier

ALPHABET = "0123456789ABCDEFGHJKMNPQRSTVWXYZ"
TEXT_LENGTH = 26
BINARY_LENGTH = 16

_ALPHABET_SET = frozenset(ALPHABET)
# A leading digit above 7 would need more than 128 bits.
_FIRST_CHARACTERS = frozenset("01234567")


def generate(at: datetime | None = None) -> str:
    """Return a fresh identifier.

    Args:
        at: Pin the timestamp part to this moment instead of the current time.

    Returns:
        Canonical ULID text.
    """
    value = ulid.new() if at is None else ulid.from_timestamp(at)
    return value.str


def _parse_text(value: str) -> ulid.ULID:
    if len(value) == TEXT_LENGTH:
        text = value.upper()
        if text[0] not in _FIRST_CHARACTERS or not _ALPHABET_SET.issuperset(text):
            raise InvalidIdentifier(value)
        return ulid.from_str(text)
    try:
        return ulid.from_uuid(uuid.UUID(value))
    except ValueError as exc:
        raise InvalidIdentifier(value) from exc


def _parse(value: Any) -> ulid.ULID:
    if isinstance(value, ulid.ULID):
        return value
    if isinstance(value, uuid.UUID):
        return ulid.from_uuid(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        raw = bytes(value)
        if len(raw) != BINARY_LENGTH:
            raise InvalidIdentifier(value)
        return ulid.from_bytes(raw)
    if isinstance(value, str):
        return _parse_text(value)
    raise InvalidIdentifier(value)


def cast(value: Any) -> str:
    """Validate `value` and return it as canonical ULID text.

    Accepts ULID text in any case, textual UUIDs, `uuid.UUID`, 16 raw bytes
    and `ulid.ULID` instances.

    Raises:
        InvalidIdentifier: If `value` is not a well-formed identifier.
    """
    return _parse(value).str


def is_valid(value: Any) -> bool:
    """Return True when `cast` would accept `value`."""
    try:
        _parse(value)
    except InvalidIdentifier:
        return False
    return True


def dump(value: Any) -> uuid.UUID:
    """Return the storage form of an identifier."""
    return _parse(value).uuid


def load(value: Any) -> str:
    """Return the ULID text for a value read back from the database."""
    return cast(value)


def timestamp(value: Any) -> datetime:
    """Return the creation time embedded in an identifier, in UTC."""
    millis = _parse(value).timestamp().int
    return datetime.fromtimestamp(millis / 1000, tz=UTC)
