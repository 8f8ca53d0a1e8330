"""
Helpers for the ordered id lists that link users, folders and aspirations.

Lists are stored as JSON arrays of id strings. The helpers always return new
list objects so SQLAlchemy sees the attribute change.
"""

from collections.abc import Iterable
from uuid import UUID


def push_id(ids: list[str] | None, new_id: UUID) -> list[str]:
    """Append ``new_id`` unless it is already present."""
    current = list(ids or [])
    value = str(new_id)
    if value not in current:
        current.append(value)
    return current


def pull_ids(ids: list[str] | None, *removed: UUID) -> list[str]:
    """Remove every occurrence of the given ids; absent ids are ignored."""
    drop = {str(value) for value in removed}
    return [value for value in ids or [] if value not in drop]


def to_uuids(ids: Iterable[str] | None) -> list[UUID]:
    """Convert stored id strings to UUIDs, skipping malformed entries."""
    result = []
    for value in ids or []:
        try:
            result.append(UUID(str(value)))
        except ValueError:
            continue
    return result
