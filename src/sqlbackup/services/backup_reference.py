"""
Backup reference resolution.

A requested backup id is read two ways:
- 0 or negative: an offset from the most recent backup (-1 is the latest,
  -2 the one before it, 0 means "not specified" and also picks the latest)
- positive: an absolute backup position, passed to the server unchanged
"""

from typing import Iterable, List, Sequence

from ..models import BackupKind, BackupRecord


class BackupResolutionError(Exception):
    """Raised when a backup reference cannot be mapped onto a backup set."""
    pass


def filter_backup_candidates(records: Iterable[BackupRecord], database: str,
                             kind: BackupKind) -> List[BackupRecord]:
    """Keep the backups of one database and kind, most recent (highest position) first."""
    key = database.casefold()
    candidates = [
        record for record in records
        if record.kind == kind and record.database_name.casefold() == key
    ]
    candidates.sort(key=lambda record: record.position, reverse=True)
    return candidates


def resolve_backup_id(candidates: Sequence[BackupRecord], reference: int) -> int:
    """Map a requested backup reference onto a backup position.

    Args:
        candidates: Backups of one database and kind, sorted by position descending
        reference: Requested reference from /ID (0 when not given)

    Returns:
        Backup position to restore

    Raises:
        BackupResolutionError: If there are no candidates, or a negative
            offset points past the oldest candidate
    """
    if not candidates:
        raise BackupResolutionError("No matching backup was found")

    if reference > 0:
        return reference

    if reference in (0, -1):
        return candidates[0].position

    offset = abs(reference) - 1
    if offset >= len(candidates):
        raise BackupResolutionError(
            f"Negative offset '{reference}' is too big, only {len(candidates)} backups are available"
        )
    return candidates[offset].position
