from tablediff.algorithms.changes import (
    ChangeType, Change, ChangeList, AlignedRow, BatchUpdate, DiffResult,
    make_insert, make_delete, make_update, make_move,
    count_changes, partition_changes, align_changes
)
from tablediff.algorithms.table_diff import (
    TableDiff, Identifiable, DiffSearchError,
    diff, changes_from, edit_distance, apply_changes
)

__version__ = "1.0.0"

__all__ = [
    "ChangeType", "Change", "ChangeList", "AlignedRow", "BatchUpdate", "DiffResult",
    "make_insert", "make_delete", "make_update", "make_move",
    "count_changes", "partition_changes", "align_changes",
    "TableDiff", "Identifiable", "DiffSearchError",
    "diff", "changes_from", "edit_distance", "apply_changes",
    "__version__",
]
