import logging
from abc import ABC, abstractmethod
from typing import TypeVar, List, Callable, Optional, Sequence, Tuple
from .changes import (
    ChangeList, ChangeType, DiffResult,
    make_insert, make_delete, make_update
)

T = TypeVar('T')

Predicate = Callable[[T, T], bool]

logger = logging.getLogger(__name__)


class DiffSearchError(RuntimeError):
    """The edit graph search ran past its own upper bound."""


class Identifiable(ABC):
    @abstractmethod
    def has_same_identity(self, other) -> bool:
        pass


def _has_same_identity(a, b) -> bool:
    return a.has_same_identity(b)


def _are_equal(a, b) -> bool:
    return a == b


def _never_equal(a, b) -> bool:
    return False


class TableDiff:
    """Shortest edit script between two row sequences.

    Rows are matched through ``same_identity``; matched rows that fail
    ``content_equal`` are reported as updates. Every diagonal keeps its own
    change list, so memory grows with ``D * (len(old) + len(new))``.
    """

    def __init__(self, old: Sequence[T], new: Sequence[T],
                 same_identity: Optional[Predicate] = None,
                 content_equal: Optional[Predicate] = None):
        self.old = old
        self.new = new
        self.n = len(old)
        self.m = len(new)
        self.max_d = self.n + self.m
        self.same_identity = same_identity or _has_same_identity
        self.content_equal = content_equal or _are_equal
        self._edit_distance: Optional[int] = None

    def compute(self) -> ChangeList:
        if self.max_d == 0:
            self._edit_distance = 0
            return []
        logger.debug("Diffing %d old rows against %d new rows", self.n, self.m)
        return self._search()

    def _search(self) -> ChangeList:
        n, m, max_d = self.n, self.m, self.max_d
        v: List[Tuple[int, ChangeList]] = [(0, [])] * (2 * max_d + 1)
        for d in range(max_d + 1):
            for k in range(-d, d + 1, 2):
                if k == -d or (k != d and v[k - 1 + max_d][0] < v[k + 1 + max_d][0]):
                    x, changes = v[k + 1 + max_d]
                    if d != 0:
                        changes = changes + [make_insert(x - k - 1)]
                else:
                    x, changes = v[k - 1 + max_d]
                    x += 1
                    changes = changes + [make_delete(x - 1)]
                y = x - k
                while x < n and y < m and self.same_identity(self.old[x], self.new[y]):
                    if not self.content_equal(self.old[x], self.new[y]):
                        changes = changes + [make_update(x)]
                    x += 1
                    y += 1
                v[k + max_d] = (x, changes)
                if x >= n and y >= m:
                    self._edit_distance = d
                    logger.debug("Edit script found at d=%d with %d changes", d, len(changes))
                    return changes
        raise DiffSearchError(f"No edit script within {max_d} edits for {n} -> {m} rows")

    def get_edit_distance(self) -> int:
        if self._edit_distance is None:
            self.compute()
        return self._edit_distance or 0

    def get_result(self) -> DiffResult:
        changes = self.compute()
        return DiffResult.from_changes(changes, self.n, self.m)


def diff(old: Sequence[T], new: Sequence[T],
         same_identity: Optional[Predicate] = None,
         content_equal: Optional[Predicate] = None) -> ChangeList:
    differ = TableDiff(old, new, same_identity, content_equal)
    return differ.compute()


def changes_from(old: Sequence[T], new: Sequence[T], has_same_identity: Predicate) -> ChangeList:
    """Diff by identity alone; every retained row is reported as updated."""
    return diff(old, new, has_same_identity, _never_equal)


def edit_distance(old: Sequence[T], new: Sequence[T],
                  same_identity: Optional[Predicate] = None) -> int:
    differ = TableDiff(old, new, same_identity, _are_equal)
    return differ.get_edit_distance()


def apply_changes(old: Sequence[T], new: Sequence[T], changes: ChangeList) -> List[T]:
    deletions: List[int] = []
    insertions: List[int] = []
    updates: List[int] = []
    for change in changes:
        if change.kind == ChangeType.DELETE:
            deletions.append(change.index)
        elif change.kind == ChangeType.INSERT:
            insertions.append(change.index)
        elif change.kind == ChangeType.UPDATE:
            updates.append(change.index)
        elif change.kind == ChangeType.MOVE:
            deletions.append(change.index)
            insertions.append(change.to_index)
    if len(set(deletions)) != len(deletions):
        raise ValueError(f"Duplicate delete index in {sorted(deletions)}")
    if len(set(insertions)) != len(insertions):
        raise ValueError(f"Duplicate insert index in {sorted(insertions)}")
    rows: List[Tuple[Optional[int], T]] = list(enumerate(old))
    for index in sorted(deletions, reverse=True):
        if not 0 <= index < len(old):
            raise ValueError(f"Delete index {index} out of range for {len(old)} rows")
        del rows[index]
    for index in sorted(insertions):
        if not 0 <= index < len(new) or index > len(rows):
            raise ValueError(f"Insert index {index} out of range at {len(rows)} rows")
        rows.insert(index, (None, new[index]))
    if len(rows) != len(new):
        raise ValueError(f"Changes produce {len(rows)} rows, expected {len(new)}")
    positions = {old_index: pos for pos, (old_index, _) in enumerate(rows) if old_index is not None}
    result = [item for _, item in rows]
    for index in updates:
        if index not in positions:
            raise ValueError(f"Update index {index} does not name a retained row")
        pos = positions[index]
        result[pos] = new[pos]
    return result
