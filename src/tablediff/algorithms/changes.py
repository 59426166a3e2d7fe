from typing import List, Tuple, NamedTuple, Optional, Dict
from enum import Enum
from dataclasses import dataclass, field


class ChangeType(str, Enum):
    INSERT = 'insert'
    DELETE = 'delete'
    UPDATE = 'update'
    MOVE = 'move'


class Change(NamedTuple):
    kind: ChangeType
    index: int
    to_index: Optional[int] = None

    @property
    def from_index(self) -> int:
        return self.index

    def __repr__(self) -> str:
        if self.kind == ChangeType.MOVE:
            return f"Move(from_index={self.index}, to_index={self.to_index})"
        return f"{self.kind.value.capitalize()}(index={self.index})"


ChangeList = List[Change]


class AlignedRow(NamedTuple):
    kind: Optional[ChangeType]
    old_index: Optional[int]
    new_index: Optional[int]


@dataclass
class BatchUpdate:
    deletions: List[int] = field(default_factory=list)
    insertions: List[int] = field(default_factory=list)
    updates: List[int] = field(default_factory=list)
    moves: List[Tuple[int, int]] = field(default_factory=list)

    def is_empty(self) -> bool:
        return not (self.deletions or self.insertions or self.updates or self.moves)


@dataclass
class DiffResult:
    changes: ChangeList
    old_length: int
    new_length: int
    edit_distance: int
    update_count: int
    retained_count: int
    similarity_ratio: float

    @classmethod
    def from_changes(cls, changes: ChangeList, old_len: int, new_len: int) -> 'DiffResult':
        deletes = sum(1 for c in changes if c.kind == ChangeType.DELETE)
        inserts = sum(1 for c in changes if c.kind == ChangeType.INSERT)
        updates = sum(1 for c in changes if c.kind == ChangeType.UPDATE)
        retained = old_len - deletes
        total = old_len + new_len
        sim_ratio = (2.0 * retained / total) if total > 0 else 1.0
        return cls(
            changes=changes,
            old_length=old_len,
            new_length=new_len,
            edit_distance=inserts + deletes,
            update_count=updates,
            retained_count=retained,
            similarity_ratio=sim_ratio
        )


def make_insert(index: int) -> Change:
    return Change(ChangeType.INSERT, index)


def make_delete(index: int) -> Change:
    return Change(ChangeType.DELETE, index)


def make_update(index: int) -> Change:
    return Change(ChangeType.UPDATE, index)


def make_move(from_index: int, to_index: int) -> Change:
    return Change(ChangeType.MOVE, from_index, to_index)


def changes_to_tuples(changes: ChangeList) -> List[tuple]:
    result = []
    for change in changes:
        if change.kind == ChangeType.MOVE:
            result.append((change.kind.value, change.index, change.to_index))
        else:
            result.append((change.kind.value, change.index))
    return result


def tuples_to_changes(tuples: List[tuple]) -> ChangeList:
    result = []
    for item in tuples:
        kind = ChangeType(item[0])
        if kind == ChangeType.MOVE:
            if len(item) != 3:
                raise ValueError(f"Move needs from and to indices: {item!r}")
            result.append(make_move(int(item[1]), int(item[2])))
        else:
            if len(item) != 2:
                raise ValueError(f"Malformed change tuple: {item!r}")
            result.append(Change(kind, int(item[1])))
    return result


def count_changes(changes: ChangeList) -> Dict[str, int]:
    counts = {
        'inserts': 0,
        'deletes': 0,
        'updates': 0,
        'moves': 0,
        'total': len(changes)
    }
    for change in changes:
        if change.kind == ChangeType.INSERT:
            counts['inserts'] += 1
        elif change.kind == ChangeType.DELETE:
            counts['deletes'] += 1
        elif change.kind == ChangeType.UPDATE:
            counts['updates'] += 1
        elif change.kind == ChangeType.MOVE:
            counts['moves'] += 1
    return counts


def group_consecutive_changes(changes: ChangeList) -> List[Tuple[ChangeType, List[int]]]:
    if not changes:
        return []
    groups = []
    current_kind = changes[0].kind
    current_indices = [changes[0].index]
    for change in changes[1:]:
        if change.kind == current_kind:
            current_indices.append(change.index)
        else:
            groups.append((current_kind, current_indices))
            current_kind = change.kind
            current_indices = [change.index]
    groups.append((current_kind, current_indices))
    return groups


def partition_changes(changes: ChangeList) -> BatchUpdate:
    """Split a change list into the index sets a table view applies in one batch.

    Deletions and updates refer to the old rows, insertions to the new rows.
    """
    batch = BatchUpdate()
    for change in changes:
        if change.kind == ChangeType.DELETE:
            batch.deletions.append(change.index)
        elif change.kind == ChangeType.INSERT:
            batch.insertions.append(change.index)
        elif change.kind == ChangeType.UPDATE:
            batch.updates.append(change.index)
        elif change.kind == ChangeType.MOVE:
            batch.moves.append((change.index, change.to_index))
    batch.deletions.sort()
    batch.insertions.sort()
    batch.updates.sort()
    return batch


def align_changes(changes: ChangeList, old_length: int, new_length: int) -> List[AlignedRow]:
    batch = partition_changes(changes)
    deleted = set(batch.deletions) | {f for f, _ in batch.moves}
    inserted = set(batch.insertions) | {t for _, t in batch.moves}
    updated = set(batch.updates)
    if old_length - len(deleted) != new_length - len(inserted):
        raise ValueError(
            f"Changes do not reconcile {old_length} old rows with {new_length} new rows"
        )
    rows: List[AlignedRow] = []
    old_idx = 0
    new_idx = 0
    while old_idx < old_length or new_idx < new_length:
        if old_idx < old_length and old_idx in deleted:
            rows.append(AlignedRow(ChangeType.DELETE, old_idx, None))
            old_idx += 1
        elif new_idx < new_length and new_idx in inserted:
            rows.append(AlignedRow(ChangeType.INSERT, None, new_idx))
            new_idx += 1
        elif old_idx < old_length and new_idx < new_length:
            kind = ChangeType.UPDATE if old_idx in updated else None
            rows.append(AlignedRow(kind, old_idx, new_idx))
            old_idx += 1
            new_idx += 1
        else:
            raise ValueError(f"Alignment broke at old row {old_idx}, new row {new_idx}")
    return rows


def calculate_row_numbers(rows: List[AlignedRow]) -> List[Tuple[Optional[int], Optional[int]]]:
    return [
        (None if r.old_index is None else r.old_index + 1,
         None if r.new_index is None else r.new_index + 1)
        for r in rows
    ]
