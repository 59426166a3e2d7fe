from abc import ABC, abstractmethod
from dataclasses import dataclass, replace
from typing import List, TextIO, Optional, Dict, Sequence, Any
from enum import Enum
import io
import sys

from tablediff.algorithms.changes import ChangeType, ChangeList, partition_changes, align_changes


class OutputTarget(Enum):
    STDOUT = "stdout"
    FILE = "file"
    STRING = "string"


@dataclass
class FormatterConfig:
    width: int = 100
    use_color: bool = True
    show_unchanged: bool = False
    show_line_numbers: bool = True
    encoding: str = "utf-8"

    def copy(self) -> 'FormatterConfig':
        return replace(self)

    def with_width(self, width: int) -> 'FormatterConfig':
        return replace(self, width=width)

    def with_color(self, use_color: bool) -> 'FormatterConfig':
        return replace(self, use_color=use_color)

    def with_unchanged(self, show_unchanged: bool) -> 'FormatterConfig':
        return replace(self, show_unchanged=show_unchanged)


@dataclass
class ColorScheme:
    reset: str = '\033[0m'
    bold: str = '\033[1m'
    red: str = '\033[31m'
    green: str = '\033[32m'
    yellow: str = '\033[33m'

    def disable_colors(self):
        self.reset = self.bold = self.red = self.green = self.yellow = ''

    @classmethod
    def no_color(cls) -> 'ColorScheme':
        return cls('', '', '', '', '')

    def for_kind(self, kind: Optional[ChangeType]) -> str:
        if kind == ChangeType.DELETE:
            return self.red
        if kind == ChangeType.INSERT:
            return self.green
        if kind in (ChangeType.UPDATE, ChangeType.MOVE):
            return self.yellow
        return ''


class OutputWriter:
    """Collects formatter output in memory or forwards it to a stream."""

    def __init__(self, target: OutputTarget = OutputTarget.STDOUT, output: Optional[TextIO] = None):
        self.target = target
        if target == OutputTarget.STRING:
            self._output = io.StringIO()
        else:
            self._output = output or sys.stdout

    def write(self, text: str):
        self._output.write(text)

    def writeln(self, text: str = ""):
        self.write(text + "\n")

    def get_output(self) -> str:
        if self.target != OutputTarget.STRING:
            return ""
        return self._output.getvalue()

    def flush(self):
        self._output.flush()


def row_label(item: Any) -> str:
    label = getattr(item, 'label', None)
    return str(label) if label is not None else str(item)


class BaseFormatter(ABC):
    def __init__(self, config: Optional[FormatterConfig] = None):
        self.config = config or FormatterConfig()
        self.colors = ColorScheme() if self.config.use_color else ColorScheme.no_color()
        self.writer: Optional[OutputWriter] = None

    def format(
        self,
        changes: ChangeList,
        old: Sequence[Any],
        new: Sequence[Any],
        name1: str = "old",
        name2: str = "new",
        output: Optional[TextIO] = None
    ) -> str:
        if output is None:
            self.writer = OutputWriter(OutputTarget.STRING)
        else:
            self.writer = OutputWriter(OutputTarget.FILE, output)
        self._format_impl(changes, old, new, name1, name2)
        if output is None:
            return self.writer.get_output()
        self.writer.flush()
        return ""

    @abstractmethod
    def _format_impl(
        self,
        changes: ChangeList,
        old: Sequence[Any],
        new: Sequence[Any],
        name1: str,
        name2: str
    ):
        pass

    def _writeln(self, text: str = ""):
        if self.writer:
            self.writer.writeln(text)

    def _colored(self, kind: Optional[ChangeType], text: str) -> str:
        color = self.colors.for_kind(kind)
        return f"{color}{text}{self.colors.reset}" if color else text


def _item_at(rows: Sequence[Any], index: Optional[int]) -> str:
    if index is None or not 0 <= index < len(rows):
        return ""
    return row_label(rows[index])


class SimpleFormatter(BaseFormatter):
    MARKERS = {
        ChangeType.DELETE: "-",
        ChangeType.INSERT: "+",
        ChangeType.UPDATE: "~",
        ChangeType.MOVE: ">",
    }

    def _format_impl(self, changes, old, new, name1, name2):
        if self.config.show_unchanged:
            self._format_aligned(changes, old, new)
            return
        for change in changes:
            marker = self.MARKERS[change.kind]
            if change.kind == ChangeType.INSERT:
                text = f"{marker} [{change.index}] {_item_at(new, change.index)}"
            elif change.kind == ChangeType.MOVE:
                text = f"{marker} [{change.index} -> {change.to_index}] {_item_at(old, change.index)}"
            else:
                text = f"{marker} [{change.index}] {_item_at(old, change.index)}"
            self._writeln(self._colored(change.kind, text.rstrip()))

    def _format_aligned(self, changes, old, new):
        """Every row in table order; moves show as a delete and an insert."""
        for row in align_changes(changes, len(old), len(new)):
            if row.kind == ChangeType.INSERT:
                text = f"+ [{row.new_index}] {_item_at(new, row.new_index)}"
            else:
                marker = self.MARKERS.get(row.kind, " ")
                text = f"{marker} [{row.old_index}] {_item_at(old, row.old_index)}"
            self._writeln(self._colored(row.kind, text.rstrip()))


class BatchFormatter(BaseFormatter):
    def _format_impl(self, changes, old, new, name1, name2):
        batch = partition_changes(changes)
        self._writeln(f"{self.colors.bold}{name1} -> {name2}{self.colors.reset}")
        if batch.is_empty():
            self._writeln("No changes")
            return
        sections = [
            ("Deleted", ChangeType.DELETE, batch.deletions, old),
            ("Inserted", ChangeType.INSERT, batch.insertions, new),
            ("Updated", ChangeType.UPDATE, batch.updates, old),
        ]
        for title, kind, indices, rows in sections:
            if not indices:
                continue
            self._writeln(f"{title} ({len(indices)}): {', '.join(str(i) for i in indices)}")
            for i in indices:
                self._writeln(self._colored(kind, f"  {i}: {_item_at(rows, i)}".rstrip()))
        if batch.moves:
            moves = ", ".join(f"{f}->{t}" for f, t in batch.moves)
            self._writeln(f"Moved ({len(batch.moves)}): {moves}")


class FormatterFactory:
    _formatters: Dict[str, type] = {}

    @classmethod
    def register(cls, name: str, formatter_class: type):
        cls._formatters[name] = formatter_class

    @classmethod
    def create(cls, name: str, config: Optional[FormatterConfig] = None) -> BaseFormatter:
        if name not in cls._formatters:
            raise ValueError(f"Unknown formatter: {name}")
        return cls._formatters[name](config)

    @classmethod
    def available(cls) -> List[str]:
        return list(cls._formatters.keys())


FormatterFactory.register("simple", SimpleFormatter)
FormatterFactory.register("batch", BatchFormatter)
