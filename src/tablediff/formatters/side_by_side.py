from typing import List, Optional

from tablediff.algorithms.changes import ChangeType, AlignedRow, align_changes
from tablediff.formatters.base import BaseFormatter, FormatterConfig, FormatterFactory, row_label


class ColumnConfig:
    def __init__(self, total_width: int = 100, gutter_width: int = 3, line_num_width: int = 4):
        self.total_width = total_width
        self.gutter_width = gutter_width
        self.line_num_width = line_num_width
        self._calculate_content_width()

    def _calculate_content_width(self):
        available = self.total_width - self.gutter_width - (2 * self.line_num_width) - 2
        self.content_width = max(available // 2, 1)


class TextTruncator:
    def __init__(self, max_width: int, ellipsis: str = "..."):
        self.max_width = max_width
        self.ellipsis = ellipsis

    def truncate(self, text: str) -> str:
        if len(text) <= self.max_width:
            return text
        if self.max_width <= len(self.ellipsis):
            return text[:self.max_width]
        return text[:self.max_width - len(self.ellipsis)] + self.ellipsis

    def truncate_and_pad(self, text: str) -> str:
        return self.truncate(text).ljust(self.max_width)


class LineNumberFormatter:
    def __init__(self, width: int = 4):
        self.width = width

    def format(self, row_num: Optional[int]) -> str:
        if row_num is None:
            return " " * self.width
        return str(row_num).rjust(self.width)[-self.width:]


class GutterFormatter:
    MARKERS = {
        None: " | ",
        ChangeType.DELETE: " < ",
        ChangeType.INSERT: " > ",
        ChangeType.UPDATE: " ~ ",
    }

    def __init__(self, colors):
        self.colors = colors

    def format(self, kind: Optional[ChangeType]) -> str:
        marker = self.MARKERS.get(kind, " | ")
        color = self.colors.for_kind(kind)
        return f"{color}{marker}{self.colors.reset}" if color else marker


class SideBySideRow:
    def __init__(self, left_num: Optional[int], left_content: str,
                 right_num: Optional[int], right_content: str,
                 change_type: Optional[ChangeType]):
        self.left_num = left_num
        self.left_content = left_content
        self.right_num = right_num
        self.right_content = right_content
        self.change_type = change_type


class SideBySideGenerator:
    def generate(self, aligned: List[AlignedRow], old, new) -> List[SideBySideRow]:
        rows = []
        for row in aligned:
            left = row_label(old[row.old_index]) if row.old_index is not None else ""
            right = row_label(new[row.new_index]) if row.new_index is not None else ""
            rows.append(SideBySideRow(
                left_num=None if row.old_index is None else row.old_index + 1,
                left_content=left,
                right_num=None if row.new_index is None else row.new_index + 1,
                right_content=right,
                change_type=row.kind
            ))
        return rows


class SideBySideFormatter(BaseFormatter):
    def __init__(self, config: Optional[FormatterConfig] = None):
        super().__init__(config)
        self.column_config = ColumnConfig(self.config.width)
        self.generator = SideBySideGenerator()
        self.truncator = TextTruncator(self.column_config.content_width)
        self.line_num_fmt = LineNumberFormatter(self.column_config.line_num_width)
        self.gutter_fmt = GutterFormatter(self.colors)

    def _format_impl(self, changes, old, new, name1, name2):
        header = TextTruncator(self.column_config.content_width + self.column_config.line_num_width + 1)
        self._writeln("=" * self.column_config.total_width)
        self._writeln(f"{header.truncate_and_pad(name1)} | {header.truncate(name2)}")
        self._writeln("=" * self.column_config.total_width)
        aligned = align_changes(changes, len(old), len(new))
        for row in self.generator.generate(aligned, old, new):
            if row.change_type is None and not self.config.show_unchanged:
                continue
            self._writeln(self.format_row(row))

    def format_row(self, row: SideBySideRow) -> str:
        if self.config.show_line_numbers:
            left = f"{self.line_num_fmt.format(row.left_num)} "
            right = f"{self.line_num_fmt.format(row.right_num)} "
        else:
            left = right = ""
        left += self.truncator.truncate_and_pad(row.left_content)
        right += self.truncator.truncate(row.right_content)
        gutter = self.gutter_fmt.format(row.change_type)
        if row.change_type == ChangeType.DELETE:
            left = self._colored(ChangeType.DELETE, left)
        elif row.change_type == ChangeType.INSERT:
            right = self._colored(ChangeType.INSERT, right)
        return f"{left}{gutter}{right}".rstrip()


FormatterFactory.register("side-by-side", SideBySideFormatter)
