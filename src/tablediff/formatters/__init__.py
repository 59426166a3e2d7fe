from tablediff.formatters.base import (
    BaseFormatter, SimpleFormatter, BatchFormatter, FormatterConfig, FormatterFactory,
    ColorScheme, OutputWriter, OutputTarget, row_label
)
from tablediff.formatters.side_by_side import (
    SideBySideFormatter, SideBySideRow, SideBySideGenerator, ColumnConfig,
    TextTruncator, LineNumberFormatter, GutterFormatter
)
from tablediff.formatters.html import HTMLFormatter, JSONFormatter


__all__ = [
    "BaseFormatter", "SimpleFormatter", "BatchFormatter", "FormatterConfig", "FormatterFactory",
    "ColorScheme", "OutputWriter", "OutputTarget", "row_label",
    "SideBySideFormatter", "SideBySideRow", "SideBySideGenerator", "ColumnConfig",
    "TextTruncator", "LineNumberFormatter", "GutterFormatter",
    "HTMLFormatter", "JSONFormatter"
]


def create_formatter(name: str, config: FormatterConfig = None) -> BaseFormatter:
    return FormatterFactory.create(name, config)


def get_available_formatters():
    return FormatterFactory.available()


def format_changes(
    changes,
    old,
    new,
    name1: str = "old",
    name2: str = "new",
    formatter_name: str = "simple",
    config: FormatterConfig = None
) -> str:
    formatter = create_formatter(formatter_name, config)
    return formatter.format(changes, old, new, name1, name2)
