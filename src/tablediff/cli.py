import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, List, TextIO

from tablediff import __version__
from tablediff.algorithms.table_diff import diff, changes_from
from tablediff.algorithms.changes import count_changes
from tablediff.formatters import FormatterConfig, FormatterFactory
from tablediff.fs.rows import RowSource, FORMATS


logger = logging.getLogger(__name__)

LOG_FORMAT = '[%(asctime)s] %(levelname)-8s [%(name)s] %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


class ANSIColors:
    RESET = '\033[0m'
    RED = '\033[31m'
    YELLOW = '\033[33m'

    @classmethod
    def disable(cls):
        cls.RESET = ''
        cls.RED = ''
        cls.YELLOW = ''


class ColorPrinter:
    def __init__(self, use_color: bool = True, output: Optional[TextIO] = None):
        self.use_color = use_color
        self.output = output or sys.stdout
        if not use_color:
            ANSIColors.disable()

    def print(self, text: str, end: str = '\n'):
        self.output.write(text + end)

    def print_error(self, text: str):
        sys.stderr.write(f"{ANSIColors.RED}Error: {text}{ANSIColors.RESET}\n")

    def print_warning(self, text: str):
        sys.stderr.write(f"{ANSIColors.YELLOW}Warning: {text}{ANSIColors.RESET}\n")


def setup_logging(level: int = logging.WARNING, log_file: Optional[str] = None):
    formatter = logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT)
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(formatter)
    console_handler.setLevel(level)
    handlers: List[logging.Handler] = [console_handler]
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_path, encoding='utf-8')
        file_handler.setFormatter(formatter)
        file_handler.setLevel(logging.DEBUG)
        handlers.append(file_handler)
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    logger.debug("Log level: %s", logging.getLevelName(level))


class CLIApplication:
    def __init__(self):
        self.parser = self._create_parser()
        self.printer: Optional[ColorPrinter] = None

    def _create_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog='tablediff',
            description='Compute row-level changes between two tables',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog='''
Examples:
  %(prog)s old.txt new.txt
  %(prog)s -k id old.json new.json
  %(prog)s -k id -k region --side-by-side old.csv new.csv
  %(prog)s --json -o changes.json old.json new.json
  %(prog)s --identity-only -k id old.csv new.csv
            '''
        )
        parser.add_argument('file1', help='Old rows (JSON, CSV or text)')
        parser.add_argument('file2', help='New rows (JSON, CSV or text)')
        parser.add_argument(
            '-k', '--key',
            action='append',
            default=[],
            metavar='FIELD',
            help='Field that identifies a row; repeat for compound keys'
        )
        parser.add_argument(
            '--format',
            choices=FORMATS,
            dest='row_format',
            help='Input format (default: from file extension)'
        )
        format_group = parser.add_mutually_exclusive_group()
        format_group.add_argument(
            '-f', '--formatter',
            default='simple',
            metavar='NAME',
            help='Output formatter (default: simple)'
        )
        format_group.add_argument(
            '-y', '--side-by-side',
            action='store_const',
            const='side-by-side',
            dest='formatter',
            help='Output aligned old and new rows'
        )
        format_group.add_argument(
            '-b', '--batch',
            action='store_const',
            const='batch',
            dest='formatter',
            help='Output grouped deletions, insertions and updates'
        )
        format_group.add_argument(
            '--json',
            action='store_const',
            const='json',
            dest='formatter',
            help='Output JSON'
        )
        format_group.add_argument(
            '--html',
            action='store_const',
            const='html',
            dest='formatter',
            help='Output HTML'
        )
        parser.add_argument(
            '-w', '--width',
            type=int,
            default=100,
            metavar='NUM',
            help='Output width for side-by-side (default: 100)'
        )
        parser.add_argument(
            '-a', '--all',
            action='store_true',
            dest='show_unchanged',
            help='Also show unchanged rows'
        )
        parser.add_argument(
            '-q', '--quiet',
            action='store_true',
            help='Report only whether the tables differ'
        )
        parser.add_argument(
            '--no-color',
            action='store_true',
            help='Disable colored output'
        )
        parser.add_argument(
            '-o', '--output',
            type=str,
            metavar='FILE',
            help='Write output to file'
        )
        parser.add_argument(
            '--ignore-whitespace',
            action='store_true',
            help='Ignore whitespace when matching text rows'
        )
        parser.add_argument(
            '--ignore-case',
            action='store_true',
            help='Ignore case when matching text rows'
        )
        parser.add_argument(
            '--identity-only',
            action='store_true',
            help='Match by identity only and report every kept row as updated'
        )
        parser.add_argument(
            '--verbose',
            action='store_true',
            help='Log debug output to stderr'
        )
        parser.add_argument(
            '--log-file',
            metavar='FILE',
            help='Also write debug logs to FILE'
        )
        parser.add_argument(
            '-v', '--version',
            action='version',
            version=f'%(prog)s {__version__}'
        )
        return parser

    def run(self, argv: Optional[List[str]] = None) -> int:
        args = self.parser.parse_args(argv)
        setup_logging(logging.DEBUG if args.verbose else logging.WARNING, args.log_file)
        use_color = not args.no_color and sys.stdout.isatty()
        output_file = None
        self.printer = ColorPrinter(use_color=use_color and not args.output)
        try:
            if args.output:
                output_file = open(args.output, 'w', encoding='utf-8')
                self.printer = ColorPrinter(use_color=False, output=output_file)
            result = self._execute(args)
        except KeyboardInterrupt:
            self.printer.print_error("Interrupted")
            result = 130
        except Exception as e:
            logger.debug("Comparison failed", exc_info=True)
            self.printer.print_error(str(e))
            result = 2
        finally:
            if output_file is not None:
                output_file.close()
        return result

    def _execute(self, args) -> int:
        if args.formatter not in FormatterFactory.available():
            self.printer.print_error(
                f"Unknown formatter: {args.formatter} "
                f"(available: {', '.join(FormatterFactory.available())})"
            )
            return 2
        sources = []
        for path in (args.file1, args.file2):
            source = RowSource(path, tuple(args.key), args.row_format,
                               args.ignore_case, args.ignore_whitespace)
            if not source.exists:
                self.printer.print_error(f"File not found: {path}")
                return 2
            sources.append(source)
        try:
            old_rows = sources[0].load()
            new_rows = sources[1].load()
        except (OSError, ValueError) as e:
            self.printer.print_error(f"Error reading rows: {e}")
            return 2
        if args.identity_only:
            changes = changes_from(old_rows, new_rows, lambda a, b: a.has_same_identity(b))
        else:
            changes = diff(old_rows, new_rows)
        counts = count_changes(changes)
        logger.info("%d inserts, %d deletes, %d updates",
                    counts['inserts'], counts['deletes'], counts['updates'])
        has_changes = counts['total'] > 0
        if args.quiet:
            if has_changes:
                self.printer.print(f"Tables {args.file1} and {args.file2} differ")
            return 1 if has_changes else 0
        if not has_changes and args.formatter in ('simple', 'side-by-side') and not args.show_unchanged:
            return 0
        config = FormatterConfig(
            width=args.width,
            use_color=self.printer.use_color,
            show_unchanged=args.show_unchanged
        )
        formatter = FormatterFactory.create(args.formatter, config)
        self.printer.print(formatter.format(changes, old_rows, new_rows, args.file1, args.file2), end='')
        return 1 if has_changes else 0


def main(argv: Optional[List[str]] = None) -> int:
    app = CLIApplication()
    return app.run(argv)


if __name__ == '__main__':
    sys.exit(main())
