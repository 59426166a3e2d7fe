import os
import io
import csv
import json
import logging
from typing import List, Optional, Sequence, Tuple, Any
from dataclasses import dataclass, field

from tablediff.algorithms.table_diff import Identifiable


logger = logging.getLogger(__name__)


BINARY_SIGNATURES = [
    b'\x89PNG\r\n\x1a\n',
    b'\xff\xd8\xff',
    b'GIF87a',
    b'GIF89a',
    b'PK\x03\x04',
    b'%PDF',
    b'\x7fELF',
    b'\x1f\x8b',
    b'SQLite format 3\x00',
]

FORMAT_BY_EXTENSION = {
    '.json': 'json',
    '.csv': 'csv',
    '.tsv': 'csv',
}

FORMATS = ('json', 'csv', 'text')

CHECK_SIZE = 8192


@dataclass(frozen=True)
class Row(Identifiable):
    key: Tuple[Any, ...]
    content: Tuple[Tuple[str, Any], ...] = ()
    line: int = 0

    def has_same_identity(self, other: 'Row') -> bool:
        return self.key == other.key

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Row):
            return NotImplemented
        return self.key == other.key and self.content == other.content

    def __hash__(self) -> int:
        return hash((self.key, self.content))

    @property
    def label(self) -> str:
        if len(self.content) == 1 and self.content[0][0] == '':
            return str(self.content[0][1])
        return ", ".join(f"{name}={value}" for name, value in self.content)

    def to_dict(self) -> dict:
        return {'key': list(self.key), 'line': self.line,
                'content': {name: value for name, value in self.content}}


def is_binary_file(filepath: str) -> bool:
    if not os.path.isfile(filepath):
        raise FileNotFoundError(f"File not found: {filepath}")
    with open(filepath, 'rb') as f:
        chunk = f.read(CHECK_SIZE)
    if not chunk:
        return False
    if any(chunk.startswith(sig) for sig in BINARY_SIGNATURES):
        return True
    return b'\x00' in chunk


def detect_format(filepath: str) -> str:
    ext = os.path.splitext(filepath)[1].lower()
    return FORMAT_BY_EXTENSION.get(ext, 'text')


def _normalize(value: str, ignore_case: bool, ignore_whitespace: bool) -> str:
    if ignore_whitespace:
        value = " ".join(value.split())
    if ignore_case:
        value = value.lower()
    return value


def _freeze(value: Any) -> Any:
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    if isinstance(value, list):
        return tuple(_freeze(v) for v in value)
    return value


def _record_row(record: dict, key_fields: Sequence[str], line: int) -> Row:
    missing = [name for name in key_fields if name not in record]
    if missing:
        raise ValueError(f"Row {line} has no key field(s): {', '.join(missing)}")
    content = tuple(sorted((str(k), _freeze(v)) for k, v in record.items()))
    if key_fields:
        key = tuple(_freeze(record[name]) for name in key_fields)
    else:
        key = content
    return Row(key=key, content=content, line=line)


def parse_text_rows(text: str, ignore_case: bool = False,
                    ignore_whitespace: bool = False) -> List[Row]:
    if not text:
        return []
    lines = text[:-1].split('\n') if text.endswith('\n') else text.split('\n')
    return [
        Row(key=(_normalize(line, ignore_case, ignore_whitespace),),
            content=(('', line),), line=i + 1)
        for i, line in enumerate(lines)
    ]


def parse_json_rows(text: str, key_fields: Sequence[str] = ()) -> List[Row]:
    try:
        data = json.loads(text) if text.strip() else []
    except json.JSONDecodeError as e:
        raise ValueError(f"Malformed JSON: {e}") from e
    if not isinstance(data, list):
        raise ValueError("JSON rows must be a top-level array")
    rows = []
    for i, item in enumerate(data):
        if isinstance(item, dict):
            rows.append(_record_row(item, key_fields, i + 1))
        elif key_fields:
            raise ValueError(f"Row {i + 1} is not an object, cannot read key fields")
        else:
            value = _freeze(item)
            rows.append(Row(key=(value,), content=(('', value),), line=i + 1))
    return rows


def parse_csv_rows(text: str, key_fields: Sequence[str] = (), delimiter: str = ',') -> List[Row]:
    reader = csv.DictReader(io.StringIO(text, newline=''), delimiter=delimiter)
    header = reader.fieldnames or []
    unknown = [name for name in key_fields if name not in header]
    if unknown:
        raise ValueError(f"Unknown key field(s): {', '.join(unknown)}")
    rows = []
    # quoted fields may span lines
    start = reader.line_num + 1
    for record in reader:
        rows.append(_record_row(record, key_fields, start))
        start = reader.line_num + 1
    return rows


@dataclass
class RowSource:
    path: str
    key_fields: Sequence[str] = field(default_factory=tuple)
    fmt: Optional[str] = None
    ignore_case: bool = False
    ignore_whitespace: bool = False
    encoding: str = 'utf-8-sig'

    @property
    def exists(self) -> bool:
        return os.path.exists(self.path)

    @property
    def format(self) -> str:
        return self.fmt or detect_format(self.path)

    @property
    def is_binary(self) -> bool:
        return is_binary_file(self.path)

    def load(self) -> List[Row]:
        if not self.exists:
            raise FileNotFoundError(f"File not found: {self.path}")
        if os.path.isdir(self.path):
            raise ValueError(f"Not a file: {self.path}")
        if self.format not in FORMATS:
            raise ValueError(f"Unknown row format: {self.format}")
        if self.is_binary:
            raise ValueError(f"Cannot read binary file: {self.path}")
        newline = '' if self.format == 'csv' else None
        with open(self.path, 'r', encoding=self.encoding, errors='replace', newline=newline) as f:
            text = f.read()
        if self.format == 'json':
            rows = parse_json_rows(text, self.key_fields)
        elif self.format == 'csv':
            delimiter = '\t' if self.path.lower().endswith('.tsv') else ','
            rows = parse_csv_rows(text, self.key_fields, delimiter)
        else:
            if self.key_fields:
                logger.warning("Key fields ignored for text file %s", self.path)
            rows = parse_text_rows(text, self.ignore_case, self.ignore_whitespace)
        logger.debug("Read %d %s rows from %s", len(rows), self.format, self.path)
        return rows


def read_rows(path: str, key_fields: Sequence[str] = (), fmt: Optional[str] = None,
              ignore_case: bool = False, ignore_whitespace: bool = False) -> List[Row]:
    source = RowSource(path, tuple(key_fields), fmt, ignore_case, ignore_whitespace)
    return source.load()
