"""
CSV and terminal rendering of normalized values and records.

Files get RFC4180 CSV with a human-formatted header row. The terminal gets
headerless rows: Rich ``Text`` colored by column, or plain escaped CSV data
when stdout is piped.
"""

import os
import re
import stat
import sys
import tempfile
from pathlib import Path
from typing import Any, Iterable, Mapping, Optional, Sequence

from loguru import logger
from rich.text import Text

from ..library.exceptions import FileWriteError

COLUMN_STYLES = {
    "artist": "magenta",
    "album": "yellow",
    "track": "green",
    "title": "green",  # alias for track
    "playlist": "cyan",
}
DEFAULT_STYLE = "white"
SEPARATOR = " · "
SEPARATOR_STYLE = "dim"

_NEEDS_QUOTING = re.compile(r'[",\r\n]')


def escape_field(value: Any) -> str:
    """
    Escape a single CSV field according to RFC4180.

    The field is quoted, with inner quotes doubled, only when it contains a
    comma, double quote, carriage return or line feed.

    Example:
        escape_field('He said "hi", twice') -> '"He said ""hi"", twice"'
    """
    if value is None:
        return ""
    text = str(value)
    if _NEEDS_QUOTING.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def format_header(header: str) -> str:
    """Format a column name for file output: ``album_artist`` -> ``Album Artist``."""
    return " ".join(word[:1].upper() + word[1:] for word in header.split("_"))


def column_style(column: str) -> str:
    """Rich style for a column name, neutral for unknown columns."""
    return COLUMN_STYLES.get(column.lower(), DEFAULT_STYLE)


def _row_value(row: Any, column: str) -> Any:
    if isinstance(row, Mapping):
        return row.get(column)
    return getattr(row, column, None)


def _join_lines(lines: Iterable[str]) -> str:
    return "".join(f"{line}\n" for line in lines)


def single_column_csv(values: Iterable[str], header: str = "value") -> str:
    """Single-column CSV with header and trailing newline."""
    return _join_lines([format_header(header), *(escape_field(v) for v in values)])


def single_column_data(values: Iterable[str]) -> str:
    """Single-column data lines without header."""
    return _join_lines(escape_field(v) for v in values)


def _data_line(row: Any, headers: Sequence[str]) -> str:
    return ",".join(escape_field(_row_value(row, column)) for column in headers)


def multi_column_csv(rows: Iterable[Any], headers: Sequence[str]) -> str:
    """
    Multi-column CSV with header and trailing newline.

    Args:
        rows: Records (NamedTuples or mappings) holding a field per header
        headers: Column names, also the record field names
    """
    header_line = ",".join(escape_field(format_header(h)) for h in headers)
    return _join_lines([header_line, *(_data_line(row, headers) for row in rows)])


def multi_column_data(rows: Iterable[Any], headers: Sequence[str]) -> str:
    """Multi-column data lines without header."""
    return _join_lines(_data_line(row, headers) for row in rows)


def colorize_single_column(
    values: Iterable[str], column: str, color: bool = True
) -> Text:
    """Terminal rendering of a single column, one value per line."""
    style = column_style(column) if color else ""
    text = Text()
    for value in values:
        text.append(value, style=style)
        text.append("\n")
    return text


def colorize_multi_column(
    rows: Iterable[Any], headers: Sequence[str], color: bool = True
) -> Text:
    """Terminal rendering of records, fields joined by a dim separator glyph."""
    separator_style = SEPARATOR_STYLE if color else ""
    text = Text()
    for row in rows:
        for index, column in enumerate(headers):
            if index:
                text.append(SEPARATOR, style=separator_style)
            text.append(
                _row_value(row, column) or "",
                style=column_style(column) if color else "",
            )
        text.append("\n")
    return text


def _target_mode(path: Path) -> int:
    """Permission bits for the written file: the existing file's, else 0666 minus umask."""
    if path.exists():
        return stat.S_IMODE(path.stat().st_mode)
    umask = os.umask(0)
    os.umask(umask)
    return 0o666 & ~umask


def write_csv_file(path: Path, content: str) -> None:
    """
    Write CSV content in one piece.

    The content goes to a temporary file next to ``path`` which then
    replaces it, so a failed write never leaves a partial artifact.

    Raises:
        FileWriteError: If the file could not be written
    """
    path = Path(path)
    tmp_name: Optional[str] = None
    try:
        fd, tmp_name = tempfile.mkstemp(
            prefix=f".{path.name}.", suffix=".tmp", dir=path.parent
        )
        with os.fdopen(fd, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        os.chmod(tmp_name, _target_mode(path))
        os.replace(tmp_name, path)
        tmp_name = None
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise FileWriteError(str(e), path=str(path)) from e
    finally:
        if tmp_name is not None:
            try:
                os.unlink(tmp_name)
            except OSError:
                pass

    logger.info(f"Wrote {len(content.encode('utf-8'))} bytes to {path}")


def write_to_stdout(content: str) -> None:
    """Write already-rendered content to stdout unchanged."""
    sys.stdout.write(content)
    sys.stdout.flush()
