"""
Export command handler for amlib-export.

Handles every query kind: artists, albums, tracks, playlists,
playlist-tracks, detailed.
"""

from contextlib import nullcontext
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, List, NamedTuple, Optional, Tuple

from loguru import logger
from rich.text import Text

from amlib_export.core.config import Config
from amlib_export.core.console import get_console, get_error_console
from amlib_export.core.output import log
from amlib_export.domain.export import csv_writer
from amlib_export.domain.library import extractor, normalizer, parser
from amlib_export.domain.library.exceptions import ExtractionError
from amlib_export.domain.library.models import QueryKind


class ExportType(NamedTuple):
    """Presentation details of one query kind."""

    name: str
    description: str
    headers: Tuple[str, ...]
    noun: str  # used in "Exported N <noun>"
    multi_column: bool = False


EXPORT_TYPES = {
    QueryKind.ARTISTS: ExportType(
        "Artists",
        "Unique artist names from your library. Uses album artist as fallback "
        "when track artist is empty.",
        ("artist",),
        "unique artists",
    ),
    QueryKind.ALBUMS: ExportType(
        "Albums", "Unique album names", ("album",), "unique albums"
    ),
    QueryKind.TRACKS: ExportType(
        "Tracks", "Unique track titles", ("track",), "unique tracks"
    ),
    QueryKind.PLAYLISTS: ExportType(
        "Playlists", "Playlist names only", ("playlist",), "playlists"
    ),
    QueryKind.PLAYLIST_TRACKS: ExportType(
        "Playlist Tracks",
        "Playlists with their track listings",
        ("playlist", "track", "artist", "album"),
        "playlist tracks",
        multi_column=True,
    ),
    QueryKind.DETAILED: ExportType(
        "Detailed",
        "Full track metadata (title, artist, album artist, album)",
        ("title", "artist", "album_artist", "album"),
        "tracks",
        multi_column=True,
    ),
}


@dataclass
class ExportOptions:
    """Per-run options, resolved from config and command-line flags."""

    kind: QueryKind = QueryKind.ARTISTS
    out: Optional[Path] = None
    sort: bool = False
    limit: Optional[int] = None
    no_trim: bool = False
    strict: bool = False  # Artists: disable album artist fallback
    composite: bool = False
    playlists: List[str] = field(default_factory=list)
    color: bool = True
    progress: bool = True

    @classmethod
    def from_config(cls, config: Config, **overrides: Any) -> "ExportOptions":
        options = cls(
            sort=config.export.sort,
            no_trim=not config.export.trim,
            strict=not config.export.album_artist_fallback,
            composite=config.export.composite_keys,
            color=config.ui.use_colors,
            progress=config.ui.show_progress,
        )
        for name, value in overrides.items():
            setattr(options, name, value)
        return options


class ExportData(NamedTuple):
    """Normalized output ready for rendering."""

    kind: QueryKind
    headers: Tuple[str, ...]
    rows: List[Any]  # strings for single-column kinds, records otherwise
    multi_column: bool

    @property
    def count(self) -> int:
        return len(self.rows)


def query_for(options: ExportOptions) -> QueryKind:
    """The query actually run for an export.

    Artists with album-artist fallback need full track data.
    """
    if options.kind is QueryKind.ARTISTS and not options.strict:
        return QueryKind.TRACKS
    return options.kind


def build_export(options: ExportOptions, lines: List[str]) -> ExportData:
    """
    Turn raw extraction lines into normalized, ordered output.

    Args:
        options: Export options (kind, sort, trim, fallback, composite, filter)
        lines: Raw lines from the query returned by ``query_for(options)``

    Returns:
        ExportData for the serializer
    """
    kind = options.kind
    export_type = EXPORT_TYPES[kind]
    no_trim, sort = options.no_trim, options.sort

    if kind is QueryKind.ARTISTS:
        if options.strict:
            rows = normalizer.normalize_values(lines, no_trim=no_trim, sort=sort)
        else:
            rows = normalizer.normalize_artists(
                parser.parse_tracks(lines),
                fallback_album_artist=True,
                no_trim=no_trim,
                sort=sort,
            )
    elif kind is QueryKind.ALBUMS:
        rows = normalizer.normalize_albums(
            parser.parse_tracks(lines),
            composite=options.composite,
            no_trim=no_trim,
            sort=sort,
        )
    elif kind is QueryKind.TRACKS:
        rows = normalizer.normalize_track_titles(
            parser.parse_tracks(lines),
            composite=options.composite,
            no_trim=no_trim,
            sort=sort,
        )
    elif kind is QueryKind.PLAYLISTS:
        rows = normalizer.normalize_values(lines, no_trim=no_trim, sort=sort)
    elif kind is QueryKind.PLAYLIST_TRACKS:
        rows = normalizer.prepare_playlist_tracks(
            parser.parse_playlist_tracks(lines),
            no_trim=no_trim,
            sort=sort,
            playlists=options.playlists,
        )
    else:
        rows = normalizer.prepare_detailed_tracks(
            parser.parse_tracks(lines), no_trim=no_trim, sort=sort
        )

    return ExportData(kind, export_type.headers, rows, export_type.multi_column)


def render_csv(data: ExportData) -> str:
    """File form: headered RFC4180 CSV."""
    if data.multi_column:
        return csv_writer.multi_column_csv(data.rows, data.headers)
    return csv_writer.single_column_csv(data.rows, data.headers[0])


def render_data(data: ExportData) -> str:
    """Piped stdout form: headerless RFC4180 data lines."""
    if data.multi_column:
        return csv_writer.multi_column_data(data.rows, data.headers)
    return csv_writer.single_column_data(data.rows)


def render_terminal(data: ExportData, color: bool = True) -> Text:
    """Interactive terminal form: headerless, colored by column."""
    if data.multi_column:
        return csv_writer.colorize_multi_column(data.rows, data.headers, color=color)
    return csv_writer.colorize_single_column(data.rows, data.headers[0], color=color)


def emit(data: ExportData, out: Optional[Path], color: bool = True) -> None:
    """Write ``data`` to ``out`` as CSV, or to stdout."""
    if out is not None:
        csv_writer.write_csv_file(out, render_csv(data))
        return

    console = get_console()
    if console.is_terminal:
        console.print(render_terminal(data, color=color), end="", soft_wrap=True)
    else:
        csv_writer.write_to_stdout(render_data(data))


def run_export(options: ExportOptions, config: Config) -> ExportData:
    """
    Run one export: extract, normalize, then write the output.

    Raises:
        ExtractionError: If the automation engine run failed
        FileWriteError: If the CSV file could not be written
    """
    export_type = EXPORT_TYPES[options.kind]
    query = query_for(options)
    label = export_type.name.lower()

    error_console = get_error_console()
    show_status = options.progress and error_console.is_terminal
    status = (
        error_console.status(f"Extracting {label} from Music.app...")
        if show_status
        else nullcontext()
    )

    def on_line(line: str, count: int) -> None:
        if show_status:
            status.update(f"Extracting {label} from Music.app... {count} lines read")

    with status:
        result = extractor.run_query(
            query,
            limit=options.limit,
            on_line=on_line,
            osascript_path=config.export.osascript_path,
            script_dir=config.export.script_dir,
        )

    if not result.ok:
        raise ExtractionError(result.kind, result.detail)

    logger.info(f"{query.value} query returned {len(result.lines)} lines")
    data = build_export(options, result.lines)

    emit(data, options.out, color=options.color)

    limit_note = f" (limited to {options.limit} lines)" if result.truncated else ""
    target = f" to {options.out}" if options.out is not None else ""
    log(f"Exported {data.count} {export_type.noun}{target}{limit_note}", style="green")
    return data
