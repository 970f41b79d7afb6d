"""Library domain - extraction from Music.app and normalization.

This domain handles:
- Query kinds and record models
- Running the automation scripts and classifying failures
- Parsing delimited records
- Deduplicating and ordering values
"""

# Models
from .models import QueryKind, TrackRecord, PlaylistTrackRecord

# Errors
from .exceptions import (
    ErrorKind,
    ExitCode,
    ExportError,
    ExtractionError,
    FileWriteError,
    classify_error,
    error_message,
)

# Extraction
from .extractor import (
    ExtractionSuccess,
    ExtractionFailure,
    ExtractionResult,
    run_script,
    run_query,
)

# Parsing
from .parser import FIELD_SEPARATOR, parse_record, parse_tracks, parse_playlist_tracks

# Normalization
from .normalizer import (
    Normalizer,
    normalize_values,
    add_with_fallback,
    composite_key,
    normalize_artists,
    normalize_albums,
    normalize_track_titles,
    prepare_detailed_tracks,
    prepare_playlist_tracks,
)

__all__ = [
    # Models
    "QueryKind",
    "TrackRecord",
    "PlaylistTrackRecord",
    # Errors
    "ErrorKind",
    "ExitCode",
    "ExportError",
    "ExtractionError",
    "FileWriteError",
    "classify_error",
    "error_message",
    # Extraction
    "ExtractionSuccess",
    "ExtractionFailure",
    "ExtractionResult",
    "run_script",
    "run_query",
    # Parsing
    "FIELD_SEPARATOR",
    "parse_record",
    "parse_tracks",
    "parse_playlist_tracks",
    # Normalization
    "Normalizer",
    "normalize_values",
    "add_with_fallback",
    "composite_key",
    "normalize_artists",
    "normalize_albums",
    "normalize_track_titles",
    "prepare_detailed_tracks",
    "prepare_playlist_tracks",
]
