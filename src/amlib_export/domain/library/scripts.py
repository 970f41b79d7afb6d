"""
Static registry of the AppleScript bound to each query kind.

The scripts ship as package data under ``amlib_export/applescripts``. The
table is read-only; resolving a path never touches the filesystem.
"""

from pathlib import Path
from types import MappingProxyType
from typing import List, Optional

from .models import QueryKind

BUNDLED_SCRIPT_DIR = Path(__file__).resolve().parents[2] / "applescripts"

SCRIPT_FILES = MappingProxyType(
    {
        QueryKind.ARTISTS: "extract-artists.applescript",
        QueryKind.ALBUMS: "extract-tracks.applescript",
        QueryKind.TRACKS: "extract-tracks.applescript",
        QueryKind.DETAILED: "extract-tracks.applescript",
        QueryKind.PLAYLISTS: "extract-playlists.applescript",
        QueryKind.PLAYLIST_TRACKS: "extract-playlist-tracks.applescript",
    }
)


def get_script_path(kind: QueryKind, script_dir: Optional[str] = None) -> Path:
    """
    Resolve the script file for a query kind.

    Args:
        kind: Query kind to run
        script_dir: Directory overriding the bundled scripts

    Returns:
        Path to the .applescript file
    """
    base = Path(script_dir).expanduser() if script_dir else BUNDLED_SCRIPT_DIR
    return base / SCRIPT_FILES[kind]


def build_command(
    kind: QueryKind, osascript_path: str = "osascript", script_dir: Optional[str] = None
) -> List[str]:
    """Build the argv that runs the script bound to ``kind``."""
    return [osascript_path, str(get_script_path(kind, script_dir))]
