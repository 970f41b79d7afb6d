"""
Library extraction domain models.

Contains the query kinds and the record shapes reconstructed from the
automation engine's delimited output.
"""

from enum import Enum
from typing import NamedTuple


class QueryKind(str, Enum):
    """Which metadata extraction to perform."""

    ARTISTS = "artists"
    ALBUMS = "albums"
    TRACKS = "tracks"
    PLAYLISTS = "playlists"
    PLAYLIST_TRACKS = "playlist-tracks"
    DETAILED = "detailed"

    @classmethod
    def from_name(cls, name: str) -> "QueryKind":
        """Look up a kind by its command-line name.

        Raises:
            ValueError: If the name is not a known kind
        """
        try:
            return cls(name)
        except ValueError:
            valid = ", ".join(kind.value for kind in cls)
            raise ValueError(f'Invalid type "{name}". Valid types: {valid}') from None


class TrackRecord(NamedTuple):
    """One library track as emitted by the tracks query."""

    title: str = ""
    artist: str = ""
    album_artist: str = ""
    album: str = ""


class PlaylistTrackRecord(NamedTuple):
    """One (playlist, track) membership as emitted by the playlist-tracks query."""

    playlist: str = ""
    track: str = ""
    artist: str = ""
    album: str = ""


TRACK_FIELDS = TrackRecord._fields
PLAYLIST_TRACK_FIELDS = PlaylistTrackRecord._fields
