"""
Deduplication and ordering of extracted values.

Values are deduplicated case-insensitively; the first-seen casing is kept
for display. Sorting uses a collation key rather than code-point order so
that "beyoncé" sorts next to "Beyonce" and lowercase names are not pushed
after every capitalised one.
"""

import unicodedata
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .models import PlaylistTrackRecord, TrackRecord


def fold_key(value: str) -> str:
    """Lowercased lookup key used for deduplication.

    Plain lowercasing, not casefold(): "Straße" and "STRASSE" stay distinct.
    """
    return value.lower()


def collation_key(value: str) -> Tuple[str, str, str]:
    """Sort key approximating locale collation.

    Compares base letters first (accents and case ignored), then accents,
    then case with lowercase first.

    Examples:
        >>> sorted(["the beatles", "Beyoncé", "ABBA"], key=collation_key)
        ['ABBA', 'Beyoncé', 'the beatles']
    """
    decomposed = unicodedata.normalize("NFD", value)
    base = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return (base.casefold(), decomposed.casefold(), value.swapcase())


class Normalizer:
    """Ordered set of display values keyed by their lowercased form."""

    def __init__(self, no_trim: bool = False, sort: bool = False):
        self.no_trim = no_trim
        self.sort = sort
        self._seen: Dict[str, str] = {}

    def add(self, value: Optional[str]) -> bool:
        """
        Add a raw value.

        Args:
            value: Raw string; None and blank values are rejected

        Returns:
            True if this was a new unique value, False otherwise
        """
        if value is None:
            return False
        if not self.no_trim:
            value = value.strip()
        if not value:
            return False

        key = fold_key(value)
        if key in self._seen:
            return False

        self._seen[key] = value
        return True

    def add_all(self, values: Iterable[Optional[str]]) -> "Normalizer":
        for value in values:
            self.add(value)
        return self

    def values(self) -> List[str]:
        """Display values in insertion order, or collation order if sorting."""
        values = list(self._seen.values())
        if self.sort:
            values.sort(key=collation_key)
        return values

    @property
    def count(self) -> int:
        return len(self._seen)

    def __len__(self) -> int:
        return len(self._seen)

    def __contains__(self, value: object) -> bool:
        return isinstance(value, str) and fold_key(value) in self._seen


def normalize_values(
    values: Iterable[Optional[str]], no_trim: bool = False, sort: bool = False
) -> List[str]:
    """Deduplicate plain values (artist-only or playlist query output)."""
    return Normalizer(no_trim=no_trim, sort=sort).add_all(values).values()


def _field(record: Any, name: str) -> str:
    if isinstance(record, dict):
        value = record.get(name)
    else:
        value = getattr(record, name, None)
    return value or ""


def pick_field(record: Any, primary: str, fallback: Optional[str] = None) -> str:
    """Return ``primary`` unless it is blank, in which case ``fallback``."""
    value = _field(record, primary)
    if fallback is not None and not value.strip():
        value = _field(record, fallback)
    return value


def add_with_fallback(
    normalizer: Normalizer,
    records: Iterable[Any],
    primary: str,
    fallback: Optional[str] = None,
) -> Normalizer:
    """
    Feed one field per record into ``normalizer``.

    Used when a primary attribute is often unset (compilation tracks without
    a per-track artist) and a coarser attribute should stand in.

    Args:
        normalizer: Target normalizer
        records: Track records (NamedTuples or dicts)
        primary: Field used when non-blank after trimming
        fallback: Field used otherwise; None disables fallback

    Returns:
        The same normalizer, for chaining
    """
    for record in records:
        normalizer.add(pick_field(record, primary, fallback))
    return normalizer


def composite_key(
    value: str, qualifier: Optional[str] = None, no_trim: bool = False
) -> str:
    """Format ``"<qualifier> - <value>"``, or the bare value without a qualifier.

    Both parts are trimmed unless ``no_trim``; a blank qualifier is dropped
    either way.
    """
    qualifier = qualifier or ""
    if not no_trim:
        value = value.strip()
        qualifier = qualifier.strip()
    if qualifier.strip():
        return f"{qualifier} - {value}"
    return value


def normalize_artists(
    tracks: Iterable[TrackRecord],
    fallback_album_artist: bool = True,
    no_trim: bool = False,
    sort: bool = False,
) -> List[str]:
    """Unique artists from track records, optionally falling back to album artist."""
    normalizer = Normalizer(no_trim=no_trim, sort=sort)
    fallback = "album_artist" if fallback_album_artist else None
    return add_with_fallback(normalizer, tracks, "artist", fallback).values()


def normalize_albums(
    tracks: Iterable[TrackRecord],
    composite: bool = False,
    no_trim: bool = False,
    sort: bool = False,
) -> List[str]:
    """
    Unique albums from track records.

    In composite mode each album is qualified by its album artist (or track
    artist when that is blank) and the combined string is deduplicated.
    """
    normalizer = Normalizer(no_trim=no_trim, sort=sort)
    for track in tracks:
        if not track.album.strip():
            continue
        if composite:
            artist = pick_field(track, "album_artist", "artist")
            normalizer.add(composite_key(track.album, artist, no_trim=no_trim))
        else:
            normalizer.add(track.album)
    return normalizer.values()


def normalize_track_titles(
    tracks: Iterable[TrackRecord],
    composite: bool = False,
    no_trim: bool = False,
    sort: bool = False,
) -> List[str]:
    """Unique track titles, as ``"Artist - Title"`` in composite mode."""
    normalizer = Normalizer(no_trim=no_trim, sort=sort)
    for track in tracks:
        if not track.title.strip():
            continue
        if composite:
            artist = pick_field(track, "artist", "album_artist")
            normalizer.add(composite_key(track.title, artist, no_trim=no_trim))
        else:
            normalizer.add(track.title)
    return normalizer.values()


def _clean(value: str, no_trim: bool) -> str:
    return value if no_trim else value.strip()


def prepare_detailed_tracks(
    tracks: Iterable[TrackRecord], no_trim: bool = False, sort: bool = False
) -> List[TrackRecord]:
    """Track rows for multi-column output; not deduplicated, sorted by title."""
    rows = [TrackRecord(*(_clean(v, no_trim) for v in track)) for track in tracks]
    if sort:
        rows.sort(key=lambda row: collation_key(row.title))
    return rows


def prepare_playlist_tracks(
    playlist_tracks: Iterable[PlaylistTrackRecord],
    no_trim: bool = False,
    sort: bool = False,
    playlists: Optional[Sequence[str]] = None,
) -> List[PlaylistTrackRecord]:
    """
    Playlist membership rows for multi-column output.

    Args:
        playlist_tracks: Parsed playlist-tracks records
        no_trim: Keep surrounding whitespace
        sort: Sort by playlist, then track
        playlists: Only keep these playlists (matched case-insensitively)
    """
    rows = [
        PlaylistTrackRecord(*(_clean(v, no_trim) for v in record))
        for record in playlist_tracks
    ]

    if playlists:
        selected = {fold_key(name.strip()) for name in playlists}
        rows = [row for row in rows if fold_key(row.playlist.strip()) in selected]

    if sort:
        rows.sort(key=lambda row: (collation_key(row.playlist), collation_key(row.track)))
    return rows
