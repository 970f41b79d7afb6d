"""Tests for deduplication, fallback extraction and ordering."""

import pytest

from amlib_export.domain.library.models import PlaylistTrackRecord, TrackRecord
from amlib_export.domain.library.normalizer import (
    Normalizer,
    add_with_fallback,
    collation_key,
    composite_key,
    normalize_albums,
    normalize_artists,
    normalize_track_titles,
    normalize_values,
    pick_field,
    prepare_detailed_tracks,
    prepare_playlist_tracks,
)


class TestNormalizerAdd:
    """Tests for Normalizer.add."""

    def test_new_value_returns_true(self) -> None:
        normalizer = Normalizer()
        assert normalizer.add("Abba") is True
        assert normalizer.values() == ["Abba"]

    def test_case_insensitive_duplicate_keeps_first_casing(self) -> None:
        """The first-seen casing is the display value."""
        normalizer = Normalizer()
        assert normalizer.add("Abba") is True
        assert normalizer.add("ABBA") is False
        assert normalizer.add("abba") is False
        assert normalizer.values() == ["Abba"]
        assert len(normalizer) == 1

    def test_trims_by_default(self) -> None:
        normalizer = Normalizer()
        normalizer.add("  Beyoncé  ")
        assert normalizer.add("Beyoncé") is False
        assert normalizer.values() == ["Beyoncé"]

    def test_no_trim_keeps_whitespace(self) -> None:
        """With no_trim, padded values are distinct and kept verbatim."""
        normalizer = Normalizer(no_trim=True)
        assert normalizer.add(" Beyoncé ") is True
        assert normalizer.add("Beyoncé") is True
        assert normalizer.values() == [" Beyoncé ", "Beyoncé"]

    @pytest.mark.parametrize("value", ["", "   ", "\t\n", None])
    def test_blank_values_rejected(self, value) -> None:
        normalizer = Normalizer()
        assert normalizer.add(value) is False
        assert normalizer.count == 0

    def test_contains_is_case_insensitive(self) -> None:
        normalizer = Normalizer().add_all(["The Beatles"])
        assert "the beatles" in normalizer
        assert "Queen" not in normalizer
        assert 42 not in normalizer

    def test_only_case_variants_merge(self) -> None:
        """Lowercasing, not case folding: sharp s and final sigma stay distinct."""
        assert normalize_values(["Straße", "STRASSE"]) == ["Straße", "STRASSE"]
        assert normalize_values(["Σίσυφος", "σίσυφοσ"]) == ["Σίσυφος", "σίσυφοσ"]


class TestNormalizerOrdering:
    """Tests for Normalizer.values ordering."""

    def test_insertion_order_without_sort(self) -> None:
        values = normalize_values(["Queen", "abba", "Queen", "Blur", "ABBA"])
        assert values == ["Queen", "abba", "Blur"]

    def test_sorted_by_collation(self) -> None:
        """Sorting ignores case and accents at the first level."""
        values = normalize_values(
            ["Taylor Swift", "the beatles", "Taylor Swift", "  Beyoncé  "], sort=True
        )
        assert values == ["Beyoncé", "Taylor Swift", "the beatles"]

    def test_sort_places_lowercase_with_uppercase(self) -> None:
        values = normalize_values(["zz top", "Abba", "beck", "Coldplay"], sort=True)
        assert values == ["Abba", "beck", "Coldplay", "zz top"]

    def test_accented_sorts_next_to_base_letter(self) -> None:
        values = normalize_values(["Étienne", "Frank", "Eels"], sort=True)
        assert values == ["Eels", "Étienne", "Frank"]

    def test_collation_key_tiebreaks_on_case(self) -> None:
        """Lowercase sorts before uppercase when letters are equal."""
        assert collation_key("abc") < collation_key("ABC")

    def test_idempotent(self) -> None:
        """Normalizing normalized output changes nothing."""
        raw = ["Abba", "ABBA", " Queen", "queen ", "Blur", "", "blur"]
        once = normalize_values(raw)
        assert normalize_values(once) == once

    def test_idempotent_sorted(self) -> None:
        raw = ["b", "A", "a", "C", "c "]
        once = normalize_values(raw, sort=True)
        assert normalize_values(once, sort=True) == once


class TestFallbackExtraction:
    """Tests for pick_field and add_with_fallback."""

    def test_primary_used_when_present(self) -> None:
        track = TrackRecord(artist="Daft Punk", album_artist="Various Artists")
        assert pick_field(track, "artist", "album_artist") == "Daft Punk"

    def test_fallback_used_when_primary_blank(self) -> None:
        track = TrackRecord(artist="   ", album_artist="Various Artists")
        assert pick_field(track, "artist", "album_artist") == "Various Artists"

    def test_works_with_dicts(self) -> None:
        record = {"artist": "", "album_artist": "Various Artists"}
        assert pick_field(record, "artist", "album_artist") == "Various Artists"

    def test_fallback_enabled(self) -> None:
        tracks = [TrackRecord(title="Track 1", artist="", album_artist="Various Artists")]
        assert normalize_artists(tracks, fallback_album_artist=True) == ["Various Artists"]

    def test_fallback_disabled_contributes_nothing(self) -> None:
        tracks = [TrackRecord(title="Track 1", artist="", album_artist="Various Artists")]
        assert normalize_artists(tracks, fallback_album_artist=False) == []

    def test_add_with_fallback_chains(self) -> None:
        normalizer = Normalizer()
        result = add_with_fallback(
            normalizer,
            [TrackRecord(artist="Moby"), TrackRecord(artist="MOBY"), TrackRecord(album_artist="Air")],
            "artist",
            "album_artist",
        )
        assert result is normalizer
        assert normalizer.values() == ["Moby", "Air"]


class TestCompositeKeys:
    """Tests for composite_key and the album/track listings."""

    def test_with_qualifier(self) -> None:
        assert composite_key("Abbey Road", "The Beatles") == "The Beatles - Abbey Road"

    def test_without_qualifier(self) -> None:
        assert composite_key("Abbey Road", "  ") == "Abbey Road"
        assert composite_key("Abbey Road") == "Abbey Road"

    def test_flat_albums(self) -> None:
        tracks = [
            TrackRecord(title="a", artist="X", album="Album"),
            TrackRecord(title="b", artist="Y", album="ALBUM"),
            TrackRecord(title="c", artist="Z", album=""),
        ]
        assert normalize_albums(tracks) == ["Album"]

    def test_composite_albums_prefer_album_artist(self) -> None:
        tracks = [
            TrackRecord(title="a", artist="Guest", album_artist="Host", album="Live"),
            TrackRecord(title="b", artist="Solo", album_artist="", album="Debut"),
            TrackRecord(title="c", artist="", album_artist="", album="Mystery"),
        ]
        assert normalize_albums(tracks, composite=True) == [
            "Host - Live",
            "Solo - Debut",
            "Mystery",
        ]

    def test_composite_collapses_case_variants(self) -> None:
        """The composite string is deduplicated as one opaque value."""
        tracks = [
            TrackRecord(title="x", artist="abba", album="Gold"),
            TrackRecord(title="y", artist="ABBA", album="gold"),
        ]
        assert normalize_albums(tracks, composite=True) == ["abba - Gold"]

    def test_track_titles(self) -> None:
        tracks = [
            TrackRecord(title="Intro", artist="The xx"),
            TrackRecord(title="intro", artist="M83"),
            TrackRecord(title="", artist="Nobody"),
        ]
        assert normalize_track_titles(tracks) == ["Intro"]
        assert normalize_track_titles(tracks, composite=True) == [
            "The xx - Intro",
            "M83 - intro",
        ]

    def test_no_trim_keeps_composite_parts_verbatim(self) -> None:
        assert composite_key(" Abbey Road", "The Beatles ", no_trim=True) == (
            "The Beatles  -  Abbey Road"
        )
        assert composite_key(" Abbey Road ", "  ", no_trim=True) == " Abbey Road "

    def test_composite_albums_honour_no_trim(self) -> None:
        tracks = [
            TrackRecord(title="a", album_artist="Host", album="Live "),
            TrackRecord(title="b", album_artist="Host", album="Live"),
        ]
        assert normalize_albums(tracks, composite=True, no_trim=True) == [
            "Host - Live ",
            "Host - Live",
        ]
        assert normalize_albums(tracks, composite=True) == ["Host - Live"]


class TestPrepareRecords:
    """Tests for multi-column record preparation."""

    def test_detailed_trimmed_not_deduplicated(self) -> None:
        tracks = [
            TrackRecord(" Song ", " Artist ", "", " Album "),
            TrackRecord("Song", "Artist", "", "Album"),
        ]
        rows = prepare_detailed_tracks(tracks)
        assert rows == [
            TrackRecord("Song", "Artist", "", "Album"),
            TrackRecord("Song", "Artist", "", "Album"),
        ]

    def test_detailed_no_trim(self) -> None:
        rows = prepare_detailed_tracks([TrackRecord(" Song ")], no_trim=True)
        assert rows[0].title == " Song "

    def test_detailed_sorted_by_title(self) -> None:
        tracks = [TrackRecord("b"), TrackRecord("A"), TrackRecord("c")]
        assert [r.title for r in prepare_detailed_tracks(tracks, sort=True)] == ["A", "b", "c"]

    def test_playlist_tracks_sorted_by_playlist_then_track(self) -> None:
        rows = prepare_playlist_tracks(
            [
                PlaylistTrackRecord("Workout", "Zebra"),
                PlaylistTrackRecord("chill", "Yes"),
                PlaylistTrackRecord("Workout", "Alpha"),
            ],
            sort=True,
        )
        assert [(r.playlist, r.track) for r in rows] == [
            ("chill", "Yes"),
            ("Workout", "Alpha"),
            ("Workout", "Zebra"),
        ]

    def test_playlist_selection_case_insensitive(self) -> None:
        rows = prepare_playlist_tracks(
            [
                PlaylistTrackRecord("Road Trip", "Africa", "Toto"),
                PlaylistTrackRecord("Focus", "Weightless", "Marconi Union"),
            ],
            playlists=["road trip"],
        )
        assert rows == [PlaylistTrackRecord("Road Trip", "Africa", "Toto", "")]
