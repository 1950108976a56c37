"""Test URI batch conversion"""

import logging

import pytest

from spot_names.converter import UriBatchConverter
from spot_names.core.exceptions import (
    InvalidUriError,
    LocalUriFormatError,
    SpotifyError,
    UriKindMismatchError,
)
from spot_names.spotify.uri import UriKind


def track_uris(count, prefix="spotify:track:"):
    return [f"{prefix}id{index}" for index in range(count)]


class TestBatching:
    """Test batch accumulation and flushing"""

    def test_fifty_one_tracks_make_two_requests(self, fake_client):
        """Test 51 track URIs are sent as 50 + 1"""
        converter = UriBatchConverter(fake_client)

        lines = list(converter.convert(track_uris(51)))

        assert [len(ids) for _, ids in fake_client.calls] == [50, 1]
        assert lines == [f"Artist id{index} - Title id{index}" for index in range(51)]
        assert converter.stats.batches == 2
        assert converter.stats.lines_emitted == 51

    def test_albums_batch_by_twenty(self, fake_client):
        """Test albums respect the smaller several-albums limit"""
        converter = UriBatchConverter(fake_client, uri_kind="album")

        list(converter.convert([f"album{index}" for index in range(45)]))

        assert [len(ids) for _, ids in fake_client.calls] == [20, 20, 5]
        assert all(kind is UriKind.ALBUM for kind, _ in fake_client.calls)

    def test_empty_input(self, fake_client):
        """Test no input means no requests and no output"""
        assert list(UriBatchConverter(fake_client).convert([])) == []
        assert fake_client.calls == []

    def test_ids_are_stripped_of_prefix_and_query(self, fake_client):
        """Test only bare IDs are sent"""
        converter = UriBatchConverter(fake_client)

        list(converter.convert([
            "https://open.spotify.com/track/abc?si=123\n",
            "  spotify:track:def  \n",
            "ghi",
        ]))

        assert fake_client.calls == [(UriKind.TRACK, ["abc", "def", "ghi"])]

    def test_blank_line_flushes_batch(self, fake_client):
        """Test a blank line ends the current batch and processing continues"""
        converter = UriBatchConverter(fake_client)

        lines = list(converter.convert(["spotify:track:a", "spotify:track:b", "", "spotify:track:c"]))

        assert [ids for _, ids in fake_client.calls] == [["a", "b"], ["c"]]
        assert len(lines) == 3

    def test_delay_after_each_batch(self, fake_client, monkeypatch):
        """Test the inter-batch delay is slept after every request"""
        sleeps = []
        monkeypatch.setattr("spot_names.converter.time.sleep", sleeps.append)
        converter = UriBatchConverter(fake_client, batch_delay=0.2)

        list(converter.convert(track_uris(60)))

        assert sleeps == [0.2, 0.2]

    def test_no_delay_by_default(self, fake_client, monkeypatch):
        """Test no sleep when the delay is zero"""
        sleeps = []
        monkeypatch.setattr("spot_names.converter.time.sleep", sleeps.append)

        list(UriBatchConverter(fake_client).convert(track_uris(3)))

        assert sleeps == []


class TestLocalUris:
    """Test local URIs interleaved with remote ones"""

    def test_local_flushes_pending_batch_first(self, fake_client):
        """Test output order equals input order around local URIs"""
        converter = UriBatchConverter(fake_client)

        lines = list(converter.convert([
            "spotify:track:a",
            "spotify:local:Pink+Floyd::Money:123",
            "spotify:track:b",
        ]))

        assert lines == ["Artist a - Title a", "Pink Floyd - Money", "Artist b - Title b"]
        assert [ids for _, ids in fake_client.calls] == [["a"], ["b"]]
        assert converter.stats.local_uris == 1

    def test_local_only_makes_no_requests(self, fake_client):
        """Test local URIs never reach the client"""
        lines = list(UriBatchConverter(fake_client).convert([
            "spotify:local:::Money:123",
            "https://open.spotify.com/local/Daft+Punk//Aerodynamic/212",
        ]))

        assert lines == ["Money", "Daft Punk - Aerodynamic"]
        assert fake_client.calls == []

    def test_local_does_not_pin_kind(self, fake_client):
        """Test the kind is still inferred from the first remote URI"""
        converter = UriBatchConverter(fake_client)

        list(converter.convert(["spotify:local:A::B:1", "spotify:artist:xyz"]))

        assert converter.uri_kind is UriKind.ARTIST

    def test_unrecognized_local_uri(self, fake_client):
        """Test an undecodable local URI aborts"""
        with pytest.raises(LocalUriFormatError):
            list(UriBatchConverter(fake_client).convert(["spotify:local:nothing"]))

    def test_unrecognized_local_uri_flushes_pending_batch(self, fake_client):
        """Test pending remote lines are emitted before a bad local URI aborts"""
        converter = UriBatchConverter(fake_client)
        lines = []

        with pytest.raises(LocalUriFormatError):
            for line in converter.convert(["spotify:track:a", "spotify:local:bad", "spotify:track:never"]):
                lines.append(line)

        assert lines == ["Artist a - Title a"]
        assert fake_client.calls == [(UriKind.TRACK, ["a"])]


class TestUriKind:
    """Test kind pinning and validation"""

    def test_kind_inferred_from_first_uri(self, fake_client):
        """Test the first prefixed URI pins the kind for later bare IDs"""
        converter = UriBatchConverter(fake_client)

        lines = list(converter.convert(["https://open.spotify.com/artist/a1", "b2"]))

        assert converter.uri_kind is UriKind.ARTIST
        assert fake_client.calls == [(UriKind.ARTIST, ["a1", "b2"])]
        assert lines == ["Artist a1", "Artist b2"]

    def test_configured_kind_rejects_other_kind(self, fake_client):
        """Test an album URI is rejected when the kind is fixed to track"""
        converter = UriBatchConverter(fake_client, uri_kind=UriKind.TRACK)

        with pytest.raises(UriKindMismatchError) as exc_info:
            list(converter.convert(["spotify:album:abc"]))

        assert exc_info.value.uri == "spotify:album:abc"
        assert fake_client.calls == []

    def test_inferred_kind_is_fixed(self, fake_client):
        """Test a later URI of another kind is rejected"""
        converter = UriBatchConverter(fake_client)

        with pytest.raises(UriKindMismatchError):
            list(converter.convert(["spotify:album:one", "spotify:track:two"]))

    def test_bare_id_pins_default_kind(self, fake_client):
        """Test a bare ID first pins track"""
        converter = UriBatchConverter(fake_client)

        with pytest.raises(UriKindMismatchError):
            list(converter.convert(["abc", "spotify:album:def"]))

        assert converter.uri_kind is UriKind.TRACK

    def test_kind_persists_across_streams(self, fake_client):
        """Test the pinned kind carries over to the next file"""
        converter = UriBatchConverter(fake_client)
        list(converter.convert(["spotify:album:one"]))

        with pytest.raises(UriKindMismatchError):
            list(converter.convert(["spotify:track:two"]))


class TestErrors:
    """Test failure handling"""

    def test_invalid_uri_aborts(self, fake_client):
        """Test an invalid token raises before later lines are read"""
        converter = UriBatchConverter(fake_client)

        with pytest.raises(InvalidUriError) as exc_info:
            list(converter.convert(["spotify:track:good", "spotify:track:b@d", "spotify:track:never"]))

        assert exc_info.value.message == "Invalid URI provided: spotify:track:b@d"
        assert converter.stats.lines_read == 2
        assert fake_client.calls == []

    def test_lookup_error_propagates(self, fake_client):
        """Test API errors abort the run without retry"""
        fake_client.fail_with = SpotifyError("boom", raw_response='{"error": "boom"}')

        with pytest.raises(SpotifyError):
            list(UriBatchConverter(fake_client).convert(track_uris(3)))

        assert len(fake_client.calls) == 1

    def test_all_null_batch_continues(self, fake_client_factory, caplog):
        """Test an unmatched batch warns and later batches still run"""
        client = fake_client_factory(catalog={
            "good": {"name": "Money", "artists": [{"name": "Pink Floyd"}]},
        })
        converter = UriBatchConverter(client)

        with caplog.at_level(logging.WARNING):
            lines = list(converter.convert(["spotify:track:missing", "", "spotify:track:good"]))

        assert lines == ["Pink Floyd - Money"]
        assert len(client.calls) == 2
        assert "no matching track URI found" in caplog.text


class TestOutputModes:
    """Test CSV and default output"""

    def test_csv_mode(self, fake_client_factory):
        """Test the CSV example from the docs"""
        client = fake_client_factory(catalog={
            "x": {"name": "C", "artists": [{"name": "A"}, {"name": "B"}]},
        })

        assert list(UriBatchConverter(client, csv_mode=True).convert(["x"])) == ['"A, B","C"']
        assert list(UriBatchConverter(client).convert(["x"])) == ["A, B - C"]
