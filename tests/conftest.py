"""Test configuration and fixtures"""

import pytest

from spot_names.spotify.uri import UriKind


SPOTIFY_ENV_VARS = [
    "SPOTIFY_URI_TYPE",
    "SPOTIFY_CSV",
    "SPOTIFY_BATCH_DELAY",
    "SPOTIFY_ACCESS_TOKEN",
    "SPOTIFY_CLIENT_ID",
    "SPOTIFY_CLIENT_SECRET",
    "DEBUG",
]


class FakeSpotifyClient:
    """
    Stand-in for SpotifyClient.

    Without a catalog every ID resolves to a generated item; with a catalog,
    IDs missing from it come back as null like the real API. An error
    set with fail_with is raised on the next lookup.
    """

    def __init__(self, catalog=None):
        self.catalog = catalog
        self.calls = []
        self.fail_with = None

    def lookup(self, kind, ids):
        self.calls.append((kind, list(ids)))
        if self.fail_with is not None:
            raise self.fail_with
        if self.catalog is None:
            items = [make_item(kind, spotify_id) for spotify_id in ids]
        else:
            items = [self.catalog.get(spotify_id) for spotify_id in ids]
        return {kind.plural: items}


def make_item(kind, spotify_id):
    """Build a minimal track/album/artist object for an ID"""
    if kind is UriKind.ARTIST:
        return {"id": spotify_id, "name": f"Artist {spotify_id}"}
    return {
        "id": spotify_id,
        "name": f"Title {spotify_id}",
        "artists": [{"name": f"Artist {spotify_id}"}],
    }


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Run every test without Spotify env vars, config.yaml or .env"""
    for name in SPOTIFY_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def temp_dir(tmp_path):
    """Temporary directory for input files"""
    return tmp_path


@pytest.fixture
def fake_client():
    """Fake client resolving every ID"""
    return FakeSpotifyClient()


@pytest.fixture
def fake_client_factory():
    """FakeSpotifyClient class, for tests that need a catalog"""
    return FakeSpotifyClient


@pytest.fixture
def sample_track_data():
    """Sample track object as returned by GET /v1/tracks"""
    return {
        'id': '4cOdK2wGLETKBW3PvgPWqT',
        'name': 'Money',
        'artists': [{'id': 'artist_123', 'name': 'Pink Floyd'}],
        'album': {
            'id': 'album_123',
            'name': 'The Dark Side of the Moon',
            'artists': [{'id': 'artist_123', 'name': 'Pink Floyd'}]
        },
        'duration_ms': 382000,
    }
