"""
spot-names: Convert Spotify URIs to human-readable names.

Takes Spotify track, album and artist URIs and converts them to
"Artist - Title" lines using the Spotify Web API. Useful for saving
playlists in a readable form, keeping them under revision control or
exporting them to other music systems.

Architecture:
    One linear pipeline per input stream:

    1. spotify/uri.py        Classify each line: local, remote or invalid
    2. converter.py          Accumulate remote IDs into batches (max 50)
    3. spotify/client.py     One Web API request per batch
    4. spotify/formatter.py  'Artist - Title' or CSV lines
    5. cli.py                Write lines to stdout, diagnostics to stderr

    Local URIs (spotify:local:...) carry their own metadata and are
    decoded without an API call.

Modules:
    core/       - Configuration, logging, exceptions
    spotify/    - URI parsing, API client, output formatting
    converter   - Batch conversion session
    cli.py      - Command-line interface

Usage:
    Command Line:
        spotify-uri-to-name playlist.txt
        SPOTIFY_URI_TYPE=album spotify-uri-to-name < albums.txt

    Python API:
        from spot_names.core import load_config
        from spot_names.spotify import SpotifyClient
        from spot_names.converter import UriBatchConverter

        config = load_config()
        client = SpotifyClient.from_config(config.spotify)
        converter = UriBatchConverter(client, uri_kind=config.conversion.uri_type)

        for line in converter.convert(["spotify:track:4cOdK2wGLETKBW3PvgPWqT"]):
            print(line)

Dependencies:
    - spotipy: Spotify Web API client and token flow
    - requests: HTTP session for pass-through client options
    - click: CLI framework
    - rich-click: CLI colors
    - pyyaml: Configuration file parsing
    - python-dotenv: .env file support
"""

__version__ = "0.1.0"
__author__ = "spot-names"
__license__ = "MIT"

# Convenience imports for common usage
from spot_names.converter import ConversionStats, UriBatchConverter
from spot_names.core import (
    Config,
    ConfigError,
    InvalidUriError,
    LocalUriFormatError,
    SpotifyError,
    SpotNamesError,
    UriError,
    UriKindMismatchError,
    get_logger,
    load_config,
    setup_logging,
)
from spot_names.spotify import SpotifyClient, UriKind, parse_uri

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "SpotNamesError",
    "ConfigError",
    "UriError",
    "InvalidUriError",
    "UriKindMismatchError",
    "LocalUriFormatError",
    "SpotifyError",
    # Conversion
    "SpotifyClient",
    "UriKind",
    "parse_uri",
    "UriBatchConverter",
    "ConversionStats",
]
