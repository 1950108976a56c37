"""
Spotify integration module for spot-names.

This module provides everything that knows about Spotify formats and the API:
    - uri: URI kinds, parsing into Local/Remote/Invalid, local URI decoding
    - options: Pass-through HTTP client options
    - client: Token request and batched lookups
    - formatter: 'Artist - Title' and CSV output lines

Usage:
    from spot_names.spotify import SpotifyClient, UriKind, parse_uri

    client = SpotifyClient.from_config(config.spotify)
    parsed = parse_uri("spotify:track:4cOdK2wGLETKBW3PvgPWqT")
    response = client.lookup(UriKind.TRACK, [parsed.spotify_id])
"""

from spot_names.spotify.client import (
    BATCH_LIMITS,
    MAX_BATCH_SIZE,
    SpotifyClient,
    request_access_token,
)
from spot_names.spotify.formatter import clean_line, format_item, format_response
from spot_names.spotify.options import ClientOptions, parse_client_options
from spot_names.spotify.uri import (
    InvalidUri,
    LocalUri,
    RemoteUri,
    UriKind,
    parse_uri,
)

__all__ = [
    # Client
    "SpotifyClient",
    "request_access_token",
    "BATCH_LIMITS",
    "MAX_BATCH_SIZE",
    # Options
    "ClientOptions",
    "parse_client_options",
    # URIs
    "UriKind",
    "LocalUri",
    "RemoteUri",
    "InvalidUri",
    "parse_uri",
    # Formatting
    "format_item",
    "format_response",
    "clean_line",
]
