"""
Spotify URI parsing for spot-names.

Every input token is classified into exactly one of three variants:

    LocalUri    - spotify:local:... or open.spotify.com/local/...
                  Carries artist/album/title literally, never looked up.
    RemoteUri   - spotify:<kind>:<id>, http(s)://open.spotify.com/<kind>/<id>
                  or a bare <id>, optionally followed by ?query.
    InvalidUri  - anything else.

Accepted remote forms:
    spotify:track:4cOdK2wGLETKBW3PvgPWqT
    https://open.spotify.com/album/4aawyAB9vmqN3uQ7FjRGTy?si=xyz
    4cOdK2wGLETKBW3PvgPWqT

IDs are 22 characters today, but the length is not enforced in case
the Spotify API changes.

Local URIs:
    spotify:local:<artist>:<album>:<title>:<duration>
    https://open.spotify.com/local/<artist>/<album>/<title>/<duration>

    Spaces are written as '+' and the segments are percent-encoded.
"""

import re
from dataclasses import dataclass
from enum import Enum
from urllib.parse import unquote_plus

from spot_names.core.exceptions import LocalUriFormatError


class UriKind(str, Enum):
    """Category of a remote URI, selecting the API endpoint and output shape."""
    TRACK = "track"
    ALBUM = "album"
    ARTIST = "artist"

    @property
    def plural(self) -> str:
        """Endpoint and response key name: tracks, albums, artists."""
        return f"{self.value}s"


_KINDS = "|".join(kind.value for kind in UriKind)

_REMOTE_URI_RE = re.compile(
    rf"^(?:spotify:(?P<uri_kind>{_KINDS}):"
    rf"|https?://open\.spotify\.com/(?P<url_kind>{_KINDS})/)?"
    r"(?P<id>[A-Za-z0-9]+)"
    r"(?:\?.+)?$"
)

LOCAL_URI_PREFIX = "spotify:local:"
LOCAL_URL_MARKER = "open.spotify.com/local/"


@dataclass(frozen=True)
class LocalUri:
    """
    A local file reference carrying its own metadata.

    Attributes:
        raw: The input token.
        artist: Decoded artist, empty string if the URI has none.
        album: Decoded album, may be empty.
        title: Decoded track title.
    """
    raw: str
    artist: str
    album: str
    title: str

    @property
    def display_name(self) -> str:
        """'Artist - Title', or just 'Title' when there is no artist."""
        if self.artist:
            return f"{self.artist} - {self.title}"
        return self.title


@dataclass(frozen=True)
class RemoteUri:
    """
    A reference to a track, album or artist that must be looked up.

    Attributes:
        raw: The input token.
        spotify_id: The bare alphanumeric identifier.
        kind: Kind named by the URI prefix, or None for a bare ID.
    """
    raw: str
    spotify_id: str
    kind: UriKind | None = None


@dataclass(frozen=True)
class InvalidUri:
    raw: str
    reason: str


ParsedUri = LocalUri | RemoteUri | InvalidUri


def is_local_uri(token: str) -> bool:
    """Check whether a token is a local file URI."""
    return token.startswith(LOCAL_URI_PREFIX) or LOCAL_URL_MARKER in token


def parse_uri(token: str) -> ParsedUri:
    """
    Classify a single input token.

    Args:
        token: One stripped line of input.

    Returns:
        LocalUri, RemoteUri or InvalidUri.

    Raises:
        LocalUriFormatError: If the token is a local URI whose body does not
                             have the artist/album/title/duration layout.

    Examples:
        parse_uri("spotify:track:abc123")
        # RemoteUri(raw='spotify:track:abc123', spotify_id='abc123', kind=UriKind.TRACK)

        parse_uri("spotify:local:Pink+Floyd::Money:123").display_name
        # 'Pink Floyd - Money'
    """
    if is_local_uri(token):
        return parse_local_uri(token)

    match = _REMOTE_URI_RE.match(token)
    if match is None:
        return InvalidUri(raw=token, reason=f"Invalid URI provided: {token}")

    kind_name = match.group("uri_kind") or match.group("url_kind")
    return RemoteUri(
        raw=token,
        spotify_id=match.group("id"),
        kind=UriKind(kind_name) if kind_name else None
    )


def parse_local_uri(token: str) -> LocalUri:
    """
    Decode the metadata embedded in a local URI.

    The body after the prefix is split into artist, album and the rest;
    the title is the rest minus its final (duration) segment, so a title
    may itself contain the separator.

    Raises:
        LocalUriFormatError: If the prefix is not recognized or fewer than
                             three separators follow it.
    """
    if token.startswith(LOCAL_URI_PREFIX):
        body = token[len(LOCAL_URI_PREFIX):]
        separator = ":"
    elif LOCAL_URL_MARKER in token:
        body = token.split(LOCAL_URL_MARKER, 1)[1]
        separator = "/"
    else:
        raise LocalUriFormatError(f"Unrecognized track URI format: {token}", uri=token)

    parts = body.split(separator, 2)
    if len(parts) < 3 or separator not in parts[2]:
        raise LocalUriFormatError(f"Unrecognized track URI format: {token}", uri=token)

    artist, album, rest = parts
    title = rest.rsplit(separator, 1)[0]

    return LocalUri(
        raw=token,
        artist=urldecode(artist),
        album=urldecode(album),
        title=urldecode(title)
    )


def urldecode(value: str) -> str:
    """Decode '+' as space and %XX escapes."""
    return unquote_plus(value)
