"""
URI batch conversion for spot-names.

UriBatchConverter is the session object for one run. It holds the only
mutable state of the conversion:

    - the pinned URI kind (from configuration, or inferred once)
    - the pending batch of remote IDs

Processing one stream:
    1. Blank line     -> flush the pending batch, continue
    2. Local URI      -> flush the pending batch, emit the decoded name
    3. Remote URI     -> pin/check the kind, append the ID,
                         flush when the batch is full
    4. Invalid token  -> raise InvalidUriError
    5. End of stream  -> flush what is left

A flush issues one lookup, yields one line per item in response order,
then sleeps for the inter-batch delay. Because pending remote IDs are
always flushed before a local URI is emitted, output order equals input
order.

Usage:
    converter = UriBatchConverter(client, uri_kind=None, csv_mode=False)
    with open("playlist.txt") as f:
        for line in converter.convert(f):
            print(line)
"""

import time
from dataclasses import dataclass
from typing import Iterable, Iterator, Protocol

from spot_names.core.exceptions import InvalidUriError, UriKindMismatchError
from spot_names.core.logger import get_logger
from spot_names.spotify.client import BATCH_LIMITS
from spot_names.spotify.formatter import format_response
from spot_names.spotify.uri import InvalidUri, LocalUri, RemoteUri, UriKind, is_local_uri, parse_uri

logger = get_logger(__name__)


# Kind assumed for bare IDs when nothing else pins it
DEFAULT_URI_KIND = UriKind.TRACK


class LookupClient(Protocol):
    def lookup(self, kind: UriKind, ids: list[str]) -> dict: ...


@dataclass
class ConversionStats:
    """Counters for one run, reported at the end of the CLI."""
    lines_read: int = 0
    local_uris: int = 0
    batches: int = 0
    lines_emitted: int = 0


class UriBatchConverter:
    """
    Converts Spotify URIs into 'Artist - Title' lines.

    Attributes:
        client: Object with lookup(kind, ids) returning the decoded response.
        uri_kind: Pinned kind, or None until the first remote URI pins it.
        kind_from_config: True if the kind was fixed by configuration.
        csv_mode: Emit quoted CSV fields.
        batch_delay: Seconds to sleep after each batch request.
        stats: Counters for this run.
    """

    def __init__(
        self,
        client: LookupClient,
        uri_kind: UriKind | str | None = None,
        csv_mode: bool = False,
        batch_delay: float = 0.0
    ) -> None:
        self.client = client
        self.uri_kind = UriKind(uri_kind) if uri_kind is not None else None
        self.kind_from_config = self.uri_kind is not None
        self.csv_mode = csv_mode
        self.batch_delay = batch_delay
        self.stats = ConversionStats()
        self._batch: list[str] = []

    @property
    def batch_limit(self) -> int:
        return BATCH_LIMITS[self.uri_kind or DEFAULT_URI_KIND]

    def convert(self, lines: Iterable[str]) -> Iterator[str]:
        """
        Convert one input stream, yielding output lines in input order.

        The pinned kind carries over between calls, so several files in
        one run must all hold URIs of the same kind.

        Raises:
            InvalidUriError: On a token that is not a Spotify URI.
            UriKindMismatchError: On a URI of a different kind than pinned.
            LocalUriFormatError: On an undecodable local URI.
            SpotifyError: If a batch lookup fails.
        """
        for line in lines:
            token = line.strip()
            self.stats.lines_read += 1

            if not token:
                yield from self.flush()
                continue

            # Pending IDs go out before a local URI is decoded, even a bad one
            if is_local_uri(token):
                yield from self.flush()

            parsed = parse_uri(token)

            if isinstance(parsed, LocalUri):
                self.stats.local_uris += 1
                self.stats.lines_emitted += 1
                yield parsed.display_name
                continue

            if isinstance(parsed, InvalidUri):
                raise InvalidUriError(parsed.reason, uri=token)

            self._add(parsed)
            if len(self._batch) >= self.batch_limit:
                yield from self.flush()

        yield from self.flush()

    def flush(self) -> Iterator[str]:
        """
        Look up the pending batch and yield its formatted lines.

        Does nothing if the batch is empty.
        """
        if not self._batch:
            return

        ids, self._batch = self._batch, []
        kind = self.uri_kind or DEFAULT_URI_KIND

        logger.info(f"Looking up {len(ids)} {kind.value} URI(s)")
        response = self.client.lookup(kind, ids)
        self.stats.batches += 1

        for output_line in format_response(response, kind, ids, self.csv_mode):
            self.stats.lines_emitted += 1
            yield output_line

        if self.batch_delay > 0:
            time.sleep(self.batch_delay)

    def _add(self, uri: RemoteUri) -> None:
        """Pin the kind on first sight, check it afterwards, queue the ID."""
        if self.uri_kind is None:
            self.uri_kind = uri.kind or DEFAULT_URI_KIND
            logger.debug(f"URI kind inferred as '{self.uri_kind.value}' from {uri.raw}")

        if uri.kind is not None and uri.kind is not self.uri_kind:
            raise UriKindMismatchError(
                f"Invalid URI type '{self.uri_kind.value}' vs URI '{uri.raw}'",
                uri=uri.raw,
                details={"uri_kind": self.uri_kind.value, "pinned_by_config": self.kind_from_config}
            )

        self._batch.append(uri.spotify_id)
