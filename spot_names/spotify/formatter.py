"""
Output formatting for looked-up Spotify items.

Output format by kind:

    track   Artist - Track        "Artist","Track"    (CSV mode)
    album   Artist - Album        "Artist","Album"    (CSV mode)
    artist  Artist                "Artist"            (CSV mode)

Multiple artists are joined with ", ".
"""

import csv
import io
import re
from typing import Any, Iterator

from spot_names.core.logger import get_logger
from spot_names.spotify.uri import UriKind

logger = get_logger(__name__)


# A '-' left at the start of a line when an item has no artists
_LEADING_DASH_RE = re.compile(r"^\s*-(?=\s|$)")


def join_artists(item: dict[str, Any]) -> str:
    """Join the names of an item's artists with ', '."""
    return ", ".join(artist.get("name") or "" for artist in item.get("artists") or [])


def to_csv_row(fields: list[str]) -> str:
    """Quote every field and join with commas, doubling embedded quotes."""
    buffer = io.StringIO()
    csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="").writerow(fields)
    return buffer.getvalue()


def clean_line(line: str) -> str:
    """
    Normalize one output line.

    Tabs become spaces, a leading bare dash is removed and surrounding
    whitespace is stripped.

    Examples:
        clean_line(" - Money")       # "Money"
        clean_line("A\\tB - C ")     # "A B - C"
        clean_line("-M- - Track")    # "-M- - Track"
    """
    line = line.replace("\t", " ")
    line = _LEADING_DASH_RE.sub("", line)
    return line.strip()


def format_item(item: dict[str, Any], kind: UriKind, csv_mode: bool = False) -> str:
    """
    Format a single track, album or artist object.

    Args:
        item: Object from the 'tracks', 'albums' or 'artists' array.
        kind: Kind of the batch the item came from.
        csv_mode: Quote fields and join with commas instead of ' - '.

    Returns:
        The cleaned output line.
    """
    name = item.get("name") or ""

    if kind is UriKind.ARTIST:
        fields = [name]
    else:
        fields = [join_artists(item), name]

    if csv_mode:
        return clean_line(to_csv_row(fields))
    return clean_line(" - ".join(fields))


def format_response(
    response: dict[str, Any],
    kind: UriKind,
    ids: list[str],
    csv_mode: bool = False
) -> Iterator[str]:
    """
    Yield one output line per item of a batch lookup response, in order.

    A response where every item is null produces no lines and a single
    warning. Isolated null items are skipped with a warning naming the ID.

    Args:
        response: Decoded JSON document for the batch.
        kind: Kind of the batch.
        ids: The identifiers sent, used to name unmatched items.
        csv_mode: See format_item().
    """
    items = response.get(kind.plural) or []

    if all(item is None for item in items):
        logger.warning(
            f"no matching {kind.value} URI found - did you specify an incorrect URI "
            f"or wrong $SPOTIFY_URI_TYPE for that URI?"
        )
        return

    for position, item in enumerate(items):
        if item is None:
            spotify_id = ids[position] if position < len(ids) else "?"
            logger.warning(f"no matching {kind.value} found for ID '{spotify_id}' - skipping")
            continue
        yield format_item(item, kind, csv_mode)
