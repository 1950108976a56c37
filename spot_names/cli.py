"""
Command-line interface for spot-names.

This module implements the CLI using Click; rich-click is used for the
help and error colors.

Usage:
    spotify-uri-to-name playlist.txt
    spotify-uri-to-name < playlist.txt
    SPOTIFY_CSV=1 spotify-uri-to-name playlist.txt > playlist.csv
    spotify-uri-to-name --type album albums.txt --max-time 10 -x http://proxy:3128

Arguments:
    Options of this command go before the files; option parsing stops at the
    first file. Leading arguments that are existing files are read in order.
    The first argument that is not a file, and everything after it, is passed
    to the HTTP client as options (see spot_names.spotify.options), so a -v
    or -c there is a client option, not --verbose or --config. With no files,
    URIs are read from standard input.

Exit Codes:
    0    Success
    1    Invalid URI, kind mismatch, undecodable local URI or API error
    3    Usage error (bad configuration or arguments)
    130  Interrupted
"""

import logging
import sys
from pathlib import Path
from typing import Iterator, Optional, TextIO

import rich_click as click
from dotenv import find_dotenv, load_dotenv

# Configure rich-click for better help formatting
click.rich_click.USE_RICH_MARKUP = True
click.rich_click.SHOW_ARGUMENTS = True
click.rich_click.STYLE_ERRORS_SUGGESTION = "magenta italic"
click.rich_click.ERRORS_SUGGESTION = "Try 'spotify-uri-to-name --help' for help."
click.rich_click.MAX_WIDTH = 100
click.rich_click.OPTION_GROUPS = {
    "spotify-uri-to-name": [
        {
            "name": "Conversion",
            "options": ["--type", "--csv", "--delay"],
        },
        {
            "name": "Configuration",
            "options": ["--config", "--verbose", "--log-file"],
        },
        {
            "name": "Info",
            "options": ["--version", "--help"],
        },
    ],
}

from spot_names import __version__
from spot_names.converter import UriBatchConverter
from spot_names.core import (
    ConfigError,
    SpotifyError,
    UriError,
    get_logger,
    load_config,
    setup_logging,
    shutdown_logging,
)
from spot_names.spotify import SpotifyClient, parse_client_options

logger = get_logger(__name__)


# Exit codes
EXIT_ERROR = 1
EXIT_USAGE = 3
EXIT_INTERRUPTED = 130


class UsageError(click.UsageError):
    """click.UsageError exiting with code 3."""
    exit_code = EXIT_USAGE


@click.command(
    name="spotify-uri-to-name",
    context_settings={
        "ignore_unknown_options": True,
        "allow_interspersed_args": False,
        "help_option_names": ["--help"],
    }
)
@click.argument(
    "args",
    nargs=-1,
    type=click.UNPROCESSED,
    metavar="[FILES]... [CLIENT_OPTIONS]..."
)
@click.option(
    "-t", "--type", "uri_type",
    type=str,
    default=None,
    metavar="<track|album|artist>",
    help="URI kind, overrides $SPOTIFY_URI_TYPE (default: inferred, else track)"
)
@click.option(
    "--csv", "csv_mode",
    is_flag=True,
    help="Quoted CSV output, like setting $SPOTIFY_CSV"
)
@click.option(
    "--delay",
    type=str,
    default=None,
    metavar="<seconds>",
    help="Pause after each batch request, overrides $SPOTIFY_BATCH_DELAY"
)
@click.option(
    "-c", "--config", "config_path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<config.yaml>",
    help="Configuration file (default: ./config.yaml if present)"
)
@click.option(
    "-v", "--verbose",
    count=True,
    help="More logging on stderr (-v info, -vv debug)"
)
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    metavar="<path>",
    help="Also write a debug log to this file"
)
@click.option(
    "--version",
    is_flag=True,
    help="Show version and exit."
)
@click.pass_context
def cli(
    ctx: click.Context,
    args: tuple[str, ...],
    uri_type: Optional[str],
    csv_mode: bool,
    delay: Optional[str],
    config_path: Optional[Path],
    verbose: int,
    log_file: Optional[Path],
    version: bool
) -> None:
    """
    Convert Spotify URIs to Track, Album or Artist names using the Spotify API.

    URIs are read from file arguments or standard input, one per line, in
    any of these forms:

    \b
        spotify:<type>:<alphanumeric_ID>
        https://open.spotify.com/<type>/<alphanumeric_ID>
        <alphanumeric_ID>
        spotify:local:<artist>:<album>:<title>:<duration>

    where <type> is track, album or artist.

    \b
    OUTPUT:
        Artist - Track        "Artist","Track"    (with --csv / $SPOTIFY_CSV)
        Artist - Album        "Artist","Album"
        Artist                "Artist"

    Useful for saving Spotify playlists in a format that is easier to read,
    keep under revision control or export to other music systems.

    Options of this command go before the files. The first argument that is
    not a file, and all after it, are HTTP client options: -m/--max-time,
    -x/--proxy, -H/--header, -k/--insecure.

    Requires $SPOTIFY_ACCESS_TOKEN, or $SPOTIFY_CLIENT_ID and
    $SPOTIFY_CLIENT_SECRET to obtain one.
    """
    # Handle --version
    if version:
        click.echo(f"spotify-uri-to-name {__version__}")
        ctx.exit(0)

    # .env in the current directory; real environment variables win
    load_dotenv(find_dotenv(usecwd=True))

    files, client_args = split_arguments(args)

    try:
        config = load_config(config_path).override(
            uri_type=uri_type,
            csv=True if csv_mode else None,
            batch_delay=delay
        )
        client_options = parse_client_options(client_args)
    except ConfigError as e:
        raise UsageError(e.message, ctx) from e

    if verbose >= 2 or config.debug:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    setup_logging(level, log_file)

    try:
        client = SpotifyClient.from_config(config.spotify, client_options)
        converter = UriBatchConverter(
            client,
            uri_kind=config.conversion.uri_type,
            csv_mode=config.conversion.csv,
            batch_delay=config.conversion.batch_delay
        )

        for stream in _open_inputs(files):
            for line in converter.convert(stream):
                click.echo(line)

        stats = converter.stats
        logger.info(
            f"Converted {stats.lines_emitted} line(s) from {stats.lines_read} input line(s) "
            f"using {stats.batches} batch request(s)"
        )

    except ConfigError as e:
        raise UsageError(e.message, ctx) from e

    except UriError as e:
        click.echo(e.message, err=True)
        logger.debug(f"URI error: {e.details}")
        sys.exit(EXIT_ERROR)

    except SpotifyError as e:
        click.echo(f"Spotify error: {e.message}", err=True)
        if e.raw_response and e.raw_response != e.message:
            click.echo(e.raw_response, err=True)
        if e.is_auth_error:
            click.echo("Check $SPOTIFY_ACCESS_TOKEN or $SPOTIFY_CLIENT_ID / $SPOTIFY_CLIENT_SECRET", err=True)
        logger.debug(f"Spotify error: {e.message}", exc_info=True)
        sys.exit(EXIT_ERROR)

    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(EXIT_INTERRUPTED)

    except OSError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(EXIT_ERROR)

    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        logger.exception("Unexpected error")
        sys.exit(EXIT_ERROR)

    finally:
        shutdown_logging()


def split_arguments(args: tuple[str, ...] | list[str]) -> tuple[list[Path], list[str]]:
    """
    Split positional arguments into input files and HTTP client options.

    Args:
        args: Everything after the recognized CLI options.

    Returns:
        (files, client_args): leading arguments that are existing files,
        and the rest starting at the first argument that is not a file.

    Example:
        split_arguments(("a.txt", "b.txt", "-m", "10"))
        # ([Path("a.txt"), Path("b.txt")], ["-m", "10"])
    """
    files: list[Path] = []
    for index, arg in enumerate(args):
        path = Path(arg)
        if not path.is_file():
            return files, list(args[index:])
        files.append(path)
    return files, []


def _open_inputs(files: list[Path]) -> Iterator[TextIO]:
    """Yield each file opened for reading in turn, or stdin if none."""
    if not files:
        yield sys.stdin
        return

    for path in files:
        logger.debug(f"Reading {path}")
        with open(path, "r", encoding="utf-8") as f:
            yield f


def main() -> None:
    """
    Entry point for the CLI.

    This function is called when running `spotify-uri-to-name` from the
    command line.
    """
    cli()


if __name__ == "__main__":
    main()
