"""
Exception classes for spot-names.

This module defines all custom exceptions used throughout the application.
Each exception carries a human-readable message plus an optional details
dictionary, and maps to one exit code in the CLI.

Exception Hierarchy:
    SpotNamesError (base)
        ConfigError - Bad configuration (exit code 3)
        UriError - Problems with an input URI (exit code 1)
            InvalidUriError - Token is not a recognizable Spotify URI
            UriKindMismatchError - URI kind differs from the pinned kind
            LocalUriFormatError - Local URI body cannot be decoded
        SpotifyError - Web API or transport failure (exit code 1)
"""


class SpotNamesError(Exception):
    """
    Base exception for all spot-names errors.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., the URI,
                 the batch size, the underlying error).

    Example:
        try:
            for line in converter.convert(stream):
                click.echo(line)
        except SpotNamesError as e:
            logger.error(f"Conversion failed: {e.message}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description shown to the user.
            details: Optional dictionary containing additional context.
                     Common keys include:
                     - 'uri': The input token involved in the error
                     - 'uri_kind': The pinned URI kind
                     - 'original_error': The underlying exception text
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(SpotNamesError):
    """
    Raised when the configuration is invalid.

    This is a usage error: the CLI reports it together with the usage line
    and exits with code 3.

    Common causes:
        - $SPOTIFY_URI_TYPE is not one of track, album, artist
        - $SPOTIFY_BATCH_DELAY is not a non-negative number
        - config.yaml cannot be read or is not valid YAML
        - No access token and no client credentials to obtain one

    Example:
        raise ConfigError(
            "invalid $SPOTIFY_URI_TYPE 'playlist' - must be track, album or artist",
            details={'field': 'SPOTIFY_URI_TYPE', 'value': 'playlist'}
        )
    """
    pass


class UriError(SpotNamesError):
    """
    Base class for errors caused by an input URI.

    Any UriError aborts the whole run: lines after the bad one are
    not processed.

    Attributes:
        uri: The raw input token that caused the error.
    """

    def __init__(self, message: str, uri: str, details: dict | None = None) -> None:
        super().__init__(message, {"uri": uri, **(details or {})})
        self.uri = uri


class InvalidUriError(UriError):
    """
    Raised when a token is neither a local URI nor a valid remote URI.

    Example:
        raise InvalidUriError("Invalid URI provided: spotify:track:!!", uri="spotify:track:!!")
    """
    pass


class UriKindMismatchError(UriError):
    """
    Raised when a URI carries a different kind prefix than the pinned kind.

    Example:
        raise UriKindMismatchError(
            "Invalid URI type 'track' vs URI 'spotify:album:abc'",
            uri="spotify:album:abc",
            details={'uri_kind': 'track'}
        )
    """
    pass


class LocalUriFormatError(UriError):
    """
    Raised when a local URI does not have the artist/album/title/duration layout.
    """
    pass


class SpotifyError(SpotNamesError):
    """
    Raised when a Spotify Web API request or token request fails.

    This is always fatal for the run: no retry is attempted and the
    remaining input is discarded.

    Common causes:
        - Invalid or expired access token (is_auth_error)
        - Rate limiting (is_rate_limit)
        - Malformed identifiers in the batch (HTTP 400)
        - Network connectivity issues
        - Response with a non-null top-level 'error' field

    Attributes:
        is_auth_error: True if this is an authentication error.
        is_rate_limit: True if the API answered 429.
        raw_response: The raw response text, echoed to stderr for diagnosis.

    Example:
        raise SpotifyError(
            "Failed to look up tracks batch",
            details={'batch_size': 50, 'http_status': 400},
            raw_response='{"error": {"status": 400, "message": "invalid id"}}'
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        is_auth_error: bool = False,
        is_rate_limit: bool = False,
        raw_response: str | None = None
    ) -> None:
        """
        Initialize Spotify error with additional flags.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            is_auth_error: Set to True if this is an authentication failure.
            is_rate_limit: Set to True if this is a rate limit error.
            raw_response: Raw response body or transport error text.
        """
        super().__init__(message, details)
        self.is_auth_error = is_auth_error
        self.is_rate_limit = is_rate_limit
        self.raw_response = raw_response
