"""
Spotify Web API client for spot-names.

This module wraps the spotipy library to provide the two collaborators the
converter needs:

    request_access_token()   Client Credentials flow, returns a bearer token
    SpotifyClient.lookup()   One GET per batch to /v1/tracks, /v1/albums or
                             /v1/artists with ids=<comma-joined IDs>

Authentication:
    If $SPOTIFY_ACCESS_TOKEN is set it is used as-is. Otherwise a token is
    requested once from $SPOTIFY_CLIENT_ID / $SPOTIFY_CLIENT_SECRET and
    reused for every batch of the run. There is no refresh: a token that
    expires mid-run surfaces as an API error.

Retries:
    spotipy retries rate-limited and 5xx responses by default. Retries are
    disabled here; the first failed batch aborts the run.

Usage:
    from spot_names.spotify.client import SpotifyClient

    client = SpotifyClient.from_config(config.spotify, client_options)
    response = client.lookup(UriKind.TRACK, ["4cOdK2wGLETKBW3PvgPWqT"])
    print(response["tracks"][0]["name"])
"""

import json
from typing import Any

import requests
import spotipy
from spotipy.oauth2 import SpotifyClientCredentials, SpotifyOauthError

from spot_names.core.config import SpotifyConfig
from spot_names.core.exceptions import ConfigError, SpotifyError
from spot_names.core.logger import get_logger
from spot_names.spotify.options import ClientOptions
from spot_names.spotify.uri import UriKind

logger = get_logger(__name__)


# Maximum IDs per request accepted by the "get several" endpoints
MAX_BATCH_SIZE = 50
BATCH_LIMITS = {
    UriKind.TRACK: MAX_BATCH_SIZE,
    UriKind.ALBUM: 20,
    UriKind.ARTIST: MAX_BATCH_SIZE,
}


def request_access_token(
    client_id: str,
    client_secret: str,
    options: ClientOptions | None = None
) -> str:
    """
    Obtain a bearer token via the Client Credentials flow.

    Args:
        client_id: Spotify application client ID.
        client_secret: Spotify application client secret.
        options: HTTP options (proxy, timeout) for the token request.

    Returns:
        The access token string.

    Raises:
        SpotifyError: If the token endpoint rejects the credentials or
                      cannot be reached (is_auth_error=True).
    """
    options = options or ClientOptions()

    try:
        credentials = SpotifyClientCredentials(
            client_id=client_id,
            client_secret=client_secret,
            proxies=options.proxies,
            requests_timeout=options.timeout
        )
        token = credentials.get_access_token(as_dict=False)
    except SpotifyOauthError as e:
        raise SpotifyError(
            f"Spotify authentication failed: {e}",
            details={"original_error": str(e)},
            is_auth_error=True,
            raw_response=str(e)
        ) from e
    except requests.exceptions.RequestException as e:
        raise SpotifyError(
            f"Failed to request Spotify access token: {e}",
            details={"original_error": str(e)},
            is_auth_error=True,
            raw_response=str(e)
        ) from e

    if not token:
        raise SpotifyError("Spotify token endpoint returned no access token", is_auth_error=True)

    logger.debug("Obtained Spotify access token via client credentials")
    return token


class SpotifyClient:
    """
    Batched lookup client for tracks, albums and artists.

    Attributes:
        _spotify: The underlying spotipy.Spotify instance.
        options: HTTP options applied to every request.

    Example:
        client = SpotifyClient(access_token="BQD...")
        response = client.lookup(UriKind.ARTIST, ["0k17h0D3J5VfsdmQ1iZtE9"])
    """

    def __init__(self, access_token: str, options: ClientOptions | None = None) -> None:
        """
        Create the client around an already issued access token.

        Args:
            access_token: Bearer token for the Web API.
            options: Pass-through HTTP options (timeout, proxy, headers, TLS).
        """
        self.options = options or ClientOptions()
        self._spotify = spotipy.Spotify(
            auth=access_token,
            requests_session=self.options.build_session(),
            proxies=self.options.proxies,
            requests_timeout=self.options.timeout,
            retries=0,
            status_retries=0
        )

    @classmethod
    def from_config(
        cls,
        spotify_config: SpotifyConfig,
        options: ClientOptions | None = None
    ) -> "SpotifyClient":
        """
        Build a client, requesting a token only if none was configured.

        Raises:
            ConfigError: If there is no access token and no client credentials.
            SpotifyError: If the token request fails.
        """
        token = spotify_config.access_token
        if not token:
            if not spotify_config.client_id or not spotify_config.client_secret:
                raise ConfigError(
                    "$SPOTIFY_ACCESS_TOKEN is not set and $SPOTIFY_CLIENT_ID / "
                    "$SPOTIFY_CLIENT_SECRET are not defined to obtain one",
                    details={"field": "SPOTIFY_CLIENT_ID"}
                )
            token = request_access_token(
                spotify_config.client_id,
                spotify_config.client_secret,
                options
            )
        return cls(token, options)

    def lookup(self, kind: UriKind, ids: list[str]) -> dict[str, Any]:
        """
        Fetch several tracks, albums or artists in a single request.

        Args:
            kind: Selects the endpoint (/v1/tracks, /v1/albums, /v1/artists).
            ids: Bare Spotify IDs, at most BATCH_LIMITS[kind].

        Returns:
            The decoded response, e.g. {"tracks": [...]}. Items are in
            request order, None where an ID matched nothing.

        Raises:
            ValueError: If the batch is empty or over the kind's limit.
            SpotifyError: On transport failure, HTTP error, or a response
                          carrying a non-null top-level 'error' field.
        """
        if not ids or len(ids) > BATCH_LIMITS[kind]:
            raise ValueError(
                f"{kind.value} batch must hold 1 to {BATCH_LIMITS[kind]} IDs, got {len(ids)}"
            )

        fetch = {
            UriKind.TRACK: self._spotify.tracks,
            UriKind.ALBUM: self._spotify.albums,
            UriKind.ARTIST: self._spotify.artists,
        }[kind]

        logger.debug(f"GET /v1/{kind.plural}?ids={','.join(ids)}")

        try:
            response = fetch(ids)
        except spotipy.SpotifyException as e:
            raise SpotifyError(
                f"Failed to look up {kind.plural} batch: {e.msg}",
                details={"batch_size": len(ids), "http_status": e.http_status},
                is_auth_error=e.http_status == 401,
                is_rate_limit=e.http_status == 429,
                raw_response=str(e)
            ) from e
        except requests.exceptions.RequestException as e:
            raise SpotifyError(
                f"Failed to look up {kind.plural} batch: {e}",
                details={"batch_size": len(ids), "original_error": str(e)},
                raw_response=str(e)
            ) from e

        if not isinstance(response, dict):
            raise SpotifyError(
                f"Unexpected response while looking up {kind.plural} batch",
                details={"batch_size": len(ids)},
                raw_response=str(response)
            )

        if response.get("error") is not None:
            raise SpotifyError(
                f"Spotify API returned an error for {kind.plural} batch",
                details={"batch_size": len(ids), "error": response["error"]},
                raw_response=json.dumps(response)
            )

        return response
