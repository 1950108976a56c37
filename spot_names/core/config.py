"""
Configuration management for spot-names.

Settings are merged from several sources, later ones winning:

    1. Built-in defaults
    2. config.yaml (current directory, or an explicit path)
    3. Environment variables (a .env file is loaded by the CLI first)
    4. Command-line options (applied by the CLI with Config.override())

Environment variables:
    SPOTIFY_URI_TYPE        track | album | artist - pins the URI kind
    SPOTIFY_CSV             non-empty enables CSV output
    SPOTIFY_BATCH_DELAY     seconds to sleep after each batch request
    SPOTIFY_ACCESS_TOKEN    bearer token, skips the token request
    SPOTIFY_CLIENT_ID       used to request a token when none is set
    SPOTIFY_CLIENT_SECRET
    DEBUG                   non-empty enables debug logging

Example config.yaml:
    spotify:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"

    conversion:
      uri_type: album
      csv: true
      batch_delay: 0.1
"""

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Mapping

import yaml

from spot_names.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

URI_TYPES = ("track", "album", "artist")


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Spotify API credentials.

    Attributes:
        client_id: Application client ID, empty if not configured.
        client_secret: Application client secret, empty if not configured.
        access_token: Pre-issued bearer token, or None to request one.
    """
    client_id: str = ""
    client_secret: str = ""
    access_token: str | None = None


@dataclass(frozen=True)
class ConversionConfig:
    """
    Conversion behavior.

    Attributes:
        uri_type: Pinned URI kind, or None to infer it from the first URI.
        csv: Emit quoted comma-separated fields instead of 'Artist - Title'.
        batch_delay: Seconds to pause after each batch request. Default 0.
    """
    uri_type: str | None = None
    csv: bool = False
    batch_delay: float = 0.0


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Attributes:
        spotify: Spotify credentials.
        conversion: Conversion settings.
        debug: Enable debug logging.
    """
    spotify: SpotifyConfig
    conversion: ConversionConfig
    debug: bool = False

    def override(
        self,
        uri_type: str | None = None,
        csv: bool | None = None,
        batch_delay: float | None = None
    ) -> "Config":
        """
        Return a copy with command-line values applied on top.

        None means "not given on the command line" and keeps the current value.

        Raises:
            ConfigError: If uri_type or batch_delay is invalid.
        """
        conversion = self.conversion
        if uri_type is not None:
            conversion = replace(conversion, uri_type=_parse_uri_type(uri_type, "--type"))
        if csv is not None:
            conversion = replace(conversion, csv=csv)
        if batch_delay is not None:
            conversion = replace(conversion, batch_delay=_parse_delay(batch_delay, "--delay"))
        return replace(self, conversion=conversion)


def load_config(
    config_path: Path | None = None,
    environ: Mapping[str, str] | None = None
) -> Config:
    """
    Load configuration from config.yaml and the environment.

    Args:
        config_path: Optional explicit path to a YAML file. If None,
                     config.yaml in the current directory is used when it
                     exists; it is optional.
        environ: Environment mapping, defaults to os.environ.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, or a value is out of range.

    Example:
        try:
            config = load_config()
        except ConfigError as e:
            raise UsageError(e.message)
    """
    if environ is None:
        environ = os.environ

    raw_config = _read_config_file(config_path)
    spotify_section = _section(raw_config, "spotify")
    conversion_section = _section(raw_config, "conversion")

    # Spotify credentials: environment wins over file
    spotify_config = SpotifyConfig(
        client_id=environ.get("SPOTIFY_CLIENT_ID") or _string(spotify_section, "client_id"),
        client_secret=environ.get("SPOTIFY_CLIENT_SECRET") or _string(spotify_section, "client_secret"),
        access_token=environ.get("SPOTIFY_ACCESS_TOKEN") or _string(spotify_section, "access_token") or None
    )

    uri_type = conversion_section.get("uri_type")
    if environ.get("SPOTIFY_URI_TYPE"):
        uri_type = _parse_uri_type(environ["SPOTIFY_URI_TYPE"], "$SPOTIFY_URI_TYPE")
    elif uri_type is not None:
        uri_type = _parse_uri_type(uri_type, "conversion.uri_type")

    csv_mode = conversion_section.get("csv", False)
    if not isinstance(csv_mode, bool):
        raise ConfigError(
            "'conversion.csv' must be true or false",
            details={"field": "conversion.csv", "value": csv_mode}
        )
    if environ.get("SPOTIFY_CSV"):
        csv_mode = True

    batch_delay = _parse_delay(conversion_section.get("batch_delay", 0), "conversion.batch_delay")
    if environ.get("SPOTIFY_BATCH_DELAY"):
        batch_delay = _parse_delay(environ["SPOTIFY_BATCH_DELAY"], "$SPOTIFY_BATCH_DELAY")

    return Config(
        spotify=spotify_config,
        conversion=ConversionConfig(uri_type=uri_type, csv=csv_mode, batch_delay=batch_delay),
        debug=bool(environ.get("DEBUG"))
    )


def _read_config_file(config_path: Path | None) -> dict[str, Any]:
    """
    Read and parse the YAML config file.

    Returns an empty dict when no explicit path is given and the default
    file does not exist.
    """
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME
        if not config_path.exists():
            return {}
    elif not config_path.exists():
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # Empty file
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _section(raw_config: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw_config.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ConfigError(
            f"Section '{name}' must be a dictionary",
            details={"section": name}
        )
    return section


def _string(section: dict[str, Any], key: str) -> str:
    value = section.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ConfigError(
            f"'{key}' must be a string",
            details={"field": key}
        )
    return value.strip()


def _parse_uri_type(value: Any, source: str) -> str:
    if not isinstance(value, str) or value not in URI_TYPES:
        raise ConfigError(
            f"invalid {source} '{value}' - must be track, album or artist",
            details={"field": source, "value": value}
        )
    return value


def _parse_delay(value: Any, source: str) -> float:
    try:
        delay = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(
            f"invalid {source} '{value}' - must be a number of seconds",
            details={"field": source, "value": value}
        ) from e
    if delay < 0:
        raise ConfigError(
            f"invalid {source} '{value}' - must not be negative",
            details={"field": source, "value": value}
        )
    return delay
