"""
Pass-through options for the HTTP client.

Arguments following the input files are forwarded to the HTTP layer that
talks to the Spotify Web API. The familiar curl spellings are accepted so
existing invocations keep working:

    -m, --max-time SECONDS     Request timeout
    -x, --proxy URL            Proxy for both http and https
    -H, --header "Name: value" Extra request header (repeatable)
    -k, --insecure             Do not verify TLS certificates

Long options also accept the --option=value form.
"""

from dataclasses import dataclass, field

import requests

from spot_names.core.exceptions import ConfigError


# Default request timeout in seconds (spotipy default)
DEFAULT_TIMEOUT = 5.0

_VALUE_OPTIONS = {
    "-m": "timeout",
    "--max-time": "timeout",
    "-x": "proxy",
    "--proxy": "proxy",
    "-H": "header",
    "--header": "header",
}

_FLAG_OPTIONS = {
    "-k": "insecure",
    "--insecure": "insecure",
}


@dataclass(frozen=True)
class ClientOptions:
    """
    HTTP settings applied to every Web API request.

    Attributes:
        timeout: Request timeout in seconds.
        proxy: Proxy URL used for http and https, or None.
        headers: Extra headers sent with each request.
        verify: Whether TLS certificates are verified.
    """
    timeout: float = DEFAULT_TIMEOUT
    proxy: str | None = None
    headers: dict[str, str] = field(default_factory=dict)
    verify: bool = True

    @property
    def proxies(self) -> dict[str, str] | None:
        if self.proxy is None:
            return None
        return {"http": self.proxy, "https": self.proxy}

    def build_session(self) -> requests.Session:
        """Create a requests session carrying the extra headers and TLS setting."""
        session = requests.Session()
        session.headers.update(self.headers)
        session.verify = self.verify
        return session


def parse_client_options(args: list[str] | tuple[str, ...]) -> ClientOptions:
    """
    Parse pass-through arguments into ClientOptions.

    Args:
        args: Arguments left after the input files.

    Returns:
        ClientOptions with the parsed settings.

    Raises:
        ConfigError: On an unknown option, a missing value, a non-numeric
                     timeout or a header without a colon.

    Example:
        parse_client_options(["-m", "10", "--header=X-Trace: 1"])
        # ClientOptions(timeout=10.0, proxy=None, headers={'X-Trace': '1'}, verify=True)
    """
    timeout = DEFAULT_TIMEOUT
    proxy = None
    headers: dict[str, str] = {}
    verify = True

    remaining = list(args)
    while remaining:
        arg = remaining.pop(0)
        name, has_inline, inline_value = arg.partition("=") if arg.startswith("--") else (arg, "", "")

        if name in _FLAG_OPTIONS and not has_inline:
            verify = False
            continue

        if name not in _VALUE_OPTIONS:
            raise ConfigError(
                f"unrecognized file or client option: '{arg}'",
                details={"argument": arg}
            )

        if has_inline:
            value = inline_value
        elif remaining:
            value = remaining.pop(0)
        else:
            raise ConfigError(
                f"client option '{name}' requires a value",
                details={"argument": name}
            )

        target = _VALUE_OPTIONS[name]
        if target == "timeout":
            timeout = _parse_timeout(value)
        elif target == "proxy":
            proxy = value
        else:
            header_name, header_value = _parse_header(value)
            headers[header_name] = header_value

    return ClientOptions(timeout=timeout, proxy=proxy, headers=headers, verify=verify)


def _parse_timeout(value: str) -> float:
    try:
        timeout = float(value)
    except ValueError as e:
        raise ConfigError(
            f"invalid timeout '{value}' - must be a number of seconds",
            details={"value": value}
        ) from e
    if timeout <= 0:
        raise ConfigError(
            f"invalid timeout '{value}' - must be greater than zero",
            details={"value": value}
        )
    return timeout


def _parse_header(value: str) -> tuple[str, str]:
    header_name, colon, header_value = value.partition(":")
    if not colon or not header_name.strip():
        raise ConfigError(
            f"invalid header '{value}' - expected 'Name: value'",
            details={"value": value}
        )
    return header_name.strip(), header_value.strip()
