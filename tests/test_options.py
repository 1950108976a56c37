"""Test pass-through HTTP client options"""

import pytest

from spot_names.core.exceptions import ConfigError
from spot_names.spotify.options import DEFAULT_TIMEOUT, ClientOptions, parse_client_options


class TestParseClientOptions:
    """Test curl-style option parsing"""

    def test_no_options(self):
        """Test defaults when nothing is passed"""
        options = parse_client_options([])

        assert options == ClientOptions()
        assert options.timeout == DEFAULT_TIMEOUT
        assert options.proxies is None

    def test_short_options(self):
        """Test -m, -x, -H and -k"""
        options = parse_client_options(
            ["-m", "10", "-x", "http://proxy:3128", "-H", "Accept-Language: en", "-k"]
        )

        assert options.timeout == 10.0
        assert options.proxies == {"http": "http://proxy:3128", "https": "http://proxy:3128"}
        assert options.headers == {"Accept-Language": "en"}
        assert options.verify is False

    def test_long_options_with_equals(self):
        """Test --option=value spelling"""
        options = parse_client_options(["--max-time=2.5", "--proxy=socks5://localhost:1080"])

        assert options.timeout == 2.5
        assert options.proxy == "socks5://localhost:1080"

    def test_repeated_headers(self):
        """Test several headers accumulate"""
        options = parse_client_options(["--header", "X-One: 1", "-H", "X-Two:2"])

        assert options.headers == {"X-One": "1", "X-Two": "2"}

    @pytest.mark.parametrize("args", [
        ["--bogus"],
        ["missing_file.txt"],
        ["-m"],
        ["-m", "soon"],
        ["-m", "0"],
        ["-H", "no colon"],
        ["--insecure=yes"],
    ])
    def test_invalid_options(self, args):
        """Test bad options raise ConfigError"""
        with pytest.raises(ConfigError):
            parse_client_options(args)


class TestClientOptions:
    """Test the requests session built from options"""

    def test_build_session(self):
        """Test headers and TLS verification are applied to the session"""
        options = ClientOptions(headers={"X-Trace": "abc"}, verify=False)

        session = options.build_session()

        assert session.headers["X-Trace"] == "abc"
        assert session.verify is False
