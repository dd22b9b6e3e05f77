"""Tests for scope_scraper/security/credentials.py — username:key parsing."""

import base64

import httpx
import pytest

from scope_scraper.errors import ConfigError, CredentialsError
from scope_scraper.security.credentials import Credentials, parse_credentials


class TestParseCredentials:

    def test_valid_pair(self):
        creds = parse_credentials("hacker:s3cret")
        assert creds == Credentials(username="hacker", key="s3cret")

    @pytest.mark.parametrize("raw", [
        "",
        "no-delimiter",
        ":key-only",
        "user-only:",
        "too:many:parts",
    ])
    def test_malformed_rejected(self, raw):
        with pytest.raises(CredentialsError):
            parse_credentials(raw)

    def test_is_config_error(self):
        with pytest.raises(ConfigError) as exc_info:
            parse_credentials("nope")
        assert exc_info.value.category == "config"


class TestCredentials:

    def test_as_auth_sets_basic_header(self, credentials):
        request = httpx.Request("GET", "https://api.hackerone.com/")
        flow = credentials.as_auth().auth_flow(request)
        authed = next(flow)
        expected = "Basic " + base64.b64encode(b"hacker:s3cret-token").decode()
        assert authed.headers["Authorization"] == expected
        assert authed.headers["Authorization"].startswith("Basic ")

    def test_repr_hides_key(self, credentials):
        assert "s3cret-token" not in repr(credentials)
        assert "hacker" in repr(credentials)
