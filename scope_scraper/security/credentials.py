"""HackerOne API credentials.

The API token is given as a single "username:key" string and sent as
HTTP Basic Auth on every request.
"""

from dataclasses import dataclass

import httpx

from scope_scraper.errors import CredentialsError


@dataclass(frozen=True)
class Credentials:
    username: str
    key: str

    def as_auth(self) -> httpx.BasicAuth:
        return httpx.BasicAuth(self.username, self.key)

    def __repr__(self) -> str:
        # Never leak the key into logs or tracebacks
        return f"Credentials(username={self.username!r}, key='***')"


def parse_credentials(raw: str) -> Credentials:
    """Split a "username:key" string into Credentials.

    Raises:
        CredentialsError: if the string does not hold exactly two
            non-empty parts separated by ':'.
    """
    parts = raw.split(":")
    if len(parts) != 2 or not all(parts):
        raise CredentialsError("API credentials must be in 'username:key' format")
    return Credentials(username=parts[0], key=parts[1])
