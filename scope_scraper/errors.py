"""Error taxonomy for the scraper.

Every failure inside the library is raised as a ScrapeError subclass so
the caller decides whether to abort the run or log and continue.
"""


class ScrapeError(Exception):
    """Base class. `category` groups errors for logging and exit handling."""

    category = "scrape"

    def __init__(self, message: str, handle: str | None = None):
        super().__init__(message)
        self.handle = handle


class ConfigError(ScrapeError):
    category = "config"


class CredentialsError(ConfigError):
    pass


class InputError(ScrapeError):
    category = "input"


class RateLimitError(ScrapeError):
    category = "rate_limit"


class TransportError(ScrapeError):
    category = "transport"


class OutputError(ScrapeError):
    category = "output"
