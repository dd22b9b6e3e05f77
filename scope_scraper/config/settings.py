"""Scraper settings loaded from environment variables.

CLI flags are layered on top via Settings.with_overrides().
"""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # Input / output
    input_path: str = ""  # newline-delimited program handles
    output_path: str = ""  # Empty = response bodies go to the log

    # Upstream API
    api_credentials: str = ""  # "username:key" for HTTP Basic Auth
    api_base_url: str = "https://api.hackerone.com"
    request_timeout: float = 30.0  # seconds, per request
    requests_per_minute: int = 600  # see https://api.hackerone.com/getting-started/#rate-limits

    # Error policy
    fail_fast: bool = True  # False = log failed handles and keep going

    # Logging
    log_level: str = "INFO"
    log_file: str = ""  # Empty = stdout only

    model_config = {"env_prefix": "SCRAPER_", "env_file": ".env", "env_file_encoding": "utf-8"}

    def with_overrides(self, **values) -> "Settings":
        """Return a copy with every non-None value applied."""
        updates = {k: v for k, v in values.items() if v is not None}
        return self.model_copy(update=updates)


@lru_cache
def get_settings() -> Settings:
    return Settings()
