"""The scrape loop.

Pipeline per program handle: Permit -> GET -> Write -> Log

Handles are processed strictly in input order, one at a time. The loop
owns every resource it touches through a ScrapeJob, and raises
categorized ScrapeErrors so the caller picks the failure policy.
"""

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import TextIO

from aiolimiter import AsyncLimiter

from scope_scraper.client.hackerone import HackerOneClient
from scope_scraper.config.settings import Settings
from scope_scraper.errors import InputError, RateLimitError, ScrapeError
from scope_scraper.logging.audit import RequestTimer, get_logger
from scope_scraper.output.sink import ResponseSink, open_sink
from scope_scraper.security.credentials import parse_credentials
from scope_scraper.security.ratelimit import new_limiter, wait_for_permit


@dataclass
class ScrapeFailure:
    handle: str | None
    category: str
    message: str


@dataclass
class ScrapeSummary:
    attempted: int = 0
    succeeded: int = 0
    failures: list[ScrapeFailure] = field(default_factory=list)


@dataclass
class ScrapeJob:
    """Everything one run needs, passed explicitly instead of held globally."""

    client: HackerOneClient
    limiter: AsyncLimiter
    sink: ResponseSink
    logger: logging.Logger
    fail_fast: bool = True


def open_input(path: str) -> TextIO:
    """Open the handles file, raising InputError if it cannot be opened.

    Handles are opaque: bytes that are not valid UTF-8 survive as surrogate
    escapes and are restored when the handle is put into a URL.
    """
    try:
        return open(path, encoding="utf-8", errors="surrogateescape")
    except OSError as e:
        raise InputError(f"cannot open input file {path}: {e}") from e


def iter_identifiers(lines: Iterable[str]) -> Iterator[str]:
    """Yield one stripped handle per non-blank line, in order."""
    try:
        for line in lines:
            handle = line.strip()
            if handle:
                yield handle
    except OSError as e:
        raise InputError(f"error reading input: {e}") from e


async def _scrape_one(job: ScrapeJob, handle: str) -> None:
    await wait_for_permit(job.limiter, handle=handle)

    with RequestTimer() as timer:
        response = await job.client.fetch_structured_scopes(handle)

    job.sink.write(handle, response.body)

    job.logger.info(
        f"[+] success scraping program: {handle}",
        extra={"audit_data": {
            "handle": handle,
            "upstream_status": response.status_code,
            "body_bytes": len(response.body),
            "latency_ms": timer.elapsed_ms,
        }},
    )


async def run_scrape(job: ScrapeJob, identifiers: Iterable[str]) -> ScrapeSummary:
    """Scrape every handle in order.

    With fail_fast the first ScrapeError propagates. Otherwise failures are
    logged, recorded in the summary and the loop moves on. RateLimitError
    always propagates.
    """
    summary = ScrapeSummary()

    for handle in identifiers:
        summary.attempted += 1
        try:
            await _scrape_one(job, handle)
        except ScrapeError as e:
            # A broken limiter fails every later handle too
            if job.fail_fast or isinstance(e, RateLimitError):
                raise
            job.logger.error(
                "Scrape failed, continuing",
                extra={"audit_data": {
                    "handle": handle,
                    "category": e.category,
                    "error": str(e),
                }},
            )
            summary.failures.append(ScrapeFailure(handle=handle, category=e.category, message=str(e)))
        else:
            summary.succeeded += 1

    return summary


async def scrape(settings: Settings, transport=None) -> ScrapeSummary:
    """Run a full scrape from settings.

    Credentials and limiter are validated, and the input file opened,
    before any network call is made.
    """
    logger = get_logger()
    credentials = parse_credentials(settings.api_credentials)
    limiter = new_limiter(settings.requests_per_minute)

    with open_input(settings.input_path) as input_file:
        with open_sink(settings.output_path, logger) as sink:
            async with HackerOneClient(
                credentials,
                base_url=settings.api_base_url,
                timeout=settings.request_timeout,
                transport=transport,
            ) as client:
                job = ScrapeJob(
                    client=client,
                    limiter=limiter,
                    sink=sink,
                    logger=logger,
                    fail_fast=settings.fail_fast,
                )
                summary = await run_scrape(job, iter_identifiers(input_file))

    logger.info(
        "Scrape finished",
        extra={"audit_data": {
            "attempted": summary.attempted,
            "succeeded": summary.succeeded,
            "failed": len(summary.failures),
        }},
    )
    return summary
