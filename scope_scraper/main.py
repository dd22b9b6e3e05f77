"""HackerOne structured-scope scraper: command-line entry point.

Reads program handles from a file, fetches each program's structured
scopes under a requests-per-minute ceiling, and appends the raw JSON
responses to a jsonl file (or the log).
"""

import argparse
import asyncio
import sys

from pydantic import ValidationError

from scope_scraper.config.settings import get_settings
from scope_scraper.errors import ScrapeError
from scope_scraper.logging.audit import generate_run_id, run_id_var, setup_logging
from scope_scraper.scrape.loop import scrape

VERSION = "0.1.0"


def build_parser() -> argparse.ArgumentParser:
    # Single-dash long flags are accepted alongside the usual double-dash ones
    parser = argparse.ArgumentParser(
        prog="h1-scope-scraper",
        description="Scrape HackerOne program structured scopes into a jsonl file.",
        allow_abbrev=False,
    )
    parser.add_argument(
        "-input-path", "--input-path", dest="input_path",
        help="path to program handles file to scrape",
    )
    parser.add_argument(
        "-output-path", "--output-path", dest="output_path",
        help="jsonl file to write scraped data (default: log responses)",
    )
    parser.add_argument(
        "-rlm", "--rlm", dest="rlm", type=int,
        help="max requests to send per minute (default: 600). "
             "see https://api.hackerone.com/getting-started/#rate-limits",
    )
    parser.add_argument(
        "-api", "--api", dest="api",
        help="username:key format api key to use. "
             "see https://hackerone.com/settings/api_token/edit",
    )
    parser.add_argument("--log-level", dest="log_level", help="log level (default: INFO)")
    parser.add_argument("--log-file", dest="log_file", help="also write logs to this file")
    parser.add_argument(
        "--keep-going", action="store_true",
        help="log failed handles and continue instead of stopping at the first error",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {VERSION}")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        settings = get_settings()
    except ValidationError as e:
        parser.print_usage(sys.stderr)
        print(f"{parser.prog}: invalid SCRAPER_* environment setting:\n{e}", file=sys.stderr)
        return 1

    settings = settings.with_overrides(
        input_path=args.input_path,
        output_path=args.output_path,
        requests_per_minute=args.rlm,
        api_credentials=args.api,
        log_level=args.log_level,
        log_file=args.log_file,
        fail_fast=False if args.keep_going else None,
    )
    if not settings.api_credentials or not settings.input_path:
        parser.print_help(sys.stderr)
        return 1

    try:
        logger = setup_logging(settings)
    except OSError as e:
        print(f"{parser.prog}: cannot open log file {settings.log_file}: {e}", file=sys.stderr)
        return 1

    run_id_var.set(generate_run_id())
    logger.info(
        "Scrape started",
        extra={"audit_data": {
            "input_path": settings.input_path,
            "output_path": settings.output_path or None,
            "requests_per_minute": settings.requests_per_minute,
            "version": VERSION,
        }},
    )

    try:
        summary = asyncio.run(scrape(settings))
    except ScrapeError as e:
        logger.error(
            str(e),
            extra={"audit_data": {"category": e.category, "handle": e.handle}},
        )
        return 1
    except KeyboardInterrupt:
        logger.warning("Scrape interrupted")
        return 130

    return 1 if summary.failures else 0


if __name__ == "__main__":
    sys.exit(main())
