"""Response sinks: where raw response bodies end up.

FileSink appends one body per line to a jsonl-style file; LogSink sends
bodies to the log when no output path is configured.
"""

import logging
from abc import ABC, abstractmethod

from scope_scraper.errors import OutputError


class ResponseSink(ABC):
    """Base class for response body destinations."""

    @abstractmethod
    def write(self, handle: str, body: bytes) -> None:
        """Record one response body."""
        ...

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def __enter__(self):
        self.open()
        return self

    def __exit__(self, *args):
        self.close()


class FileSink(ResponseSink):
    """Appends `body + b"\\n"` per record. Opened once per run."""

    def __init__(self, path: str):
        self.path = path
        self._file = None

    def open(self) -> None:
        try:
            self._file = open(self.path, "ab")
        except OSError as e:
            raise OutputError(f"cannot open output file {self.path}: {e}") from e

    def write(self, handle: str, body: bytes) -> None:
        if self._file is None:
            raise OutputError(f"output file {self.path} is not open", handle=handle)
        try:
            self._file.write(body + b"\n")  # newline for jsonl
            self._file.flush()
        except OSError as e:
            raise OutputError(f"write to {self.path} failed: {e}", handle=handle) from e

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class LogSink(ResponseSink):
    """Logs each body as text. Creates no files."""

    def __init__(self, logger: logging.Logger):
        self._logger = logger

    def write(self, handle: str, body: bytes) -> None:
        self._logger.info(
            body.decode("utf-8", errors="replace"),
            extra={"audit_data": {"handle": handle}},
        )


def open_sink(output_path: str, logger: logging.Logger) -> ResponseSink:
    """Pick the sink for a run: a file when a path is given, else the log."""
    if output_path:
        return FileSink(output_path)
    return LogSink(logger)
