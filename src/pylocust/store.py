"""Append-only JSON-lines log of location samples.

One writer, any number of readers.  Every record sits on its own line
and is parsed on its own, so a damaged line costs exactly that record.
Running two recorders against the same path is not supported.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterator
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from pylocust._constants import MAX_LOGGED_LINE
from pylocust.exceptions import LogWriteError, RecordParseError
from pylocust.models.sample import Sample

_logger = logging.getLogger(__name__)

ErrorHandler = Callable[[RecordParseError], None]


def _shorten(line: str) -> str:
    if len(line) > MAX_LOGGED_LINE:
        return f"{line[:MAX_LOGGED_LINE]}…"
    return line


@dataclass(frozen=True)
class LogReadResult:
    """Outcome of a full log read.

    ``exists`` is ``False`` when there is no log file yet, which is a
    normal state before the first sample has been recorded.
    """

    exists: bool
    samples: list[Sample] = field(default_factory=list)
    errors: list[RecordParseError] = field(default_factory=list)


class LogStore:
    """Durable, append-only sequence of :class:`Sample` records."""

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    @property
    def exists(self) -> bool:
        return self._path.is_file()

    def append(self, sample: Sample) -> None:
        """Write *sample* as one line at the end of the log.

        The file is created when absent and never truncated.

        Raises
        ------
        LogWriteError
            If the file cannot be opened or written.
        """
        record = sample.to_record() + "\n"
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with self._path.open("a", encoding="utf-8") as fh:
                fh.write(record)
                fh.flush()
                os.fsync(fh.fileno())
        except OSError as exc:
            raise LogWriteError(f"Could not append to {self._path}: {exc}", path=self._path) from exc

    def read_all(self, on_error: ErrorHandler | None = None) -> Iterator[Sample]:
        """Yield samples lazily in file order, oldest first.

        A missing log yields nothing.  Lines that do not parse are
        logged, handed to *on_error* and skipped; blank lines are
        ignored.
        """
        try:
            fh = self._path.open("r", encoding="utf-8", errors="replace")
        except FileNotFoundError:
            _logger.debug("No log at %s", self._path)
            return

        with fh:
            for line_number, raw in enumerate(fh, start=1):
                line = raw.strip()
                if not line:
                    continue
                try:
                    sample = Sample.from_record(line)
                except ValidationError as exc:
                    error = RecordParseError(
                        f"Could not parse log entry at {self._path}:{line_number}: {exc.error_count()} error(s)",
                        line_number=line_number,
                        line=line,
                    )
                    _logger.warning("Skipping log line %d: %s", line_number, _shorten(line))
                    if on_error is not None:
                        on_error(error)
                    continue
                yield sample

    def read(self) -> LogReadResult:
        """Read the whole log, collecting skipped records alongside samples."""
        if not self.exists:
            return LogReadResult(exists=False)
        errors: list[RecordParseError] = []
        samples = list(self.read_all(on_error=errors.append))
        return LogReadResult(exists=True, samples=samples, errors=errors)
