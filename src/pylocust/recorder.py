"""Periodic sampling loop.

Each cycle fetches one sample, appends it to the log and then waits
``interval`` seconds before the next fetch::

    fetch -> append -> wait -> fetch -> ...

A failed fetch skips the append for that cycle.  A failed append is
retried a bounded number of times with exponential backoff and then
dropped.  Neither ends the loop; only the stop event (or ``max_cycles``)
does.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass
from typing import Protocol

from pylocust.exceptions import FetchError, LogWriteError
from pylocust.models.sample import Sample
from pylocust.store import LogStore

_logger = logging.getLogger(__name__)


class SampleSource(Protocol):
    """Anything that can produce one sample per call (see ``LocationClient``)."""

    async def fetch(self) -> Sample:
        ...


class CycleOutcome(enum.Enum):
    RECORDED = "recorded"
    FETCH_FAILED = "fetch_failed"
    WRITE_FAILED = "write_failed"


@dataclass
class RecorderStats:
    """Counters accumulated over a :meth:`Recorder.run`."""

    cycles: int = 0
    recorded: int = 0
    fetch_failures: int = 0
    write_failures: int = 0

    def count(self, outcome: CycleOutcome) -> None:
        self.cycles += 1
        if outcome is CycleOutcome.RECORDED:
            self.recorded += 1
        elif outcome is CycleOutcome.FETCH_FAILED:
            self.fetch_failures += 1
        else:
            self.write_failures += 1


class Recorder:
    """Drive the fetch/append/wait cycle.

    Parameters
    ----------
    source : SampleSource
        Where samples come from, usually an entered ``LocationClient``.
    store : LogStore
        Destination log.  The recorder must be its only writer.
    interval : float
        Seconds to wait after every cycle, whatever its outcome.  The
        wait is not shortened by the time the fetch took.
    write_attempts : int
        Total append attempts per sample before giving up on it.
    write_retry_delay : float
        Backoff before the second attempt; doubled for each further one.
    """

    def __init__(
        self,
        source: SampleSource,
        store: LogStore,
        interval: float,
        *,
        write_attempts: int = 3,
        write_retry_delay: float = 0.5,
    ) -> None:
        if interval < 0:
            raise ValueError(f"interval must not be negative, got {interval}")
        if write_attempts < 1:
            raise ValueError(f"write_attempts must be at least 1, got {write_attempts}")
        self._source = source
        self._store = store
        self._interval = interval
        self._write_attempts = write_attempts
        self._write_retry_delay = write_retry_delay

    @property
    def interval(self) -> float:
        return self._interval

    async def run_cycle(self) -> CycleOutcome:
        """Fetch one sample and append it; never raises for fetch or write failures."""
        try:
            sample = await self._source.fetch()
        except FetchError as exc:
            _logger.warning("Failed to fetch location: %s", exc)
            return CycleOutcome.FETCH_FAILED

        try:
            await self._append_with_retry(sample)
        except LogWriteError as exc:
            _logger.warning(
                "Dropped sample from %s after %d write attempt(s): %s",
                sample.timestamp.isoformat(),
                self._write_attempts,
                exc,
            )
            return CycleOutcome.WRITE_FAILED

        _logger.info("Logged %s: %s, %s", sample.timestamp.isoformat(), sample.lat, sample.lon)
        return CycleOutcome.RECORDED

    async def run(
        self,
        stop: asyncio.Event | None = None,
        *,
        max_cycles: int | None = None,
    ) -> RecorderStats:
        """Run cycles until *stop* is set or *max_cycles* have completed.

        *stop* is checked before every cycle and also cuts the wait
        short, so a stop request ends the loop once the current cycle
        is done.  After the last of *max_cycles* the loop returns
        without waiting.
        """
        if max_cycles is not None and max_cycles < 1:
            raise ValueError(f"max_cycles must be at least 1, got {max_cycles}")
        stats = RecorderStats()
        while stop is None or not stop.is_set():
            outcome = await self.run_cycle()
            stats.count(outcome)
            if max_cycles is not None and stats.cycles >= max_cycles:
                break
            if await self._wait(stop):
                break
        _logger.debug("Recorder stopped after %d cycle(s)", stats.cycles)
        return stats

    async def _append_with_retry(self, sample: Sample) -> None:
        delay = self._write_retry_delay
        for attempt in range(1, self._write_attempts + 1):
            try:
                self._store.append(sample)
                return
            except LogWriteError as exc:
                if attempt >= self._write_attempts:
                    raise
                _logger.debug("Write attempt %d failed (%s), retrying in %.2fs", attempt, exc, delay)
            if delay > 0:
                await asyncio.sleep(delay)
            delay *= 2

    async def _wait(self, stop: asyncio.Event | None) -> bool:
        """Sleep for one interval; return ``True`` if *stop* fired meanwhile."""
        if stop is None:
            await asyncio.sleep(self._interval)
            return False
        try:
            await asyncio.wait_for(stop.wait(), timeout=self._interval)
        except TimeoutError:
            return False
        return True
