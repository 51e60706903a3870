"""Most recent samples, newest first."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field

from pylocust._constants import DEFAULT_RECENT_COUNT
from pylocust.exceptions import RecordParseError
from pylocust.models.sample import Sample
from pylocust.store import LogStore


@dataclass(frozen=True)
class RecentSamples:
    exists: bool
    samples: list[Sample] = field(default_factory=list)
    errors: list[RecordParseError] = field(default_factory=list)


def list_recent(store: LogStore, n: int = DEFAULT_RECENT_COUNT) -> RecentSamples:
    """Return the last *n* samples of the log in reverse chronological order.

    Malformed records are skipped and reported in ``errors``.  A missing
    log gives ``exists=False`` and no samples.
    """
    if not store.exists:
        return RecentSamples(exists=False)

    errors: list[RecordParseError] = []
    if n <= 0:
        # Still scan so damaged lines get reported.
        for _ in store.read_all(on_error=errors.append):
            pass
        return RecentSamples(exists=True, errors=errors)

    tail: deque[Sample] = deque(store.read_all(on_error=errors.append), maxlen=n)
    return RecentSamples(exists=True, samples=list(reversed(tail)), errors=errors)


def format_sample(sample: Sample) -> str:
    """One display line: ``[timestamp] lat, lon (city, country)``."""
    return (
        f"[{sample.timestamp.isoformat()}] {sample.lat}, {sample.lon} "
        f"({sample.city or ''}, {sample.country or ''})"
    )
