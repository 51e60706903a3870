from __future__ import annotations

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest

from pylocust.models.sample import Sample

SampleFactory = Callable[..., Sample]


@pytest.fixture
def make_sample() -> SampleFactory:
    """Build samples one minute apart, oldest first."""
    base = datetime(2026, 1, 1, tzinfo=UTC)

    def _make(index: int = 0, lat: float | None = None, lon: float | None = None, **extra: object) -> Sample:
        return Sample(
            timestamp=base + timedelta(minutes=index),
            lat=float(index) if lat is None else lat,
            lon=float(index) * 2 if lon is None else lon,
            **extra,
        )

    return _make
