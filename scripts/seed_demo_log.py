#!/usr/bin/env python3
"""Append a handful of well-known cities to a sample log.

Handy for looking at the heat map and path rendering without waiting
for real samples to accumulate.

Usage
-----
::

    python scripts/seed_demo_log.py                     # locations.jsonl
    python scripts/seed_demo_log.py --log demo.jsonl --step 30
    pylocust map

Options::

    --log PATH      Log file to append to (default: config log_path)
    --config PATH   Config file used to find the default log path
    --step MINUTES  Minutes between consecutive samples (default: 60)
"""

from __future__ import annotations

import argparse
import sys
from datetime import UTC, datetime, timedelta
from pathlib import Path

# Allow running from the repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pylocust import LocustConfig, LogStore, Sample  # noqa: E402

DEMO_CITIES: tuple[tuple[str, str, float, float], ...] = (
    ("New York", "United States", 40.7128, -74.0060),
    ("London", "United Kingdom", 51.5074, -0.1278),
    ("Tokyo", "Japan", 35.6895, 139.6917),
    ("Sydney", "Australia", -33.8688, 151.2093),
    ("Rio de Janeiro", "Brazil", -22.9068, -43.1729),
    ("Cairo", "Egypt", 30.0444, 31.2357),
    ("Cape Town", "South Africa", -33.9249, 18.4241),
    ("Moscow", "Russia", 55.7558, 37.6173),
    ("Reykjavik", "Iceland", 64.1265, -21.8174),
    ("Bangkok", "Thailand", 13.7563, 100.5018),
)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed a pylocust log with demo samples")
    parser.add_argument("--log", default=None, help="Log file to append to")
    parser.add_argument("--config", default="config.json", help="Config file (default: config.json)")
    parser.add_argument("--step", type=int, default=60, help="Minutes between samples (default: 60)")
    return parser.parse_args()


def main() -> int:
    args = _parse_args()
    log_path = args.log or LocustConfig.from_file(args.config).log_path
    store = LogStore(log_path)

    start = datetime.now(tz=UTC) - timedelta(minutes=args.step * len(DEMO_CITIES))
    for index, (city, country, lat, lon) in enumerate(DEMO_CITIES):
        sample = Sample(
            timestamp=start + timedelta(minutes=args.step * index),
            lat=lat,
            lon=lon,
            city=city,
            country=country,
        )
        store.append(sample)
        print(f"Appended {city}, {country}")

    print(f"Wrote {len(DEMO_CITIES)} samples to {store.path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
