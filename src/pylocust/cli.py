"""Command line entry point.

Usage
-----
::

    pylocust start              # record forever (Ctrl-C to stop)
    pylocust list -n 5          # five most recent samples
    pylocust map                # render map/index.html and open it
    pylocust config             # print the effective configuration

The configuration is read from ``config.json`` in the working
directory unless ``--config`` points elsewhere; ``LOCUST_*``
environment variables override file values.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import json
import logging
import signal
import sys
import webbrowser
from collections.abc import Sequence
from pathlib import Path

from pylocust import __version__
from pylocust._constants import DEFAULT_CONFIG_PATH, DEFAULT_RECENT_COUNT
from pylocust.client import LocationClient
from pylocust.config import LocustConfig
from pylocust.exceptions import LocustError, RenderError
from pylocust.recorder import Recorder, RecorderStats
from pylocust.store import LogStore
from pylocust.views.heatmap import render
from pylocust.views.recent import format_sample, list_recent

_logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pylocust",
        description="Record your IP-derived location over time and look back at it.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        default=DEFAULT_CONFIG_PATH,
        help=f"Path to the JSON config file (default: {DEFAULT_CONFIG_PATH})",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command", required=True)

    start = sub.add_parser("start", help="Start logging the location every interval")
    start.add_argument(
        "--max-cycles",
        type=_positive_int,
        default=None,
        help="Stop after this many samples were attempted (default: run until interrupted)",
    )

    recent = sub.add_parser("list", help="List recently logged locations")
    recent.add_argument(
        "-n",
        "--count",
        type=int,
        default=DEFAULT_RECENT_COUNT,
        help=f"Number of entries to show (default: {DEFAULT_RECENT_COUNT})",
    )

    map_cmd = sub.add_parser("map", help="Generate the heat map and open it")
    map_cmd.add_argument("--output", default=None, help="Where to write the map (default: config map_path)")
    map_cmd.add_argument("--no-open", action="store_true", help="Only write the file, do not open a viewer")

    sub.add_parser("config", help="Show the effective configuration")

    return parser.parse_args(argv)


# ── start ────────────────────────────────────────────────────


async def _record(config: LocustConfig, max_cycles: int | None) -> RecorderStats:
    stop = asyncio.Event()
    loop = asyncio.get_running_loop()
    for signum in (signal.SIGINT, signal.SIGTERM):
        # Not available on every platform (e.g. Windows event loops).
        with contextlib.suppress(NotImplementedError, RuntimeError):
            loop.add_signal_handler(signum, stop.set)

    store = LogStore(config.log_path)
    async with LocationClient(config) as client:
        recorder = Recorder(
            client,
            store,
            config.interval,
            write_attempts=config.write_attempts,
            write_retry_delay=config.write_retry_delay,
        )
        return await recorder.run(stop, max_cycles=max_cycles)


def _cmd_start(config: LocustConfig, args: argparse.Namespace) -> int:
    print(f"📍 Logging every {config.interval} seconds to {config.log_path}...")
    stats = asyncio.run(_record(config, args.max_cycles))
    print(
        f"Stopped after {stats.cycles} cycle(s): {stats.recorded} logged, "
        f"{stats.fetch_failures} fetch failure(s), {stats.write_failures} write failure(s)"
    )
    return 0


# ── list ─────────────────────────────────────────────────────


def _cmd_list(config: LocustConfig, args: argparse.Namespace) -> int:
    result = list_recent(LogStore(config.log_path), args.count)
    if not result.exists:
        print(f"No log file found at '{config.log_path}'. Run 'pylocust start' to begin logging.")
        return 0
    if not result.samples:
        print(f"No readable entries in '{config.log_path}' yet.")
    for sample in result.samples:
        print(format_sample(sample))
    return 0


# ── map ──────────────────────────────────────────────────────


def open_in_viewer(path: Path) -> None:
    """Open *path* with the system's default browser.

    Raises
    ------
    RenderError
        If no browser could be launched.
    """
    uri = path.resolve().as_uri()
    try:
        opened = webbrowser.open(uri)
    except webbrowser.Error as exc:
        raise RenderError(f"Could not open {path}: {exc}", path=path) from exc
    if not opened:
        raise RenderError(f"No viewer available to open {path}", path=path)


def _cmd_map(config: LocustConfig, args: argparse.Namespace) -> int:
    store = LogStore(config.log_path)
    if not store.exists:
        print(f"No log file found at '{config.log_path}'. The map will be empty.")
    document = render(store, args.output or config.map_path)
    print(f"Map with {document.point_count} point(s) written to {document.path}")
    if not args.no_open:
        open_in_viewer(document.path)
    return 0


# ── config ───────────────────────────────────────────────────


def _cmd_config(config: LocustConfig, _args: argparse.Namespace) -> int:
    print(json.dumps(config.to_dict(), indent=2))
    return 0


_COMMANDS = {
    "start": _cmd_start,
    "list": _cmd_list,
    "map": _cmd_map,
    "config": _cmd_config,
}


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    try:
        config = LocustConfig.load(args.config)
        return _COMMANDS[args.command](config, args)
    except LocustError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
