from __future__ import annotations

import json
import logging
from collections.abc import Callable
from pathlib import Path

import pytest

from pylocust.exceptions import LogWriteError, RecordParseError
from pylocust.models.sample import Sample
from pylocust.store import LogStore

SampleFactory = Callable[..., Sample]


def test_append_then_read_preserves_order(tmp_path: Path, make_sample: SampleFactory) -> None:
    store = LogStore(tmp_path / "locations.jsonl")
    samples = [make_sample(i) for i in range(3)]

    for sample in samples:
        store.append(sample)

    assert list(store.read_all()) == samples


def test_each_sample_is_one_line(tmp_path: Path, make_sample: SampleFactory) -> None:
    path = tmp_path / "locations.jsonl"
    store = LogStore(path)
    store.append(make_sample(0, city="Oslo"))
    store.append(make_sample(1))

    lines = path.read_text(encoding="utf-8").splitlines()
    assert len(lines) == 2
    assert json.loads(lines[0])["city"] == "Oslo"
    assert json.loads(lines[1])["city"] is None
    assert path.read_text(encoding="utf-8").endswith("\n")


def test_append_never_truncates_existing_content(tmp_path: Path, make_sample: SampleFactory) -> None:
    path = tmp_path / "locations.jsonl"
    existing = make_sample(0).to_record() + "\n"
    path.write_text(existing, encoding="utf-8")

    LogStore(path).append(make_sample(1))

    assert path.read_text(encoding="utf-8").startswith(existing)
    assert len(list(LogStore(path).read_all())) == 2


def test_append_creates_missing_parent_directories(tmp_path: Path, make_sample: SampleFactory) -> None:
    store = LogStore(tmp_path / "nested" / "dir" / "locations.jsonl")
    store.append(make_sample(0))
    assert store.exists


def test_append_failure_raises_log_write_error(tmp_path: Path, make_sample: SampleFactory) -> None:
    # A directory cannot be opened for appending.
    store = LogStore(tmp_path)
    with pytest.raises(LogWriteError) as excinfo:
        store.append(make_sample(0))
    assert excinfo.value.path == tmp_path


def test_missing_log_reads_as_empty(tmp_path: Path) -> None:
    store = LogStore(tmp_path / "missing.jsonl")

    assert not store.exists
    assert list(store.read_all()) == []
    result = store.read()
    assert result.exists is False
    assert result.samples == []
    assert result.errors == []


def test_malformed_line_is_skipped_with_one_warning(
    tmp_path: Path,
    make_sample: SampleFactory,
    caplog: pytest.LogCaptureFixture,
) -> None:
    path = tmp_path / "locations.jsonl"
    first, second = make_sample(0), make_sample(1)
    path.write_text(
        first.to_record() + "\n" + '{"timestamp": "garbage", "lat": 1' + "\n" + second.to_record() + "\n",
        encoding="utf-8",
    )
    errors: list[RecordParseError] = []

    with caplog.at_level(logging.WARNING, logger="pylocust.store"):
        samples = list(LogStore(path).read_all(on_error=errors.append))

    assert samples == [first, second]
    assert len(errors) == 1
    assert errors[0].line_number == 2
    assert errors[0].line.startswith('{"timestamp": "garbage"')
    assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1


def test_record_missing_required_field_is_skipped(tmp_path: Path, make_sample: SampleFactory) -> None:
    path = tmp_path / "locations.jsonl"
    good = make_sample(4)
    path.write_text(
        '{"timestamp":"2026-01-01T00:00:00Z","lon":3.0,"city":null,"country":null}\n' + good.to_record() + "\n",
        encoding="utf-8",
    )

    result = LogStore(path).read()

    assert result.samples == [good]
    assert [e.line_number for e in result.errors] == [1]


def test_blank_lines_are_ignored(tmp_path: Path, make_sample: SampleFactory) -> None:
    path = tmp_path / "locations.jsonl"
    path.write_text("\n" + make_sample(0).to_record() + "\n\n   \n", encoding="utf-8")

    result = LogStore(path).read()

    assert len(result.samples) == 1
    assert result.errors == []


def test_undecodable_bytes_only_cost_their_line(tmp_path: Path, make_sample: SampleFactory) -> None:
    path = tmp_path / "locations.jsonl"
    good = make_sample(7)
    path.write_bytes(b"\xff\xfe\x00garbage\n" + good.to_record().encode("utf-8") + b"\n")

    result = LogStore(path).read()

    assert result.samples == [good]
    assert len(result.errors) == 1


def test_read_all_is_lazy(tmp_path: Path, make_sample: SampleFactory) -> None:
    store = LogStore(tmp_path / "locations.jsonl")
    store.append(make_sample(0))
    store.append(make_sample(1))

    iterator = store.read_all()
    assert next(iterator) == make_sample(0)
    assert [s.lat for s in iterator] == [1.0]


@pytest.mark.parametrize(
    "bad_line",
    [
        '{"timestamp":"2026-01-01T00:00:00Z","lat":1' + "0" * 400 + ',"lon":2.0,"city":null,"country":null}',
        '{"timestamp":"9999-12-31T23:59:59-05:00","lat":1.0,"lon":2.0,"city":null,"country":null}',
        '{"timestamp":0,"lat":1.0,"lon":2.0,"city":null,"country":null}',
    ],
    ids=["huge-latitude", "timestamp-past-year-9999", "numeric-timestamp"],
)
def test_out_of_range_record_costs_only_its_line(
    tmp_path: Path,
    make_sample: SampleFactory,
    bad_line: str,
) -> None:
    path = tmp_path / "locations.jsonl"
    first, second = make_sample(0), make_sample(1)
    path.write_text(first.to_record() + "\n" + bad_line + "\n" + second.to_record() + "\n", encoding="utf-8")

    result = LogStore(path).read()

    assert result.samples == [first, second]
    assert [e.line_number for e in result.errors] == [2]
