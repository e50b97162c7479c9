"""Tests for the NDJSON result sink."""

from __future__ import annotations

import io
import json
from pathlib import Path

from rich.console import Console

from pkgquality.models.schemas import EvaluationRecord, MetricName, MetricResult
from pkgquality.output import ResultSink


def _record(url: str, score: float = 0.5) -> EvaluationRecord:
    metrics = {name: MetricResult(score=score, latency=0.1) for name in MetricName}
    return EvaluationRecord.build(url, MetricResult(score=score, latency=0.0), metrics)


def _console() -> tuple[Console, io.StringIO]:
    buffer = io.StringIO()
    return Console(file=buffer, width=80, soft_wrap=True), buffer


class TestResultSink:
    def test_truncates_existing_file(self, tmp_path: Path) -> None:
        output = tmp_path / "out.ndjson"
        output.write_text("stale\n")
        console, _ = _console()

        ResultSink(output, console=console)

        assert output.read_text() == ""

    def test_creates_missing_file(self, tmp_path: Path) -> None:
        output = tmp_path / "out.ndjson"
        console, _ = _console()
        ResultSink(output, console=console)
        assert output.exists()

    def test_appends_one_line_per_record(self, tmp_path: Path) -> None:
        output = tmp_path / "out.ndjson"
        console, _ = _console()
        sink = ResultSink(output, console=console)

        sink.write(_record("https://github.com/a/one"))
        sink.write(_record("https://github.com/b/two"))

        lines = output.read_text().splitlines()
        assert [json.loads(line)["URL"] for line in lines] == [
            "https://github.com/a/one",
            "https://github.com/b/two",
        ]
        assert output.read_text().endswith("\n")
        assert sink.count == 2

    def test_record_is_on_disk_when_write_returns(self, tmp_path: Path) -> None:
        output = tmp_path / "out.ndjson"
        console, _ = _console()
        sink = ResultSink(output, console=console)

        record = _record("https://github.com/a/one")
        sink.write(record)

        assert output.read_text() == record.to_json_line() + "\n"

    def test_mirrors_line_to_console(self, tmp_path: Path) -> None:
        console, buffer = _console()
        sink = ResultSink(tmp_path / "out.ndjson", console=console)

        record = _record("https://github.com/a/one")
        sink.write(record)

        assert buffer.getvalue() == record.to_json_line() + "\n"
