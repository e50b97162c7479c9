"""Tests for CLI interface."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import patch

import pytest
from typer.testing import CliRunner

from pkgquality.cli import app
from pkgquality.errors import InvalidURLTypeError
from pkgquality.models.schemas import EvaluationRecord, MetricName, MetricResult

runner = CliRunner()


class FakePipeline:
    """Stands in for EvaluationPipeline; fails on URLs containing 'bad'."""

    instances: list[FakePipeline] = []

    def __init__(self, github_token=None, parallel=False, timeout=30.0) -> None:
        self.parallel = parallel
        self.evaluated: list[str] = []
        FakePipeline.instances.append(self)

    async def __aenter__(self) -> FakePipeline:
        return self

    async def __aexit__(self, *args) -> None:
        return None

    async def evaluate(self, url: str) -> EvaluationRecord:
        self.evaluated.append(url)
        if "bad" in url:
            raise InvalidURLTypeError(url)
        metrics = {name: MetricResult(score=0.5, latency=0.0) for name in MetricName}
        return EvaluationRecord.build(url, MetricResult(score=0.5, latency=0.0), metrics)


@pytest.fixture(autouse=True)
def fake_pipeline(monkeypatch: pytest.MonkeyPatch):
    FakePipeline.instances = []
    monkeypatch.delenv("LOG_FILE", raising=False)
    monkeypatch.setenv("LOG_LEVEL", "0")
    with patch("pkgquality.cli.EvaluationPipeline", FakePipeline):
        yield


class TestArguments:
    def test_no_arguments(self) -> None:
        result = runner.invoke(app, [])
        assert result.exit_code == 1
        assert "Usage: pkgquality <url_file> <output_file>" in result.output

    def test_one_argument(self, tmp_path: Path) -> None:
        result = runner.invoke(app, [str(tmp_path / "urls.txt")])
        assert result.exit_code == 1

    def test_three_arguments(self, tmp_path: Path) -> None:
        result = runner.invoke(app, ["a", "b", "c"])
        assert result.exit_code == 1
        assert FakePipeline.instances == []


class TestRun:
    def test_success(self, tmp_path: Path) -> None:
        urls = tmp_path / "urls.txt"
        urls.write_text("https://github.com/a/one\nhttps://github.com/b/two\n")
        output = tmp_path / "out.ndjson"

        result = runner.invoke(app, [str(urls), str(output)])

        assert result.exit_code == 0
        lines = output.read_text().splitlines()
        assert [json.loads(line)["URL"] for line in lines] == [
            "https://github.com/a/one",
            "https://github.com/b/two",
        ]
        assert lines[0] in result.output

    def test_missing_input_file(self, tmp_path: Path) -> None:
        output = tmp_path / "out.ndjson"
        output.write_text("old results\n")

        result = runner.invoke(app, [str(tmp_path / "missing.txt"), str(output)])

        assert result.exit_code == 1
        assert output.read_text() == ""

    def test_failure_keeps_earlier_records(self, tmp_path: Path) -> None:
        urls = tmp_path / "urls.txt"
        urls.write_text("https://github.com/a/one\nhttps://bad.example/x\nhttps://github.com/c/three\n")
        output = tmp_path / "out.ndjson"

        result = runner.invoke(app, [str(urls), str(output)])

        assert result.exit_code == 1
        assert len(output.read_text().splitlines()) == 1
        assert FakePipeline.instances[0].evaluated == [
            "https://github.com/a/one",
            "https://bad.example/x",
        ]

    def test_parallel_flag(self, tmp_path: Path) -> None:
        urls = tmp_path / "urls.txt"
        urls.write_text("https://github.com/a/one\n")

        result = runner.invoke(app, [str(urls), str(tmp_path / "out.ndjson"), "--parallel"])

        assert result.exit_code == 0
        assert FakePipeline.instances[0].parallel is True
