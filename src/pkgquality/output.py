"""Append-only NDJSON output of evaluation records."""

import logging
import os
from pathlib import Path

from rich.console import Console

from pkgquality.models.schemas import EvaluationRecord

logger = logging.getLogger(__name__)


class ResultSink:
    """Writes one JSON record per line to the output file.

    The file is truncated when the sink is created, so every run starts
    from an empty output. Each line is flushed to disk before `write`
    returns and is mirrored to the console.
    """

    def __init__(self, path: Path, console: Console | None = None) -> None:
        self.path = Path(path)
        self.console = console or Console(soft_wrap=True)
        self.path.write_text("", encoding="utf-8")
        self.count = 0

    def write(self, record: EvaluationRecord) -> None:
        line = record.to_json_line()
        with self.path.open("a", encoding="utf-8") as f:
            f.write(line + "\n")
            f.flush()
            os.fsync(f.fileno())
        self.count += 1
        logger.debug(f"Wrote record {self.count} to {self.path}")

        self.console.print(line, markup=False, highlight=False)
