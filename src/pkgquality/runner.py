"""Batch processing of a URL file."""

import logging
from collections.abc import Iterator
from pathlib import Path

from pkgquality.analyzers.pipeline import EvaluationPipeline
from pkgquality.errors import InputFileNotFoundError
from pkgquality.output import ResultSink

logger = logging.getLogger(__name__)


def read_urls(path: Path, skip_blank: bool = True) -> Iterator[str]:
    """Yield the stripped lines of `path` in file order.

    Blank lines are skipped unless `skip_blank` is False, in which case they
    are yielded as empty strings and fail classification downstream.
    """
    with path.open(encoding="utf-8") as f:
        for line_number, line in enumerate(f, start=1):
            url = line.strip()
            if not url and skip_blank:
                logger.debug(f"Skipping blank line {line_number}")
                continue
            yield url


class BatchRunner:
    """Drives the pipeline once per URL in the input file, in input order.

    The run stops at the first failure: remaining URLs are not attempted,
    and records already written stay in the output file.

    Usage:
        sink = ResultSink(Path("out.ndjson"))
        async with EvaluationPipeline(github_token=token) as pipeline:
            await BatchRunner(Path("urls.txt"), sink, pipeline).run()
    """

    def __init__(
        self,
        input_path: Path,
        sink: ResultSink,
        pipeline: EvaluationPipeline,
        skip_blank: bool = True,
    ) -> None:
        self.input_path = Path(input_path)
        self.sink = sink
        self.pipeline = pipeline
        self.skip_blank = skip_blank

    async def run(self) -> int:
        """Process every URL; return the number of records written.

        Raises:
            InputFileNotFoundError: If the input file does not exist.
            PkgQualityError: On the first URL that fails.
        """
        if not self.input_path.exists():
            raise InputFileNotFoundError(self.input_path)

        logger.info(f"Processing URLs from file: {self.input_path}")
        processed = 0
        for url in read_urls(self.input_path, self.skip_blank):
            logger.info(f"Processing URL: {url}")
            record = await self.pipeline.evaluate(url)
            self.sink.write(record)
            processed += 1

        logger.info(f"Finished: {processed} URLs evaluated")
        return processed
