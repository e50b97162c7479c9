"""CLI entry point for pkgquality."""

import asyncio
import logging
from pathlib import Path

# Load .env file if it exists
from dotenv import load_dotenv
load_dotenv()

import httpx
import typer
from rich.console import Console

from pkgquality.analyzers.pipeline import EvaluationPipeline
from pkgquality.config import Settings
from pkgquality.errors import PkgQualityError
from pkgquality.logging_config import configure_logging
from pkgquality.output import ResultSink
from pkgquality.runner import BatchRunner

logger = logging.getLogger(__name__)

USAGE = "Usage: pkgquality <url_file> <output_file>"

app = typer.Typer(help="Score the quality of GitHub repositories and npm packages.", add_completion=False)

err_console = Console(stderr=True)


@app.command()
def main(
    paths: list[str] | None = typer.Argument(
        None,
        metavar="URL_FILE OUTPUT_FILE",
        help="File with one GitHub or npm URL per line, and the NDJSON file to write.",
        show_default=False,
    ),
    parallel: bool = typer.Option(
        False, "--parallel/--sequential", help="Run the metric scorers for a URL concurrently"
    ),
    skip_blank: bool = typer.Option(
        True, "--skip-blank/--no-skip-blank", help="Ignore blank lines in the URL file"
    ),
) -> None:
    """Evaluate every URL in URL_FILE and write one JSON record per line to OUTPUT_FILE."""
    if not paths or len(paths) != 2:
        err_console.print(USAGE, markup=False)
        raise typer.Exit(1)

    url_file, output_file = (Path(p) for p in paths)
    settings = Settings.from_env()
    configure_logging(settings.log_level, settings.log_file)

    try:
        processed = asyncio.run(_run(url_file, output_file, settings, parallel, skip_blank))
    except (PkgQualityError, httpx.HTTPError, OSError) as e:
        logger.error(f"Run aborted: {e}")
        err_console.print(f"Error: {e}", style="red", markup=False)
        raise typer.Exit(1)

    logger.info(f"Wrote {processed} records to {output_file}")


async def _run(
    url_file: Path,
    output_file: Path,
    settings: Settings,
    parallel: bool,
    skip_blank: bool,
) -> int:
    """Async implementation of main."""
    sink = ResultSink(output_file)
    async with EvaluationPipeline(
        github_token=settings.github_token,
        parallel=parallel,
        timeout=settings.request_timeout,
    ) as pipeline:
        runner = BatchRunner(url_file, sink, pipeline, skip_blank=skip_blank)
        return await runner.run()


if __name__ == "__main__":
    app()
