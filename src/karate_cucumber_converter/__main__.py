"""Main CLI entry point for the karate-cucumber-converter.

This module provides a command-line interface using Typer. The `convert`
command runs the whole pipeline:
1.  Loading configuration (`config.py`) and applying CLI overrides.
2.  Expanding input arguments into report files (`reports.py`).
3.  Decoding and mapping each Karate document to a Cucumber feature
    (`converter.py` / `mapper.py`), skipping documents that fail.
4.  Writing the combined Cucumber JSON array to the output file.
"""
from __future__ import annotations

import logging
from typing import List, Optional

import typer

from .config import get_settings, normalize_log_level
from .converter import convert_files
from .errors import PersistFailure
from .reports import collect_input_paths, write_report

app = typer.Typer(help="Karate JSON to Cucumber JSON report converter CLI")

EXIT_PERSIST_FAILURE = 1
EXIT_SKIPPED_DOCUMENTS = 3
EXIT_CONFIG_ERROR = 4


def _log_level_option(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return normalize_log_level(value)
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.callback()
def main() -> None:  # pragma: no cover - simple callback
    """karate-cucumber-converter CLI.

    Use the 'convert' subcommand to build a Cucumber report.
    """
    pass


@app.command(help="Convert Karate JSON reports into one Cucumber JSON report.")
def convert(
    output: str = typer.Argument(..., help="Destination file for the Cucumber JSON report"),
    inputs: List[str] = typer.Argument(
        ..., help="Karate JSON report files, or directories containing them"
    ),
    indent: Optional[int] = typer.Option(
        None, min=0, help="Override OUTPUT_INDENT (JSON indentation, 0 = compact)"
    ),
    input_glob: Optional[str] = typer.Option(
        None, help="Override INPUT_GLOB (file pattern used for directory inputs)"
    ),
    fail_on_skipped: Optional[bool] = typer.Option(
        None,
        "--fail-on-skipped/--no-fail-on-skipped",
        help="Override FAIL_ON_SKIPPED (non-zero exit when any input was skipped)",
    ),
    log_level: Optional[str] = typer.Option(
        None, callback=_log_level_option, help="Override LOG_LEVEL"
    ),
) -> None:
    """Convert Karate reports and write them as one Cucumber report.

    Inputs that cannot be read or mapped are logged and skipped. Failing to
    write the output file ends the run with a non-zero exit status.
    """
    try:
        settings = get_settings()
    except RuntimeError as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_CONFIG_ERROR)
    logging.basicConfig(level=log_level or settings.LOG_LEVEL)
    logger = logging.getLogger(__name__)

    effective_indent = settings.OUTPUT_INDENT if indent is None else indent
    pattern = input_glob or settings.INPUT_GLOB
    strict = settings.FAIL_ON_SKIPPED if fail_on_skipped is None else fail_on_skipped

    paths = collect_input_paths(inputs, pattern)
    logger.info("Converting %d input file(s) into %s", len(paths), output)
    result = convert_files(paths, encoding=settings.FILE_ENCODING)

    try:
        write_report(
            output,
            result.features,
            indent=effective_indent,
            encoding=settings.FILE_ENCODING,
        )
    except PersistFailure as e:
        typer.echo(str(e), err=True)
        raise typer.Exit(code=EXIT_PERSIST_FAILURE)

    typer.echo(f"File {output} has been saved with {result.converted} features.")
    if result.skipped:
        typer.echo(f"Skipped {result.skipped} input file(s); see log for details.", err=True)
        if strict:
            raise typer.Exit(code=EXIT_SKIPPED_DOCUMENTS)


if __name__ == "__main__":  # pragma: no cover
    app()
