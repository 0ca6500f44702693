import logging
import pathlib
from datetime import datetime

import click

from i18ncheck.classes import AnalysisResult
from i18ncheck.formatters import EXTENSIONS

logger = logging.getLogger(__name__)


def report_console(output: str) -> None:
    click.echo(output, nl=not output.endswith("\n"))


def report_file(output: str, output_dir: str, output_format: str = "console") -> pathlib.Path:
    directory = pathlib.Path(output_dir)
    directory.mkdir(parents=True, exist_ok=True)

    extension = EXTENSIONS.get(output_format, "txt")
    timestamp = datetime.now().strftime("%Y-%m-%dT%H-%M-%S")
    path = directory / f"translation-analysis-{timestamp}.{extension}"
    path.write_text(output, "utf-8")
    (directory / f"latest.{extension}").write_text(output, "utf-8")

    logger.info(f"Report saved to: {path}")
    return path


def report(
    result: AnalysisResult,
    output: str,
    output_dir: str | None = None,
    output_format: str = "console",
) -> None:
    logger.debug(
        f"Reporting {len(result.unused_keys)} unused and {len(result.missing_keys)} missing keys"
    )
    report_console(output)
    if output_dir:
        try:
            report_file(output, output_dir, output_format)
        except OSError as ex:
            logger.error(f"Failed to save report to {output_dir}: {ex}")
