import logging
import os
import sys

import click
from i18ncheck import checker, reporters
from i18ncheck.config import (
    OUTPUT_FORMATS,
    configure_logging,
    generate_config,
    load_config,
)
from i18ncheck.errors import TranslationCheckerError
from i18ncheck.formatters import format_result

logger = logging.getLogger(__name__)


@click.group()
@click.version_option(package_name="i18n-check")
def cli() -> None:
    pass


@cli.command("check")
@click.option("-c", "--config", "config_path", help="Configuration file path.")
@click.option("-l", "--locales-path", help="Translation files folder path.")
@click.option("-s", "--src-path", help="Source code folder path.")
@click.option(
    "-f", "--format", "output_format", type=click.Choice(OUTPUT_FORMATS), help="Output format."
)
@click.option(
    "-o", "--output", "sections", help="Comma-separated output sections, e.g. summary,unused."
)
@click.option("--output-dir", help="Also save the report in this folder.")
@click.option(
    "--exit-on-issues/--no-exit-on-issues", default=None, help="Exit with code 1 if issues are found."
)
@click.option("-v", "--verbose", is_flag=True, help="Verbose output.")
def check(
    config_path: str | None,
    locales_path: str | None,
    src_path: str | None,
    output_format: str | None,
    sections: str | None,
    output_dir: str | None,
    exit_on_issues: bool | None,
    verbose: bool,
) -> None:
    try:
        config = load_config(config_path).with_overrides(
            locales_path=locales_path,
            src_path=src_path,
            output_format=output_format,
            output_sections=[s.strip() for s in sections.split(",") if s.strip()]
            if sections
            else None,
            output_dir=output_dir,
            exit_on_issues=exit_on_issues,
            verbose=verbose or None,
        )
    except TranslationCheckerError as ex:
        raise click.ClickException(str(ex)) from ex

    configure_logging(config)
    logger.debug(f"Configuration: {config.to_dict()}")

    try:
        result = checker.run(config)
        output = format_result(result, config.output_format, config.output_sections)
    except TranslationCheckerError as ex:
        raise click.ClickException(str(ex)) from ex

    reporters.report(result, output, config.output_dir, config.output_format)

    if config.exit_on_issues and result.has_issues:
        sys.exit(1)


@cli.command("init")
@click.option(
    "--path", default="i18n-checker.config.yml", show_default=True, help="Configuration file to write."
)
@click.option("--force", is_flag=True, help="Overwrite an existing configuration file.")
def init(path: str, force: bool) -> None:
    if os.path.exists(path) and not force:
        raise click.ClickException(f"{path} already exists, use --force to overwrite it")

    try:
        data = generate_config(path)
    except TranslationCheckerError as ex:
        raise click.ClickException(str(ex)) from ex

    click.echo(f"Generated configuration file: {path}")
    click.echo(f"Translation path: {data['localesPath']}")
