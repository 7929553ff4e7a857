import json
import logging
import os
from pathlib import Path
import sys
from typing import cast

import click
from pydantic import ValidationError
from pythonjsonlogger.json import JsonFormatter
from rich.console import Console
from rich.markup import escape

from adfwriter.config import CONFIGURATION, ApplicationConfiguration
from adfwriter.constants import LOGGER_NAME, PAYLOAD_TYPES
from adfwriter.exceptions import EmptyContentError
from adfwriter.files import get_log_file
from adfwriter.utils.adf_helpers import (
    build_payload_to_add_comment,
    build_payload_to_update_description,
    text_to_adf,
)
from adfwriter.utils.diagnostics import detect_malformed_markdown

console = Console()
error_console = Console(stderr=True)
logger = logging.getLogger(LOGGER_NAME)


def setup_logging() -> None:
    settings = CONFIGURATION.get()
    logger.setLevel(settings.log_level or logging.WARNING)

    if adfwriter_log_file := os.getenv('ADFWRITER_LOG_FILE'):
        log_file = Path(adfwriter_log_file).resolve()
    elif settings.log_file == '':
        return
    elif config_log_file := settings.log_file:
        log_file = Path(config_log_file).resolve()
    else:
        log_file = get_log_file()

    try:
        fh = logging.FileHandler(log_file)
    except Exception as e:
        logger.warning(f'Failed to create log file handler: {e}')
    else:
        fh.setLevel(settings.log_level or logging.WARNING)
        fh.setFormatter(
            JsonFormatter('%(asctime)s %(levelname)s %(message)s %(lineno)s %(module)s %(pathname)s ')
        )
        logger.addHandler(fh)


def build_output(text: str, payload: str) -> dict:
    """Convert the text into the requested kind of JSON payload.

    Raises:
        EmptyContentError: if a comment or description payload is requested for blank text.
    """
    if payload == 'comment':
        return build_payload_to_add_comment(text)
    if payload == 'description':
        return build_payload_to_update_description(text)
    return cast(dict, text_to_adf(text))


@click.command()
@click.argument('source', type=click.File('r', encoding='utf-8'), default='-')
@click.option(
    '--payload',
    '-p',
    type=click.Choice(PAYLOAD_TYPES),
    default=None,
    help='Wrap the document as a comment body or a description field instead of printing the bare document.',
)
@click.option(
    '--warnings/--no-warnings',
    'report_warnings',
    default=None,
    help='Print warnings about malformed Markdown to stderr.',
)
@click.option(
    '--indent',
    '-i',
    type=click.IntRange(0, 8),
    default=None,
    help='Number of spaces used to indent the JSON output.',
)
@click.option(
    '--version',
    is_flag=True,
    default=False,
    help='Show the version of the tool.',
)
def cli(
    source,
    payload: str | None = None,
    report_warnings: bool | None = None,
    indent: int | None = None,
    version: bool = False,
):
    """Converts the Markdown in SOURCE (or stdin) into Atlassian Document Format JSON."""

    if version:
        from importlib.metadata import version as get_version

        console.print(get_version('adfwriter'))
        return

    try:
        settings = ApplicationConfiguration()
    except ValidationError as e:
        error_console.print('Configuration validation error. Make sure your config file is correct.')
        for _e in e.errors():
            if location := _e.get('loc'):
                error_console.print(f'Configuration error at {location[0]}: {_e.get("msg")}')
            else:
                error_console.print(f'Configuration error: {_e.get("msg")}')
        sys.exit(1)

    CONFIGURATION.set(settings)
    setup_logging()

    try:
        text = source.read()
    except UnicodeDecodeError as e:
        logger.info('Failed to decode the Markdown source', extra={'source': source.name, 'error': str(e)})
        error_console.print(f'[bold red]Error:[/bold red] The source is not valid UTF-8 text: {escape(str(e))}')
        sys.exit(1)

    payload = payload or settings.default_payload

    try:
        output = build_output(text, payload)
    except EmptyContentError as e:
        logger.info('Refused to build payload', extra={'payload': payload, 'error': str(e)})
        error_console.print(f'[bold red]Error:[/bold red] {e}')
        sys.exit(1)

    if report_warnings is None:
        report_warnings = settings.report_warnings
    if report_warnings:
        for warning in detect_malformed_markdown(text):
            error_console.print(f'[yellow]Warning:[/yellow] {escape(warning)}', highlight=False)

    json_indent = indent if indent is not None else settings.json_indent
    click.echo(json.dumps(output, indent=json_indent or None, ensure_ascii=False))


def adfwriterCLI():
    cli()


if __name__ == '__main__':
    adfwriterCLI()
