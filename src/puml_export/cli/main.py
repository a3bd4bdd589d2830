"""Command-line interface for puml-export.

Renders each PlantUML file given on the command line through a PlantUML
server and writes the image next to the source file.
"""

import asyncio
import logging
from pathlib import Path

import click
from pydantic import ValidationError

from puml_export import __version__
from puml_export.cli.shared import setup_logging
from puml_export.core.dispatcher import run_export
from puml_export.core.errors import PumlExportError
from puml_export.core.output_format import FORMAT_NAMES, OutputFormat
from puml_export.infrastructure.config import DEFAULT_SERVER_URL, LOG_LEVELS, get_config

logger = logging.getLogger(__name__)


@click.command()
@click.version_option(version=__version__, prog_name="puml-export")
@click.argument(
    "paths",
    nargs=-1,
    required=True,
    type=click.Path(path_type=Path),
)
@click.option(
    "-t",
    "--type",
    "output_type",
    type=click.Choice(FORMAT_NAMES, case_sensitive=False),
    default=None,
    help="Export type (default from configuration, normally svg)",
)
@click.option(
    "-u",
    "--url",
    default=None,
    help=f"PlantUML server URL (default from configuration, normally {DEFAULT_SERVER_URL})",
)
@click.option(
    "--log-level",
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    default=None,
    help="Set the logging level (default from configuration, normally WARNING)",
)
def cli(paths, output_type, url, log_level):
    """Render PlantUML files using a PlantUML server.

    Each image is written next to its PATHS entry, with the file extension
    replaced by the export type (txt, png or svg).
    """
    try:
        config = get_config()
    except ValidationError as e:
        raise click.ClickException(f"Invalid configuration: {e}") from e

    setup_logging(log_level or config.logging.log_level, config.logging.log_to_file)

    output_format = OutputFormat.parse(output_type) if output_type else config.output_format
    base_url = url or config.server.url
    logger.debug(f"Exporting {len(paths)} files as {output_format} via {base_url}")

    try:
        results = asyncio.run(
            run_export(
                paths,
                base_url,
                output_format,
                proxy=config.http.proxy,
                timeout=config.http.timeout,
            )
        )
    except PumlExportError as e:
        raise click.ClickException(str(e)) from e

    total_size = sum(result.size for result in results)
    click.echo(f"Exported {len(results)} diagrams ({total_size} bytes).", err=True)


if __name__ == "__main__":
    cli()
