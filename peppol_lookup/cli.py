"""Command-line interface for Peppol directory lookup."""

import json
import logging
import sys
from typing import Optional

import click
import httpx
from rich.console import Console

from peppol_lookup import __version__
from peppol_lookup.config.manager import ConfigManager
from peppol_lookup.core.errors import InvalidInputError
from peppol_lookup.core.identifiers import EXAMPLE_IDENTIFIERS, normalize_identifier, read_identifiers
from peppol_lookup.core.lookup_engine import LookupEngine
from peppol_lookup.data.schemas import Config
from peppol_lookup.output.exporter import ResultExporter
from peppol_lookup.output.formatter import ConsoleFormatter

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

console = Console()
formatter = ConsoleFormatter(console)


def get_config(config_path: Optional[str]) -> Config:
    """Load configuration from file and environment."""
    manager = ConfigManager(config_path)
    return manager.load()


@click.group()
@click.version_option(version=__version__)
def cli():
    """Peppol Lookup - check company numbers against the Peppol Directory.

    Reports which companies are registered Peppol participants and whether
    they accept Peppol BIS Billing 3.0 invoices or credit notes.
    """


@cli.command()
@click.argument("identifiers", nargs=-1)
@click.option(
    "-i", "--input", "input_file",
    type=click.Path(exists=True),
    help="File with company numbers (.txt, .csv, .xlsx).",
)
@click.option(
    "--column",
    help="Column header holding company numbers in CSV/Excel input.",
)
@click.option(
    "--raw",
    is_flag=True,
    help="Send company numbers as given instead of stripping non-digits.",
)
@click.option(
    "-b", "--batch-size",
    type=click.IntRange(min=1),
    help="Requested batch size (lookups still run one at a time).",
)
@click.option(
    "-f", "--format",
    type=click.Choice(["console", "json", "csv", "both"]),
    default="console",
    help="Output format.",
)
@click.option(
    "-o", "--output",
    help="Output filename without extension.",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to YAML config file.",
)
@click.option(
    "-v", "--verbose",
    is_flag=True,
    help="Enable debug logging.",
)
def lookup(
    identifiers: tuple[str, ...],
    input_file: Optional[str],
    column: Optional[str],
    raw: bool,
    batch_size: Optional[int],
    format: str,
    output: Optional[str],
    config: Optional[str],
    verbose: bool,
):
    """Check company numbers for Peppol registration.

    Example:
        peppol-lookup lookup "BE 0635.581.315" 0769377373
    """
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        cfg = get_config(config)

        company_numbers = list(identifiers)
        if input_file:
            company_numbers.extend(read_identifiers(input_file, column))
        if not raw:
            company_numbers = [normalize_identifier(n) for n in company_numbers]

        skipped = [n for n in company_numbers if not n.strip()]
        if skipped:
            formatter.print_warning(f"Skipping {len(skipped)} empty company number(s)")
            company_numbers = [n for n in company_numbers if n.strip()]

        with LookupEngine(config=cfg) as engine:
            report = engine.lookup_participants(company_numbers, batch_size=batch_size)

        if format in ("console", "both"):
            formatter.print_report(report)

        if format in ("json", "csv", "both"):
            exporter = ResultExporter(cfg.output_directory)
            export_format = cfg.output_format if format == "both" else format
            filepath = exporter.export_report(report, export_format, output)
            formatter.print_success(f"Exported to: {filepath}")

    except InvalidInputError as e:
        formatter.print_error(f"Invalid input: {e}")
        sys.exit(1)
    except FileNotFoundError as e:
        formatter.print_error(f"File not found: {e}")
        sys.exit(1)
    except ValueError as e:
        formatter.print_error(f"Invalid input: {e}")
        sys.exit(1)
    except Exception as e:
        formatter.print_error(f"Error: {e}")
        if verbose:
            logger.exception("Detailed error:")
        sys.exit(1)


@cli.command()
@click.argument("participant_id")
@click.option(
    "--json", "as_json",
    is_flag=True,
    help="Print the raw JSON document.",
)
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to YAML config file.",
)
def details(participant_id: str, as_json: bool, config: Optional[str]):
    """Show directory details for one participant.

    Example:
        peppol-lookup details iso6523-actorid-upis::0208:0769377373
    """
    try:
        cfg = get_config(config)
        with LookupEngine(config=cfg) as engine:
            data = engine.get_participant_details(participant_id)

        if as_json:
            click.echo(json.dumps(data, indent=2, ensure_ascii=False))
        else:
            formatter.print_details(participant_id, data)

    except httpx.HTTPStatusError as e:
        formatter.print_error(f"Directory returned HTTP {e.response.status_code} for {participant_id}")
        sys.exit(1)
    except (httpx.HTTPError, ValueError) as e:
        formatter.print_error(f"Error: {e}")
        sys.exit(1)


@cli.command()
@click.option(
    "-c", "--config",
    type=click.Path(exists=True),
    help="Path to YAML config file.",
)
def example(config: Optional[str]):
    """Run the lookup on a fixed list of Belgian company numbers."""
    try:
        cfg = get_config(config)
        company_numbers = [normalize_identifier(n) for n in EXAMPLE_IDENTIFIERS]
        with LookupEngine(config=cfg) as engine:
            report = engine.lookup_participants(company_numbers)
        formatter.print_lists(report)

    except Exception as e:
        formatter.print_error(f"Lookup failed: {e}")
        sys.exit(1)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
