"""CLI interface for sqlreview."""

import logging
import sys
from pathlib import Path
from typing import List, Optional, Tuple

import click

from . import __version__
from .base import ReviewResult
from .catalog import Catalog
from .config import Config, default_config, load_config, load_schema_metadata
from .formatters import JsonFormatter, TextFormatter
from .formatters.base import Formatter
from .models import AdviceStatus, ChangeType
from .reviewer import Reviewer
from .rules.registry import AdvisorRegistry

FORMAT_TEXT = "text"
FORMAT_JSON = "json"
STDIN_SOURCE = "-"

EXIT_OK = 0
EXIT_ADVICE_ERRORS = 1
EXIT_CONFIG_ERROR = 2

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _load_config_or_exit(config_path: Optional[str]) -> Config:
    if not config_path:
        return default_config()
    try:
        config = load_config(Path(config_path))
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Failed to load configuration {config_path}: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    logger.info(f"Configuration loaded from {config_path}")
    return config


def _load_catalog_or_exit(schema_path: Optional[str]) -> Optional[Catalog]:
    if not schema_path:
        return None
    try:
        metadata = load_schema_metadata(Path(schema_path))
    except (FileNotFoundError, ValueError) as e:
        click.echo(f"❌ Failed to load schema {schema_path}: {e}", err=True)
        sys.exit(EXIT_CONFIG_ERROR)
    return Catalog(metadata)


def read_sources(paths: Tuple[str, ...], sql: Optional[str]) -> List[Tuple[str, str]]:
    """
    Collect the SQL texts to review.

    Args:
        paths: SQL file paths; "-" reads standard input
        sql: SQL passed inline with --sql

    Returns:
        List of tuples (source name, SQL text). Unreadable files are reported and skipped.
    """
    sources: List[Tuple[str, str]] = []
    if sql is not None:
        sources.append(("<sql>", sql))
    for path in paths:
        if path == STDIN_SOURCE:
            with click.open_file(STDIN_SOURCE) as stream:
                sources.append(("<stdin>", stream.read()))
            continue
        try:
            sources.append((path, Path(path).read_text(encoding="utf-8")))
        except FileNotFoundError:
            click.echo(f"⚠️  File not found: {path}", err=True)
        except (OSError, UnicodeDecodeError) as e:
            click.echo(f"❌ Error reading file {path}: {e}", err=True)
    return sources


def get_formatter(output_format: str, no_color: bool, min_status: Optional[AdviceStatus]) -> Formatter:
    if output_format == FORMAT_JSON:
        return JsonFormatter(min_status=min_status, no_color=no_color)
    return TextFormatter(min_status=min_status, no_color=no_color)


def has_errors(results: List[Tuple[str, ReviewResult]]) -> bool:
    return any(result.has_errors() for _, result in results)


@click.group()
@click.version_option(version=__version__, prog_name="sqlreview")
def cli():
    """sqlreview - static review of MySQL statements."""
    pass


@cli.command()
@click.argument("paths", nargs=-1, type=click.Path(exists=False))
@click.option("--sql", "sql", default=None, help="SQL text to review instead of (or in addition to) files")
@click.option("--config", type=click.Path(exists=False), help="Path to rule configuration file (.json or .toml)")
@click.option("--schema", type=click.Path(exists=False), help="Path to database schema metadata (.json or .toml)")
@click.option(
    "--change-type",
    type=click.Choice([c.value for c in ChangeType], case_sensitive=False),
    default=ChangeType.UNSPECIFIED.value,
    help="Kind of change the SQL belongs to",
)
@click.option(
    "--format",
    "output_format",
    type=click.Choice([FORMAT_TEXT, FORMAT_JSON]),
    default=FORMAT_TEXT,
    help="Output format",
)
@click.option(
    "--min-status",
    type=click.Choice([s.value for s in AdviceStatus], case_sensitive=False),
    default=None,
    help="Only show advice at or above this status",
)
@click.option("--no-color", is_flag=True, help="Disable colored output (useful for CI)")
@click.option("--verbose", "-v", is_flag=True, help="Verbose logging")
@click.option("--exit-code", is_flag=True, help="Return non-zero code when errors are found (for CI)")
def check(
    paths: Tuple[str, ...],
    sql: Optional[str],
    config: Optional[str],
    schema: Optional[str],
    change_type: str,
    output_format: str,
    min_status: Optional[str],
    no_color: bool,
    verbose: bool,
    exit_code: bool,
):
    """Review SQL files against the configured rules."""
    _setup_logging(verbose)

    if not paths and sql is None:
        click.echo("❌ Nothing to review. Pass SQL files, '-' for stdin, or --sql.", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    reviewer = Reviewer(_load_config_or_exit(config))
    catalog = _load_catalog_or_exit(schema)
    sources = read_sources(paths, sql)
    if not sources:
        click.echo("❌ No SQL could be read.", err=True)
        sys.exit(EXIT_CONFIG_ERROR)

    results: List[Tuple[str, ReviewResult]] = []
    for name, text in sources:
        # The catalog is mutated by review, so each source starts from a fresh copy.
        source_catalog = Catalog(catalog.metadata) if catalog is not None else None
        results.append((name, reviewer.review(text, catalog=source_catalog, change_type=ChangeType(change_type.upper()))))

    formatter = get_formatter(output_format, no_color, AdviceStatus(min_status.upper()) if min_status else None)
    click.echo(formatter.format(results))

    if exit_code and has_errors(results):
        sys.exit(EXIT_ADVICE_ERRORS)
    sys.exit(EXIT_OK)


@cli.command("rules")
def list_rules():
    """List the rule types known to sqlreview."""
    for rule_type in AdvisorRegistry.with_default_rules().list_rule_types():
        click.echo(rule_type)


def main():
    """Entry point for CLI."""
    cli()


if __name__ == "__main__":
    main()
