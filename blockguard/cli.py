"""CLI entrypoint for blockguard."""

import sys
from pathlib import Path

import click

from . import __version__
from .logging_config import setup_logging


@click.group()
@click.version_option(__version__, prog_name="blockguard")
@click.option("--verbose", "-v", is_flag=True, help="Log engine activity to stderr")
def cli(verbose: bool) -> None:
    """blockguard - Validate and sanitize editor blocks against a schema."""
    if verbose:
        setup_logging("DEBUG")


@cli.command()
@click.option(
    "--config",
    "-c",
    "config_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Schema configuration (.json or .toml)",
)
@click.argument("document", type=click.Path(dir_okay=False, allow_dash=True, path_type=Path))
@click.option(
    "--validate-only",
    is_flag=True,
    help="Only check the document, do not print sanitized output",
)
@click.option(
    "--compact",
    is_flag=True,
    help="Print sanitized JSON on a single line",
)
def check(config_path: Path, document: Path, validate_only: bool, compact: bool) -> None:
    """Validate DOCUMENT and print its sanitized blocks as JSON.

    Pass - as DOCUMENT to read the editor output from stdin.
    """
    from .commands.check import run_check

    document_path = None if str(document) == "-" else document
    exit_code = run_check(
        config_path,
        document_path,
        validate_only=validate_only,
        indent=None if compact else 2,
    )
    sys.exit(exit_code)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
