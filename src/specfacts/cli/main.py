"""specfacts CLI entry point: Click group with subcommands."""

import logging

import click

from specfacts import __version__


@click.group()
@click.version_option(version=__version__, prog_name="specfacts")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    show_default=True,
    help="Logging verbosity.",
)
def cli(log_level: str) -> None:
    """specfacts - extract WebIDL and CSS grammar facts from spec text."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format="%(levelname)s %(name)s: %(message)s",
    )


# Import and register subcommands
from specfacts.cli.css import css  # noqa: E402
from specfacts.cli.idl import idl  # noqa: E402
from specfacts.cli.validate import validate  # noqa: E402

cli.add_command(idl)
cli.add_command(css)
cli.add_command(validate)
