"""CLI command: specfacts idl -- analyze a WebIDL file and print the report."""

from __future__ import annotations

import json
import sys
from pathlib import Path

import click

from specfacts.webidl import IdlSyntaxError, analyze


@click.command()
@click.argument("idlfile", type=click.Path(exists=True, dir_okay=False))
@click.option("--compact", is_flag=True, help="Print JSON on a single line.")
def idl(idlfile: str, compact: bool) -> None:
    """Analyze the WebIDL in IDLFILE and print the report as JSON."""
    try:
        source = Path(idlfile).read_text(encoding="utf-8")
        report = analyze(source)
    except IdlSyntaxError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    click.echo(json.dumps(report.to_dict(), indent=None if compact else 2))
