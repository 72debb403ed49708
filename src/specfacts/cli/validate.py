"""CLI command: specfacts validate -- analyze a WebIDL file and check the report."""

from __future__ import annotations

import sys
from collections import Counter
from pathlib import Path

import click

from specfacts.model.diagnostic import Severity
from specfacts.validation import validate as run_validate
from specfacts.webidl import IdlSyntaxError, analyze


@click.command()
@click.argument("idlfile", type=click.Path(exists=True, dir_okay=False))
def validate(idlfile: str) -> None:
    """Analyze and check the WebIDL in IDLFILE.

    Prints what the IDL defines and needs, then any diagnostics. Exits with
    code 1 if an ERROR diagnostic is found.
    """
    idl_path = Path(idlfile)

    try:
        report = analyze(idl_path.read_text(encoding="utf-8"))
    except IdlSyntaxError as exc:
        click.echo(f"Parse error: {exc}", err=True)
        sys.exit(1)

    contexts = ", ".join(sorted(report.exposure_map.contexts())) or "none"
    click.echo(
        f"{idl_path.name}: {len(report.idl_names)} name(s), "
        f"{len(report.external_dependencies)} external, exposed in {contexts}"
    )

    diagnostics = run_validate(report)
    for diag in diagnostics:
        click.echo(str(diag))

    counts = Counter(d.severity for d in diagnostics)
    click.echo(
        f"Summary: {counts[Severity.ERROR]} error(s), "
        f"{counts[Severity.WARNING]} warning(s), {counts[Severity.INFO]} info"
    )
    sys.exit(1 if counts[Severity.ERROR] else 0)
