"""CLI command: specfacts css -- parse a CSS value definition."""

from __future__ import annotations

import json
import sys

import click

from specfacts.css import GrammarError, parse_grammar


@click.command()
@click.argument("grammar")
@click.option("--compact", is_flag=True, help="Print JSON on a single line.")
def css(grammar: str, compact: bool) -> None:
    """Parse GRAMMAR (e.g. '[ <length> | auto ]{1,4}') and print its tree as JSON."""
    try:
        node = parse_grammar(grammar)
    except GrammarError as exc:
        click.echo(f"Grammar error: {exc}", err=True)
        sys.exit(1)

    click.echo(json.dumps(node.to_dict(), indent=None if compact else 2))
