"""JSON output for CLI commands.

Every command prints exactly one JSON document to stdout. On an interactive
terminal the document is syntax-highlighted with rich; otherwise it is
written plainly so pipes and agents get parseable text.
"""

import json
import sys
from typing import Any

import click
from rich.console import Console

JSON_INDENT = 2


def emit_json(data: dict[str, Any]) -> None:
    """Write data as indented JSON to stdout."""
    json_str = json.dumps(data, indent=JSON_INDENT, ensure_ascii=False)
    if sys.stdout.isatty():
        Console().print_json(json_str, indent=JSON_INDENT)
        return
    click.echo(json_str)
