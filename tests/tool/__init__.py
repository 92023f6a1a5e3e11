"""Test helpers for hub-reconcile tools."""

import contextlib
import io

from hub_reconcile.tool.hub_reconcile import main


def run_command(args: list[str]) -> str:
    """Run the command line tool in process and return its output."""
    out = io.StringIO()
    with contextlib.redirect_stdout(out):
        main(args)
    return out.getvalue()
