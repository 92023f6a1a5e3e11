"""Command line tool for reconciling hub resources once."""

import argparse
import asyncio
import logging
import sys
import traceback

from hub_reconcile.exceptions import ReconcileException
from . import ensure_view, sync_package_manifest

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Command line utility for reconciling hub resources once.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    ensure_view.EnsureViewAction.register(subparsers)
    sync_package_manifest.SyncPackageManifestAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """Hub-reconcile command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        asyncio.run(action.run(**vars(args)))
    except ReconcileException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("hub-reconcile error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
