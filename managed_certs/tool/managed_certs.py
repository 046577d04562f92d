"""Command line tool for running and inspecting the ManagedCertificate controller."""

import argparse
import logging
import sys
import traceback

from managed_certs.exceptions import ManagedCertsException
from . import get, run

_LOGGER = logging.getLogger(__name__)


def _make_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Controller keeping ManagedCertificates in sync with SslCertificates.",
    )
    parser.add_argument(
        "--log-level", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    )

    subparsers = parser.add_subparsers(dest="command", help="Command", required=True)

    run.RunAction.register(subparsers)
    get.GetAction.register(subparsers)
    return parser


def main(argv: list[str] | None = None) -> None:
    """managed-certs command line tool main entry point."""
    parser = _make_parser()
    args = parser.parse_args(argv)

    if args.log_level:
        logging.basicConfig(level=args.log_level)

    action = args.cls()
    try:
        action.run(**vars(args))
    except ManagedCertsException as err:
        if args.log_level == "DEBUG":
            traceback.print_exc(file=sys.stderr)
        print("managed-certs error: ", err, file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
