"""Command-line interface for httpfile.

Builds the argparse parser, validates the input files and configures
logging for a run.
"""

import argparse
import logging
import os
import sys

from httpfile import __version__
from httpfile.engine import DEFAULT_TIMEOUT

LOG_FORMAT = "%(levelname)s | %(name)s | %(message)s"

# Value of --request that selects every request in the file
ALL_REQUESTS = "a"


def request_number(value: str) -> int | None:
    """argparse type for ``--request``: a 0-based index, or ``a`` for all."""
    if value == ALL_REQUESTS:
        return None
    if value == "":
        return 0
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid request number: {value!r} (use an index or 'a')"
        ) from None
    if number < 0:
        raise argparse.ArgumentTypeError(
            f"request number must not be negative: {number}"
        )
    return number


def positive_int(value: str) -> int:
    """argparse type for strictly positive integers."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"invalid integer value: {value!r}"
        ) from None
    if number <= 0:
        raise argparse.ArgumentTypeError(f"must be positive: {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build and return the argument parser for the httpfile CLI."""
    parser = argparse.ArgumentParser(
        prog="httpfile",
        description=(
            "httpfile v{ver} — run HTTP requests described in .http files.\n\n"
            "Requests are separated by lines starting with ###, comments "
            "start with // or #, and {{NAME}} is replaced with the value of "
            "the NAME environment variable."
        ).format(ver=__version__),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=(
            "Verbosity:\n"
            "  (none)  only the raw response body, handy for piping into jq\n"
            "  -v      status, elapsed time, headers and body; JSON bodies\n"
            "          are pretty-printed\n"
            "  -vv     also echo the request being sent\n\n"
            "Examples:\n"
            "  httpfile requests.http\n"
            "  httpfile requests.http -n 2 -v\n"
            "  httpfile requests.http -n a -t 10 -vv\n"
        ),
    )

    parser.add_argument(
        "files",
        nargs="+",
        metavar="FILE",
        help="Path to the .http file(s) to run.",
    )
    parser.add_argument(
        "-n",
        "--request",
        type=request_number,
        default=0,
        dest="request_index",
        help=(
            "Request to run when the file holds more than one. Numbering "
            "starts from 0; use 'a' to run them all (default: 0)."
        ),
    )
    parser.add_argument(
        "-t",
        "--timeout",
        type=positive_int,
        default=DEFAULT_TIMEOUT,
        help=f"Request timeout in seconds (default: {DEFAULT_TIMEOUT}).",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        dest="verbosity",
        help="Increase output verbosity (-v, -vv).",
    )
    parser.add_argument(
        "-k",
        "--insecure",
        action="store_false",
        dest="verify",
        help="Do not verify TLS certificates.",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Log parser and transport details to stderr.",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def validate_args(args: argparse.Namespace) -> None:
    """Validate parsed CLI arguments.

    Raises:
        SystemExit: If a request file does not exist or is not readable.
    """
    for path in args.files:
        if not os.path.isfile(path):
            print(f"Error: Request file not found: '{path}'", file=sys.stderr)
            sys.exit(1)

        if not os.access(path, os.R_OK):
            print(
                f"Error: Request file is not readable: '{path}'",
                file=sys.stderr,
            )
            sys.exit(1)


def configure_logging(debug: bool = False) -> None:
    """Send log records to stderr, at DEBUG level when *debug* is set."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def parse_cli(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse and validate command-line arguments.

    Args:
        argv: Optional list of arguments (defaults to sys.argv).

    Returns:
        Parsed and validated argument namespace.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    validate_args(args)
    return args
