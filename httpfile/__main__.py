"""httpfile — Main entry point.

Ties together the CLI, parser, and engine modules to run the requests
described in one or more ``.http`` files.
"""

import logging
import sys

import requests

from httpfile.cli import configure_logging, parse_cli
from httpfile.engine import disable_tls_warnings, execute_requests
from httpfile.errors import HttpFileError, RequestIndexError
from httpfile.parser import parse_file

log = logging.getLogger("httpfile")


def main(argv: list[str] | None = None) -> int:
    """Run httpfile.

    Args:
        argv: Optional argument list (defaults to sys.argv).

    Returns:
        Exit code (0 = success, 2 = parse, selection or network error).
    """
    args = parse_cli(argv)
    configure_logging(args.debug)
    if not args.verify:
        disable_tls_warnings()

    for path in args.files:
        try:
            reqs = parse_file(path)
        except (OSError, UnicodeDecodeError) as exc:
            print(f"Error reading request file: {exc}", file=sys.stderr)
            return 2
        except HttpFileError as exc:
            print(f"Error parsing {path}: {exc}", file=sys.stderr)
            return 2
        log.debug("Parsed %d requests from %s", len(reqs), path)

        try:
            execute_requests(
                reqs,
                index=args.request_index,
                timeout=args.timeout,
                verbosity=args.verbosity,
                verify=args.verify,
            )
        except RequestIndexError as exc:
            print(f"Error in {path}: {exc}", file=sys.stderr)
            return 2
        except requests.RequestException as exc:
            print(f"Error during request: {exc}", file=sys.stderr)
            return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
