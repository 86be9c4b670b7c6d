"""Request execution and response rendering.

Sends parsed requests with the ``requests`` library and formats the
responses for the terminal at one of three verbosity levels.
"""

from __future__ import annotations

import json
import logging
import time

import requests
import urllib3

from httpfile.errors import EmptyRequestError, RequestIndexError
from httpfile.request import Request

log = logging.getLogger(__name__)

# Default request timeout, in seconds
DEFAULT_TIMEOUT = 120

JSON_CONTENT_TYPE = "application/json"


class ExecutionResult:
    """Container for a response and the time it took to receive it."""

    __slots__ = ("response", "elapsed")

    def __init__(self, response: requests.Response, elapsed: float) -> None:
        self.response = response
        self.elapsed = elapsed


def disable_tls_warnings() -> None:
    """Silence urllib3's InsecureRequestWarning for ``--insecure`` runs."""
    urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


def send_request(
    request: Request,
    timeout: int = DEFAULT_TIMEOUT,
    verify: bool = True,
) -> ExecutionResult:
    """Send *request* and time the round trip.

    URL parameters are passed to ``requests`` as query parameters, which
    appends them to the URL in file order.

    Args:
        request: The parsed request.
        timeout: Request timeout in seconds.
        verify: Whether to verify TLS certificates.

    Returns:
        An ExecutionResult with the response and elapsed seconds.

    Raises:
        requests.RequestException: On connection, timeout or URL errors.
    """
    log.debug("Sending %s %s", request.method, request.url)
    start = time.perf_counter()
    response = requests.request(
        method=request.method,
        url=request.url,
        params=request.url_parameters or None,
        headers=request.headers,
        data=request.body.encode("utf-8") if request.body else None,
        timeout=timeout,
        verify=verify,
    )
    elapsed = time.perf_counter() - start
    log.debug(
        "Received HTTP %s from %s in %.3fs",
        response.status_code,
        request.url,
        elapsed,
    )
    return ExecutionResult(response=response, elapsed=elapsed)


def select_requests(
    reqs: list[Request], index: int | None
) -> list[Request]:
    """Pick the requests to run.

    Blocks without a request line, such as the text before a leading
    ``### title`` marker, are skipped when running every request.

    Args:
        reqs: All requests parsed from a file.
        index: 0-based request number, or ``None`` for all of them.

    Raises:
        RequestIndexError: If *index* is out of range.
        EmptyRequestError: If *index* points at a block with no request.
    """
    if index is None:
        selected = []
        for number, request in enumerate(reqs):
            if not request.url:
                log.debug("Skipping empty request #%d", number)
                continue
            selected.append(request)
        return selected
    if not 0 <= index < len(reqs):
        raise RequestIndexError(index, len(reqs))
    if not reqs[index].url:
        raise EmptyRequestError(index, len(reqs))
    return [reqs[index]]


def media_type(content_type: str) -> str:
    """Return the media type of a Content-Type value, without parameters."""
    return content_type.split(";", 1)[0].strip().lower()


def beautify_json(text: str) -> str:
    """Pretty-print a JSON document, or return *text* if it is not JSON."""
    try:
        parsed = json.loads(text)
    except ValueError:
        log.debug("Response declared JSON but could not be decoded")
        return text
    return json.dumps(parsed, indent=2, ensure_ascii=False)


def render_response(result: ExecutionResult, verbosity: int = 0) -> str:
    """Format a response for output.

    Verbosity 0 yields only the body text. Higher levels prefix the status
    line, elapsed time and response headers, and pretty-print JSON bodies.
    """
    response = result.response
    if verbosity < 1:
        return response.text

    headers = "".join(
        f"{key}: {value}\n" for key, value in response.headers.items()
    )
    body = response.text
    if media_type(response.headers.get("Content-Type", "")) == JSON_CONTENT_TYPE:
        body = beautify_json(body)
    return (
        f"{response.status_code} {response.reason} - {result.elapsed:.3f}s\n"
        f"{headers}\n"
        f"{body}"
    )


def execute_requests(
    reqs: list[Request],
    index: int | None = 0,
    timeout: int = DEFAULT_TIMEOUT,
    verbosity: int = 0,
    verify: bool = True,
) -> None:
    """Run the selected requests in order and print each response.

    Raises:
        RequestIndexError: If *index* is out of range or points at an
            empty block.
        requests.RequestException: If a request fails on the network.
    """
    for request in select_requests(reqs, index):
        if verbosity > 1:
            print(f"===== Request:\n{request}\n===== Response:")
        result = send_request(request, timeout=timeout, verify=verify)
        print(render_response(result, verbosity))
