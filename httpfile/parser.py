"""``.http`` file parsing engine.

Converts the text of a ``.http`` file into structured :class:`Request`
objects. A file holds one or more requests separated by ``###`` lines::

    // comments start with // or #
    POST https://example.com/comments HTTP/1.1
    Content-Type: application/json
    Authorization: Bearer {{TOKEN}}
      ?page=2

    {"name": "sample"}

    ### next request
    GET https://example.com/comments/1

Each block is parsed line by line. Lines before the first blank line
following the request line form the head (headers, and indented ``?key=value``
URL parameters); everything after it is the raw body.
"""

from __future__ import annotations

import enum
import functools
import logging
import re
from collections.abc import Mapping

from httpfile.env import expand_text
from httpfile.errors import (
    HttpFileError,
    InvalidHeader,
    InvalidURL,
    InvalidURLParameter,
)
from httpfile.request import Method, Request

log = logging.getLogger(__name__)

BLOCK_SEPARATOR = "###"
COMMENT_PREFIXES = ("//", "#")
PROTOCOL_RE = re.compile(r"HTTP/\d(\.\d)?")


class Phase(enum.Enum):
    """Region of the block the parser is currently in."""

    HEAD = "head"
    BODY = "body"


class ParserState:
    """Parsing state of a single block, threaded through :func:`parse_line`."""

    __slots__ = ("phase", "request", "body_lines")

    def __init__(self) -> None:
        self.phase = Phase.HEAD
        self.request = Request()
        self.body_lines: list[str] = []

    def finish(self) -> Request:
        """Close the block and return the finished request."""
        self.request.body = "\n".join(self.body_lines).strip()
        return self.request


def parse_header(line: str) -> tuple[str, str]:
    """Split a ``Name: value`` line into its name and value.

    Only the first colon separates the name, so values such as
    ``10:30:00`` or ``session=abc:def`` are kept intact.

    Raises:
        InvalidHeader: If the line contains no colon.
    """
    key, sep, value = line.partition(":")
    if not sep:
        raise InvalidHeader(line)
    return key, value.lstrip()


def parse_url_parameter(line: str) -> tuple[str, str]:
    """Parse an indented ``?key=value`` line into a ``(key, value)`` pair.

    The first character of the key is always dropped, since it is the
    ``?`` marker.

    Raises:
        InvalidURLParameter: If ``=`` is missing or either side is empty.
    """
    parts = line.lstrip().split("=", 1)
    if len(parts) < 2 or not parts[0] or not parts[1]:
        raise InvalidURLParameter(line)
    key, value = parts
    return key[1:], value


def parse_url(line: str) -> tuple[str, str | None]:
    """Extract the URL and optional protocol from a request line.

    Handles ``URL``, ``METHOD URL`` and ``METHOD URL PROTOCOL``.

    Returns:
        A ``(url, protocol)`` tuple; ``protocol`` is ``None`` when the
        line does not end with one.

    Raises:
        InvalidURL: If the line ends with a protocol but has no room for
            both a method and a URL before it.
    """
    tokens = line.split()
    candidate = tokens[-1]
    if PROTOCOL_RE.fullmatch(candidate):
        if len(tokens) <= 2:
            raise InvalidURL(line)
        return tokens[-2], candidate
    return candidate, None


def parse_line(state: ParserState, line: str) -> ParserState:
    """Apply one line of a block to *state* and return it."""
    request = state.request
    blank = not line.strip()

    if blank and not request.url:
        # leading blank lines before the request line
        return state
    if line.startswith(COMMENT_PREFIXES):
        return state
    if state.phase is Phase.BODY:
        state.body_lines.append(line)
        return state
    if blank:
        state.phase = Phase.BODY
        return state

    if request.url:
        if line[0].isspace():
            request.url_parameters.append(parse_url_parameter(line))
        else:
            key, value = parse_header(line)
            request.headers[key] = value
        return state

    if not request.method:
        request.method = Method.from_token(line.split()[0]).value
    url, protocol = parse_url(line)
    request.url = url
    if protocol is not None:
        request.protocol = protocol
    return state


def parse_request(block: str) -> Request:
    """Parse one raw block of text into a :class:`Request`.

    A block made only of blank lines and comments yields an empty request
    rather than an error.

    Args:
        block: The raw (already expanded) text of one request.

    Returns:
        The parsed request.

    Raises:
        InvalidHeader, InvalidURLParameter, InvalidURL: On malformed lines.
    """
    state = functools.reduce(parse_line, block.split("\n"), ParserState())
    return state.finish()


def split_blocks(text: str) -> list[str]:
    """Split file text into raw request blocks at ``###`` lines.

    The marker line, including any title after ``###``, belongs to no
    block. A file with *n* marker lines always yields *n + 1* blocks.
    """
    blocks: list[list[str]] = [[]]
    for line in text.split("\n"):
        if line.startswith(BLOCK_SEPARATOR):
            blocks.append([])
            continue
        blocks[-1].append(line)
    return ["\n".join(lines) for lines in blocks]


def parse_text(
    text: str, environ: Mapping[str, str] | None = None
) -> list[Request]:
    """Parse the full text of a ``.http`` file.

    Args:
        text: Raw file contents; ``\\r\\n`` line endings are accepted.
        environ: Placeholder lookup; defaults to ``os.environ``.

    Returns:
        The requests in file order.

    Raises:
        HttpFileError: On the first unset placeholder or malformed block.
    """
    normalized = text.replace("\r\n", "\n")
    blocks = split_blocks(expand_text(normalized, environ))
    log.debug("Split request file into %d blocks", len(blocks))

    requests: list[Request] = []
    for index, block in enumerate(blocks):
        try:
            request = parse_request(block)
        except HttpFileError as exc:
            exc.block = index
            raise
        log.debug("Parsed request #%d: %r", index, request)
        requests.append(request)
    return requests


def load_request_file(filepath: str) -> str:
    """Read and return the contents of a ``.http`` file.

    A leading UTF-8 byte order mark is dropped.

    Raises:
        FileNotFoundError: If the file does not exist.
        OSError: If the file cannot be read.
        UnicodeDecodeError: If the file is not valid UTF-8.
    """
    with open(filepath, "r", encoding="utf-8-sig") as fh:
        return fh.read()


def parse_file(
    filepath: str, environ: Mapping[str, str] | None = None
) -> list[Request]:
    """Read *filepath* and parse every request it contains."""
    log.debug("Loading request file %s", filepath)
    return parse_text(load_request_file(filepath), environ)
