"""Exceptions raised while reading and parsing ``.http`` files."""

from __future__ import annotations


class HttpFileError(ValueError):
    """Base class for every error raised while parsing a request file.

    Attributes:
        line: The offending input line, when one is known.
        block: 0-based index of the request block being parsed, when the
            error was raised while parsing a whole file.
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.line = line
        self.block: int | None = None

    def __str__(self) -> str:
        if self.block is None:
            return self.message
        return f"request #{self.block}: {self.message}"


class MissingVariable(HttpFileError):
    """A ``{{NAME}}`` placeholder references an unset environment variable."""

    def __init__(self, name: str, line: str | None = None) -> None:
        super().__init__(f"you must provide a value for key {name}", line)
        self.name = name


class InvalidHeader(HttpFileError):
    """A header line has no ``:`` separator."""

    def __init__(self, line: str) -> None:
        super().__init__(f"invalid header in {line!r}", line)


class InvalidURLParameter(HttpFileError):
    """A URL parameter line has no ``=`` or an empty key/value."""

    def __init__(self, line: str) -> None:
        super().__init__(f"invalid url parameter in {line!r}", line)


class InvalidURL(HttpFileError):
    """The request line ends with a protocol but carries no URL."""

    def __init__(self, line: str) -> None:
        super().__init__(f"invalid URL: {line!r}", line)


class RequestIndexError(IndexError):
    """The selected request number does not exist in the file."""

    def __init__(self, index: int, count: int) -> None:
        super().__init__(f"invalid request index: {index} out of {count}")
        self.index = index
        self.count = count


class EmptyRequestError(RequestIndexError):
    """The selected request block has no request line."""

    def __init__(self, index: int, count: int) -> None:
        IndexError.__init__(
            self,
            f"request #{index} is empty (no request line); "
            "select another with -n",
        )
        self.index = index
        self.count = count
