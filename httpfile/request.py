"""Request model produced by the ``.http`` parser."""

from __future__ import annotations

import enum

DEFAULT_PROTOCOL = "HTTP/1.1"


class Method(str, enum.Enum):
    """HTTP methods recognised on the request line."""

    OPTIONS = "OPTIONS"
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    TRACE = "TRACE"
    CONNECT = "CONNECT"

    @classmethod
    def from_token(cls, token: str) -> Method:
        """Decode a request-line token, falling back to ``GET``.

        Matching is exact and case-sensitive: ``post`` is not ``POST``.
        """
        try:
            return cls(token)
        except ValueError:
            return cls.GET


class Request:
    """A single request parsed from one ``###`` block."""

    __slots__ = (
        "method",
        "url",
        "protocol",
        "headers",
        "url_parameters",
        "body",
    )

    def __init__(
        self,
        method: str = "",
        url: str = "",
        protocol: str = DEFAULT_PROTOCOL,
        headers: dict[str, str] | None = None,
        url_parameters: list[tuple[str, str]] | None = None,
        body: str = "",
    ) -> None:
        self.method = method
        self.url = url
        self.protocol = protocol
        self.headers = headers if headers is not None else {}
        self.url_parameters = (
            url_parameters if url_parameters is not None else []
        )
        self.body = body

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Request):
            return NotImplemented
        return all(
            getattr(self, name) == getattr(other, name)
            for name in self.__slots__
        )

    def __repr__(self) -> str:
        return (
            f"Request(method={self.method!r}, url={self.url!r}, "
            f"protocol={self.protocol!r}, "
            f"headers=<{len(self.headers)} headers>, "
            f"url_parameters=<{len(self.url_parameters)} parameters>, "
            f"body={'<present>' if self.body else '<none>'})"
        )

    def __str__(self) -> str:
        headers = "".join(
            f"   {key}: {value!r}\n" for key, value in self.headers.items()
        )
        parameters = "".join(
            f"   {key}: {value}\n" for key, value in self.url_parameters
        )
        return (
            f"{self.method} {self.url} {self.protocol}\n"
            f"headers:\n{headers}\n"
            f"url parameters:\n{parameters}\n"
            f"body:\n{self.body}"
        )
