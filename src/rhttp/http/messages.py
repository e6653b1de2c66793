"""Request and response values carried inside pub/sub frames."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .status import reason_phrase


CORRELATION_HEADER = "X-Socket-ID"

HeaderMap = dict[str, str]
QueryMap = dict[str, "str | None"]


class HttpMethod(str, Enum):
    """Request methods understood by the codec and the router."""

    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    CONNECT = "CONNECT"
    OPTIONS = "OPTIONS"
    TRACE = "TRACE"
    PATCH = "PATCH"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class Request:
    """An inbound request.

    `path` never contains the query segment; the parsed parameters live in
    `query`, where a key given without `=` maps to None.
    `socket_id` is taken from the correlation header so the reply can be
    routed back to the peer that is waiting for it.
    """

    method: HttpMethod
    path: str
    headers: HeaderMap = field(default_factory=dict)
    query: QueryMap = field(default_factory=dict)
    body: str = ""
    socket_id: str | None = field(init=False, default=None)

    def __post_init__(self) -> None:
        object.__setattr__(self, "method", HttpMethod(self.method))
        object.__setattr__(self, "socket_id", self.headers.get(CORRELATION_HEADER))

    @property
    def target(self) -> str:
        """Path with the query segment reattached."""
        if not self.query:
            return self.path
        pairs = (key if value is None else f"{key}={value}" for key, value in self.query.items())
        return f"{self.path}?{'&'.join(pairs)}"


def _default_headers() -> HeaderMap:
    return {"Content-Length": "0"}


@dataclass(slots=True)
class Response:
    status_code: int = 200
    status_message: str = field(default_factory=lambda: reason_phrase(200))
    headers: HeaderMap = field(default_factory=_default_headers)
    body: str = ""

    def set_status(self, code: int) -> None:
        self.status_code = code
        self.status_message = reason_phrase(code)

    @property
    def socket_id(self) -> str | None:
        return self.headers.get(CORRELATION_HEADER)

    @socket_id.setter
    def socket_id(self, value: str | None) -> None:
        if value is None:
            self.headers.pop(CORRELATION_HEADER, None)
        else:
            self.headers[CORRELATION_HEADER] = value
