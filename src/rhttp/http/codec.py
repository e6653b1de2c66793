"""Textual HTTP frame codec.

A frame is one complete message carried as a single pub/sub payload:

    <start line>\r\n
    <Name>: <value>\r\n
    ...
    \r\n
    <body>

Parsing runs in two steps. `tokenize()` turns the frame into typed line records
(start line, header lines, body lines) and rejects lines that fit none of them.
`parse()` then splits the start line into its fields and builds a `Request` or
`Response` from the records.

Body handling matches the peers this talks to: body lines are joined with no
separator, and blank lines inside the body are dropped. Pass
`preserve_line_breaks=True` to keep the body verbatim instead.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from ..exceptions import MalformedMessageError
from .messages import HeaderMap, HttpMethod, QueryMap, Request, Response


CRLF = "\r\n"
HTTP_VERSION = "HTTP/1.1"


@dataclass(frozen=True, slots=True)
class StartLine:
    text: str


@dataclass(frozen=True, slots=True)
class HeaderLine:
    name: str
    value: str


@dataclass(frozen=True, slots=True)
class BodyLine:
    text: str


LineRecord = StartLine | HeaderLine | BodyLine


def tokenize(raw: str, *, preserve_line_breaks: bool = False) -> Iterator[LineRecord]:
    """Yield the line records of a frame, start line first."""
    if not raw:
        raise MalformedMessageError("empty frame")

    head, sep, rest = raw.partition(CRLF)
    if not head.strip():
        raise MalformedMessageError("missing start line", line=head)
    yield StartLine(head)

    if not sep:
        return

    # Header block ends at the first empty line. A frame whose start line is
    # followed directly by the blank separator has no headers at all.
    if rest.startswith(CRLF):
        header_block, body = "", rest[len(CRLF):]
        has_body = True
    else:
        header_block, marker, body = rest.partition(CRLF + CRLF)
        has_body = bool(marker)
        if not has_body and header_block.endswith(CRLF):
            header_block = header_block[: -len(CRLF)]

    if header_block:
        for line in header_block.split(CRLF):
            if line == "":
                continue
            name, colon, value = line.partition(":")
            if not colon:
                raise MalformedMessageError("header line without ':'", line=line)
            yield HeaderLine(name.strip(), value.strip())

    if not has_body or not body:
        return

    if preserve_line_breaks:
        yield BodyLine(body)
        return

    for line in body.split(CRLF):
        if line:
            yield BodyLine(line)


def _parse_status_line(text: str) -> Response:
    parts = text.split(" ", 2)
    if len(parts) < 2:
        raise MalformedMessageError("invalid status line", line=text)
    if not (parts[1].isascii() and parts[1].isdigit()):
        raise MalformedMessageError(f"invalid status code {parts[1]!r}", line=text)
    status_code = int(parts[1])
    status_message = parts[2].strip() if len(parts) == 3 else ""
    return Response(status_code=status_code, status_message=status_message, headers={})


def _parse_request_line(text: str) -> tuple[HttpMethod, str]:
    parts = text.split(" ")
    if len(parts) != 3:
        raise MalformedMessageError("invalid request line", line=text)
    method, target, version = parts
    if not version.startswith("HTTP/"):
        raise MalformedMessageError(f"invalid http version {version!r}", line=text)
    try:
        return HttpMethod(method), target
    except ValueError as e:
        raise MalformedMessageError(f"unsupported method {method!r}", line=text) from e


def parse_query(query_string: str) -> QueryMap:
    """Split `a=1&b` into {"a": "1", "b": None}. Values are not decoded."""
    query: QueryMap = {}
    for pair in query_string.split("&"):
        if not pair:
            continue
        key, eq, value = pair.partition("=")
        query[key] = value if eq else None
    return query


def parse(raw: str, *, preserve_line_breaks: bool = False) -> Request | Response:
    """Parse a raw frame into a `Request` or a `Response`.

    Raises `MalformedMessageError` when the start line cannot be classified or
    split, or when a header line has no `:`.
    """
    records = tokenize(raw, preserve_line_breaks=preserve_line_breaks)
    start = next(records)
    assert isinstance(start, StartLine)

    headers: HeaderMap = {}
    body_parts: list[str] = []
    for record in records:
        match record:
            case HeaderLine(name=name, value=value):
                headers[name] = value
            case BodyLine(text=text):
                body_parts.append(text)

    if start.text.startswith("HTTP"):
        response = _parse_status_line(start.text)
        response.headers = headers
        response.body = "".join(body_parts)
        return response

    method, target = _parse_request_line(start.text)
    path, qmark, query_string = target.partition("?")
    return Request(
        method=method,
        path=path,
        headers=headers,
        query=parse_query(query_string) if qmark else {},
        body="".join(body_parts),
    )


def serialize(message: Request | Response) -> str:
    """Render a message back into the frame grammar.

    Headers are written as they are; `Content-Length` is the caller's job.
    """
    if isinstance(message, Response):
        start = f"{HTTP_VERSION} {message.status_code} {message.status_message}"
    else:
        start = f"{message.method.value} {message.target} {HTTP_VERSION}"
    head = "".join(f"{name}: {value}{CRLF}" for name, value in message.headers.items())
    return f"{start}{CRLF}{head}{CRLF}{message.body}"
