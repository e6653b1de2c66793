"""HTTP message model and the textual frame codec.

Frames are plain HTTP/1.1-style text carried as pub/sub payloads rather than
over a socket, so there is no connection state, no chunked encoding and no
percent-decoding here.
"""

from .builder import ResponseBuilder
from .codec import parse, parse_query, serialize, tokenize
from .messages import CORRELATION_HEADER, HttpMethod, Request, Response
from .status import UNKNOWN_STATUS, reason_phrase

__all__ = [
    "CORRELATION_HEADER",
    "HttpMethod",
    "Request",
    "Response",
    "ResponseBuilder",
    "UNKNOWN_STATUS",
    "parse",
    "parse_query",
    "reason_phrase",
    "serialize",
    "tokenize",
]
