"""HTTP request/response semantics over a publish/subscribe transport."""

from .config import ServerConfig
from .dispatch import Dispatcher, DispatchOutcome, Ignored, Rejected, Responded
from .exceptions import MalformedMessageError, RHTTPError, TransportError
from .http import (
    CORRELATION_HEADER,
    HttpMethod,
    Request,
    Response,
    ResponseBuilder,
    parse,
    reason_phrase,
    serialize,
)
from .registry import Endpoint, EndpointRegistry, Handler, RegistryBuilder
from .server import RHTTPServer, acknowledgement
from .transport import MemoryBroker, Message, Subscription, Transport

__all__ = [
    # Messages and codec
    "CORRELATION_HEADER",
    "HttpMethod",
    "Request",
    "Response",
    "ResponseBuilder",
    "parse",
    "serialize",
    "reason_phrase",
    # Routing
    "Endpoint",
    "EndpointRegistry",
    "Handler",
    "RegistryBuilder",
    "Dispatcher",
    "DispatchOutcome",
    "Responded",
    "Rejected",
    "Ignored",
    # Server
    "RHTTPServer",
    "ServerConfig",
    "acknowledgement",
    # Transport
    "Transport",
    "Subscription",
    "Message",
    "MemoryBroker",
    # Errors
    "RHTTPError",
    "MalformedMessageError",
    "TransportError",
]
