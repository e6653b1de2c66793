"""Dispatch of raw request frames to registered endpoints."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .http.builder import ResponseBuilder
from .http.codec import parse
from .http.messages import Request
from .registry.endpoints import EndpointRegistry


logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class DispatchOutcome:
    """Base class for the result of dispatching one frame."""


@dataclass(frozen=True, slots=True)
class Responded(DispatchOutcome):
    """A handler produced a frame to publish as is."""

    frame: str


@dataclass(frozen=True, slots=True)
class Rejected(DispatchOutcome):
    """No response body to deliver.

    Covers both a missing route and a handler that declined. `socket_id` is
    the correlation id of the waiting caller, None if the request had none.
    """

    socket_id: str | None


@dataclass(frozen=True, slots=True)
class Ignored(DispatchOutcome):
    """The frame was not a request."""


class Dispatcher:
    """Routes raw request frames through an `EndpointRegistry`.

    `dispatch()` is synchronous and keeps no state between calls, so one
    dispatcher can serve any number of frames. `MalformedMessageError` from the
    codec propagates to the caller; an exception raised by a handler is logged
    and turned into `Rejected`.
    """

    def __init__(self, registry: EndpointRegistry, *, preserve_line_breaks: bool = False):
        self._registry = registry
        self._preserve_line_breaks = preserve_line_breaks

    @property
    def registry(self) -> EndpointRegistry:
        return self._registry

    def dispatch(self, raw: str) -> DispatchOutcome:
        match parse(raw, preserve_line_breaks=self._preserve_line_breaks):
            case Request() as req:
                return self.dispatch_request(req)
            case _:
                return Ignored()

    def dispatch_request(self, req: Request) -> DispatchOutcome:
        endpoint = self._registry.find(req.method, req.path)
        if endpoint is None:
            logger.debug("no endpoint for %s %s", req.method, req.path)
            return Rejected(req.socket_id)

        try:
            frame = endpoint.handler(req, ResponseBuilder(req))
        except Exception:
            logger.exception("handler for %s %s failed", req.method, req.path)
            return Rejected(req.socket_id)

        if not frame:
            logger.debug("handler for %s %s declined", req.method, req.path)
            return Rejected(req.socket_id)
        return Responded(frame)
