"""Chainable response builder handed to request handlers."""

from __future__ import annotations

from typing import Mapping

from .codec import serialize
from .messages import Request, Response


class ResponseBuilder:
    """Accumulates a `Response` for one request.

    Mutators return the builder so calls can be chained:

        return res.status(201).content_type("application/json").send(body)

    `send()` finalizes the frame. It may be called again; the latest call
    wins. A builder belongs to a single request and must not outlive the
    handler invocation it was created for.
    """

    def __init__(self, request: Request):
        self._request = request
        self._response = Response()

    @property
    def request(self) -> Request:
        return self._request

    @property
    def response(self) -> Response:
        return self._response

    def status(self, code: int) -> "ResponseBuilder":
        self._response.set_status(code)
        return self

    def content_type(self, type: str) -> "ResponseBuilder":
        self._response.headers["Content-Type"] = type
        return self

    def header(self, headers: Mapping[str, str]) -> "ResponseBuilder":
        self._response.headers.update(headers)
        return self

    def send(self, body: str = "") -> str:
        """Set the body, fix Content-Length and the correlation id, and serialize."""
        response = self._response
        response.body = body
        response.headers["Content-Length"] = str(len(body))
        response.socket_id = self._request.socket_id
        return serialize(response)
