"""Endpoint bindings and their registry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Iterator

from ..http.builder import ResponseBuilder
from ..http.messages import HttpMethod, Request


Handler = Callable[[Request, ResponseBuilder], str | None]


@dataclass(frozen=True, slots=True)
class Endpoint:
    method: HttpMethod
    path: str
    handler: Handler

    def matches(self, method: str, path: str) -> bool:
        return self.method == method and self.path == path


class EndpointRegistry:
    """
    Immutable, ordered collection of endpoints.

    Lookups return the earliest registration for a (method, path) pair.
    Paths are compared exactly: no prefixes, no parameters, no trailing
    slash folding.
    """

    __slots__ = ("_endpoints",)

    def __init__(self, endpoints: tuple[Endpoint, ...] = ()):
        self._endpoints = tuple(endpoints)

    def find(self, method: str, path: str) -> Endpoint | None:
        """
        Find the endpoint for a request.

        Returns the first matching Endpoint, None if nothing matches.
        """
        for endpoint in self._endpoints:
            if endpoint.matches(method, path):
                return endpoint
        return None

    def __iter__(self) -> Iterator[Endpoint]:
        return iter(self._endpoints)

    def __len__(self) -> int:
        return len(self._endpoints)

    def __repr__(self) -> str:
        routes = ", ".join(f"{e.method} {e.path}" for e in self._endpoints)
        return f"EndpointRegistry([{routes}])"


class RegistryBuilder:
    """
    Collects endpoint registrations during setup.

    Registrations are append-only. Call `build()` once setup is done to get
    the immutable registry handed to the dispatcher.

    Every verb helper takes the handler directly or, when it is omitted,
    returns a decorator:

        builder.get("/ping", ping)

        @builder.post("/items")
        def create_item(req, res): ...
    """

    def __init__(self):
        self._endpoints: list[Endpoint] = []

    def register(self, method: HttpMethod | str, path: str, handler: Handler) -> Endpoint:
        """
        Append a binding.

        Raises ValueError for a method outside HttpMethod.
        """
        endpoint = Endpoint(method=HttpMethod(method), path=path, handler=handler)
        self._endpoints.append(endpoint)
        return endpoint

    def route(self, method: HttpMethod | str, path: str, handler: Handler | None = None):
        if handler is not None:
            self.register(method, path, handler)
            return handler

        def decorator(func: Handler) -> Handler:
            self.register(method, path, func)
            return func

        return decorator

    def get(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.GET, path, handler)

    def head(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.HEAD, path, handler)

    def post(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.POST, path, handler)

    def put(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.PUT, path, handler)

    def delete(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.DELETE, path, handler)

    def connect(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.CONNECT, path, handler)

    def options(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.OPTIONS, path, handler)

    def trace(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.TRACE, path, handler)

    def patch(self, path: str, handler: Handler | None = None):
        return self.route(HttpMethod.PATCH, path, handler)

    def build(self) -> EndpointRegistry:
        """Snapshot the registrations made so far."""
        return EndpointRegistry(tuple(self._endpoints))

    def __len__(self) -> int:
        return len(self._endpoints)
