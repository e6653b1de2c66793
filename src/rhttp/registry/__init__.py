"""Endpoint registry for exact (method, path) routing."""

from .endpoints import Endpoint, EndpointRegistry, Handler, RegistryBuilder

__all__ = [
    "Endpoint",
    "EndpointRegistry",
    "Handler",
    "RegistryBuilder",
]
