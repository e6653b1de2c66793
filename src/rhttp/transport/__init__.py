"""Pub/sub transports."""

from .base import Message, Subscription, Transport
from .memory import MemoryBroker, MemorySubscription

__all__ = [
    "Message",
    "Subscription",
    "Transport",
    "MemoryBroker",
    "MemorySubscription",
]
