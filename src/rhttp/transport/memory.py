"""In-process pub/sub broker built on AnyIO memory object streams.

Useful for wiring a server and its callers inside one process and for tests.
Delivery is fan-out: every open subscription on a channel receives each
message published after it was opened. Streams are unbounded, so `publish()`
never waits on a slow subscriber.
"""

from __future__ import annotations

import math
from collections import defaultdict

import anyio
from anyio.streams.memory import MemoryObjectReceiveStream, MemoryObjectSendStream
from typing_extensions import override

from ..exceptions import TransportError
from .base import Message, Subscription, Transport


class MemorySubscription(Subscription):
    def __init__(self, broker: "MemoryBroker", channels: tuple[str, ...]):
        super().__init__(channels)
        self._broker = broker
        self._send: MemoryObjectSendStream[Message] | None = None
        self._receive: MemoryObjectReceiveStream[Message] | None = None

    @override
    async def open(self) -> None:
        if self._receive is not None:
            raise RuntimeError("subscription already open")
        send, receive = anyio.create_memory_object_stream(math.inf)
        try:
            self._broker._attach(self.channels, send)
        except TransportError:
            send.close()
            receive.close()
            raise
        self._send, self._receive = send, receive

    @override
    async def receive(self) -> Message:
        if self._receive is None:
            raise RuntimeError("subscription not open")
        try:
            return await self._receive.receive()
        except anyio.EndOfStream:
            raise StopAsyncIteration from None

    @override
    async def aclose(self) -> None:
        if self._send is not None:
            self._broker._detach(self.channels, self._send)
            self._send.close()
        if self._receive is not None:
            self._receive.close()


class MemoryBroker(Transport):
    """In-memory broker: channels are names, subscribers are stream pairs."""

    def __init__(self):
        self._subscribers: defaultdict[str, list[MemoryObjectSendStream[Message]]] = defaultdict(list)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def subscriber_count(self, channel: str) -> int:
        return len(self._subscribers.get(channel, ()))

    @override
    async def publish(self, channel: str, payload: str) -> int:
        if self._closed:
            raise TransportError("broker is closed")

        message = Message(channel=channel, payload=payload)
        delivered = 0
        for stream in list(self._subscribers.get(channel, ())):
            try:
                await stream.send(message)
            except (anyio.BrokenResourceError, anyio.ClosedResourceError):
                # Closed subscriber: remove it from every channel it is on.
                self._detach(tuple(self._subscribers), stream)
                continue
            delivered += 1
        return delivered

    @override
    def subscribe(self, *channels: str) -> MemorySubscription:
        if self._closed:
            raise TransportError("broker is closed")
        return MemorySubscription(self, channels)

    @override
    async def aclose(self) -> None:
        """Close the broker. Open subscriptions finish iterating."""
        self._closed = True
        streams = {id(s): s for subs in self._subscribers.values() for s in subs}
        self._subscribers.clear()
        for stream in streams.values():
            stream.close()

    def _attach(self, channels: tuple[str, ...], stream: MemoryObjectSendStream[Message]) -> None:
        if self._closed:
            stream.close()
            raise TransportError("broker is closed")
        for channel in channels:
            self._subscribers[channel].append(stream)

    def _detach(self, channels: tuple[str, ...], stream: MemoryObjectSendStream[Message]) -> None:
        for channel in channels:
            subs = self._subscribers.get(channel)
            if subs and stream in subs:
                subs.remove(stream)
            if not subs:
                self._subscribers.pop(channel, None)
