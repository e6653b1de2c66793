"""Pub/sub transport contract used by the server loops."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType


@dataclass(frozen=True, slots=True)
class Message:
    channel: str
    payload: str


class Subscription(ABC):
    """
    A live subscription to one or more channels.

    Use as an async context manager, then iterate to receive messages:

        async with transport.subscribe("REQUEST_PIPE") as sub:
            async for message in sub:
                ...

    Iteration ends when the transport shuts down.
    """

    def __init__(self, channels: tuple[str, ...]):
        if not channels:
            raise ValueError("subscription needs at least one channel")
        self.channels = channels

    @abstractmethod
    async def open(self) -> None:
        """Start receiving messages published on `channels`."""

    @abstractmethod
    async def receive(self) -> Message:
        """Wait for the next message. Raises StopAsyncIteration once closed by the transport."""

    @abstractmethod
    async def aclose(self) -> None:
        """Stop receiving. Safe to call more than once."""

    async def __aenter__(self) -> "Subscription":
        await self.open()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    def __aiter__(self) -> "Subscription":
        return self

    async def __anext__(self) -> Message:
        return await self.receive()


class Transport(ABC):
    """Publish/subscribe transport carrying frames between peers."""

    @abstractmethod
    async def publish(self, channel: str, payload: str) -> int:
        """Publish `payload` on `channel`. Returns the number of receivers."""

    @abstractmethod
    def subscribe(self, *channels: str) -> Subscription:
        """Create a subscription; it starts receiving once opened."""

    async def aclose(self) -> None:
        """Release transport resources."""

    async def __aenter__(self) -> "Transport":
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
