"""HTTP-over-pub/sub server.

The server subscribes to two channels and runs one loop for each inside its
own AnyIO TaskGroup:

- the request loop parses every frame from the request channel, dispatches it
  and publishes either the response frame or the caller's correlation id on
  the reject channel;
- the heartbeat loop answers every probe with `<name>\\x0e<description>`.

The loops use separate subscriptions and handlers run in worker threads, so
neither a busy request channel nor a blocking handler holds up a heartbeat
acknowledgement.
"""

from __future__ import annotations

import logging

import anyio
import anyio.to_thread
from anyio.abc import TaskGroup, TaskStatus
from typing_extensions import override

from .config import ServerConfig
from .dispatch import DispatchOutcome, Dispatcher, Ignored, Rejected, Responded
from .exceptions import MalformedMessageError
from .http.messages import HttpMethod
from .registry.endpoints import Endpoint, Handler, RegistryBuilder
from .transport.base import Transport


logger = logging.getLogger(__name__)

ACK_SEPARATOR = "\x0e"


def acknowledgement(name: str, description: str) -> str:
    """Heartbeat acknowledgement payload."""
    return f"{name}{ACK_SEPARATOR}{description}"


class RHTTPServer(RegistryBuilder):
    """Registers endpoints during setup, then serves them over a transport.

        server = RHTTPServer(broker, ServerConfig(name="inventory"))

        @server.get("/ping")
        def ping(req, res):
            return res.status(200).send("pong")

        async with anyio.create_task_group() as tg:
            await tg.start(server.serve)

    The endpoint registry is frozen when `serve()` starts; registering
    afterwards raises RuntimeError.
    """

    def __init__(self, transport: Transport, config: ServerConfig | None = None):
        super().__init__()
        self._transport = transport
        self.config = config or ServerConfig()
        self._dispatcher: Dispatcher | None = None
        self._task_group: TaskGroup | None = None

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def description(self) -> str:
        return self.config.description

    @property
    def running(self) -> bool:
        return self._task_group is not None

    @property
    def dispatcher(self) -> Dispatcher:
        """The dispatcher over the frozen registry, built on first use."""
        if self._dispatcher is None:
            self._dispatcher = Dispatcher(
                self.build(),
                preserve_line_breaks=self.config.preserve_line_breaks,
            )
        return self._dispatcher

    @override
    def register(self, method: HttpMethod | str, path: str, handler: Handler) -> Endpoint:
        if self._dispatcher is not None:
            raise RuntimeError("endpoints cannot be registered once the server has started")
        return super().register(method, path, handler)

    async def serve(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        """Run both channel loops until `stop()` is called or the transport closes."""
        if self._task_group is not None:
            raise RuntimeError("server is already running")

        dispatcher = self.dispatcher
        try:
            async with anyio.create_task_group() as tg:
                self._task_group = tg
                await tg.start(self._request_loop)
                await tg.start(self._heartbeat_loop)
                logger.info(
                    "server %r listening on %r with %d endpoint(s)",
                    self.name,
                    self.config.request_channel,
                    len(dispatcher.registry),
                )
                task_status.started()
        finally:
            self._task_group = None

    def stop(self) -> None:
        if self._task_group is not None:
            self._task_group.cancel_scope.cancel()

    async def handle_frame(self, raw: str) -> DispatchOutcome | None:
        """Dispatch one request frame and publish the outcome.

        Handlers are plain blocking callables, so dispatch runs in a worker
        thread and the heartbeat loop keeps answering meanwhile.

        Returns None when the frame was malformed and dropped.
        """
        try:
            outcome = await anyio.to_thread.run_sync(self.dispatcher.dispatch, raw)
        except MalformedMessageError as e:
            logger.warning("dropping malformed frame: %s", e)
            return None

        match outcome:
            case Responded(frame=frame):
                await self._transport.publish(self.config.response_channel, frame)
            case Rejected(socket_id=None):
                logger.warning("rejected request carries no correlation id; nothing to publish")
            case Rejected(socket_id=socket_id):
                await self._transport.publish(self.config.reject_channel, socket_id)
            case Ignored():
                logger.debug("ignoring non-request frame on %r", self.config.request_channel)
        return outcome

    async def acknowledge(self) -> None:
        await self._transport.publish(
            self.config.acknowledge_channel,
            acknowledgement(self.name, self.description),
        )

    async def _request_loop(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        async with self._transport.subscribe(self.config.request_channel) as sub:
            task_status.started()
            async for message in sub:
                await self.handle_frame(message.payload)
        logger.info("request channel %r closed", self.config.request_channel)

    async def _heartbeat_loop(self, *, task_status: TaskStatus[None] = anyio.TASK_STATUS_IGNORED) -> None:
        async with self._transport.subscribe(self.config.heartbeat_channel) as sub:
            task_status.started()
            async for _ in sub:
                await self.acknowledge()
