"""
Ping server example

Runs an RHTTPServer against the in-process MemoryBroker and plays the caller
side by hand: publish request frames on REQUEST_PIPE, read replies from
RESPONSE_PIPE / REJECT_PIPE, and probe HEARTBEAT.

Run:
  uv run python examples/ping_server.py
"""

from __future__ import annotations

import json
import logging

import anyio

from rhttp import MemoryBroker, Request, ResponseBuilder, RHTTPServer, ServerConfig, parse


def handle_ping(_req: Request, res: ResponseBuilder) -> str:
    return res.status(200).send("pong")


def handle_echo(req: Request, res: ResponseBuilder) -> str:
    # Echo the request body back with the caller's content type.
    return res.content_type(req.headers.get("Content-Type", "text/plain")).send(req.body)


def handle_item(req: Request, res: ResponseBuilder) -> str | None:
    item_id = req.query.get("id")
    if not item_id:
        # Declining turns into a rejection for the caller.
        return None
    body = json.dumps({"id": item_id})
    return res.status(200).content_type("application/json").send(body)


async def main() -> None:
    logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    config = ServerConfig(name="example", description="ping server")
    async with MemoryBroker() as broker:
        server = RHTTPServer(broker, config)
        server.get("/ping", handle_ping)
        server.post("/echo", handle_echo)
        server.get("/item", handle_item)

        async with anyio.create_task_group() as tg:
            await tg.start(server.serve)

            async with broker.subscribe(
                config.response_channel, config.reject_channel, config.acknowledge_channel
            ) as replies:
                frames = [
                    "GET /ping HTTP/1.1\r\nX-Socket-ID: s1\r\n\r\n",
                    "POST /echo HTTP/1.1\r\nX-Socket-ID: s2\r\nContent-Type: text/plain\r\n\r\nhello there",
                    "GET /item?id=42 HTTP/1.1\r\nX-Socket-ID: s3\r\n\r\n",
                    "GET /item HTTP/1.1\r\nX-Socket-ID: s4\r\n\r\n",
                    "GET /missing HTTP/1.1\r\nX-Socket-ID: s5\r\n\r\n",
                ]
                for frame in frames:
                    await broker.publish(config.request_channel, frame)
                await broker.publish(config.heartbeat_channel, "")

                for _ in range(len(frames) + 1):
                    message = await replies.receive()
                    if message.channel == config.response_channel:
                        response = parse(message.payload)
                        print(f"{message.channel}: {response.socket_id} -> {response.status_code} {response.body!r}")
                    else:
                        print(f"{message.channel}: {message.payload!r}")

            server.stop()


if __name__ == "__main__":
    anyio.run(main)
