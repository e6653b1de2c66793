"""Server configuration."""

from __future__ import annotations

import os
import secrets
import string
from dataclasses import dataclass, field, fields

NAME_ALPHABET = string.ascii_letters + string.digits
NAME_LENGTH = 20
DEFAULT_DESCRIPTION = "PYTHON"

REQUEST_CHANNEL = "REQUEST_PIPE"
RESPONSE_CHANNEL = "RESPONSE_PIPE"
REJECT_CHANNEL = "REJECT_PIPE"
HEARTBEAT_CHANNEL = "HEARTBEAT"
ACKNOWLEDGE_CHANNEL = "ACKNOWLEDGE_PIPE"


def random_server_name(length: int = NAME_LENGTH) -> str:
    return "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))


@dataclass(frozen=True)
class ServerConfig:
    """
    Identity and channel layout of a server.

    Attributes:
        name: Server name reported in heartbeat acknowledgements
        description: Free-form description reported alongside the name
        request_channel: Channel carrying inbound request frames
        response_channel: Channel receiving response frames
        reject_channel: Channel receiving correlation ids of rejected requests
        heartbeat_channel: Channel carrying heartbeat probes
        acknowledge_channel: Channel receiving heartbeat acknowledgements
        preserve_line_breaks: Keep request bodies verbatim instead of joining lines
    """
    name: str = field(default_factory=random_server_name)
    description: str = DEFAULT_DESCRIPTION
    request_channel: str = REQUEST_CHANNEL
    response_channel: str = RESPONSE_CHANNEL
    reject_channel: str = REJECT_CHANNEL
    heartbeat_channel: str = HEARTBEAT_CHANNEL
    acknowledge_channel: str = ACKNOWLEDGE_CHANNEL
    preserve_line_breaks: bool = False

    def __post_init__(self):
        for f in fields(self):
            if f.name.endswith("_channel") and not getattr(self, f.name):
                raise ValueError(f"{f.name} cannot be empty")

    @classmethod
    def from_env(cls) -> "ServerConfig":
        """Create a config from environment variables.

        Optional environment variables:
            RHTTP_SERVER_NAME: Server name (random when unset).
            RHTTP_SERVER_DESC: Server description.
            RHTTP_REQUEST_CHANNEL, RHTTP_RESPONSE_CHANNEL, RHTTP_REJECT_CHANNEL,
            RHTTP_HEARTBEAT_CHANNEL, RHTTP_ACKNOWLEDGE_CHANNEL: Channel names.
            RHTTP_PRESERVE_LINE_BREAKS: Set to "1" to keep bodies verbatim.
        """
        kwargs: dict[str, object] = {}
        name = os.environ.get("RHTTP_SERVER_NAME")
        if name:
            kwargs["name"] = name
        description = os.environ.get("RHTTP_SERVER_DESC")
        if description:
            kwargs["description"] = description
        for key in ("request", "response", "reject", "heartbeat", "acknowledge"):
            value = os.environ.get(f"RHTTP_{key.upper()}_CHANNEL")
            if value:
                kwargs[f"{key}_channel"] = value
        kwargs["preserve_line_breaks"] = os.environ.get("RHTTP_PRESERVE_LINE_BREAKS", "") == "1"
        return cls(**kwargs)  # type: ignore[arg-type]
