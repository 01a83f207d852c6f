"""Message passing between the document context and the aggregator.

Messages are plain dicts with a namespaced ``type`` such as
``domscribr:messages``. Responses always carry ``ok``.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from .agent import ContentAgent
    from .aggregator import Aggregator


DEFAULT_NAMESPACE = "domscribr"

START = "start"
STOP = "stop"
READY = "ready"
MESSAGES = "messages"
POPUP_START = "popup-start"
POPUP_STOP = "popup-stop"
POPUP_EXPORT = "popup-export"
POPUP_STATUS = "popup-status"


class TransportError(Exception):
    """A message could not be delivered."""

    context_id: int | None = None

    def __init__(self, message: str, context_id: int | None = None):
        super().__init__(message)
        self.context_id = context_id


def message_type(name: str, namespace: str = DEFAULT_NAMESPACE) -> str:
    return f"{namespace}:{name}"


def parse_type(value: Any, namespace: str = DEFAULT_NAMESPACE) -> str | None:
    """Strip the namespace from a message type; None if it is not ours."""
    if not isinstance(value, str):
        return None
    prefix = f"{namespace}:"
    if not value.startswith(prefix):
        return None
    return value[len(prefix):]


class Transport(Protocol):
    """Document context -> aggregator."""

    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        ...


class CommandSink(Protocol):
    """Aggregator -> document context, addressed by context id."""

    async def send_command(self, context_id: int, message: dict[str, Any]) -> dict[str, Any]:
        ...

    def unregister(self, context_id: int) -> None:
        """Forget the document context; later commands to it fail."""
        ...


class LocalTransport:
    """In-process transport that tags messages with the sender's context id."""

    def __init__(self, aggregator: "Aggregator", context_id: int | None):
        self.aggregator = aggregator
        self.context_id = context_id
        self.connected = True

    def disconnect(self) -> None:
        self.connected = False

    async def send(self, message: dict[str, Any]) -> dict[str, Any]:
        if not self.connected:
            raise TransportError("Receiving end does not exist.", self.context_id)
        return await self.aggregator.handle(message, sender_context=self.context_id)


class LocalCommandSink:
    """Routes commands to in-process content agents."""

    def __init__(self) -> None:
        self._agents: dict[int, "ContentAgent"] = {}

    def register(self, context_id: int, agent: "ContentAgent") -> None:
        self._agents[context_id] = agent

    def unregister(self, context_id: int) -> None:
        self._agents.pop(context_id, None)

    async def send_command(self, context_id: int, message: dict[str, Any]) -> dict[str, Any]:
        agent = self._agents.get(context_id)
        if agent is None:
            raise TransportError(f"No content agent for context {context_id}", context_id)
        return agent.handle_command(message)


__all__ = [
    "DEFAULT_NAMESPACE",
    "START",
    "STOP",
    "READY",
    "MESSAGES",
    "POPUP_START",
    "POPUP_STOP",
    "POPUP_EXPORT",
    "POPUP_STATUS",
    "TransportError",
    "message_type",
    "parse_type",
    "Transport",
    "CommandSink",
    "LocalTransport",
    "LocalCommandSink",
]
