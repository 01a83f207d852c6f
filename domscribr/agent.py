"""Content agent - hosts a Harvester inside one document context.

Receives start/stop commands, buffers emitted batches and ships them to
the aggregator. Delivery failures are logged and dropped; the harvester
keeps running either way.
"""

from __future__ import annotations

import logging
from collections import deque
from typing import Any

from .builder import Clock, utc_now
from .config import ScribrConfig, default_config
from .document import Watcher
from .harvester import Harvester
from .schema import MessageRecord
from .transport import MESSAGES, READY, START, STOP, Transport, TransportError, message_type, parse_type

logger = logging.getLogger(__name__)


class ContentAgent:
    """Bridge between one document's Harvester and a Transport."""

    def __init__(
        self,
        document: Any,
        transport: Transport,
        watcher: Watcher | None = None,
        config: ScribrConfig | None = None,
        clock: Clock = utc_now,
    ):
        self.config = config or default_config
        self.transport = transport
        self.outbox: deque[tuple[MessageRecord, ...]] = deque()
        if watcher is None and hasattr(document, "subscribe"):
            watcher = document
        self.harvester = Harvester(
            document,
            self._enqueue,
            watcher=watcher,
            clock=clock,
            text_limit=self.config.fingerprint_text_limit,
            ignore_attribute=self.config.ignore_attribute,
        )

    @property
    def namespace(self) -> str:
        return self.config.message_namespace

    def _enqueue(self, records: list[MessageRecord]) -> None:
        self.outbox.append(tuple(records))

    def handle_command(self, message: Any) -> dict[str, Any] | None:
        """
        Apply a start/stop command.

        Returns ``{"ok": True}`` for known commands, None for anything else.
        """
        if not isinstance(message, dict):
            return None
        kind = parse_type(message.get("type"), self.namespace)
        if kind == START:
            self.harvester.start()
            return {"ok": True}
        if kind == STOP:
            self.harvester.stop()
            return {"ok": True}
        return None

    async def connect(self) -> bool:
        """
        Ready handshake; self-starts if the aggregator says we are recording.

        Returns whether recording is active afterwards.
        """
        try:
            response = await self.transport.send({"type": message_type(READY, self.namespace)})
        except TransportError as e:
            logger.warning(f"{self.namespace}: ready handshake failed: {e}")
            return self.harvester.recording
        if response and response.get("recording"):
            self.harvester.start()
        return self.harvester.recording

    async def flush(self) -> int:
        """
        Send queued batches in order. Failed batches are not retried.

        Returns the number of records delivered.
        """
        delivered = 0
        while self.outbox:
            batch = self.outbox.popleft()
            message = {
                "type": message_type(MESSAGES, self.namespace),
                "payload": [record.to_wire() for record in batch],
            }
            try:
                response = await self.transport.send(message)
            except TransportError as e:
                logger.warning(f"{self.namespace}: failed to send messages: {e}")
                continue
            if response and response.get("ok"):
                delivered += len(batch)
            else:
                error = response.get("error") if response else "no response"
                logger.warning(f"{self.namespace}: messages rejected: {error}")
        return delivered


__all__ = ["ContentAgent"]
