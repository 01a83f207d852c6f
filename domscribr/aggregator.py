"""
Session aggregator.

Owns the per-context session log: appends record batches in arrival order,
tracks the last capture time and serves snapshots. It does not deduplicate;
batches arrive already unique from the harvester.

``handle`` is the message router used by the transport and the CLI.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

from pydantic import ValidationError

from .schema import MessageRecord, Session, SessionStatus
from .store import MemorySessionStore, SessionStore, SessionStoreError
from .transport import (
    DEFAULT_NAMESPACE,
    MESSAGES,
    POPUP_EXPORT,
    POPUP_START,
    POPUP_STATUS,
    POPUP_STOP,
    READY,
    START,
    STOP,
    CommandSink,
    TransportError,
    message_type,
    parse_type,
)

logger = logging.getLogger(__name__)

NO_ACTIVE_CONTEXT = "No active tab available."
MISSING_CONTEXT = "Missing tab context."
UNKNOWN_TYPE = "Unknown message type."


class Aggregator:
    """
    Per-context session log.

    Sessions are created on first reference and destroyed by
    ``close_context``. The store is read lazily once and written after
    every mutation.
    """

    def __init__(
        self,
        store: SessionStore | None = None,
        commands: CommandSink | None = None,
        namespace: str = DEFAULT_NAMESPACE,
    ):
        self.store = store if store is not None else MemorySessionStore()
        self.commands = commands
        self.namespace = namespace
        self._sessions: dict[int, Session] = {}
        self._loaded = False

    @property
    def loaded(self) -> bool:
        return self._loaded

    # =========================================================================
    # Session lifecycle
    # =========================================================================

    async def _ensure_loaded(self) -> None:
        if self._loaded:
            return
        try:
            self._sessions.update(self.store.load())
        except SessionStoreError as e:
            logger.error(f"Discarding unreadable session store: {e}")
        self._loaded = True

    def _get_or_create(self, context_id: int) -> Session:
        if context_id not in self._sessions:
            self._sessions[context_id] = Session()
        return self._sessions[context_id]

    async def _update(self, context_id: int, updater: Callable[[Session], Any]) -> Any:
        await self._ensure_loaded()
        session = self._get_or_create(context_id)
        result = updater(session)
        self.store.save(self._sessions)
        return result

    async def get_session(self, context_id: int) -> Session:
        await self._ensure_loaded()
        return self._get_or_create(context_id)

    async def close_context(self, context_id: int) -> bool:
        """
        Forget the session of a closed context.

        The context is always dropped from the command sink; the session is
        only removed once the store has been loaded.
        """
        if self.commands is not None:
            self.commands.unregister(context_id)
        if not self._loaded:
            return False
        if self._sessions.pop(context_id, None) is None:
            return False
        try:
            self.store.save(self._sessions)
        except OSError as e:
            logger.error(f"Persist on context removal failed: {e}")
        return True

    # =========================================================================
    # Recording
    # =========================================================================

    async def start_recording(self, context_id: int) -> None:
        def reset(session: Session) -> None:
            session.recording = True
            session.messages = []
            session.last_captured_at = None

        await self._update(context_id, reset)
        await self._send_command(context_id, START, "failed to send start command")

    async def stop_recording(self, context_id: int) -> None:
        def pause(session: Session) -> None:
            session.recording = False

        await self._update(context_id, pause)
        await self._send_command(context_id, STOP, "stop command error", level=logging.WARNING)

    async def append_messages(self, context_id: int, payload: Any) -> int:
        """
        Append a batch in order and update ``lastCapturedAt``.

        Non-list payloads are ignored; entries that are not valid records
        are logged and skipped. Returns the number appended.
        """

        def append(session: Session) -> int:
            if not isinstance(payload, list):
                return 0
            count = 0
            for entry in payload:
                try:
                    record = entry if isinstance(entry, MessageRecord) else MessageRecord.model_validate(entry)
                except ValidationError as e:
                    logger.warning(f"Skipping malformed record for context {context_id}: {e}")
                    continue
                session.messages.append(record)
                session.last_captured_at = record.captured_at
                count += 1
            return count

        return await self._update(context_id, append)

    async def export(self, context_id: int) -> SessionStatus:
        return SessionStatus.of(await self.get_session(context_id), include_messages=True)

    async def status(self, context_id: int) -> SessionStatus:
        return SessionStatus.of(await self.get_session(context_id))

    async def ready(self, context_id: int) -> bool:
        """
        Handshake from a (re)loaded document context.

        Returns whether the context is recording; if so the start command is
        re-sent so the document side re-arms.
        """
        session = await self.get_session(context_id)
        if session.recording:
            await self._send_command(context_id, START, "failed to re-send start after ready")
        return session.recording

    async def _send_command(
        self,
        context_id: int,
        name: str,
        failure: str,
        level: int = logging.ERROR,
    ) -> None:
        if self.commands is None:
            return
        try:
            await self.commands.send_command(context_id, {"type": message_type(name, self.namespace)})
        except TransportError as e:
            logger.log(level, f"{self.namespace}: {failure}: {e}")

    # =========================================================================
    # Message router
    # =========================================================================

    async def handle(
        self,
        message: Any,
        sender_context: int | None = None,
        active_context: int | None = None,
    ) -> dict[str, Any]:
        """
        Dispatch one runtime message.

        Popup messages address ``active_context``; ``messages`` and ``ready``
        address the sender. Never raises: failures come back as
        ``{"ok": False, "error": ...}``.
        """
        kind = parse_type(message.get("type") if isinstance(message, dict) else None, self.namespace)
        try:
            return await self._dispatch(kind, message, sender_context, active_context)
        except Exception as e:
            logger.exception(f"{self.namespace}: runtime message error")
            return {"ok": False, "error": str(e) or type(e).__name__}

    async def _dispatch(
        self,
        kind: str | None,
        message: Any,
        sender_context: int | None,
        active_context: int | None,
    ) -> dict[str, Any]:
        if kind == POPUP_START:
            if active_context is None:
                return {"ok": False, "error": NO_ACTIVE_CONTEXT}
            await self.start_recording(active_context)
            return {"ok": True}

        if kind == POPUP_STOP:
            if active_context is None:
                return {"ok": False, "error": NO_ACTIVE_CONTEXT}
            await self.stop_recording(active_context)
            return {"ok": True}

        if kind == POPUP_EXPORT:
            if active_context is None:
                return {"ok": False, "error": NO_ACTIVE_CONTEXT}
            payload = await self.export(active_context)
            return {"ok": True, "payload": payload.to_payload()}

        if kind == POPUP_STATUS:
            if active_context is None:
                return {"ok": True, "payload": SessionStatus().to_payload()}
            payload = await self.status(active_context)
            return {"ok": True, "payload": payload.to_payload()}

        if kind == MESSAGES:
            if sender_context is None:
                return {"ok": False, "error": MISSING_CONTEXT}
            await self.append_messages(sender_context, message.get("payload"))
            return {"ok": True}

        if kind == READY:
            if sender_context is None:
                return {"ok": False}
            recording = await self.ready(sender_context)
            return {"ok": True, "recording": recording}

        return {"ok": False, "error": UNKNOWN_TYPE}


__all__ = [
    "NO_ACTIVE_CONTEXT",
    "MISSING_CONTEXT",
    "UNKNOWN_TYPE",
    "Aggregator",
]
