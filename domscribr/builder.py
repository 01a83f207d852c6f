"""Message builder - turns a message element into a MessageRecord."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Callable

from .classifier import infer_role
from .fingerprint import DEFAULT_TEXT_LIMIT, fingerprint
from .node import NodeLike
from .schema import MessageRecord, SourceContext

Clock = Callable[[], datetime]

_WHITESPACE = re.compile(r"\s+")


@dataclass
class DedupState:
    """
    Fingerprints already emitted plus the sequence counter.

    Owned by one Harvester. ``reset`` is only called on start of recording.
    """

    seen: set[str] = field(default_factory=set)
    sequence: int = 0

    def reset(self) -> None:
        self.seen.clear()
        self.sequence = 0


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """ISO-8601 UTC with millisecond precision and a ``Z`` suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def normalize_text(value: str | None) -> str:
    return _WHITESPACE.sub(" ", value or "").strip()


def build_message(
    node: NodeLike,
    state: DedupState,
    source: SourceContext,
    clock: Clock = utc_now,
    text_limit: int = DEFAULT_TEXT_LIMIT,
) -> MessageRecord | None:
    """
    Build a record for ``node`` unless it is empty or already seen.

    Mutates ``state`` only when a record is produced.
    """
    text = normalize_text(node.text_content)
    raw = (node.raw_markup or "").strip()
    if not text and not raw:
        return None

    key = fingerprint(node, text or raw, text_limit)
    if key in state.seen:
        return None

    state.seen.add(key)
    state.sequence += 1
    return MessageRecord(
        id=key,
        sequence=state.sequence,
        role=infer_role(node),
        text=text,
        raw_content=raw,
        captured_at=format_timestamp(clock()),
        source_context=source,
    )


__all__ = [
    "Clock",
    "DedupState",
    "utc_now",
    "format_timestamp",
    "normalize_text",
    "build_message",
]
