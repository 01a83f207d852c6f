"""
Record and session models for domscribr.

Pydantic models for captured messages and the per-context session log.
Field names are snake_case in Python and camelCase on the wire and in the
persisted store (``rawContent``, ``capturedAt``, ``lastCapturedAt`` ...).
"""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Role(str, Enum):
    """Author role of a captured message."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"


class SourceContext(BaseModel):
    """Location of the document at capture time."""

    url: str = ""
    title: str = ""

    model_config = ConfigDict(frozen=True)


class MessageRecord(BaseModel):
    """
    One captured chat message.

    ``id`` is the fingerprint and is unique within one recording span.
    Records are frozen: a batch is never mutated after it is emitted.
    """

    id: str
    sequence: int = Field(ge=1)
    role: Role
    text: str = ""
    raw_content: str = Field(default="", alias="rawContent")
    captured_at: str = Field(alias="capturedAt")
    source_context: SourceContext = Field(default_factory=SourceContext, alias="sourceContext")

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        use_enum_values=True,
    )

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class Session(BaseModel):
    """Ordered message log of one tracked context."""

    recording: bool = False
    messages: list[MessageRecord] = Field(default_factory=list)
    last_captured_at: str | None = Field(default=None, alias="lastCapturedAt")

    model_config = ConfigDict(populate_by_name=True)


class SessionStatus(BaseModel):
    """Read-only snapshot of a session; ``messages`` is only set for exports."""

    recording: bool = False
    last_captured_at: str | None = Field(default=None, alias="lastCapturedAt")
    message_count: int = Field(default=0, alias="messageCount")
    messages: list[MessageRecord] | None = None

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    @classmethod
    def of(cls, session: Session, include_messages: bool = False) -> "SessionStatus":
        return cls(
            recording=session.recording,
            last_captured_at=session.last_captured_at,
            message_count=len(session.messages),
            messages=list(session.messages) if include_messages else None,
        )

    def to_payload(self) -> dict[str, Any]:
        exclude = {"messages"} if self.messages is None else None
        return self.model_dump(mode="json", by_alias=True, exclude=exclude)


__all__ = [
    "Role",
    "SourceContext",
    "MessageRecord",
    "Session",
    "SessionStatus",
]
