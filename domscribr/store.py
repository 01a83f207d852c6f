"""
Session persistence for the aggregator.

A store maps context id -> Session. The aggregator loads it once per
process and writes the whole mapping back after every mutation.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path
from typing import Any, Protocol

from pydantic import ValidationError

from .schema import Session

STORE_VERSION = "1.0"


class SessionStoreError(Exception):
    """Persisted sessions could not be read."""


class SessionStore(Protocol):
    def load(self) -> dict[int, Session]:
        ...

    def save(self, sessions: dict[int, Session]) -> None:
        ...


def dump_sessions(sessions: dict[int, Session]) -> dict[str, Any]:
    return {
        "version": STORE_VERSION,
        "sessions": {
            str(context_id): session.model_dump(mode="json", by_alias=True)
            for context_id, session in sessions.items()
        },
    }


def parse_sessions(data: Any) -> dict[int, Session]:
    """
    Inverse of ``dump_sessions``.

    Raises:
        SessionStoreError: If the payload is not a valid session mapping or
            was written by an incompatible store version
    """
    if not isinstance(data, dict) or not isinstance(data.get("sessions", {}), dict):
        raise SessionStoreError("Session store payload must be an object")
    if data.get("version") != STORE_VERSION:
        raise SessionStoreError(f"Unsupported session store version: {data.get('version')!r}")
    try:
        return {
            int(context_id): Session.model_validate(value)
            for context_id, value in data.get("sessions", {}).items()
        }
    except (ValueError, ValidationError) as e:
        raise SessionStoreError(f"Invalid session entry: {e}") from e


class MemorySessionStore:
    """Keeps a serialized copy in memory, so callers never share objects with it."""

    def __init__(self) -> None:
        self._data: dict[str, Any] = dump_sessions({})
        self.saves = 0

    def load(self) -> dict[int, Session]:
        return parse_sessions(self._data)

    def save(self, sessions: dict[int, Session]) -> None:
        self._data = dump_sessions(sessions)
        self.saves += 1


class JsonSessionStore:
    """
    Single JSON file store.

    Writes go to a temp file in the same directory and are renamed into
    place, so a crash never leaves a half-written store.
    """

    def __init__(self, path: Path | str):
        self.path = Path(path)

    def load(self) -> dict[int, Session]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as e:
            raise SessionStoreError(f"Cannot read {self.path}: {e}") from e
        return parse_sessions(data)

    def save(self, sessions: dict[int, Session]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, temp_path = tempfile.mkstemp(
            suffix=".tmp",
            prefix="sessions_",
            dir=self.path.parent,
        )
        try:
            with os.fdopen(fd, "w") as f:
                json.dump(dump_sessions(sessions), f, indent=2)
            os.replace(temp_path, self.path)
        except Exception:
            try:
                os.unlink(temp_path)
            except OSError:
                pass
            raise


__all__ = [
    "STORE_VERSION",
    "SessionStoreError",
    "SessionStore",
    "dump_sessions",
    "parse_sessions",
    "MemorySessionStore",
    "JsonSessionStore",
]
