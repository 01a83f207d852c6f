"""Export of a session snapshot to a timestamped JSON file."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

from .builder import format_timestamp, utc_now
from .schema import SessionStatus


def export_filename(now: datetime | None = None) -> str:
    """``domscribr-2026-10-17T12-30-00-000Z.json`` style name."""
    stamp = format_timestamp(now or utc_now())
    return f"domscribr-{stamp.replace(':', '-').replace('.', '-')}.json"


def write_export(status: SessionStatus, directory: Path | str, now: datetime | None = None) -> Path:
    """Write ``status`` as pretty JSON into ``directory``; returns the file path."""
    directory = Path(directory)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / export_filename(now)
    path.write_text(json.dumps(status.to_payload(), indent=2))
    return path


__all__ = ["export_filename", "write_export"]
