"""
Configuration management for domscribr.

Settings live in ~/.domscribr/config.json. Missing or unreadable files fall
back to defaults; unknown keys are ignored.
"""

import json
import logging
import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

CONFIG_PATH = Path.home() / ".domscribr" / "config.json"

STORE_ENV = "DOMSCRIBR_STORE"


def _filter_dataclass_fields(data: dict[str, Any], cls: type) -> dict[str, Any]:
    """Filter dict to only include fields that exist in the dataclass."""
    valid_fields = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in valid_fields}


@dataclass
class ScribrConfig:
    """
    Recorder settings.

    ``fingerprint_text_limit`` bounds how much text feeds the content hash;
    changing it changes every hash-based fingerprint.
    """

    store_path: str = "~/.domscribr/sessions.json"
    ignore_attribute: str = "data-dom-scribr-ignore"
    fingerprint_text_limit: int = 200
    message_namespace: str = "domscribr"
    log_level: str = "WARNING"

    @classmethod
    def load(cls, path: Path | None = None) -> "ScribrConfig":
        """
        Load config from file with defaults.

        Args:
            path: Optional config file path. Defaults to ~/.domscribr/config.json

        Returns:
            ScribrConfig with user settings merged over defaults
        """
        if path is None:
            path = CONFIG_PATH

        config = DEFAULT_CONFIG.copy()

        if path.exists():
            try:
                user_config = json.loads(path.read_text())
                if isinstance(user_config, dict):
                    config.update(user_config)
            except (json.JSONDecodeError, IOError):
                pass

        return cls(**_filter_dataclass_fields(config, cls))

    def save(self, path: Path | None = None) -> None:
        if path is None:
            path = CONFIG_PATH

        path.parent.mkdir(parents=True, exist_ok=True)

        with open(path, "w") as f:
            json.dump(asdict(self), f, indent=2)

    def resolved_store_path(self) -> Path:
        """Session store path; ``DOMSCRIBR_STORE`` wins over the config file."""
        return Path(os.getenv(STORE_ENV) or self.store_path).expanduser()


DEFAULT_CONFIG = asdict(ScribrConfig())


def configure_logging(level: str | int = "WARNING") -> None:
    """Root logging setup for the command line."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# Default configuration instance
default_config = ScribrConfig()


__all__ = [
    "CONFIG_PATH",
    "STORE_ENV",
    "DEFAULT_CONFIG",
    "ScribrConfig",
    "configure_logging",
    "default_config",
]
