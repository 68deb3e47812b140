from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

try:
    import tomllib as tomli  # Python 3.11+
except ImportError:
    import tomli  # <3.11

from .commands import Commands
from .exceptions import ConfigParseError, ConfigReadError, ConfigWriteError
from .serialization import (
    commands_from_dict,
    commands_to_dict,
    settings_from_dict,
    settings_to_dict,
    to_toml,
)
from .types import ConfigSettings

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# Persistence collaborator
# ─────────────────────────────────────────────────────────────────────────────
@runtime_checkable
class ConfigStore(Protocol):
    """
    Where a Config's bytes live.

    read_bytes() returns None when nothing has been stored yet. Both methods
    may raise OSError; Config turns that into ConfigReadError/ConfigWriteError.
    """

    def read_bytes(self) -> bytes | None: ...

    def write_bytes(self, data: bytes) -> None: ...


class FileConfigStore:
    """ConfigStore backed by a single file on the local file system."""

    def __init__(self, path: str | Path):
        self.path = Path(path).expanduser()

    def read_bytes(self) -> bytes | None:
        if not self.path.exists():
            logger.debug(f"No config file at {self.path}")
            return None
        return self.path.read_bytes()

    def write_bytes(self, data: bytes) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            tmp.write_bytes(data)
            os.replace(tmp, self.path)
        except OSError:
            tmp.unlink(missing_ok=True)
            raise
        logger.debug(f"Wrote {len(data)} bytes to {self.path}")

    def __repr__(self) -> str:
        return f"FileConfigStore({str(self.path)!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Config
# ─────────────────────────────────────────────────────────────────────────────
@dataclass
class Config:
    """
    Root persisted object: the Commands registry plus global settings.

    Create one at startup with Config.load(store) (or load_config(path)) and
    pass it to whatever needs it. save() writes it back; the in-memory state
    is never changed by saving.
    """

    commands: Commands = field(default_factory=Commands)
    settings: ConfigSettings = field(default_factory=ConfigSettings)

    @classmethod
    def default(cls) -> Config:
        """Config used when nothing has been stored yet (seeded cargo commands)."""
        return cls(commands=Commands.with_defaults())

    # ────── Loading ──────
    @classmethod
    def loads(cls, data: bytes | str) -> Config:
        """
        Parse a stored document.

        Missing or mistyped fields fall back to their defaults (with a warning
        logged). Only data that is not valid TOML at all is rejected.

        Raises:
            ConfigParseError: If the data cannot be decoded or parsed
        """
        if isinstance(data, bytes):
            try:
                text = data.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ConfigParseError(f"Config is not valid UTF-8: {e}") from None
        else:
            text = data

        try:
            raw = tomli.loads(text)
        except tomli.TOMLDecodeError as e:
            logger.warning(f"Failed to parse config: {e}")
            raise ConfigParseError(f"Invalid TOML in config: {e}") from None

        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: dict) -> Config:
        """Materialize a Config from an already-parsed (sparse) document."""
        settings = settings_from_dict(raw.get("settings"))
        commands = commands_from_dict(
            raw.get("commands"),
            default_type=settings.default_command_type,
        )
        return cls(commands=commands, settings=settings)

    @classmethod
    def load(cls, store: ConfigStore) -> Config:
        """
        Load from a ConfigStore. An empty store yields Config.default().

        Raises:
            ConfigReadError: If the store fails to read
            ConfigParseError: If the stored data is not valid TOML
        """
        try:
            data = store.read_bytes()
        except OSError as e:
            logger.warning(f"Failed to read config from {store!r}: {e}")
            raise ConfigReadError(f"Cannot read config: {e}") from None

        if data is None:
            logger.debug("Nothing stored yet, using default config")
            return cls.default()

        config = cls.loads(data)
        logger.debug(f"Loaded config with {len(config.commands)} contexts from {store!r}")
        return config

    # ────── Saving ──────
    def to_dict(self) -> dict:
        return {
            "settings": settings_to_dict(self.settings),
            "commands": commands_to_dict(self.commands),
        }

    def dumps(self) -> str:
        """Deterministic TOML rendering of this config."""
        return to_toml(self.to_dict())

    def save(self, store: ConfigStore) -> None:
        """
        Serialize and hand the bytes to the store.

        Raises:
            ConfigWriteError: If the store fails to write
        """
        data = self.dumps().encode("utf-8")
        try:
            store.write_bytes(data)
        except OSError as e:
            logger.warning(f"Failed to write config to {store!r}: {e}")
            raise ConfigWriteError(f"Cannot write config: {e}") from None
        logger.debug(f"Saved config with {len(self.commands)} contexts to {store!r}")
