from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import BinaryIO, TextIO

from .config import Config, FileConfigStore
from .exceptions import ConfigReadError

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "CMDCONF_CONFIG"
DEFAULT_CONFIG_PATH = Path("~/.config/cmdconf/config.toml")


def default_config_path() -> Path:
    """$CMDCONF_CONFIG if set, else ~/.config/cmdconf/config.toml."""
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return DEFAULT_CONFIG_PATH.expanduser()


# =====================================================================
#   Main loader
# =====================================================================
def load_config(path: str | Path | BinaryIO | TextIO | None = None) -> Config:
    """
    Load a Config from a TOML file or an open file object.

    With no path, default_config_path() is used. A path that does not exist
    yields Config.default().
    """
    if path is not None and hasattr(path, "read"):
        try:
            data = path.read()  # type: ignore[union-attr]
        except OSError as e:
            raise ConfigReadError(f"Cannot read config: {e}") from None
        return Config.loads(data)

    config_path = Path(path) if path is not None else default_config_path()  # type: ignore[arg-type]
    logger.debug(f"Loading config from {config_path}")
    return Config.load(FileConfigStore(config_path))


def save_config(config: Config, path: str | Path | None = None) -> Path:
    """Write a Config to a TOML file and return the path written."""
    config_path = Path(path) if path is not None else default_config_path()
    store = FileConfigStore(config_path)
    config.save(store)
    return store.path
