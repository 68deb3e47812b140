__version__ = "0.1.0"

import logging

from .command_config import CommandConfig
from .command_details import (
    CommandDetails,
    CommandDetailsBuilder,
    NoEmptyParams,
    PreCommandExists,
    Validator,
)
from .commands import Commands
from .config import Config, ConfigStore, FileConfigStore
from .exceptions import (
    BuilderConsumedError,
    CmdconfError,
    ConfigError,
    ConfigKeyNotFoundError,
    ConfigParseError,
    ConfigReadError,
    ConfigWriteError,
    ContextNotFoundError,
    InvalidCommandError,
    InvalidConfigKeyError,
    LookupFailure,
    NoConfigForContextError,
    NoDefaultConfiguredError,
    NotFoundError,
    ValidationFailedError,
)
from .load_config import default_config_path, load_config, save_config
from .logging_config import disable_logging, get_log_file_path, setup_logging
from .types import CommandContext, CommandType, ConfigSettings

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    # Version
    "__version__",
    # Core Components
    "CommandConfig",
    "CommandContext",
    "CommandDetails",
    "CommandDetailsBuilder",
    "Commands",
    "CommandType",
    "Config",
    "ConfigSettings",
    "ConfigStore",
    "FileConfigStore",
    "default_config_path",
    "load_config",
    "save_config",
    # Validators
    "NoEmptyParams",
    "PreCommandExists",
    "Validator",
    # Logging
    "disable_logging",
    "get_log_file_path",
    "setup_logging",
    # Exceptions
    "BuilderConsumedError",
    "CmdconfError",
    "ConfigError",
    "ConfigKeyNotFoundError",
    "ConfigParseError",
    "ConfigReadError",
    "ConfigWriteError",
    "ContextNotFoundError",
    "InvalidCommandError",
    "InvalidConfigKeyError",
    "LookupFailure",
    "NoConfigForContextError",
    "NoDefaultConfiguredError",
    "NotFoundError",
    "ValidationFailedError",
]
