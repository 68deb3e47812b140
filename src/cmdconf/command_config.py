from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from .command_details import CommandDetails, CommandDetailsBuilder, PreCommandExists
from .exceptions import (
    ConfigKeyNotFoundError,
    InvalidConfigKeyError,
    NoDefaultConfiguredError,
    NotFoundError,
)
from .types import CommandContext, CommandType, ContextLike

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_KEY = "default"
"""Key of the single entry in a seeded config."""

WORKSPACE_FOLDER = "${workspaceFolder}"

# Seeded commands for the well-known contexts (all cargo subcommands)
SEEDED_COMMANDS: dict[str, str] = {
    "run": "run --package ${packageName} --bin ${binaryName}",
    "test": "test",
    "build": "build",
    "bench": "bench",
}


class CommandConfig:
    """
    Ordered collection of CommandDetails for one context.

    Entries are keyed by a caller-chosen config key and keep insertion order.
    `default_key`, when set, always names an existing entry. Updating an entry
    never changes which entry is the default.
    """

    def __init__(
        self,
        entries: dict[str, CommandDetails] | None = None,
        default_key: str | None = None,
        *,
        context: CommandContext | None = None,
    ):
        self._entries: dict[str, CommandDetails] = {}
        self._default_key: str | None = None
        self.context = context
        """Owning context, only used for error messages."""

        for key, details in (entries or {}).items():
            self.update_config(key, details)
        if default_key is not None:
            self.set_default(default_key)

    @classmethod
    def with_defaults(cls, context: ContextLike) -> CommandConfig:
        """
        Seeded config for a well-known context.

        run/test/build/bench get a single cargo entry under the "default" key,
        marked as default. Any other context gets an empty config.
        """
        ctx = CommandContext.of(context)
        config = cls(context=ctx)
        command = SEEDED_COMMANDS.get(ctx.name)
        if command is None:
            return config

        details = (
            CommandDetailsBuilder(command, CommandType.CARGO)
            .working_directory(WORKSPACE_FOLDER)
            .build()
        )
        config.update_config(DEFAULT_CONFIG_KEY, details)
        config.set_default(DEFAULT_CONFIG_KEY)
        return config

    # ────── Queries ──────
    @property
    def entries(self) -> dict[str, CommandDetails]:
        """Copy of the (config_key → details) mapping, in insertion order."""
        return dict(self._entries)

    @property
    def default_key(self) -> str | None:
        """Key of the default entry. Change it with set_default()."""
        return self._default_key

    def keys(self) -> list[str]:
        return list(self._entries)

    def is_empty(self) -> bool:
        return not self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, config_key: object) -> bool:
        return config_key in self._entries

    def __iter__(self) -> Iterator[tuple[str, CommandDetails]]:
        return iter(list(self._entries.items()))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CommandConfig):
            return NotImplemented
        return (
            list(self._entries.items()) == list(other._entries.items())
            and self.default_key == other.default_key
        )

    __hash__ = None  # type: ignore[assignment]

    def get(self, config_key: str) -> CommandDetails:
        """
        Return the details stored under config_key.

        Raises:
            NotFoundError: If no such entry exists
        """
        try:
            return self._entries[config_key]
        except KeyError:
            raise NotFoundError(
                f"No entry '{config_key}'" + (f" in context '{self.context}'" if self.context else "")
            ) from None

    def get_default(self) -> CommandDetails:
        """
        Resolve the default entry.

        Returns the entry at default_key if set, otherwise the only entry when
        exactly one exists.

        Raises:
            NoDefaultConfiguredError: No default set and zero or several entries
        """
        if self.default_key is not None:
            return self._entries[self.default_key]
        if len(self._entries) == 1:
            return next(iter(self._entries.values()))
        raise NoDefaultConfiguredError(self.context, len(self._entries))

    # ────── Mutation ──────
    def update_config(self, config_key: str, details: CommandDetails) -> None:
        """Insert or replace the entry at config_key. default_key is left alone."""
        if not isinstance(config_key, str) or not config_key.strip():
            logger.warning("Invalid config key: key cannot be empty")
            raise InvalidConfigKeyError("Config key cannot be empty")
        if not isinstance(details, CommandDetails):
            raise TypeError(f"Expected CommandDetails, got {type(details).__name__}")

        action = "Replaced" if config_key in self._entries else "Added"
        self._entries[config_key] = details
        logger.debug(f"{action} config '{config_key}' in context '{self.context}'")

    def set_default(self, config_key: str) -> None:
        """
        Mark config_key as the default entry.

        Raises:
            ConfigKeyNotFoundError: If no entry with that key exists
        """
        if config_key not in self._entries:
            logger.warning(f"Cannot set default: '{config_key}' not in context '{self.context}'")
            raise ConfigKeyNotFoundError(config_key, self.context)
        self._default_key = config_key
        logger.debug(f"Default for context '{self.context}' set to '{config_key}'")

    def remove_config(self, config_key: str) -> CommandDetails:
        """
        Remove and return an entry. Clears default_key if it pointed there.

        Raises:
            ConfigKeyNotFoundError: If no entry with that key exists
        """
        if config_key not in self._entries:
            raise ConfigKeyNotFoundError(config_key, self.context)
        details = self._entries.pop(config_key)
        if self.default_key == config_key:
            self._default_key = None
            logger.debug(f"Removed default entry '{config_key}'; context '{self.context}' has no default")
        return details

    # ────── Per-field edits (rebuild and substitute) ──────
    def _rebuild(self, config_key: str) -> CommandDetailsBuilder:
        if config_key not in self._entries:
            raise ConfigKeyNotFoundError(config_key, self.context)
        return CommandDetailsBuilder.from_details(self._entries[config_key])

    def update_command(self, config_key: str, command: str) -> None:
        self.update_config(config_key, self._rebuild(config_key).command(command).build())

    def update_command_type(self, config_key: str, command_type: CommandType | str) -> None:
        self.update_config(
            config_key, self._rebuild(config_key).command_type(command_type).build()
        )

    def update_params(self, config_key: str, params: list[str] | str) -> None:
        self.update_config(config_key, self._rebuild(config_key).params(params).build())

    def update_working_directory(self, config_key: str, cwd: str | Path | None) -> None:
        self.update_config(config_key, self._rebuild(config_key).working_directory(cwd).build())

    def update_allow_multiple_instances(self, config_key: str, allow: bool) -> None:
        self.update_config(
            config_key, self._rebuild(config_key).allow_multiple_instances(allow).build()
        )

    def update_pre_command(self, config_key: str, pre_command: str | None) -> None:
        """
        Point an entry's pre-command at another entry of this config.

        An empty string or None clears it.

        Raises:
            ConfigKeyNotFoundError: If config_key does not exist
            ValidationFailedError: If pre_command is the entry itself or unknown
        """
        builder = (
            self._rebuild(config_key)
            .pre_command(pre_command)
            .add_validator(PreCommandExists(self, config_key))
        )
        self.update_config(config_key, builder.build())

    def __repr__(self) -> str:
        return (
            f"CommandConfig(context={self.context}, entries={self.keys()}, "
            f"default_key={self.default_key!r})"
        )
