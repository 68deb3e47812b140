from __future__ import annotations

import logging
from collections.abc import Iterator

from .command_config import SEEDED_COMMANDS, CommandConfig
from .command_details import CommandDetails
from .exceptions import (
    ConfigKeyNotFoundError,
    ContextNotFoundError,
    NoConfigForContextError,
    NotFoundError,
)
from .types import CommandContext, ContextLike

logger = logging.getLogger(__name__)


class Commands:
    """
    Registry mapping each CommandContext to its CommandConfig.

    Contexts are registered only through the update path
    (get_or_insert_config / update_config); read-only queries never register
    anything. Insertion order is kept so persistence is deterministic.

    Not thread-safe: callers must serialize mutation.
    """

    def __init__(self, configs: dict[ContextLike, CommandConfig] | None = None):
        self._configs: dict[CommandContext, CommandConfig] = {}
        for context, config in (configs or {}).items():
            ctx = CommandContext.of(context)
            config.context = ctx
            self._configs[ctx] = config

    @classmethod
    def with_defaults(cls) -> Commands:
        """Registry seeded with the run/test/build/bench cargo commands."""
        return cls({name: CommandConfig.with_defaults(name) for name in SEEDED_COMMANDS})

    # ────── Queries ──────
    def contexts(self) -> list[CommandContext]:
        return list(self._configs)

    def items(self) -> list[tuple[CommandContext, CommandConfig]]:
        return list(self._configs.items())

    def __contains__(self, context: object) -> bool:
        if isinstance(context, (str, CommandContext)):
            try:
                return CommandContext.of(context) in self._configs
            except ValueError:
                return False
        return False

    def __len__(self) -> int:
        return len(self._configs)

    def __iter__(self) -> Iterator[CommandContext]:
        return iter(list(self._configs))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Commands):
            return NotImplemented
        return list(self._configs.items()) == list(other._configs.items())

    __hash__ = None  # type: ignore[assignment]

    def get_configs(self, context: ContextLike) -> CommandConfig:
        """
        Lenient lookup: the registered config, or a fresh empty one.

        The empty config is NOT registered; mutating it has no effect on the
        registry. Use get_or_insert_config() to register a context.
        """
        ctx = CommandContext.of(context)
        config = self._configs.get(ctx)
        if config is None:
            return CommandConfig(context=ctx)
        return config

    def require_configs(self, context: ContextLike) -> CommandConfig:
        """
        Strict lookup: the registered config.

        Raises:
            ContextNotFoundError: If the context was never registered
        """
        ctx = CommandContext.of(context)
        try:
            return self._configs[ctx]
        except KeyError:
            raise ContextNotFoundError(ctx) from None

    def get_config(self, context: ContextLike, config_key: str) -> CommandDetails:
        """
        Look up a single entry.

        Raises:
            ContextNotFoundError: If the context was never registered
            ConfigKeyNotFoundError: If the context has no such entry
        """
        config = self.require_configs(context)
        try:
            return config.get(config_key)
        except NotFoundError:
            raise ConfigKeyNotFoundError(config_key, config.context) from None

    def get_or_default_config(self, context: ContextLike) -> CommandDetails:
        """
        Resolve the default CommandDetails for a context.

        Raises:
            NoConfigForContextError: If the context has no entries at all
            NoDefaultConfiguredError: If several entries exist and none is default
        """
        ctx = CommandContext.of(context)
        config = self.get_configs(ctx)
        if config.is_empty():
            raise NoConfigForContextError(ctx)
        return config.get_default()

    # ────── Mutation ──────
    def get_or_insert_config(self, context: ContextLike) -> CommandConfig:
        """Return the config for context, registering an empty one if needed."""
        ctx = CommandContext.of(context)
        config = self._configs.get(ctx)
        if config is None:
            config = CommandConfig(context=ctx)
            self._configs[ctx] = config
            logger.debug(f"Registered context '{ctx}'")
        return config

    def update_config(self, context: ContextLike, config_key: str, details: CommandDetails) -> None:
        """Insert or replace an entry, registering the context if needed."""
        self.get_or_insert_config(context).update_config(config_key, details)

    def set_default_config(
        self,
        context: ContextLike,
        config_key: str,
        *,
        strict: bool = False,
    ) -> None:
        """
        Mark config_key as the default for context.

        strict=True requires the context to be registered already. With
        strict=False an unregistered context behaves like an empty one: the
        key cannot exist, so ConfigKeyNotFoundError is raised and nothing is
        registered.

        Raises:
            ContextNotFoundError: strict=True and context unregistered
            ConfigKeyNotFoundError: No entry with that key in the context
        """
        ctx = CommandContext.of(context)
        if strict:
            config = self.require_configs(ctx)
        else:
            config = self._configs.get(ctx)
            if config is None:
                logger.warning(f"Cannot set default: context '{ctx}' has no entries")
                raise ConfigKeyNotFoundError(config_key, ctx)
        config.set_default(config_key)

    def remove_config(self, context: ContextLike, config_key: str) -> CommandDetails:
        """
        Remove one entry from a registered context.

        The context itself stays registered, even when it becomes empty.

        Raises:
            ContextNotFoundError: If the context was never registered
            ConfigKeyNotFoundError: If the context has no such entry
        """
        return self.require_configs(context).remove_config(config_key)

    def __repr__(self) -> str:
        return f"Commands(contexts={[c.name for c in self._configs]})"
