# cmdconf/exceptions.py
"""
Custom exception hierarchy for cmdconf.

All cmdconf-specific exceptions inherit from CmdconfError to enable
catch-all error handling while still providing specific exception types
for different error conditions.
"""

from __future__ import annotations


class CmdconfError(Exception):
    """
    Base exception for all cmdconf errors.

    Catch this to handle any cmdconf-specific error.
    """

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Construction errors
# ─────────────────────────────────────────────────────────────────────────────
class InvalidCommandError(CmdconfError):
    """
    Raised by CommandDetailsBuilder.build() when the command string is empty.

    Example:
        >>> CommandDetailsBuilder("", CommandType.SHELL).build()
        InvalidCommandError: Command cannot be empty
    """

    pass


class ValidationFailedError(CmdconfError):
    """
    Raised when a validator registered with add_validator() rejects a candidate.

    Validators may raise this directly to report a specific message. Validators
    that simply return False are reported with a generic message.

    Attributes:
        message: The message reported by the failing validator
    """

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class BuilderConsumedError(CmdconfError):
    """Raised when a CommandDetailsBuilder is used again after build()."""

    pass


class InvalidConfigKeyError(CmdconfError):
    """Raised when an empty config key is used to store an entry."""

    pass


# ─────────────────────────────────────────────────────────────────────────────
# Lookup errors
# ─────────────────────────────────────────────────────────────────────────────
class LookupFailure(CmdconfError, KeyError):
    """
    Base class for failed registry lookups.

    Also a KeyError so mapping-style callers can catch it the usual way.
    """

    def __str__(self) -> str:
        # KeyError.__str__ repr()s the message
        return str(self.args[0]) if self.args else ""


class NotFoundError(LookupFailure):
    """Raised by CommandConfig.get() for an unknown config key."""

    pass


class ConfigKeyNotFoundError(NotFoundError):
    """
    Raised when an operation names a config key that does not exist.

    Attributes:
        config_key: The missing key
    """

    def __init__(self, config_key: str, context: object | None = None):
        self.config_key = config_key
        self.context = context
        where = f" in context '{context}'" if context is not None else ""
        super().__init__(f"Config key '{config_key}' not found{where}")


class ContextNotFoundError(LookupFailure):
    """
    Raised by strict lookups when a context has never been registered.

    Attributes:
        context: The missing context
    """

    def __init__(self, context: object):
        self.context = context
        super().__init__(f"Context '{context}' is not registered")


class NoDefaultConfiguredError(LookupFailure):
    """
    Raised when a context has several entries but none is marked as default.

    Attributes:
        context: The context being resolved (None when unknown)
    """

    def __init__(self, context: object | None = None, entry_count: int = 0):
        self.context = context
        self.entry_count = entry_count
        where = f" for context '{context}'" if context is not None else ""
        super().__init__(
            f"No default configured{where} and {entry_count} entries to choose from"
        )


class NoConfigForContextError(LookupFailure):
    """
    Raised when a context has no stored CommandDetails at all.

    There is no implicit default command: at least one entry must exist.
    """

    def __init__(self, context: object):
        self.context = context
        super().__init__(f"No command configured for context '{context}'")


# ─────────────────────────────────────────────────────────────────────────────
# Persistence errors
# ─────────────────────────────────────────────────────────────────────────────
class ConfigError(CmdconfError):
    """Base class for errors while loading or saving a Config."""

    pass


class ConfigParseError(ConfigError):
    """
    Raised when stored config data cannot be parsed at all.

    Missing or mistyped fields never raise this; they fall back to defaults.
    """

    pass


class ConfigReadError(ConfigError):
    """Raised when the backing store cannot be read."""

    pass


class ConfigWriteError(ConfigError):
    """
    Raised when the backing store rejects a save.

    The in-memory Config is left unchanged.
    """

    pass
