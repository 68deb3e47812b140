# cmdconf/types.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Union


class CommandType(Enum):
    """How the `command` string of a CommandDetails is interpreted downstream."""

    CARGO = "cargo"
    SHELL = "shell"

    @classmethod
    def parse(cls, value: CommandType | str) -> CommandType:
        """
        Accept an enum member or its name/value in any case ("Cargo", "cargo").

        Raises:
            ValueError: If the value names no known command type
        """
        if isinstance(value, cls):
            return value
        text = str(value).strip().lower()
        for member in cls:
            if member.value == text:
                return member
        raise ValueError(f"Unknown command type '{value}'")

    @classmethod
    def default(cls) -> CommandType:
        return cls.SHELL

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class CommandContext:
    """
    Opaque key identifying the scenario a set of command configs belongs to.

    Usually a task tag ("run", "test", "rust-test") or a file path. Only
    equality and hashing matter; the name is also used as the TOML table name
    when the registry is persisted.
    """

    name: str

    RUN: ClassVar[CommandContext]
    TEST: ClassVar[CommandContext]
    BUILD: ClassVar[CommandContext]
    BENCH: ClassVar[CommandContext]
    SCRIPT: ClassVar[CommandContext]

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not self.name.strip():
            raise ValueError("Command context name cannot be empty")

    @classmethod
    def of(cls, value: ContextLike) -> CommandContext:
        """Coerce a plain string (or an existing context) into a CommandContext."""
        if isinstance(value, cls):
            return value
        return cls(str(value))

    def __str__(self) -> str:
        return self.name


CommandContext.RUN = CommandContext("run")
CommandContext.TEST = CommandContext("test")
CommandContext.BUILD = CommandContext("build")
CommandContext.BENCH = CommandContext("bench")
CommandContext.SCRIPT = CommandContext("script")

ContextLike = Union[CommandContext, str]
"""Anything accepted where a context is expected."""


@dataclass(frozen=True)
class ConfigSettings:
    """Global settings stored in the [settings] table."""

    default_command_type: CommandType = CommandType.SHELL
    """Type given to stored entries that do not declare one."""
