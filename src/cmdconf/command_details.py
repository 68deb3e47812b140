from __future__ import annotations

import logging
import shlex
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Protocol, Union, runtime_checkable

from .exceptions import BuilderConsumedError, InvalidCommandError, ValidationFailedError
from .types import CommandType

if TYPE_CHECKING:
    from .command_config import CommandConfig

logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────────────────────
# CommandDetails
# ─────────────────────────────────────────────────────────────────────────────
@dataclass(frozen=True)
class CommandDetails:
    """
    Immutable description of one concrete way to run a command.

    Instances are only created through CommandDetailsBuilder.build(), so every
    CommandDetails in the system has a non-empty command and has passed the
    validators registered on its builder. To "edit" one, rebuild it with
    CommandDetailsBuilder.from_details() and substitute the result.
    """

    command: str
    """The command line (or cargo subcommand, depending on command_type)."""

    command_type: CommandType
    """Determines how `command` is interpreted by the executor."""

    env: Mapping[str, str] = field(default_factory=dict)
    """Extra environment variables for the command. Read-only after construction."""

    pre_command: str | None = None
    """Config key of a command to run before this one. None = nothing."""

    params: tuple[str, ...] = ()
    """Arguments appended to the command, in order."""

    working_directory: str | None = None
    """Directory to run in. None means the caller's current directory."""

    allow_multiple_instances: bool = False
    """Whether the executor may run several instances concurrently."""

    def __post_init__(self) -> None:
        object.__setattr__(self, "env", MappingProxyType(dict(self.env)))
        object.__setattr__(self, "params", tuple(self.params))

    def __hash__(self) -> int:
        return hash(
            (
                self.command,
                self.command_type,
                frozenset(self.env.items()),
                self.pre_command,
                self.params,
                self.working_directory,
                self.allow_multiple_instances,
            )
        )

    def full_command(self) -> str:
        """Command followed by its shell-quoted params, as a single string."""
        if not self.params:
            return self.command
        return " ".join([self.command, *(shlex.quote(p) for p in self.params)])

    def to_dict(self) -> dict[str, Any]:
        """
        Mapping of the persisted fields.

        `command`, `command_type`, `params` and `allow_multiple_instances` are
        always present; optional fields at their default are omitted.
        """
        data: dict[str, Any] = {
            "command": self.command,
            "command_type": self.command_type.value,
        }
        if self.pre_command is not None:
            data["pre_command"] = self.pre_command
        data["params"] = list(self.params)
        if self.working_directory is not None:
            data["working_directory"] = self.working_directory
        data["allow_multiple_instances"] = self.allow_multiple_instances
        if self.env:
            data["env"] = {k: self.env[k] for k in sorted(self.env)}
        return data


# ─────────────────────────────────────────────────────────────────────────────
# Validators
# ─────────────────────────────────────────────────────────────────────────────
@runtime_checkable
class Validator(Protocol):
    """
    A check run against a fully assembled CommandDetails before it is accepted.

    validate() raises ValidationFailedError to reject the candidate.
    """

    def validate(self, details: CommandDetails) -> None: ...


ValidatorLike = Union[Validator, Callable[[CommandDetails], Union[bool, None]]]


class _CallableValidator:
    """Adapts a plain callable to the Validator protocol."""

    def __init__(self, func: Callable[[CommandDetails], bool | None]):
        self._func = func
        self.name = getattr(func, "__name__", repr(func))

    def validate(self, details: CommandDetails) -> None:
        if self._func(details) is False:
            raise ValidationFailedError(f"Validator '{self.name}' rejected '{details.command}'")

    def __repr__(self) -> str:
        return f"_CallableValidator({self.name})"


def as_validator(candidate: ValidatorLike) -> Validator:
    if isinstance(candidate, Validator):
        return candidate
    if callable(candidate):
        return _CallableValidator(candidate)
    raise TypeError(f"Not a validator: {candidate!r}")


class PreCommandExists:
    """
    The pre-command must name another entry of the same CommandConfig.

    An entry may not use itself as its pre-command. A details value without a
    pre-command always passes.
    """

    def __init__(self, config: CommandConfig, config_key: str):
        self.config = config
        self.config_key = config_key

    def validate(self, details: CommandDetails) -> None:
        pre = details.pre_command
        if pre is None:
            return
        if pre == self.config_key:
            raise ValidationFailedError(
                f"Cannot set pre_command to its own key: {self.config_key}"
            )
        if pre not in self.config:
            raise ValidationFailedError(f"pre_command '{pre}' does not exist as a command key")


class NoEmptyParams:
    """Rejects parameters that are empty or whitespace only."""

    def validate(self, details: CommandDetails) -> None:
        for i, param in enumerate(details.params):
            if not param.strip():
                raise ValidationFailedError(f"Parameter {i} of '{details.command}' is empty")


# ─────────────────────────────────────────────────────────────────────────────
# Builder
# ─────────────────────────────────────────────────────────────────────────────
def _coerce_params(params: Iterable[str] | str | None) -> tuple[str, ...]:
    if params is None:
        return ()
    if isinstance(params, str):
        return tuple(shlex.split(params))
    return tuple(str(p) for p in params)


class CommandDetailsBuilder:
    """
    The single construction path for CommandDetails.

    The command and its type are required up front; everything else is set
    with chainable setters (last call wins). build() consumes the builder.

    Example:
        >>> details = (
        ...     CommandDetailsBuilder("cargo test", CommandType.CARGO)
        ...     .params(["--", "--nocapture"])
        ...     .env({"RUST_BACKTRACE": "1"})
        ...     .build()
        ... )
    """

    def __init__(self, command: str, command_type: CommandType | str):
        self._command = command
        self._command_type = CommandType.parse(command_type)
        self._env: dict[str, str] = {}
        self._pre_command: str | None = None
        self._params: tuple[str, ...] = ()
        self._working_directory: str | None = None
        self._allow_multiple_instances = False
        self._validators: list[Validator] = []
        self._consumed = False

    @classmethod
    def from_details(cls, details: CommandDetails) -> CommandDetailsBuilder:
        """Start a builder holding every field of an existing CommandDetails."""
        return (
            cls(details.command, details.command_type)
            .env(details.env)
            .pre_command(details.pre_command)
            .params(details.params)
            .working_directory(details.working_directory)
            .allow_multiple_instances(details.allow_multiple_instances)
        )

    def _check_open(self) -> None:
        if self._consumed:
            raise BuilderConsumedError("CommandDetailsBuilder cannot be reused after build()")

    # ────── Setters ──────
    def command(self, command: str) -> CommandDetailsBuilder:
        self._check_open()
        self._command = command
        return self

    def command_type(self, command_type: CommandType | str) -> CommandDetailsBuilder:
        self._check_open()
        self._command_type = CommandType.parse(command_type)
        return self

    def env(self, env: Mapping[str, str] | None) -> CommandDetailsBuilder:
        self._check_open()
        self._env = {str(k): str(v) for k, v in (env or {}).items()}
        return self

    def pre_command(self, pre_command: str | None) -> CommandDetailsBuilder:
        self._check_open()
        self._pre_command = pre_command or None
        return self

    def params(self, params: Iterable[str] | str | None) -> CommandDetailsBuilder:
        """Set the arguments. A single string is split shell-style."""
        self._check_open()
        self._params = _coerce_params(params)
        return self

    def working_directory(self, path: str | Path | None) -> CommandDetailsBuilder:
        self._check_open()
        self._working_directory = str(path) if path else None
        return self

    def allow_multiple_instances(self, allow: bool = True) -> CommandDetailsBuilder:
        self._check_open()
        self._allow_multiple_instances = bool(allow)
        return self

    def add_validator(self, validator: ValidatorLike) -> CommandDetailsBuilder:
        """
        Register a check to run at build() time.

        Accepts a Validator (anything with validate(details)) or a plain
        callable. A callable that returns False fails with a generic message;
        one that raises ValidationFailedError fails with its own message.
        Validators run in the order they were added.
        """
        self._check_open()
        self._validators.append(as_validator(validator))
        return self

    # ────── Finalize ──────
    def build(self) -> CommandDetails:
        """
        Assemble and validate the CommandDetails.

        Raises:
            InvalidCommandError: If the command is empty
            ValidationFailedError: From the first validator that rejects the candidate
            BuilderConsumedError: If build() was already called
        """
        self._check_open()
        self._consumed = True

        if not isinstance(self._command, str) or not self._command.strip():
            logger.warning("Invalid command details: command cannot be empty")
            raise InvalidCommandError("Command cannot be empty")

        details = CommandDetails(
            command=self._command,
            command_type=self._command_type,
            env=dict(self._env),
            pre_command=self._pre_command,
            params=self._params,
            working_directory=self._working_directory,
            allow_multiple_instances=self._allow_multiple_instances,
        )

        for validator in self._validators:
            try:
                validator.validate(details)
            except ValidationFailedError as e:
                logger.warning(f"Validation failed for '{details.command}': {e.message}")
                raise

        validators, self._validators = self._validators, []
        logger.debug(f"Built command details '{details.command}' ({len(validators)} validators)")
        return details

    def __repr__(self) -> str:
        state = "consumed" if self._consumed else "open"
        return (
            f"CommandDetailsBuilder(command={self._command!r}, "
            f"type={self._command_type.value}, validators={len(self._validators)}, {state})"
        )
