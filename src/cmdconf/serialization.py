# cmdconf/serialization.py
"""
Conversion between the stored document and the in-memory registry.

Loading is two-pass. The TOML parser produces plain dicts in which any field
may be missing (the sparse form). The *_from_dict functions here materialize
strict objects from that form, replacing missing or mistyped fields with
their defaults and logging a warning instead of failing. Nothing in this
module does I/O.

Saving goes the other way: *_to_dict builds a plain document, and to_toml()
renders it with a stable key order.
"""

from __future__ import annotations

import logging
import math
import re
import shlex
from collections.abc import Mapping
from typing import Any

from .command_config import CommandConfig
from .command_details import CommandDetails, CommandDetailsBuilder
from .commands import Commands
from .types import CommandContext, CommandType, ConfigSettings

logger = logging.getLogger(__name__)

# Older documents used these names
_FIELD_ALIASES = {
    "command_type": ("command_type", "type"),
    "entries": ("entries", "configs"),
    "default_key": ("default_key", "default"),
}


def _pick(raw: Mapping[str, Any], field_name: str) -> Any:
    for name in _FIELD_ALIASES.get(field_name, (field_name,)):
        if name in raw:
            return raw[name]
    return None


# =====================================================================
#   Sparse → strict
# =====================================================================
def settings_from_dict(raw: Any) -> ConfigSettings:
    if raw is None:
        return ConfigSettings()
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring [settings]: expected a table")
        return ConfigSettings()

    value = raw.get("default_command_type")
    if value is None:
        return ConfigSettings()
    try:
        return ConfigSettings(default_command_type=CommandType.parse(value))
    except ValueError:
        logger.warning(f"Unknown settings.default_command_type '{value}', using 'shell'")
        return ConfigSettings()


def details_from_dict(
    raw: Any,
    *,
    default_type: CommandType = CommandType.SHELL,
    where: str = "<entry>",
) -> CommandDetails | None:
    """
    Materialize one CommandDetails from its stored table.

    Returns None (after logging a warning) when the entry has no usable
    command, since a CommandDetails cannot exist without one. Every other
    problem falls back to the field's default.
    """
    if not isinstance(raw, Mapping):
        logger.warning(f"Skipping {where}: expected a table")
        return None

    command = raw.get("command")
    if not isinstance(command, str) or not command.strip():
        logger.warning(f"Skipping {where}: missing or empty 'command'")
        return None

    command_type = default_type
    type_value = _pick(raw, "command_type")
    if type_value is not None:
        try:
            command_type = CommandType.parse(type_value)
        except ValueError:
            logger.warning(f"{where}: unknown command_type '{type_value}', using '{default_type}'")

    builder = CommandDetailsBuilder(command, command_type)

    env = raw.get("env")
    if isinstance(env, Mapping):
        clean_env = {}
        for key, value in env.items():
            if isinstance(value, (str, int, float, bool)):
                clean_env[str(key)] = str(value).lower() if isinstance(value, bool) else str(value)
            else:
                logger.warning(f"{where}: dropping env var '{key}' with non-scalar value")
        builder.env(clean_env)
    elif env is not None:
        logger.warning(f"{where}: 'env' must be a table, ignoring")

    pre_command = raw.get("pre_command")
    if isinstance(pre_command, str):
        builder.pre_command(pre_command)
    elif pre_command is not None:
        logger.warning(f"{where}: 'pre_command' must be a string, ignoring")

    params = raw.get("params")
    if isinstance(params, str):
        try:
            builder.params(shlex.split(params))
        except ValueError as e:
            logger.warning(f"{where}: cannot split params '{params}' ({e}), ignoring")
    elif isinstance(params, list):
        clean_params = []
        for i, param in enumerate(params):
            if isinstance(param, bool):
                clean_params.append(str(param).lower())
            elif isinstance(param, (str, int, float)):
                clean_params.append(str(param))
            else:
                logger.warning(f"{where}: dropping non-scalar parameter {i}")
        builder.params(clean_params)
    elif params is not None:
        logger.warning(f"{where}: 'params' must be an array of strings, ignoring")

    cwd = raw.get("working_directory")
    if isinstance(cwd, str):
        builder.working_directory(cwd or None)
    elif cwd is not None:
        logger.warning(f"{where}: 'working_directory' must be a string, ignoring")

    allow = raw.get("allow_multiple_instances")
    if isinstance(allow, bool):
        builder.allow_multiple_instances(allow)
    elif allow is not None:
        logger.warning(f"{where}: 'allow_multiple_instances' must be a boolean, using false")

    return builder.build()


def command_config_from_dict(
    raw: Any,
    context: CommandContext,
    *,
    default_type: CommandType = CommandType.SHELL,
) -> CommandConfig:
    config = CommandConfig(context=context)
    if not isinstance(raw, Mapping):
        logger.warning(f"Context '{context}': expected a table, using an empty config")
        return config

    entries = _pick(raw, "entries")
    if isinstance(entries, Mapping):
        for key, entry in entries.items():
            details = details_from_dict(
                entry,
                default_type=default_type,
                where=f"commands.{context}.entries.{key}",
            )
            if details is not None and str(key).strip():
                config.update_config(str(key), details)
    elif entries is not None:
        logger.warning(f"Context '{context}': 'entries' must be a table, ignoring")

    default_key = _pick(raw, "default_key")
    if isinstance(default_key, str) and default_key in config:
        config.set_default(default_key)
    elif default_key is not None:
        logger.warning(f"Context '{context}': default '{default_key}' names no entry, ignoring")

    return config


def commands_from_dict(
    raw: Any,
    *,
    default_type: CommandType = CommandType.SHELL,
) -> Commands:
    if raw is None:
        return Commands()
    if not isinstance(raw, Mapping):
        logger.warning("Ignoring [commands]: expected a table")
        return Commands()

    configs: dict[CommandContext, CommandConfig] = {}
    for name, section in raw.items():
        try:
            context = CommandContext.of(str(name))
        except ValueError:
            logger.warning("Skipping context with empty name")
            continue
        configs[context] = command_config_from_dict(section, context, default_type=default_type)

    logger.debug(f"Materialized {len(configs)} contexts")
    return Commands(configs)


# =====================================================================
#   Strict → document
# =====================================================================
def command_config_to_dict(config: CommandConfig) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if config.default_key is not None:
        data["default_key"] = config.default_key
    if not config.is_empty():
        data["entries"] = {key: details.to_dict() for key, details in config}
    return data


def commands_to_dict(commands: Commands) -> dict[str, Any]:
    return {ctx.name: command_config_to_dict(config) for ctx, config in commands.items()}


def settings_to_dict(settings: ConfigSettings) -> dict[str, Any]:
    return {"default_command_type": settings.default_command_type.value}


# =====================================================================
#   TOML writer
# =====================================================================
_BARE_KEY = re.compile(r"^[A-Za-z0-9_-]+$")
_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\b": "\\b",
    "\t": "\\t",
    "\n": "\\n",
    "\f": "\\f",
    "\r": "\\r",
}


def _toml_string(value: str) -> str:
    out = []
    for ch in value:
        if ch in _ESCAPES:
            out.append(_ESCAPES[ch])
        elif ord(ch) < 0x20 or ord(ch) == 0x7F:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    return '"' + "".join(out) + '"'


def _toml_key(key: str) -> str:
    return key if _BARE_KEY.match(key) else _toml_string(key)


def _toml_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if math.isnan(value):
            return "nan"
        if math.isinf(value):
            return "inf" if value > 0 else "-inf"
        return repr(value)
    if isinstance(value, str):
        return _toml_string(value)
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_toml_value(v) for v in value) + "]"
    if isinstance(value, Mapping):
        items = ", ".join(f"{_toml_key(str(k))} = {_toml_value(v)}" for k, v in value.items())
        return "{ " + items + " }" if items else "{}"
    raise TypeError(f"Cannot serialize {type(value).__name__} to TOML")


def _is_inline(path: list[str], key: str, value: Any) -> bool:
    # commands.<ctx>.entries.<key>.env
    return not isinstance(value, Mapping) or (len(path) == 4 and key == "env")


def _write_table(lines: list[str], path: list[str], table: Mapping[str, Any]) -> None:
    scalars = {k: v for k, v in table.items() if _is_inline(path, k, v)}
    tables = {k: v for k, v in table.items() if not _is_inline(path, k, v)}

    # A table holding only sub-tables is defined implicitly by their headers
    if path and (scalars or not tables):
        if lines:
            lines.append("")
        lines.append("[" + ".".join(_toml_key(p) for p in path) + "]")
    for key, value in scalars.items():
        lines.append(f"{_toml_key(str(key))} = {_toml_value(value)}")
    for key, value in tables.items():
        _write_table(lines, [*path, str(key)], value)


def to_toml(document: Mapping[str, Any]) -> str:
    """
    Render a nested dict as TOML text.

    Keys keep the dict's order. Nested dicts become [dotted.tables], except
    `env` which is written inline next to the fields of its entry.
    """
    lines: list[str] = []
    _write_table(lines, [], document)
    return "\n".join(lines) + "\n"
