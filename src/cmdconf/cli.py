# cmdconf/cli.py
"""
Command-line front end.

Thin layer over Config / Commands: parse arguments, load the config, call
one registry operation, save when the registry changed.

    cmdconf show [CONTEXT]
    cmdconf get CONTEXT [KEY]
    cmdconf add CONTEXT KEY COMMAND [--type cargo] [--param P]... [--default]
    cmdconf set-default CONTEXT KEY [--strict]
    cmdconf remove CONTEXT KEY
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from . import __version__
from .command_details import CommandDetailsBuilder, NoEmptyParams, PreCommandExists
from .config import Config
from .exceptions import CmdconfError
from .load_config import default_config_path, load_config, save_config
from .logging_config import setup_logging
from .serialization import command_config_to_dict, to_toml
from .types import CommandType

logger = logging.getLogger(__name__)


def _parse_env(pairs: Sequence[str]) -> dict[str, str]:
    env = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise argparse.ArgumentTypeError(f"--env expects KEY=VALUE, got '{pair}'")
        env[key] = value
    return env


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmdconf",
        description="Manage per-context command configurations",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "-c",
        "--config",
        help=f"Config file (default: {default_config_path()})",
    )
    parser.add_argument("-v", "--verbose", action="count", default=0, help="More logging")
    sub = parser.add_subparsers(dest="action", required=True)

    show = sub.add_parser("show", help="Print the stored configuration")
    show.add_argument("context", nargs="?")

    get = sub.add_parser("get", help="Print the command resolved for a context")
    get.add_argument("context")
    get.add_argument("key", nargs="?", help="Config key (default entry when omitted)")

    add = sub.add_parser("add", help="Add or replace a command")
    add.add_argument("context")
    add.add_argument("key")
    add.add_argument("command")
    add.add_argument(
        "--type",
        default=None,
        choices=[t.value for t in CommandType],
        help="Command type (default: settings.default_command_type)",
    )
    add.add_argument("--param", action="append", default=[], dest="params")
    add.add_argument("--env", action="append", default=[], metavar="KEY=VALUE")
    add.add_argument("--cwd", default=None, help="Working directory")
    add.add_argument("--pre-command", default=None, help="Key of a command to run first")
    add.add_argument("--allow-multiple", action="store_true")
    add.add_argument("--default", action="store_true", help="Also make it the default")

    set_default = sub.add_parser("set-default", help="Choose the default command")
    set_default.add_argument("context")
    set_default.add_argument("key")
    set_default.add_argument(
        "--strict",
        action="store_true",
        help="Fail if the context has never been registered",
    )

    remove = sub.add_parser("remove", help="Remove a command")
    remove.add_argument("context")
    remove.add_argument("key")

    return parser


def _show(config: Config, args: argparse.Namespace) -> bool:
    if args.context is None:
        print(config.dumps(), end="")
    else:
        section = command_config_to_dict(config.commands.require_configs(args.context))
        print(to_toml({"commands": {args.context: section}}), end="")
    return False


def _get(config: Config, args: argparse.Namespace) -> bool:
    if args.key is None:
        details = config.commands.get_or_default_config(args.context)
    else:
        details = config.commands.get_config(args.context, args.key)
    print(details.full_command())
    return False


def _add(config: Config, args: argparse.Namespace) -> bool:
    command_config = config.commands.get_or_insert_config(args.context)
    command_type = args.type or config.settings.default_command_type
    details = (
        CommandDetailsBuilder(args.command, command_type)
        .params(args.params)
        .env(_parse_env(args.env))
        .working_directory(args.cwd)
        .pre_command(args.pre_command)
        .allow_multiple_instances(args.allow_multiple)
        .add_validator(NoEmptyParams())
        .add_validator(PreCommandExists(command_config, args.key))
        .build()
    )
    command_config.update_config(args.key, details)
    if args.default:
        config.commands.set_default_config(args.context, args.key)
    return True


def _set_default(config: Config, args: argparse.Namespace) -> bool:
    config.commands.set_default_config(args.context, args.key, strict=args.strict)
    return True


def _remove(config: Config, args: argparse.Namespace) -> bool:
    config.commands.remove_config(args.context, args.key)
    return True


_ACTIONS = {
    "show": _show,
    "get": _get,
    "add": _add,
    "set-default": _set_default,
    "remove": _remove,
}


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.verbose:
        setup_logging(logging.DEBUG if args.verbose > 1 else logging.INFO)

    try:
        config = load_config(args.config)
        changed = _ACTIONS[args.action](config, args)
        if changed:
            path = save_config(config, args.config)
            logger.info(f"Saved {path}")
    except argparse.ArgumentTypeError as e:
        parser.error(str(e))
    except (CmdconfError, ValueError) as e:
        print(f"error: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
