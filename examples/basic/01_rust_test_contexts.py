"""
01_rust_test_contexts.py - Registering commands per context and picking a default

This example demonstrates:
- Building CommandDetails with CommandDetailsBuilder
- Registering several configs under one context
- Resolving the default config and switching it
- Saving to and loading from a TOML file

Try it:
    python examples/basic/01_rust_test_contexts.py
"""
# ruff: noqa: T201

import tempfile
from pathlib import Path

from cmdconf import CommandDetailsBuilder, Commands, CommandType, Config, load_config, save_config


def main():
    # Step 1: Build two ways of running the test suite
    plain = CommandDetailsBuilder("cargo test", CommandType.CARGO).build()
    verbose = (
        CommandDetailsBuilder("cargo test", CommandType.CARGO)
        .params(["--", "--nocapture"])
        .env({"RUST_BACKTRACE": "1"})
        .build()
    )

    # Step 2: Register both under the "rust-test" context
    commands = Commands()
    commands.update_config("rust-test", "cargo-test", plain)
    commands.update_config("rust-test", "cargo-test-verbose", verbose)
    commands.set_default_config("rust-test", "cargo-test")
    print(f"Default: {commands.get_or_default_config('rust-test').full_command()}")

    # Step 3: Switch the default
    commands.set_default_config("rust-test", "cargo-test-verbose")
    print(f"Default: {commands.get_or_default_config('rust-test').full_command()}")

    # Step 4: Persist and reload
    with tempfile.TemporaryDirectory() as tmp:
        path = save_config(Config(commands=commands), Path(tmp) / "cmdconf.toml")
        print(f"\n{path.name}:\n{path.read_text()}")
        reloaded = load_config(path)
        assert reloaded.commands == commands


if __name__ == "__main__":
    main()
