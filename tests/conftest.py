# tests/conftest.py
import os
import sys

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import pytest

from cmdconf.command_details import CommandDetailsBuilder
from cmdconf.commands import Commands
from cmdconf.types import CommandType


@pytest.fixture
def cargo_test():
    return CommandDetailsBuilder("cargo test", CommandType.CARGO).build()


@pytest.fixture
def cargo_test_verbose():
    return CommandDetailsBuilder("cargo test -- --nocapture", CommandType.CARGO).build()


@pytest.fixture
def rust_commands(cargo_test, cargo_test_verbose):
    commands = Commands()
    commands.update_config("rust-test", "cargo-test", cargo_test)
    commands.update_config("rust-test", "cargo-test-verbose", cargo_test_verbose)
    commands.set_default_config("rust-test", "cargo-test")
    return commands


@pytest.fixture(autouse=True)
def isolated_config_path(tmp_path, monkeypatch):
    """Never touch the real ~/.config/cmdconf from tests."""
    path = tmp_path / "home" / "cmdconf.toml"
    monkeypatch.setenv("CMDCONF_CONFIG", str(path))
    return path
