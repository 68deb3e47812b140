# tests/test_commands.py
import pytest

from cmdconf import (
    CommandConfig,
    CommandContext,
    CommandDetailsBuilder,
    Commands,
    CommandType,
    ConfigKeyNotFoundError,
    ContextNotFoundError,
    NoConfigForContextError,
    NoDefaultConfiguredError,
)


def test_rust_test_scenario(rust_commands, cargo_test, cargo_test_verbose):
    assert rust_commands.get_or_default_config("rust-test") == cargo_test

    rust_commands.set_default_config("rust-test", "cargo-test-verbose")
    resolved = rust_commands.get_or_default_config("rust-test")
    assert resolved == cargo_test_verbose
    assert resolved.command == "cargo test -- --nocapture"
    assert resolved.command_type is CommandType.CARGO


def test_string_and_context_keys_are_interchangeable(rust_commands, cargo_test):
    assert rust_commands.get_or_default_config(CommandContext("rust-test")) == cargo_test
    assert "rust-test" in rust_commands
    assert CommandContext("rust-test") in rust_commands
    assert "other" not in rust_commands
    assert 42 not in rust_commands


def test_get_configs_is_lenient_and_read_only():
    commands = Commands()
    config = commands.get_configs("ghost")
    assert config.is_empty()
    assert "ghost" not in commands

    # Mutating the returned empty config does not register the context
    config.update_config("x", CommandDetailsBuilder("ls", CommandType.SHELL).build())
    assert "ghost" not in commands


def test_require_configs_is_strict(rust_commands):
    assert len(rust_commands.require_configs("rust-test")) == 2
    with pytest.raises(ContextNotFoundError, match="'ghost' is not registered"):
        rust_commands.require_configs("ghost")


def test_get_or_insert_registers_once():
    commands = Commands()
    first = commands.get_or_insert_config("lint")
    second = commands.get_or_insert_config("lint")
    assert first is second
    assert commands.contexts() == [CommandContext("lint")]


def test_single_entry_without_default(cargo_test):
    commands = Commands()
    commands.update_config("fmt", "cargo-fmt", cargo_test)
    assert commands.get_or_default_config("fmt") == cargo_test


def test_no_entries_means_no_config():
    commands = Commands()
    with pytest.raises(NoConfigForContextError, match="'nothing'"):
        commands.get_or_default_config("nothing")

    commands.get_or_insert_config("empty")
    with pytest.raises(NoConfigForContextError):
        commands.get_or_default_config("empty")


def test_several_entries_without_default(cargo_test, cargo_test_verbose):
    commands = Commands()
    commands.update_config("t", "a", cargo_test)
    commands.update_config("t", "b", cargo_test_verbose)
    with pytest.raises(NoDefaultConfiguredError, match="context 't'"):
        commands.get_or_default_config("t")


@pytest.mark.parametrize("prior_default", [None, "a", "b"])
def test_set_default_always_wins(prior_default, cargo_test, cargo_test_verbose):
    commands = Commands()
    commands.update_config("t", "a", cargo_test)
    commands.update_config("t", "b", cargo_test_verbose)
    if prior_default:
        commands.set_default_config("t", prior_default)

    commands.set_default_config("t", "b")
    assert commands.get_or_default_config("t") == cargo_test_verbose


def test_set_default_unknown_key(rust_commands):
    with pytest.raises(ConfigKeyNotFoundError, match="'nope' not found in context 'rust-test'"):
        rust_commands.set_default_config("rust-test", "nope")
    assert rust_commands.require_configs("rust-test").default_key == "cargo-test"


def test_set_default_lenient_on_unregistered_context():
    commands = Commands()
    with pytest.raises(ConfigKeyNotFoundError):
        commands.set_default_config("ghost", "k")
    assert "ghost" not in commands


def test_set_default_strict_on_unregistered_context():
    commands = Commands()
    with pytest.raises(ContextNotFoundError):
        commands.set_default_config("ghost", "k", strict=True)


def test_set_default_strict_on_registered_context(rust_commands, cargo_test_verbose):
    rust_commands.set_default_config("rust-test", "cargo-test-verbose", strict=True)
    assert rust_commands.get_or_default_config("rust-test") == cargo_test_verbose


def test_get_config(rust_commands, cargo_test_verbose):
    assert rust_commands.get_config("rust-test", "cargo-test-verbose") == cargo_test_verbose
    with pytest.raises(ConfigKeyNotFoundError):
        rust_commands.get_config("rust-test", "nope")
    with pytest.raises(ContextNotFoundError):
        rust_commands.get_config("ghost", "nope")


def test_lookup_errors_are_key_errors(rust_commands):
    with pytest.raises(KeyError):
        rust_commands.require_configs("ghost")


def test_remove_config_keeps_context(rust_commands, cargo_test_verbose):
    rust_commands.remove_config("rust-test", "cargo-test")
    assert "rust-test" in rust_commands
    # The default was removed; the single remaining entry is the fallback
    assert rust_commands.get_or_default_config("rust-test") == cargo_test_verbose


def test_contexts_keep_insertion_order(cargo_test):
    commands = Commands()
    for name in ["zeta", "alpha", "mid"]:
        commands.update_config(name, "k", cargo_test)
    assert [c.name for c in commands] == ["zeta", "alpha", "mid"]


def test_constructor_sets_owning_context(cargo_test):
    commands = Commands({"t": CommandConfig({"k": cargo_test})})
    assert commands.require_configs("t").context == CommandContext("t")


def test_with_defaults():
    commands = Commands.with_defaults()
    assert [c.name for c in commands.contexts()] == ["run", "test", "build", "bench"]
    assert commands.get_or_default_config(CommandContext.TEST).command == "test"
    assert CommandContext.SCRIPT not in commands


def test_empty_context_name_rejected():
    with pytest.raises(ValueError):
        Commands().get_configs("  ")
