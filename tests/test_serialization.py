# tests/test_serialization.py
import pytest

from cmdconf import CommandContext, CommandDetailsBuilder, Commands, CommandType, Config
from cmdconf.serialization import (
    command_config_from_dict,
    commands_from_dict,
    details_from_dict,
    to_toml,
)


def test_details_from_sparse_dict():
    details = details_from_dict({"command": "make"}, default_type=CommandType.CARGO)
    assert details == CommandDetailsBuilder("make", CommandType.CARGO).build()


@pytest.mark.parametrize("raw", [{}, {"command": ""}, {"command": 5}, "make", None])
def test_details_without_command_is_none(raw):
    assert details_from_dict(raw) is None


def test_bool_env_values_are_lowercased():
    details = details_from_dict({"command": "x", "env": {"DEBUG": True, "N": 1.5}})
    assert details.env == {"DEBUG": "true", "N": "1.5"}


def test_non_scalar_env_values_dropped():
    details = details_from_dict({"command": "x", "env": {"OK": "1", "BAD": ["a"]}})
    assert details.env == {"OK": "1"}


def test_params_list_lowercases_bools_and_drops_non_scalars(caplog):
    with caplog.at_level("WARNING", logger="cmdconf"):
        details = details_from_dict(
            {"command": "x", "params": ["a", True, 3, ["b"], {"c": 1}]}, where="t.k"
        )
    assert details.params == ("a", "true", "3")
    dropped = [r.getMessage() for r in caplog.records if "dropping non-scalar parameter" in r.getMessage()]
    assert dropped == [
        "t.k: dropping non-scalar parameter 3",
        "t.k: dropping non-scalar parameter 4",
    ]


def test_unbalanced_params_string_is_ignored():
    details = details_from_dict({"command": "x", "params": "'unterminated"})
    assert details.params == ()


def test_command_config_from_dict_keeps_order():
    raw = {
        "entries": {
            "z": {"command": "z"},
            "a": {"command": "a"},
        },
        "default_key": "a",
    }
    config = command_config_from_dict(raw, CommandContext("ctx"))
    assert config.keys() == ["z", "a"]
    assert config.default_key == "a"
    assert config.context == CommandContext("ctx")


def test_commands_from_dict_none():
    assert len(commands_from_dict(None)) == 0


def test_to_toml_layout(rust_commands):
    text = Config(commands=rust_commands).dumps()
    assert text == (
        "[settings]\n"
        'default_command_type = "shell"\n'
        "\n"
        "[commands.rust-test]\n"
        'default_key = "cargo-test"\n'
        "\n"
        "[commands.rust-test.entries.cargo-test]\n"
        'command = "cargo test"\n'
        'command_type = "cargo"\n'
        "params = []\n"
        "allow_multiple_instances = false\n"
        "\n"
        "[commands.rust-test.entries.cargo-test-verbose]\n"
        'command = "cargo test -- --nocapture"\n'
        'command_type = "cargo"\n'
        "params = []\n"
        "allow_multiple_instances = false\n"
    )


def test_to_toml_env_inline_and_sorted():
    commands = Commands()
    commands.update_config(
        "t",
        "k",
        CommandDetailsBuilder("x", CommandType.SHELL).env({"B": "2", "A": "1"}).build(),
    )
    text = Config(commands=commands).dumps()
    assert 'env = { A = "1", B = "2" }' in text


def test_to_toml_quotes_keys_and_escapes_strings():
    text = to_toml({"commands": {"src/main.rs": {"default_key": 'say "hi"\n\x7f'}}})
    assert '[commands."src/main.rs"]' in text
    assert 'default_key = "say \\"hi\\"\\n\\u007f"' in text


def test_to_toml_empty_table_gets_header():
    assert to_toml({"commands": {"lint": {}}}) == "[commands.lint]\n"


def test_to_toml_scalars():
    text = to_toml({"a": 1, "b": 2.5, "c": [1, "x", True], "d": {}})
    assert text.splitlines()[:3] == ["a = 1", "b = 2.5", 'c = [1, "x", true]']
    assert "[d]" in text


def test_to_toml_rejects_unknown_types():
    with pytest.raises(TypeError):
        to_toml({"a": object()})
