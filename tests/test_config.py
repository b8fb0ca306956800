import pytest

from pipesh.config import DEFAULT_PROMPT, ShellConfig, default_config, parse_config
from pipesh.expand import DEFAULT_EXPANSION_LIMIT


def test_defaults():
    config = default_config()
    assert config == ShellConfig()
    assert config.prompt == DEFAULT_PROMPT == "MonShell% "
    assert config.max_expansion == DEFAULT_EXPANSION_LIMIT


def test_parse_config_ignores_none_and_unknown_keys():
    config = parse_config({"prompt": None, "max_expansion": None, "log_level": None, "func": print})
    assert config == default_config()


def test_parse_config_overrides():
    config = parse_config({"prompt": "$ ", "max_expansion": "128", "log_level": "debug"})
    assert config == ShellConfig(prompt="$ ", max_expansion=128, log_level="DEBUG")


def test_parse_config_rejects_bad_values():
    with pytest.raises(ValueError):
        parse_config({"max_expansion": 0})
    with pytest.raises(ValueError):
        parse_config({"log_level": "chatty"})
