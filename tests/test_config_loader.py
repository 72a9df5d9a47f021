import json
import unittest
from pathlib import Path
from unittest.mock import patch

import pytest

from commitai.config.loader import (
    ConfigError,
    config_sources,
    load_config,
    masked,
    parse_config_text,
    save_config,
)


class TestParseConfigText(unittest.TestCase):
    def test_json(self) -> None:
        self.assertEqual(
            parse_config_text('{"provider": "anthropic", "apiKey": "k"}'),
            {"provider": "anthropic", "api_key": "k"},
        )

    def test_rc_lines(self) -> None:
        text = "# comment\nprovider=openai\n; other comment\nmodel = gpt-4o\napiKey=sk-a=b\n"
        self.assertEqual(
            parse_config_text(text),
            {"provider": "openai", "model": "gpt-4o", "api_key": "sk-a=b"},
        )

    def test_empty(self) -> None:
        self.assertEqual(parse_config_text("  \n"), {})

    def test_invalid_json(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config_text("{invalid}")

    def test_bad_rc_line(self) -> None:
        with self.assertRaises(ConfigError):
            parse_config_text("provider openai")


class TestLoadConfig(unittest.TestCase):
    def test_defaults(self) -> None:
        with patch("commitai.config.loader.config_sources", return_value=[]):
            config = load_config(environ={})
        self.assertEqual(config["provider"], "openai")
        self.assertEqual(config["model"], "gpt-4o-mini")
        self.assertEqual(config["api_key"], "")
        self.assertEqual(config["request_timeout"], 60.0)
        self.assertTrue(config["git"])

    def test_overrides_ignore_none(self) -> None:
        with patch("commitai.config.loader.config_sources", return_value=[]):
            config = load_config({"model": None, "provider": "anthropic"}, environ={})
        self.assertEqual(config["provider"], "anthropic")
        self.assertEqual(config["model"], "gpt-4o-mini")

    def test_unknown_provider(self) -> None:
        with patch("commitai.config.loader.config_sources", return_value=[]):
            with self.assertRaises(ConfigError):
                load_config({"provider": "cohere"}, environ={})

    def test_numeric_values_are_coerced(self) -> None:
        env = {"COMMITAI_PORT": "11434", "COMMITAI_MAX_TOKENS": "512", "COMMITAI_REQUEST_TIMEOUT": "2.5"}
        with patch("commitai.config.loader.config_sources", return_value=[]):
            config = load_config(environ=env)
        self.assertEqual(config["port"], 11434)
        self.assertEqual(config["max_tokens"], 512)
        self.assertEqual(config["request_timeout"], 2.5)

    def test_bad_number(self) -> None:
        with patch("commitai.config.loader.config_sources", return_value=[]):
            with self.assertRaises(ConfigError):
                load_config({"port": "eleven"}, environ={})


def test_source_precedence(tmp_path):
    home = Path.home()
    (home / ".commitairc").write_text("provider=anthropic\nmodel=from-home-rc\n")
    (home / ".config").mkdir()
    (home / ".config" / "commitai").write_text(json.dumps({"model": "from-user-config", "apiKey": "user"}))
    project = tmp_path / "project"
    nested = project / "sub"
    nested.mkdir(parents=True)
    (project / ".commitairc").write_text("apiKey=project\n")

    config = load_config(cwd=nested, environ={"COMMITAI_MODEL": "from-env"})
    assert config["provider"] == "anthropic"
    assert config["model"] == "from-env"
    assert config["api_key"] == "project"

    config = load_config({"api_key": "cli"}, cwd=nested, environ={})
    assert config["model"] == "from-user-config"
    assert config["api_key"] == "cli"


def test_config_sources_only_existing(tmp_path):
    assert config_sources(tmp_path) == []
    (tmp_path / ".commitairc").write_text("model=x\n")
    assert config_sources(tmp_path) == [(tmp_path / ".commitairc").resolve()]


def test_malformed_file_is_config_error(tmp_path):
    (tmp_path / ".commitairc").write_text("{broken")
    with pytest.raises(ConfigError):
        load_config(cwd=tmp_path, environ={})


def test_save_config_round_trip(tmp_path):
    target = tmp_path / "cfg" / "commitai"
    assert save_config({"provider": "ollama", "model": "llama3", "port": 11434}, target) == target
    with patch("commitai.config.loader._get_config_path", return_value=target):
        config = load_config(cwd=tmp_path, environ={})
    assert config["provider"] == "ollama"
    assert config["port"] == 11434


def test_masked_hides_secrets():
    shown = masked({"api_key": "sk-1234567890abcdef", "anthropic_api_key": "short", "model": "m"})
    assert shown["api_key"] == "sk-1...cdef"
    assert shown["anthropic_api_key"] == "****"
    assert shown["model"] == "m"


if __name__ == "__main__":
    unittest.main()
