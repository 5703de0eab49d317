from unittest.mock import patch

import pytest

from dynamic_island import config as config_module
from dynamic_island.config import (
    DEFAULT_MODEL,
    OPENROUTER_API_URL,
    AppConfig,
    load_config,
    parse_work_area,
)

ENV_VARS = [
    "OPENROUTER_API_KEY",
    "ISLAND_MODEL",
    "ISLAND_LANGUAGE",
    "ISLAND_API_URL",
    "ISLAND_TIMEOUT",
    "ISLAND_CLIPBOARD_INTERVAL",
    "ISLAND_PRESENCE_INTERVAL",
    "ISLAND_WORK_AREA",
    "ISLAND_HOST",
    "ISLAND_PORT",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    with patch.object(config_module, "load_local_env"):
        yield monkeypatch


class TestLoadConfig:
    def test_defaults(self, clean_env):
        config = load_config()

        assert config.api_key == ""
        assert config.model == DEFAULT_MODEL
        assert config.api_url == OPENROUTER_API_URL
        assert config.language == "en"
        assert config.work_area is None
        assert config.timeout == 15.0

    def test_from_environment(self, clean_env):
        clean_env.setenv("OPENROUTER_API_KEY", "  sk-or-123 \n")
        clean_env.setenv("ISLAND_MODEL", "openai/gpt-4o-mini")
        clean_env.setenv("ISLAND_LANGUAGE", "SV")
        clean_env.setenv("ISLAND_API_URL", "http://localhost:1234/v1/")
        clean_env.setenv("ISLAND_WORK_AREA", "2560x1440")
        clean_env.setenv("ISLAND_PORT", "6000")

        config = load_config()

        assert config.api_key == "sk-or-123"
        assert config.model == "openai/gpt-4o-mini"
        assert config.language == "sv"
        assert config.api_url == "http://localhost:1234/v1"
        assert config.work_area == (2560, 1440)
        assert config.port == 6000


class TestParseWorkArea:
    @pytest.mark.parametrize("value", [None, "", "  "])
    def test_unset(self, value):
        assert parse_work_area(value) is None

    def test_valid(self):
        assert parse_work_area(" 1920X1080 ") == (1920, 1080)

    @pytest.mark.parametrize("value", ["1920", "widexhigh", "1920x"])
    def test_malformed(self, value):
        with pytest.raises(ValueError):  # noqa: PT011
            parse_work_area(value)


def test_language_instruction():
    assert AppConfig(language="sv").language_instruction == "Respond in Swedish."
    assert AppConfig(language="fi").language_instruction == "Respond in English."
