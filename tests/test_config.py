"""Tests for freewrite.config: paths, API key resolution and typed settings."""

import json

from freewrite.config import AppConfig, default_root
from freewrite.models import AIModel
from freewrite.settings import SETTINGS_FILENAME


def _write_settings(root, payload):
    root.mkdir(parents=True, exist_ok=True)
    (root / SETTINGS_FILENAME).write_text(json.dumps(payload), encoding="utf-8")


class TestPaths:
    def test_default_root_uses_env(self, tmp_path):
        assert default_root() == (tmp_path / "home").resolve()

    def test_default_root_without_env(self, monkeypatch, tmp_path):
        monkeypatch.delenv("FREEWRITE_HOME")
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_root().name == ".freewrite"

    def test_paths_layout(self, tmp_path):
        config = AppConfig(tmp_path)
        assert config.paths.root == tmp_path
        assert config.paths.history_file.parent == config.paths.data_dir
        assert config.paths.draft_file.parent == config.paths.data_dir

    def test_ensure_creates_data_dir(self, tmp_path):
        config = AppConfig(tmp_path)
        config.paths.ensure()
        assert config.paths.data_dir.is_dir()


class TestApiKey:
    def test_no_key_configured(self, tmp_path):
        assert AppConfig(tmp_path).api_key is None

    def test_settings_key(self, tmp_path):
        _write_settings(tmp_path, {"openai": {"api_key": "sk-file"}})
        assert AppConfig(tmp_path).api_key == "sk-file"

    def test_env_overrides_settings(self, monkeypatch, tmp_path):
        _write_settings(tmp_path, {"openai": {"api_key": "sk-file"}})
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        assert AppConfig(tmp_path).api_key == "sk-env"

    def test_app_specific_env_wins(self, monkeypatch, tmp_path):
        monkeypatch.setenv("OPENAI_API_KEY", "sk-env")
        monkeypatch.setenv("FREEWRITE_OPENAI_API_KEY", "sk-app")
        assert AppConfig(tmp_path).api_key == "sk-app"


class TestTypedSettings:
    def test_defaults(self, tmp_path):
        config = AppConfig(tmp_path)
        assert config.default_model is AIModel.GPT4O_MINI
        assert config.temperature == 0.7
        assert config.timeout_sec == 60.0
        assert config.assistant_label == "AI"
        assert config.log_level == "INFO"
        assert config.max_conversations == 60
        assert config.base_url is None

    def test_overrides(self, tmp_path):
        _write_settings(
            tmp_path,
            {
                "app": {"log_level": "debug"},
                "openai": {"default_model": "o4-mini", "base_url": "http://localhost:1234/v1"},
                "history": {"max_conversations": 5},
            },
        )
        config = AppConfig(tmp_path)
        assert config.default_model is AIModel.O4_MINI
        assert config.base_url == "http://localhost:1234/v1"
        assert config.log_level == "DEBUG"
        assert config.max_conversations == 5

    def test_invalid_values_fall_back(self, tmp_path):
        _write_settings(
            tmp_path,
            {"openai": {"default_model": "gpt-2"}, "history": {"max_conversations": -3}},
        )
        config = AppConfig(tmp_path)
        assert config.default_model is AIModel.GPT4O_MINI
        assert config.max_conversations == 60
