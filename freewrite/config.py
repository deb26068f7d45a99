from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .models import AIModel
from .settings import (
    get_float_setting,
    get_int_setting,
    get_optional_str_setting,
    get_str_setting,
    load_settings,
)

HOME_ENV_VAR = "FREEWRITE_HOME"
API_KEY_ENV_VARS = ("FREEWRITE_OPENAI_API_KEY", "OPENAI_API_KEY")


@dataclass(frozen=True)
class AppPaths:
    root: Path
    data_dir: Path
    history_file: Path
    draft_file: Path

    @classmethod
    def from_root(cls, root: Path) -> "AppPaths":
        data_dir = root / "data"
        return cls(
            root=root,
            data_dir=data_dir,
            history_file=data_dir / "conversations.json",
            draft_file=data_dir / "draft.md",
        )

    def ensure(self) -> None:
        self.data_dir.mkdir(parents=True, exist_ok=True)


class AppConfig:
    """Resolved directories and user settings for one application run."""

    def __init__(self, root: Path | None = None) -> None:
        self.paths = AppPaths.from_root(root or default_root())
        self.settings: dict[str, Any] = load_settings(self.paths.root)

    @property
    def api_key(self) -> str | None:
        # 環境変数を優先し、設定ファイルの値はフォールバックとして扱う
        for name in API_KEY_ENV_VARS:
            value = os.getenv(name, "").strip()
            if value:
                return value
        return get_optional_str_setting(self.settings, "openai.api_key")

    @property
    def base_url(self) -> str | None:
        return get_optional_str_setting(self.settings, "openai.base_url")

    @property
    def default_model(self) -> AIModel:
        value = get_str_setting(self.settings, "openai.default_model", AIModel.GPT4O_MINI.value)
        return AIModel.from_value(value, AIModel.GPT4O_MINI)

    @property
    def temperature(self) -> float:
        return get_float_setting(self.settings, "openai.temperature", 0.7)

    @property
    def timeout_sec(self) -> float:
        return get_float_setting(self.settings, "openai.timeout_sec", 60.0)

    @property
    def assistant_label(self) -> str:
        return get_str_setting(self.settings, "app.assistant_label", "AI")

    @property
    def log_level(self) -> str:
        return get_str_setting(self.settings, "app.log_level", "INFO").upper()

    @property
    def max_conversations(self) -> int:
        value = get_int_setting(self.settings, "history.max_conversations", 60) or 60
        return value if value > 0 else 60

    @property
    def editor_font_size(self) -> int:
        value = get_int_setting(self.settings, "editor.font_size", 16) or 16
        return value if value > 0 else 16


def default_root() -> Path:
    override = os.getenv(HOME_ENV_VAR)
    if override:
        return Path(override).expanduser().resolve()
    return Path.home() / ".freewrite"
