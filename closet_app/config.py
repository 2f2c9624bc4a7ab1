"""Runtime settings for the outfit engine, its AI providers and its stores."""

from dataclasses import dataclass, fields
from pathlib import Path
import os
from typing import Dict, Optional

DEFAULT_GEMINI_MODEL = "models/gemini-1.5-flash-002"
DEFAULT_HUGGINGFACE_URL = "https://api-inference.huggingface.co"
DEFAULT_HUGGINGFACE_MODEL = "microsoft/DialoGPT-medium"
AI_PROVIDERS = ("gemini", "huggingface", "none")

# Config field -> key used in environment variables (upper-cased) and settings files.
_SETTING_KEYS: Dict[str, str] = {
    "ai_provider": "ai_service_provider",
    "model": "model",
    "google_api_key": "google_api_key",
    "huggingface_token": "huggingface_access_token",
    "huggingface_base_url": "huggingface_base_url",
    "huggingface_model": "huggingface_model",
    "ai_timeout_seconds": "ai_timeout_seconds",
    "default_max_suggestions": "default_max_suggestions",
    "ai_cache_size": "ai_cache_size",
    "wardrobe_db_path": "wardrobe_db_path",
    "preferences_dir": "preferences_dir",
}


@dataclass
class EngineConfig:
    """Settings for the suggestion engine and its collaborators.

    AI credentials are optional. Without them the engine runs purely on the
    rule-based scorer and every AI enhancement degrades to its fallback.
    """

    ai_provider: str = "gemini"
    model: str = DEFAULT_GEMINI_MODEL
    google_api_key: Optional[str] = None
    huggingface_token: Optional[str] = None
    huggingface_base_url: str = DEFAULT_HUGGINGFACE_URL
    huggingface_model: str = DEFAULT_HUGGINGFACE_MODEL
    ai_timeout_seconds: float = 20.0
    default_max_suggestions: int = 10
    ai_cache_size: int = 256
    wardrobe_db_path: str = "data/wardrobe.db"
    preferences_dir: str = "data/preferences"
    environment: str | None = None

    def __post_init__(self) -> None:
        provider = (self.ai_provider or "none").strip().lower()
        if provider not in AI_PROVIDERS:
            raise ValueError(f"Unsupported AI provider '{self.ai_provider}'. Allowed: {list(AI_PROVIDERS)}")
        self.ai_provider = provider
        if self.default_max_suggestions < 1:
            raise ValueError("default_max_suggestions must be at least 1")
        if self.ai_cache_size < 1:
            raise ValueError("ai_cache_size must be at least 1")

    @property
    def ai_available(self) -> bool:
        """True when the selected provider has the credentials it needs."""

        if self.ai_provider == "gemini":
            return bool(self.google_api_key)
        if self.ai_provider == "huggingface":
            return bool(self.huggingface_token and self.huggingface_base_url)
        return False

    @classmethod
    def from_env(cls) -> "EngineConfig":
        """Read settings from an optional environment file, then the process environment.

        The file is ``APP_CONFIG_PATH`` when set, otherwise
        ``<CLOSET_CONFIG_DIR>/<APP_ENV>.yaml`` (``config/environments`` by
        default). Environment variables win over file values so secrets can
        be injected at deploy time.
        """

        env_name = os.getenv("APP_ENV")
        settings: Dict[str, str] = {}
        path = cls._settings_path(env_name)
        if path is not None and path.exists():
            settings = read_settings_file(path)

        defaults = {field.name: field.default for field in fields(cls)}
        values: Dict[str, object] = {}
        for attr, key in _SETTING_KEYS.items():
            raw = os.getenv(key.upper(), settings.get(key))
            if raw in (None, ""):
                continue
            default = defaults[attr]
            values[attr] = type(default)(raw) if isinstance(default, (int, float)) else raw
        return cls(environment=env_name, **values)

    @staticmethod
    def _settings_path(env_name: Optional[str]) -> Optional[Path]:
        explicit = os.getenv("APP_CONFIG_PATH")
        if explicit:
            return Path(explicit)
        if env_name:
            return Path(os.getenv("CLOSET_CONFIG_DIR", "config/environments")) / f"{env_name}.yaml"
        return None


def read_settings_file(path: Path) -> Dict[str, str]:
    """Parse flat ``key: value`` lines; comments and blank lines are skipped."""

    settings: Dict[str, str] = {}
    for line in path.read_text().splitlines():
        key, sep, value = line.strip().partition(":")
        if not sep or key.startswith("#"):
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] and value[0] in "\"'":
            value = value[1:-1]
        settings[key.strip()] = value
    return settings


__all__ = [
    "AI_PROVIDERS",
    "DEFAULT_GEMINI_MODEL",
    "DEFAULT_HUGGINGFACE_MODEL",
    "DEFAULT_HUGGINGFACE_URL",
    "EngineConfig",
    "read_settings_file",
]
