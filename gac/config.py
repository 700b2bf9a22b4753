"""Configuration management for gac."""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import ConfigError

CONFIG_DIR_NAME = ".gac"
CONFIG_FILE_NAME = "config.json"

SUPPORTED_LANGUAGES = ("zh-CN", "en")
SUPPORTED_STYLES = ("conventional", "free")

DEFAULT_MODELS = {
    "dashscope": {
        "model": "qwen-turbo",
        "endpoint": (
            "https://dashscope.aliyuncs.com/api/v1/services/aigc/"
            "text-generation/generation"
        ),
        "api_key_env": "DASHSCOPE_API_KEY",
        "models": [
            "qwen-turbo",
            "qwen-plus",
            "qwen-max",
            "qwen-max-1201",
            "qwen-max-longcontext",
        ],
    },
    "openai": {
        "model": "gpt-3.5-turbo",
        "endpoint": "https://api.openai.com/v1",
        "api_key_env": "OPENAI_API_KEY",
        "models": ["gpt-3.5-turbo", "gpt-4", "gpt-4-turbo-preview"],
    },
}

# Environment variable -> config field
_ENV_OVERRIDES = {
    "GAC_PROVIDER": "provider",
    "GAC_MODEL": "model",
    "GAC_LLM_ENDPOINT": "endpoint",
    "GAC_LANGUAGE": "language",
    "GAC_STYLE": "style",
    "GAC_MAX_TOKENS": "max_tokens",
    "GAC_TEMPERATURE": "temperature",
}


@dataclass(frozen=True)
class Config:
    """Runtime configuration for one generation session."""

    provider: str = "dashscope"
    model: str = DEFAULT_MODELS["dashscope"]["model"]
    api_key: str = ""
    api_key_env: str = DEFAULT_MODELS["dashscope"]["api_key_env"]
    endpoint: str = DEFAULT_MODELS["dashscope"]["endpoint"]
    language: str = "zh-CN"
    style: str = "conventional"
    max_tokens: int = 100
    temperature: float = 0.3

    def resolve_api_key(self) -> Optional[str]:
        """Return the stored key, else the one in the provider's env var."""
        if self.api_key:
            return self.api_key
        return os.environ.get(self.api_key_env) or None

    def is_configured(self) -> bool:
        return bool(self.resolve_api_key())

    def to_dict(self) -> Dict[str, Any]:
        """Serialise configuration to a dict for persistence."""
        return asdict(self)

    def redacted(self) -> Dict[str, Any]:
        data = self.to_dict()
        key = data.get("api_key") or ""
        if key:
            data["api_key"] = key[:4] + "…" if len(key) > 4 else "…"
        return data


def config_dir() -> Path:
    home = os.environ.get("GAC_CONFIG_HOME")
    if home:
        return Path(home).expanduser().resolve(strict=False)
    return Path.home() / CONFIG_DIR_NAME


def config_file_path() -> Path:
    return config_dir() / CONFIG_FILE_NAME


def provider_defaults(provider: str) -> Dict[str, Any]:
    try:
        return DEFAULT_MODELS[provider]
    except KeyError:
        raise ConfigError(
            f"Unsupported provider: {provider!r} "
            f"(expected one of {', '.join(DEFAULT_MODELS)})"
        ) from None


def model_options(provider: str) -> List[str]:
    return list(provider_defaults(provider)["models"])


def validate_config(config: Config) -> Config:
    """Raise ConfigError if any field is out of range; return config."""
    provider_defaults(config.provider)
    if config.language not in SUPPORTED_LANGUAGES:
        raise ConfigError(
            f"Unsupported language: {config.language!r} "
            f"(expected one of {', '.join(SUPPORTED_LANGUAGES)})"
        )
    if config.style not in SUPPORTED_STYLES:
        raise ConfigError(
            f"Unsupported style: {config.style!r} "
            f"(expected one of {', '.join(SUPPORTED_STYLES)})"
        )
    if not config.model:
        raise ConfigError("Model name must not be empty")
    if isinstance(config.max_tokens, bool) or config.max_tokens <= 0:
        raise ConfigError(f"max_tokens must be positive, got {config.max_tokens}")
    if not 0 <= config.temperature <= 1:
        raise ConfigError(
            f"temperature must be within [0, 1], got {config.temperature}"
        )
    return config


def _coerce(name: str, value: Any) -> Any:
    try:
        if name == "max_tokens":
            return int(value)
        if name == "temperature":
            return float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid value for {name}: {value!r}") from None
    return str(value)


def _config_from_mapping(data: Dict[str, Any]) -> Dict[str, Any]:
    known = {f.name for f in fields(Config)}
    return {k: _coerce(k, v) for k, v in data.items() if k in known and v is not None}


def load_persisted_config() -> Dict[str, Any]:
    """Return the raw persisted mapping, or an empty dict if none exists."""
    cfg_path = config_file_path()
    if not cfg_path.exists():
        return {}
    try:
        data = json.loads(cfg_path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        raise ConfigError(f"Cannot read config file {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {cfg_path} must contain a JSON object")
    return data


def load_config(
    *,
    overrides: Optional[Dict[str, Any]] = None,
    env: Optional[Dict[str, str]] = None,
) -> Config:
    """Build configuration from defaults, config file, environment and overrides."""

    env_dict = dict(os.environ if env is None else env)
    persisted = _config_from_mapping(load_persisted_config())
    from_env = {
        field_name: env_dict[env_key]
        for env_key, field_name in _ENV_OVERRIDES.items()
        if env_dict.get(env_key)
    }
    explicit = _config_from_mapping({**from_env, **(overrides or {})})
    merged = {**persisted, **explicit}

    provider = merged.get("provider", Config.provider)
    defaults = provider_defaults(provider)
    # Model, endpoint and key belong to a provider; do not carry them across
    # a provider switch unless set explicitly this run.
    if provider != persisted.get("provider", Config.provider):
        for field_name in ("model", "endpoint", "api_key_env", "api_key"):
            if field_name not in explicit:
                merged.pop(field_name, None)
    for field_name in ("model", "endpoint", "api_key_env"):
        merged.setdefault(field_name, defaults[field_name])

    return validate_config(Config(**merged))


def save_config(config: Config) -> Path:
    """Persist configuration JSON and return the file path."""
    validate_config(config)
    cfg_path = config_file_path()
    cfg_path.parent.mkdir(parents=True, exist_ok=True)
    cfg_path.write_text(json.dumps(config.to_dict(), indent=2), encoding="utf-8")
    return cfg_path


def update_config(config: Config, **changes: Any) -> Config:
    """Return a copy of ``config`` with ``changes`` applied and validated.

    Switching provider resets model, endpoint and key env to that provider's
    defaults unless they are part of ``changes``.
    """
    coerced = _config_from_mapping(changes)
    new_provider = coerced.get("provider")
    if new_provider and new_provider != config.provider:
        defaults = provider_defaults(new_provider)
        coerced.setdefault("model", defaults["model"])
        coerced.setdefault("endpoint", defaults["endpoint"])
        coerced.setdefault("api_key_env", defaults["api_key_env"])
        coerced.setdefault("api_key", "")
    return validate_config(replace(config, **coerced))


def reset_config() -> Config:
    config = Config()
    save_config(config)
    return config


def delete_config() -> None:
    try:
        config_file_path().unlink()
    except FileNotFoundError:
        pass


def request_timeout() -> float:
    """Per-request HTTP timeout in seconds (``GAC_LLM_REQUEST_TIMEOUT``)."""
    timeout_env = os.environ.get("GAC_LLM_REQUEST_TIMEOUT")
    try:
        return float(timeout_env) if timeout_env else 60.0
    except ValueError:
        return 60.0
