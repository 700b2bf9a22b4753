"""gac - AI generated commit messages from pending Git changes."""

from importlib import import_module
from typing import TYPE_CHECKING

__version__ = "0.1.0"

# Public API (lazy-exported so `import gac` does not pull in the SDKs)
__all__ = [
    # Config
    "Config", "load_config",
    # Git
    "GitRepo",
    # Analysis / prompts / formatting
    "ChangeAnalysis", "ChangeStats", "classify",
    "build_system_prompt", "build_user_prompt", "format_commit_message",
    # Providers
    "BaseDriver", "get_driver",
    # Core workflow
    "GitAutoCommitWorkflow",
    # Exceptions
    "GacError", "GitError", "LLMError", "BackendError", "BackendErrorKind",
    "ConfigError", "ValidationError",
]


def __getattr__(name: str):
    """Lazy attribute loader to avoid importing provider SDKs at import time."""
    mapping = {
        "Config": ("gac.config", "Config"),
        "load_config": ("gac.config", "load_config"),
        "GitRepo": ("gac.git", "GitRepo"),
        "ChangeAnalysis": ("gac.analysis", "ChangeAnalysis"),
        "ChangeStats": ("gac.analysis", "ChangeStats"),
        "classify": ("gac.analysis", "classify"),
        "build_system_prompt": ("gac.prompts", "build_system_prompt"),
        "build_user_prompt": ("gac.prompts", "build_user_prompt"),
        "format_commit_message": ("gac.formatter", "format_commit_message"),
        "BaseDriver": ("gac.providers", "BaseDriver"),
        "get_driver": ("gac.providers", "get_driver"),
        "GitAutoCommitWorkflow": ("gac.core", "GitAutoCommitWorkflow"),
        "GacError": ("gac.exceptions", "GacError"),
        "GitError": ("gac.exceptions", "GitError"),
        "LLMError": ("gac.exceptions", "LLMError"),
        "BackendError": ("gac.exceptions", "BackendError"),
        "BackendErrorKind": ("gac.exceptions", "BackendErrorKind"),
        "ConfigError": ("gac.exceptions", "ConfigError"),
        "ValidationError": ("gac.exceptions", "ValidationError"),
    }
    if name in mapping:
        mod_name, attr = mapping[name]
        mod = import_module(mod_name)
        value = getattr(mod, attr)
        globals()[name] = value  # cache for future access
        return value
    raise AttributeError(f"module 'gac' has no attribute {name!r}")


if TYPE_CHECKING:
    from .analysis import ChangeAnalysis, ChangeStats, classify
    from .config import Config, load_config
    from .core import GitAutoCommitWorkflow
    from .exceptions import (
        BackendError,
        BackendErrorKind,
        ConfigError,
        GacError,
        GitError,
        LLMError,
        ValidationError,
    )
    from .formatter import format_commit_message
    from .git import GitRepo
    from .prompts import build_system_prompt, build_user_prompt
    from .providers import BaseDriver, get_driver
