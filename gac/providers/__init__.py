"""Provider drivers for text generation."""

from __future__ import annotations

from typing import Any

from ..config import Config, provider_defaults
from .base import BaseDriver
from .dashscope_driver import DashScopeDriver
from .openai_driver import OpenAIDriver

DRIVERS: dict[str, type[BaseDriver]] = {
    "openai": OpenAIDriver,
    "dashscope": DashScopeDriver,
}


def get_driver(config: Config, **kwargs: Any) -> BaseDriver:
    """Instantiate the driver for ``config.provider``."""
    provider_defaults(config.provider)
    return DRIVERS[config.provider](config, **kwargs)


__all__ = [
    "BaseDriver",
    "DashScopeDriver",
    "DRIVERS",
    "OpenAIDriver",
    "get_driver",
]
