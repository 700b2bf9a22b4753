"""Exception hierarchy for gac."""

from __future__ import annotations

from enum import Enum
from typing import Optional


class GacError(Exception):
    """Base class for all gac errors."""


class GitError(GacError):
    """Raised when a git command fails or the path is not a repository."""


class LLMError(GacError):
    """Raised when text generation fails."""


class ConfigError(GacError):
    """Raised for invalid or unreadable configuration."""


class ValidationError(GacError):
    """Raised when caller-supplied input is rejected."""


class BackendErrorKind(str, Enum):
    AUTH = "auth"
    QUOTA_EXCEEDED = "quota_exceeded"
    INVALID_RESPONSE = "invalid_response"
    UNKNOWN = "unknown"


class BackendError(LLMError):
    """Provider-agnostic generation failure.

    ``kind`` classifies the failure; ``provider_message`` keeps whatever the
    provider reported so callers can show it verbatim.
    """

    def __init__(
        self,
        kind: BackendErrorKind,
        message: str,
        provider_message: Optional[str] = None,
    ) -> None:
        super().__init__(message)
        self.kind = kind
        self.provider_message = provider_message
