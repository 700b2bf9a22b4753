from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Optional, Sequence

from ..analysis import ChangeAnalysis
from ..config import Config, request_timeout
from ..exceptions import BackendError, BackendErrorKind, ConfigError, ValidationError
from ..formatter import format_commit_message
from ..git import CommitInfo
from ..prompts import build_messages

logger = logging.getLogger(__name__)

# Prompt used by validate(); cheapest request a provider will accept
_PROBE_MESSAGES = [{"role": "user", "content": "test"}]

# Upper bound on concurrent provider requests per generate_multiple call
MAX_CONCURRENT_REQUESTS = 8


class BaseDriver(ABC):
    """Abstract base for provider-specific commit generation.

    A driver owns one provider's request envelope, authentication header
    and error codes. Prompt rendering and output formatting are shared here
    so every provider produces messages the same way.
    """

    provider: str = ""

    def __init__(self, config: Config) -> None:
        self.config = config
        api_key = config.resolve_api_key()
        if not api_key:
            raise ConfigError(
                f"No API key for provider '{config.provider}'. Set it with "
                f"'gac config --set-api-key' or the {config.api_key_env} "
                "environment variable."
            )
        self._api_key = api_key
        self._request_timeout = request_timeout()

    @abstractmethod
    def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: Optional[float] = None,
    ) -> str:
        """Send ``messages`` in one request and return the first choice's text.

        Every failure must surface as BackendError.
        """
        raise NotImplementedError

    def generate(
        self,
        diff: str,
        analysis: ChangeAnalysis,
        recent_commits: Sequence[CommitInfo] = (),
    ) -> str:
        messages = build_messages(diff, analysis, recent_commits, self.config)
        logger.debug(
            "%s request model=%s max_tokens=%s temperature=%s prompt_chars=%d",
            self.provider,
            self.config.model,
            self.config.max_tokens,
            self.config.temperature,
            sum(len(m["content"]) for m in messages),
        )
        content = self.complete(
            messages,
            max_tokens=self.config.max_tokens,
            temperature=self.config.temperature,
        ).strip()
        if not content:
            raise BackendError(
                BackendErrorKind.INVALID_RESPONSE,
                f"Empty commit message in {self.provider} response",
            )
        return format_commit_message(content, analysis, self.config)

    def generate_multiple(
        self,
        diff: str,
        analysis: ChangeAnalysis,
        recent_commits: Sequence[CommitInfo] = (),
        count: int = 3,
    ) -> list[str]:
        """Run ``count`` generations concurrently and return unique results.

        Results keep completion order. The first failure cancels whatever
        has not started and is re-raised; no partial list is returned.
        """
        if count < 1:
            raise ValidationError(f"count must be at least 1, got {count}")
        executor = ThreadPoolExecutor(
            max_workers=min(count, MAX_CONCURRENT_REQUESTS)
        )
        futures = [
            executor.submit(self.generate, diff, analysis, recent_commits)
            for _ in range(count)
        ]
        unique: dict[str, None] = {}
        try:
            for future in as_completed(futures):
                unique.setdefault(future.result(), None)
        finally:
            executor.shutdown(wait=False, cancel_futures=True)
        logger.debug(
            "%s produced %d unique candidate(s) from %d request(s)",
            self.provider,
            len(unique),
            count,
        )
        return list(unique)

    def validate(self) -> bool:
        """Cheap credential/reachability probe. Never raises BackendError."""
        try:
            self.complete(_PROBE_MESSAGES, max_tokens=1)
        except BackendError as exc:
            logger.warning("%s validation failed: %s", self.provider, exc)
            return False
        return True
