from __future__ import annotations

from typing import Any, Optional

import openai

from ..config import Config
from ..exceptions import BackendError, BackendErrorKind
from .base import BaseDriver


class OpenAIDriver(BaseDriver):
    """Driver for OpenAI / OpenAI-compatible chat completions."""

    provider = "openai"

    def __init__(self, config: Config, client: Any = None) -> None:
        super().__init__(config)
        if client is None:
            # One request per call; retries are the caller's decision.
            client = openai.OpenAI(
                base_url=config.endpoint,
                api_key=self._api_key,
                timeout=self._request_timeout,
                max_retries=0,
            )
        self._client = client

    def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: Optional[float] = None,
    ) -> str:
        kwargs: dict[str, Any] = {
            "model": self.config.model,
            "messages": messages,
            "max_tokens": max_tokens,
        }
        if temperature is not None:
            kwargs["temperature"] = temperature
        try:
            resp = self._client.chat.completions.create(**kwargs)
        except openai.APIError as exc:
            raise self._map_error(exc) from exc

        choices = getattr(resp, "choices", None)
        if not choices:
            raise BackendError(
                BackendErrorKind.INVALID_RESPONSE,
                "Invalid OpenAI API response: no choices returned",
            )
        raw_msg = getattr(choices[0], "message", None)
        if raw_msg is None:
            raise BackendError(
                BackendErrorKind.INVALID_RESPONSE,
                "Invalid OpenAI API response: first choice has no message",
            )
        return self._extract_content(getattr(raw_msg, "content", None))

    @staticmethod
    def _extract_content(msg_content: Any) -> str:
        # Newer SDKs may return a list of fragments instead of a string
        if isinstance(msg_content, str):
            return msg_content
        if isinstance(msg_content, list):
            fragments: list[str] = []
            for part in msg_content:
                if isinstance(part, dict):
                    fragments.append(str(part.get("text") or ""))
                else:
                    fragments.append(str(getattr(part, "text", "") or ""))
            return "".join(fragments)
        return ""

    @staticmethod
    def _map_error(exc: openai.APIError) -> BackendError:
        code = getattr(exc, "code", None)
        detail = getattr(exc, "message", None) or str(exc)
        if isinstance(exc, openai.AuthenticationError) or code == "invalid_api_key":
            return BackendError(
                BackendErrorKind.AUTH, "Invalid OpenAI API key", detail
            )
        if code == "insufficient_quota":
            return BackendError(
                BackendErrorKind.QUOTA_EXCEEDED,
                "OpenAI API quota exhausted; check the account balance",
                detail,
            )
        return BackendError(
            BackendErrorKind.UNKNOWN, f"OpenAI API error: {detail}", detail
        )
