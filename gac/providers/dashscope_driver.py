from __future__ import annotations

from typing import Any, Optional

import httpx

from ..exceptions import BackendError, BackendErrorKind
from .base import BaseDriver


class DashScopeDriver(BaseDriver):
    """Driver for Alibaba Cloud DashScope (Qwen) text generation."""

    provider = "dashscope"

    AUTH_CODES = {"InvalidApiKey"}
    QUOTA_CODES = {
        "Arrearage",
        "Throttling.AllocationQuota",
        "Throttling.RateQuota",
    }

    def complete(
        self,
        messages: list[dict[str, str]],
        *,
        max_tokens: int,
        temperature: Optional[float] = None,
    ) -> str:
        headers = {
            "Authorization": f"Bearer {self._api_key}",
            "Content-Type": "application/json",
        }
        parameters: dict[str, Any] = {
            "max_tokens": max_tokens,
            "result_format": "message",
        }
        if temperature is not None:
            parameters["temperature"] = temperature
        payload = {
            "model": self.config.model,
            "input": {"messages": messages},
            "parameters": parameters,
        }
        try:
            response = httpx.post(
                self.config.endpoint,
                headers=headers,
                json=payload,
                timeout=self._request_timeout,
            )
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            # InvalidURL is not an HTTPError subclass
            raise BackendError(
                BackendErrorKind.UNKNOWN,
                f"DashScope network error: {e}",
                str(e),
            ) from e

        try:
            data = response.json()
        except ValueError:
            data = None
        status = int(getattr(response, "status_code", 200) or 200)
        if status >= 400:
            raise self._map_error(status, data, getattr(response, "text", ""))

        output = data.get("output") if isinstance(data, dict) else None
        choices = output.get("choices") if isinstance(output, dict) else None
        if not choices:
            raise BackendError(
                BackendErrorKind.INVALID_RESPONSE,
                "Invalid DashScope API response: no choices returned",
            )
        try:
            content = choices[0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise BackendError(
                BackendErrorKind.INVALID_RESPONSE,
                "Invalid DashScope API response: first choice has no message",
            ) from None
        return content if isinstance(content, str) else ""

    @classmethod
    def _map_error(cls, status: int, data: Any, text: str) -> BackendError:
        code = ""
        detail = text or f"HTTP {status}"
        if isinstance(data, dict):
            code = str(data.get("code") or "")
            detail = str(data.get("message") or detail)
        if status == 401 or code in cls.AUTH_CODES:
            return BackendError(
                BackendErrorKind.AUTH, "Invalid DashScope API key", detail
            )
        if code in cls.QUOTA_CODES:
            return BackendError(
                BackendErrorKind.QUOTA_EXCEEDED,
                "DashScope quota exhausted or account in arrears",
                detail,
            )
        return BackendError(
            BackendErrorKind.UNKNOWN, f"DashScope API error: {detail}", detail
        )
