"""Thin async client for the Anthropic messages API."""
import logging
from dataclasses import dataclass, field
from typing import Any

import httpx

from cybershield.core.config import Settings

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AIReply:
    text: str
    usage: dict[str, Any] = field(default_factory=dict)


class AIClient:
    """Client for the LLM service behind scenario generation and coaching."""

    def __init__(self, settings: Settings, transport: httpx.AsyncBaseTransport | None = None):
        self.settings = settings
        self.timeout = httpx.Timeout(settings.ai_timeout_seconds)
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        return {
            "x-api-key": self.settings.anthropic_api_key,
            "anthropic-version": self.settings.ai_api_version,
            "content-type": "application/json",
        }

    async def create_message(
        self,
        messages: list[dict[str, str]],
        system: str | None = None,
        max_tokens: int | None = None,
    ) -> AIReply:
        """
        Send one messages request and return the first text block.

        Args:
            messages: List of {role, content} dicts
            system: System prompt
            max_tokens: Max response tokens (defaults to settings.ai_max_tokens)

        Raises:
            httpx.HTTPError: transport failure or non-2xx status
            ValueError: the response body is not JSON
        """
        url = f"{self.settings.ai_base_url.rstrip('/')}/v1/messages"
        payload: dict[str, Any] = {
            "model": self.settings.ai_model,
            "max_tokens": max_tokens or self.settings.ai_max_tokens,
            "messages": messages,
        }
        if system:
            payload["system"] = system

        logger.info(f"[AI] POST {url} model={self.settings.ai_model} messages={len(messages)}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self._transport) as client:
                response = await client.post(url, json=payload, headers=self._headers())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"[AI] HTTP {e.response.status_code}: {e.response.text[:200]}")
            raise
        except httpx.RequestError as e:
            logger.error(f"[AI] Request failed: {e}")
            raise
        except ValueError as e:
            logger.error(f"[AI] Response is not JSON: {e}")
            raise

        text = next(
            (block.get("text", "") for block in data.get("content", []) if block.get("type") == "text"),
            "",
        )
        logger.info(f"[AI] response received, len={len(text)}")
        return AIReply(text=text, usage=data.get("usage") or {})
