"""Conversational coaching: proxies a chat transcript to the AI service."""
import logging

import httpx

from cybershield.core.errors import CoachingError, InvalidArgumentError
from cybershield.schemas.ai import CoachingMode, CoachingReplySchema, CoachingRequestSchema
from cybershield.services.ai_client import AIClient
from cybershield.services.prompts import build_system_prompt

logger = logging.getLogger(__name__)


class CoachingService:
    def __init__(self, client: AIClient) -> None:
        self._client = client

    async def chat(self, request: CoachingRequestSchema) -> CoachingReplySchema:
        if not request.messages:
            raise InvalidArgumentError("Missing required fields: mode and messages")

        mode = CoachingMode.parse(request.mode)
        system_prompt = build_system_prompt(mode, request.difficulty, request.context)
        messages = [{"role": m.role.value, "content": m.content} for m in request.messages]

        logger.info(f"[Coaching] mode={mode.value} messages={len(messages)}")
        try:
            reply = await self._client.create_message(messages=messages, system=system_prompt)
        except (httpx.HTTPError, ValueError) as e:
            raise CoachingError(f"Coaching request failed: {e}") from e

        return CoachingReplySchema(success=True, message=reply.text, usage=reply.usage)
